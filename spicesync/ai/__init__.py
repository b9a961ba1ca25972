"""AI gateway base class, data types, and factory."""

from __future__ import annotations

import asyncio
import base64
import logging
import mimetypes
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Awaitable

from .parsing import (
    INGREDIENT_PROMPT,
    INGREDIENT_SCHEMA,
    RECIPE_SCHEMA,
    RecipeImageStrategy,
    build_recipe_prompt,
    parse_ingredients_or_empty,
    parse_recipes_or_empty,
    picsum_image_url,
)

if TYPE_CHECKING:
    from ..config import SpiceSyncConfig
    from ..models import Ingredient, Recipe

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EncodedImage:
    """A still frame as a base64 payload with its MIME type."""

    data: str  # base64, no data: URL prefix
    mime_type: str = "image/jpeg"

    @classmethod
    def from_bytes(cls, raw: bytes, mime_type: str = "image/jpeg") -> EncodedImage:
        return cls(
            data=base64.standard_b64encode(raw).decode(), mime_type=mime_type
        )

    @classmethod
    def from_file(cls, path: str | Path) -> EncodedImage:
        media_type = mimetypes.guess_type(str(path))[0] or "image/jpeg"
        return cls.from_bytes(Path(path).read_bytes(), media_type)

    def to_bytes(self) -> bytes:
        return base64.standard_b64decode(self.data)


class GatewayError(RuntimeError):
    """The AI service could not be reached or did not answer in time."""


class AIGateway(ABC):
    """Turns images and pantry snapshots into validated domain objects.

    Subclasses only talk to their SDK and return raw response text;
    timeouts, error wrapping and schema validation happen here.
    """

    def __init__(
        self,
        timeout: float = 60.0,
        recipe_count: int = 3,
        image_for: RecipeImageStrategy = picsum_image_url,
    ) -> None:
        self._timeout = timeout
        self._recipe_count = recipe_count
        self._image_for = image_for

    async def recognize_ingredients(self, image: EncodedImage) -> list[Ingredient]:
        """Identify ingredients in a still frame.

        Returns an empty list when the response is empty or malformed.

        Raises:
            GatewayError: On transport failure or timeout.
        """
        self._ensure_configured()
        text = await self._call(
            "ingredient recognition",
            self._generate_from_image(image, INGREDIENT_PROMPT, INGREDIENT_SCHEMA),
        )
        items = parse_ingredients_or_empty(text)
        logger.info("Recognized %d ingredient(s)", len(items))
        return items

    async def suggest_recipes(
        self,
        ingredients: list[Ingredient],
        dietary_preferences: list[str] | tuple[str, ...] = (),
    ) -> list[Recipe]:
        """Ask the AI for recipes built around the given ingredients.

        The caller must not pass an empty ingredient list.

        Raises:
            GatewayError: On transport failure or timeout.
        """
        self._ensure_configured()
        prompt = build_recipe_prompt(
            ingredients, dietary_preferences, self._recipe_count
        )
        logger.debug("Recipe prompt: %s", prompt)
        text = await self._call(
            "recipe suggestion", self._generate_from_text(prompt, RECIPE_SCHEMA)
        )
        recipes = parse_recipes_or_empty(text, self._image_for)
        logger.info("Received %d recipe suggestion(s)", len(recipes))
        return recipes

    async def _call(self, label: str, pending: Awaitable[str | None]) -> str | None:
        try:
            return await asyncio.wait_for(pending, timeout=self._timeout)
        except asyncio.TimeoutError as e:
            logger.error("%s timed out after %.0fs", label, self._timeout)
            raise GatewayError(f"{label} timed out after {self._timeout:.0f}s") from e
        except ImportError:
            raise
        except Exception as e:
            logger.error("%s failed: %s", label, e)
            raise GatewayError(f"{label} failed: {e}") from e

    def _ensure_configured(self) -> None:
        """Raise ValueError if the backend cannot be called at all."""

    @abstractmethod
    async def _generate_from_image(
        self, image: EncodedImage, prompt: str, schema: dict
    ) -> str | None:
        ...

    @abstractmethod
    async def _generate_from_text(self, prompt: str, schema: dict) -> str | None:
        ...


def create_gateway(
    config: SpiceSyncConfig, image_for: RecipeImageStrategy = picsum_image_url
) -> AIGateway:
    """Create an AI gateway based on configuration."""
    backend_name = config.ai.backend
    common = {
        "timeout": config.ai.timeout,
        "recipe_count": config.ai.recipe_count,
        "image_for": image_for,
    }

    match backend_name:
        case "gemini":
            from .gemini import GeminiGateway

            return GeminiGateway(
                api_key=config.ai.gemini.api_key,
                model=config.ai.gemini.model,
                **common,
            )
        case "claude":
            from .claude import ClaudeGateway

            return ClaudeGateway(
                api_key=config.ai.claude.api_key,
                model=config.ai.claude.model,
                **common,
            )
        case _:
            raise ValueError(
                f"Unknown AI backend: {backend_name!r} "
                f"(choose gemini or claude)"
            )


__all__ = [
    "AIGateway",
    "EncodedImage",
    "GatewayError",
    "create_gateway",
    "picsum_image_url",
]
