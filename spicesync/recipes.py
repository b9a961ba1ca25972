"""Recipe query engine: fetch AI suggestions and project them for display."""

from __future__ import annotations

import enum
import logging
from typing import TYPE_CHECKING, Iterable, Sequence

from .models import Recipe

if TYPE_CHECKING:
    from .ai import AIGateway
    from .models import Ingredient

logger = logging.getLogger(__name__)

SORT_KEYS = ("score", "time", "difficulty")

# Recipes scoring strictly above this count as a perfect pantry match.
PERFECT_MATCH_THRESHOLD = 90


class QueryState(enum.Enum):
    IDLE = "idle"
    FETCHING = "fetching"
    READY = "ready"
    FAILED = "failed"


def _matches_search(recipe: Recipe, needle: str) -> bool:
    return needle in recipe.title.lower() or needle in recipe.description.lower()


def _matches_diets(recipe: Recipe, filters: list[str]) -> bool:
    tags = [t.lower() for t in recipe.dietary_tags]
    return all(any(f in tag for tag in tags) for f in filters)


def _sort_key(sort_key: str):
    match sort_key:
        case "score":
            return lambda r: -(r.match_score or 0)
        case "time":
            return lambda r: r.cooking_time
        case "difficulty":
            return lambda r: r.difficulty_rank
        case _:
            raise ValueError(
                f"Unknown sort key: {sort_key!r} (choose score, time or difficulty)"
            )


def view(
    batch: Iterable[Recipe],
    search_text: str = "",
    perfect_only: bool = False,
    dietary_filters: Iterable[str] = (),
    sort_key: str = "score",
) -> list[Recipe]:
    """Search, filter and sort a recipe batch without modifying it.

    1. Case-insensitive substring match on title or description.
    2. ``perfect_only`` keeps recipes with ``match_score > 90``.
    3. Every dietary filter must be a substring of some tag.
    4. Stable sort: score descending, time ascending or difficulty ascending.
    """
    key = _sort_key(sort_key)
    result = list(batch)

    needle = search_text.lower()
    if needle:
        result = [r for r in result if _matches_search(r, needle)]

    if perfect_only:
        result = [
            r for r in result if (r.match_score or 0) > PERFECT_MATCH_THRESHOLD
        ]

    filters = [f.lower() for f in dietary_filters if f]
    if filters:
        result = [r for r in result if _matches_diets(r, filters)]

    return sorted(result, key=key)


class RecipeQueryEngine:
    """Holds the current recipe batch and the state of the last fetch.

    Overlapping fetches resolve in favour of the most recently issued one:
    responses to superseded requests are dropped.
    """

    def __init__(self, gateway: AIGateway) -> None:
        self._gateway = gateway
        self._recipes: list[Recipe] = []
        self._state = QueryState.IDLE
        self._last_error: Exception | None = None
        self._generation = 0

    @property
    def state(self) -> QueryState:
        return self._state

    @property
    def recipes(self) -> list[Recipe]:
        return list(self._recipes)

    @property
    def last_error(self) -> Exception | None:
        return self._last_error

    async def fetch(
        self,
        pantry: Sequence[Ingredient],
        dietary_preferences: Iterable[str] = (),
    ) -> QueryState:
        """Replace the batch with fresh suggestions for ``pantry``.

        An empty pantry is a no-op. Any failure of the call, a missing key
        included, leaves the previous batch in place and moves the engine to
        FAILED.
        """
        if not pantry:
            logger.debug("Pantry is empty, skipping recipe fetch")
            return self._state

        snapshot = list(pantry)
        prefs = list(dietary_preferences)
        self._generation += 1
        generation = self._generation
        self._state = QueryState.FETCHING

        try:
            recipes = await self._gateway.suggest_recipes(snapshot, prefs)
        except Exception as e:
            if generation != self._generation:
                logger.debug("Ignoring failure of superseded fetch #%d", generation)
                return self._state
            logger.warning("Recipe fetch failed: %s", e)
            self._last_error = e
            self._state = QueryState.FAILED
            return self._state

        if generation != self._generation:
            logger.debug("Discarding response of superseded fetch #%d", generation)
            return self._state

        self._recipes = list(recipes)
        self._last_error = None
        self._state = QueryState.READY
        return self._state

    def view(
        self,
        search_text: str = "",
        perfect_only: bool = False,
        dietary_filters: Iterable[str] = (),
        sort_key: str = "score",
    ) -> list[Recipe]:
        return view(
            self._recipes, search_text, perfect_only, dietary_filters, sort_key
        )
