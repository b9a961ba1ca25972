"""Prompts, response schemas and strict parsing of AI output."""

from __future__ import annotations

import json
import logging
import math
from typing import Callable
from urllib.parse import quote

from ..models import (
    Ingredient,
    Nutrition,
    Recipe,
    RecipeIngredient,
    new_id,
    normalize_category,
    normalize_freshness,
)

logger = logging.getLogger(__name__)

RecipeImageStrategy = Callable[[str], str]

INGREDIENT_PROMPT = (
    "Identify all food ingredients in this image. For each, specify name, "
    "category (produce, dairy, meat, pantry, spice, or other), freshness "
    "level, and estimated quantity. Return as a JSON array."
)

# OpenAPI-subset schemas understood by Gemini's structured output mode.
INGREDIENT_SCHEMA: dict = {
    "type": "ARRAY",
    "items": {
        "type": "OBJECT",
        "properties": {
            "name": {"type": "STRING"},
            "category": {"type": "STRING"},
            "freshness": {"type": "STRING"},
            "quantity": {"type": "STRING"},
        },
        "required": ["name", "category", "freshness", "quantity"],
    },
}

RECIPE_SCHEMA: dict = {
    "type": "ARRAY",
    "items": {
        "type": "OBJECT",
        "properties": {
            "title": {"type": "STRING"},
            "description": {"type": "STRING"},
            "cookingTime": {"type": "NUMBER"},
            "difficulty": {"type": "STRING"},
            "ingredients": {
                "type": "ARRAY",
                "items": {
                    "type": "OBJECT",
                    "properties": {
                        "name": {"type": "STRING"},
                        "amount": {"type": "STRING"},
                        "substituted": {"type": "BOOLEAN"},
                    },
                },
            },
            "instructions": {"type": "ARRAY", "items": {"type": "STRING"}},
            "nutrition": {
                "type": "OBJECT",
                "properties": {
                    "calories": {"type": "NUMBER"},
                    "protein": {"type": "STRING"},
                    "carbs": {"type": "STRING"},
                    "fats": {"type": "STRING"},
                },
            },
            "dietaryTags": {"type": "ARRAY", "items": {"type": "STRING"}},
            "matchScore": {"type": "NUMBER"},
        },
        "required": [
            "title",
            "description",
            "cookingTime",
            "difficulty",
            "ingredients",
            "instructions",
            "nutrition",
        ],
    },
}


class ResponseValidationError(ValueError):
    """Raised when an AI response does not match the declared schema."""


def build_recipe_prompt(
    ingredients: list[Ingredient],
    dietary_preferences: list[str] | tuple[str, ...] = (),
    count: int = 3,
) -> str:
    names = ", ".join(i.name for i in ingredients)
    prefs = (
        f"Consider these preferences: {', '.join(dietary_preferences)}."
        if dietary_preferences
        else ""
    )
    return (
        f"Based on these ingredients: {names}. {prefs} "
        f"Suggest {count} diverse recipes. For each, provide: title, "
        "description, cookingTime (min), difficulty (Easy, Medium, Hard), "
        "ingredients list with amounts, step-by-step instructions, nutrition "
        "(calories, protein, carbs, fats), and dietary tags. "
        "Return as a JSON array."
    )


def picsum_image_url(title: str) -> str:
    """Deterministic placeholder image for a recipe title."""
    return f"https://picsum.photos/seed/{quote(title, safe='')}/600/400"


def _strip_fences(text: str) -> str:
    cleaned = text.strip()
    if cleaned.startswith("```"):
        lines = cleaned.split("\n")
        lines = [l for l in lines[1:] if not l.strip().startswith("```")]
        cleaned = "\n".join(lines)
    return cleaned


def _load_array(text: str | None) -> list:
    if not text or not text.strip():
        raise ResponseValidationError("empty response text")
    try:
        data = json.loads(_strip_fences(text))
    except json.JSONDecodeError as e:
        raise ResponseValidationError(f"invalid JSON: {e}") from e
    if not isinstance(data, list):
        raise ResponseValidationError(
            f"expected a JSON array, got {type(data).__name__}"
        )
    return data


def _require(item: dict, key: str, kind: type | tuple[type, ...]):
    if key not in item:
        raise ResponseValidationError(f"missing required field {key!r}")
    value = item[key]
    # bool is an int subclass; never accept it where a number is expected
    if isinstance(value, bool) and kind is not bool:
        raise ResponseValidationError(f"field {key!r} has wrong type")
    if not isinstance(value, kind):
        raise ResponseValidationError(f"field {key!r} has wrong type")
    _check_finite(key, value)
    return value


def _optional(item: dict, key: str, kind: type | tuple[type, ...], default):
    value = item.get(key, default)
    if isinstance(value, bool) and kind is not bool:
        return default
    if not isinstance(value, kind):
        return default
    _check_finite(key, value)
    return value


def _check_finite(key: str, value) -> None:
    # json.loads accepts NaN, Infinity and out-of-range literals like 1e400
    if isinstance(value, float) and not math.isfinite(value):
        raise ResponseValidationError(f"field {key!r} is not a finite number")


def _parse_ingredient(item) -> Ingredient:
    if not isinstance(item, dict):
        raise ResponseValidationError("ingredient entry is not an object")
    return Ingredient(
        id=new_id(),
        name=_require(item, "name", str).strip(),
        category=normalize_category(_require(item, "category", str)),
        freshness=normalize_freshness(_require(item, "freshness", str)),
        quantity=_require(item, "quantity", str),
    )


def _parse_recipe_ingredient(item) -> RecipeIngredient:
    if not isinstance(item, dict):
        raise ResponseValidationError("recipe ingredient is not an object")
    return RecipeIngredient(
        name=_require(item, "name", str),
        amount=_require(item, "amount", str),
        substituted=_optional(item, "substituted", bool, False),
    )


def _parse_nutrition(item) -> Nutrition:
    if not isinstance(item, dict):
        raise ResponseValidationError("field 'nutrition' has wrong type")
    return Nutrition(
        calories=int(_optional(item, "calories", (int, float), 0)),
        protein=_optional(item, "protein", str, ""),
        carbs=_optional(item, "carbs", str, ""),
        fats=_optional(item, "fats", str, ""),
    )


def _parse_recipe(item, image_for: RecipeImageStrategy) -> Recipe:
    if not isinstance(item, dict):
        raise ResponseValidationError("recipe entry is not an object")

    title = _require(item, "title", str)
    cooking_time = _require(item, "cookingTime", (int, float))
    if cooking_time <= 0:
        raise ResponseValidationError("field 'cookingTime' must be positive")

    instructions = _require(item, "instructions", list)
    if not all(isinstance(step, str) for step in instructions):
        raise ResponseValidationError("field 'instructions' has wrong type")

    tags = _optional(item, "dietaryTags", list, [])
    score = _optional(item, "matchScore", (int, float), None)
    if score is not None:
        score = max(0, min(100, int(round(score))))

    return Recipe(
        id=new_id(),
        title=title,
        description=_require(item, "description", str),
        cooking_time=max(1, int(round(cooking_time))),
        difficulty=_require(item, "difficulty", str).strip().capitalize(),
        ingredients=tuple(
            _parse_recipe_ingredient(i) for i in _require(item, "ingredients", list)
        ),
        instructions=tuple(instructions),
        nutrition=_parse_nutrition(_require(item, "nutrition", dict)),
        dietary_tags=tuple(t for t in tags if isinstance(t, str)),
        match_score=score,
        image=image_for(title),
    )


def parse_ingredients(text: str | None) -> list[Ingredient]:
    """Parse a recognition response into fresh Ingredient objects.

    Raises:
        ResponseValidationError: If any entry violates the schema.
    """
    return [_parse_ingredient(item) for item in _load_array(text)]


def parse_recipes(
    text: str | None, image_for: RecipeImageStrategy = picsum_image_url
) -> list[Recipe]:
    """Parse a suggestion response into Recipe objects with fresh ids.

    Raises:
        ResponseValidationError: If any entry violates the schema.
    """
    return [_parse_recipe(item, image_for) for item in _load_array(text)]


def parse_ingredients_or_empty(text: str | None) -> list[Ingredient]:
    try:
        return parse_ingredients(text)
    except ResponseValidationError as e:
        logger.warning("Discarding malformed ingredient response: %s", e)
        return []


def parse_recipes_or_empty(
    text: str | None, image_for: RecipeImageStrategy = picsum_image_url
) -> list[Recipe]:
    try:
        return parse_recipes(text, image_for)
    except ResponseValidationError as e:
        logger.warning("Discarding malformed recipe response: %s", e)
        return []
