"""Tests for AI response validation and prompt building."""

import json

import pytest

from spicesync.ai.parsing import (
    ResponseValidationError,
    build_recipe_prompt,
    parse_ingredients,
    parse_ingredients_or_empty,
    parse_recipes,
    parse_recipes_or_empty,
    picsum_image_url,
)
from spicesync.models import Ingredient


def _recipe_payload(**overrides) -> dict:
    data = {
        "title": "Tomato Soup",
        "description": "A warm soup",
        "cookingTime": 25,
        "difficulty": "Easy",
        "ingredients": [
            {"name": "Tomato", "amount": "3"},
            {"name": "Cream", "amount": "100ml", "substituted": True},
        ],
        "instructions": ["Chop tomatoes", "Simmer", "Blend"],
        "nutrition": {"calories": 210, "protein": "4g", "carbs": "20g", "fats": "12g"},
        "dietaryTags": ["Vegetarian"],
        "matchScore": 92,
    }
    data.update(overrides)
    return data


class TestParseIngredients:
    def test_parse_json_array(self):
        text = json.dumps([
            {"name": "Tomato", "category": "produce", "freshness": "Fresh", "quantity": "3"},
            {"name": "Milk", "category": "dairy", "freshness": "Expiring Soon", "quantity": "1L"},
        ])
        result = parse_ingredients(text)
        assert [i.name for i in result] == ["Tomato", "Milk"]
        assert result[1].freshness == "Expiring Soon"
        assert result[0].category == "produce"

    def test_assigns_fresh_unique_ids(self):
        item = {"name": "Egg", "category": "dairy", "freshness": "Fresh", "quantity": "6"}
        result = parse_ingredients(json.dumps([item, item]))
        assert result[0].id != result[1].id
        assert len(result[0].id) == 32

    def test_parse_with_markdown_fences(self):
        text = """```json
[{"name": "Basil", "category": "spice", "freshness": "Fresh", "quantity": "1 bunch"}]
```"""
        result = parse_ingredients(text)
        assert result[0].name == "Basil"

    def test_unknown_category_and_freshness_are_normalized(self):
        text = json.dumps([
            {"name": "Tofu", "category": "Protein", "freshness": "so-so", "quantity": "1"},
        ])
        result = parse_ingredients(text)
        assert result[0].category == "other"
        assert result[0].freshness is None

    def test_missing_required_field_rejects_everything(self):
        text = json.dumps([
            {"name": "Tomato", "category": "produce", "freshness": "Fresh", "quantity": "3"},
            {"name": "Milk", "category": "dairy", "quantity": "1L"},
        ])
        with pytest.raises(ResponseValidationError, match="freshness"):
            parse_ingredients(text)
        assert parse_ingredients_or_empty(text) == []

    def test_wrong_type_rejected(self):
        text = json.dumps([
            {"name": "Tomato", "category": "produce", "freshness": "Fresh", "quantity": 3},
        ])
        assert parse_ingredients_or_empty(text) == []

    @pytest.mark.parametrize("text", [None, "", "   ", "not json", '{"name": "x"}'])
    def test_malformed_yields_empty(self, text):
        assert parse_ingredients_or_empty(text) == []


class TestParseRecipes:
    def test_parse_full_recipe(self):
        result = parse_recipes(json.dumps([_recipe_payload()]))
        assert len(result) == 1
        r = result[0]
        assert r.title == "Tomato Soup"
        assert r.cooking_time == 25
        assert r.difficulty == "Easy"
        assert r.instructions == ("Chop tomatoes", "Simmer", "Blend")
        assert r.ingredients[1].substituted is True
        assert r.ingredients[0].substituted is False
        assert r.nutrition.calories == 210
        assert r.dietary_tags == ("Vegetarian",)
        assert r.match_score == 92
        assert r.image == "https://picsum.photos/seed/Tomato%20Soup/600/400"

    def test_optional_fields_default(self):
        payload = _recipe_payload()
        del payload["dietaryTags"]
        del payload["matchScore"]
        r = parse_recipes(json.dumps([payload]))[0]
        assert r.dietary_tags == ()
        assert r.match_score is None

    def test_match_score_clamped(self):
        r = parse_recipes(json.dumps([_recipe_payload(matchScore=140)]))[0]
        assert r.match_score == 100

    def test_float_cooking_time_coerced(self):
        r = parse_recipes(json.dumps([_recipe_payload(cookingTime=12.6)]))[0]
        assert r.cooking_time == 13

    def test_non_positive_cooking_time_rejected(self):
        with pytest.raises(ResponseValidationError, match="cookingTime"):
            parse_recipes(json.dumps([_recipe_payload(cookingTime=0)]))

    def test_missing_nutrition_rejected(self):
        payload = _recipe_payload()
        del payload["nutrition"]
        assert parse_recipes_or_empty(json.dumps([payload])) == []

    def test_calories_optional_within_nutrition(self):
        r = parse_recipes(json.dumps([_recipe_payload(nutrition={})]))[0]
        assert r.nutrition.calories == 0
        assert r.nutrition.protein == ""

    @pytest.mark.parametrize("literal", ["NaN", "Infinity", "-Infinity", "1e400"])
    @pytest.mark.parametrize("field", ["matchScore", "cookingTime", "calories"])
    def test_non_finite_number_yields_empty(self, field, literal):
        if field == "calories":
            payload = _recipe_payload(nutrition={"calories": "__NUM__"})
        else:
            payload = _recipe_payload(**{field: "__NUM__"})
        text = json.dumps([payload]).replace('"__NUM__"', literal)

        with pytest.raises(ResponseValidationError, match="finite"):
            parse_recipes(text)
        assert parse_recipes_or_empty(text) == []

    def test_non_string_instruction_rejected(self):
        payload = _recipe_payload(instructions=["Chop", 2])
        assert parse_recipes_or_empty(json.dumps([payload])) == []

    def test_boolean_is_not_a_number(self):
        payload = _recipe_payload(cookingTime=True)
        assert parse_recipes_or_empty(json.dumps([payload])) == []

    def test_custom_image_strategy(self):
        result = parse_recipes(
            json.dumps([_recipe_payload()]), image_for=lambda t: f"img://{t}"
        )
        assert result[0].image == "img://Tomato Soup"


class TestPromptAndImage:
    def test_prompt_without_preferences(self):
        prompt = build_recipe_prompt(
            [Ingredient(name="Tomato", quantity="3"), Ingredient(name="Basil", quantity="1")]
        )
        assert prompt.startswith("Based on these ingredients: Tomato, Basil.")
        assert "Consider these preferences" not in prompt
        assert "Suggest 3 diverse recipes" in prompt

    def test_prompt_with_preferences(self):
        prompt = build_recipe_prompt(
            [Ingredient(name="Tomato", quantity="3")], ["Vegan", "Keto"]
        )
        assert "Consider these preferences: Vegan, Keto." in prompt

    def test_image_url_is_deterministic_and_escaped(self):
        url = picsum_image_url("Mac & Cheese/Deluxe")
        assert url == picsum_image_url("Mac & Cheese/Deluxe")
        assert url == "https://picsum.photos/seed/Mac%20%26%20Cheese%2FDeluxe/600/400"
