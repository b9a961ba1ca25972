"""Tests for data models."""

from spicesync.models import (
    Ingredient,
    Recipe,
    RecipeIngredient,
    UserProfile,
    normalize_category,
    normalize_freshness,
)


class TestIngredient:
    def test_ids_are_unique(self):
        ids = {Ingredient(name="Egg", quantity="1").id for _ in range(1000)}
        assert len(ids) == 1000

    def test_dict_uses_wire_names(self):
        ing = Ingredient(
            name="Milk", quantity="1L", category="dairy",
            freshness="Fresh", expiry_date="2026-11-01",
        )
        data = ing.to_dict()
        assert data["expiryDate"] == "2026-11-01"
        assert Ingredient.from_dict(data) == ing

    def test_optional_fields_omitted(self):
        data = Ingredient(name="Salt", quantity="1 jar", category="spice").to_dict()
        assert "freshness" not in data
        assert "expiryDate" not in data


class TestNormalization:
    def test_category(self):
        assert normalize_category("Produce") == "produce"
        assert normalize_category("vegetables") == "other"
        assert normalize_category(None) == "other"

    def test_freshness(self):
        assert normalize_freshness("expiring soon") == "Expiring Soon"
        assert normalize_freshness("Ripe") == "Ripe"
        assert normalize_freshness("") is None
        assert normalize_freshness("meh") is None


class TestRecipe:
    def test_difficulty_rank(self):
        def make(d):
            return Recipe(title="x", description="", cooking_time=5, difficulty=d)

        assert make("Easy").difficulty_rank == 1
        assert make("Medium").difficulty_rank == 2
        assert make("Hard").difficulty_rank == 3
        assert make("Impossible").difficulty_rank == 0

    def test_to_dict_preserves_instruction_order(self):
        recipe = Recipe(
            title="Toast",
            description="",
            cooking_time=5,
            difficulty="Easy",
            ingredients=(RecipeIngredient(name="Bread", amount="2 slices"),),
            instructions=("Slice", "Toast", "Butter"),
        )
        data = recipe.to_dict()
        assert data["instructions"] == ["Slice", "Toast", "Butter"]
        assert data["cookingTime"] == 5
        assert data["ingredients"][0]["substituted"] is False
        assert data["matchScore"] is None


class TestUserProfile:
    def test_defaults_from_empty_dict(self):
        profile = UserProfile.from_dict({})
        assert profile.name == UserProfile().name
        assert profile.preferences.servings == 2

    def test_dict_roundtrip(self):
        profile = UserProfile(name="Jane", title="Home Chef", bio="Zero waste")
        profile.preferences.diet = ["Vegan"]
        profile.preferences.allergies = ["Peanuts"]
        assert UserProfile.from_dict(profile.to_dict()) == profile
