"""Data models for pantry ingredients, recipes and user profiles."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field

CATEGORIES = ("produce", "dairy", "meat", "pantry", "spice", "other")
FRESHNESS_LEVELS = ("Fresh", "Ripe", "Expiring Soon", "Expired")
DIFFICULTIES = ("Easy", "Medium", "Hard")

DIFFICULTY_RANK: dict[str, int] = {"Easy": 1, "Medium": 2, "Hard": 3}


def new_id() -> str:
    """Return a fresh 128-bit random identifier."""
    return uuid.uuid4().hex


def normalize_category(value: str | None) -> str:
    if not value:
        return "other"
    lowered = value.strip().lower()
    return lowered if lowered in CATEGORIES else "other"


def normalize_freshness(value: str | None) -> str | None:
    """Map free-text freshness onto a known level, or None for unknown."""
    if not value:
        return None
    lowered = value.strip().lower()
    for level in FRESHNESS_LEVELS:
        if level.lower() == lowered:
            return level
    return None


@dataclass(frozen=True)
class Ingredient:
    """A single pantry item."""

    name: str
    quantity: str
    category: str = "other"  # produce, dairy, meat, pantry, spice, other
    freshness: str | None = None  # Fresh, Ripe, Expiring Soon, Expired
    expiry_date: str | None = None
    id: str = field(default_factory=new_id)

    def to_dict(self) -> dict:
        data = {
            "id": self.id,
            "name": self.name,
            "quantity": self.quantity,
            "category": self.category,
        }
        if self.freshness is not None:
            data["freshness"] = self.freshness
        if self.expiry_date is not None:
            data["expiryDate"] = self.expiry_date
        return data

    @classmethod
    def from_dict(cls, data: dict) -> Ingredient:
        return cls(
            id=data["id"],
            name=data["name"],
            quantity=data.get("quantity", ""),
            category=normalize_category(data.get("category")),
            freshness=normalize_freshness(data.get("freshness")),
            expiry_date=data.get("expiryDate"),
        )


@dataclass(frozen=True)
class RecipeIngredient:
    name: str
    amount: str
    substituted: bool = False  # True if not actually in the pantry

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "amount": self.amount,
            "substituted": self.substituted,
        }


@dataclass(frozen=True)
class Nutrition:
    calories: int = 0
    protein: str = ""
    carbs: str = ""
    fats: str = ""

    def to_dict(self) -> dict:
        return {
            "calories": self.calories,
            "protein": self.protein,
            "carbs": self.carbs,
            "fats": self.fats,
        }


@dataclass(frozen=True)
class Recipe:
    """An AI-suggested recipe. Lives only as long as the batch it came in."""

    title: str
    description: str
    cooking_time: int  # minutes
    difficulty: str  # Easy, Medium, Hard
    ingredients: tuple[RecipeIngredient, ...] = ()
    instructions: tuple[str, ...] = ()
    nutrition: Nutrition = field(default_factory=Nutrition)
    dietary_tags: tuple[str, ...] = ()
    match_score: int | None = None  # 0-100, advisory
    image: str = ""
    id: str = field(default_factory=new_id)

    @property
    def difficulty_rank(self) -> int:
        return DIFFICULTY_RANK.get(self.difficulty, 0)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "image": self.image,
            "cookingTime": self.cooking_time,
            "difficulty": self.difficulty,
            "ingredients": [i.to_dict() for i in self.ingredients],
            "instructions": list(self.instructions),
            "nutrition": self.nutrition.to_dict(),
            "dietaryTags": list(self.dietary_tags),
            "matchScore": self.match_score,
        }


@dataclass
class UserPreferences:
    diet: list[str] = field(default_factory=list)
    allergies: list[str] = field(default_factory=list)
    servings: int = 2


@dataclass
class UserProfile:
    name: str = "Home Cook"
    title: str = ""
    bio: str = ""
    avatar_color: str = "orange"
    avatar_url: str | None = None
    preferences: UserPreferences = field(default_factory=UserPreferences)

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "title": self.title,
            "bio": self.bio,
            "avatarColor": self.avatar_color,
            "avatarUrl": self.avatar_url,
            "preferences": {
                "diet": list(self.preferences.diet),
                "allergies": list(self.preferences.allergies),
                "servings": self.preferences.servings,
            },
        }

    @classmethod
    def from_dict(cls, data: dict) -> UserProfile:
        defaults = cls()
        prefs = data.get("preferences") or {}
        return cls(
            name=data.get("name", defaults.name),
            title=data.get("title", defaults.title),
            bio=data.get("bio", defaults.bio),
            avatar_color=data.get("avatarColor", defaults.avatar_color),
            avatar_url=data.get("avatarUrl"),
            preferences=UserPreferences(
                diet=list(prefs.get("diet", [])),
                allergies=list(prefs.get("allergies", [])),
                servings=int(prefs.get("servings", 2)),
            ),
        )
