"""SpiceSync: photograph your kitchen, track your pantry, get recipe ideas."""

from .ai import AIGateway, EncodedImage, GatewayError, create_gateway
from .camera import Camera, CameraError
from .config import SpiceSyncConfig, load_config
from .db import KeyValueStore
from .models import (
    Ingredient,
    Nutrition,
    Recipe,
    RecipeIngredient,
    UserPreferences,
    UserProfile,
)
from .pantry import PantryStore, PantrySummary, filter_pantry, pantry_summary
from .profile import ProfileStore
from .recipes import QueryState, RecipeQueryEngine, view
from .scanner import ScanState, ScanWorkflow

__all__ = [
    "AIGateway",
    "EncodedImage",
    "GatewayError",
    "create_gateway",
    "Camera",
    "CameraError",
    "SpiceSyncConfig",
    "load_config",
    "KeyValueStore",
    "Ingredient",
    "Nutrition",
    "Recipe",
    "RecipeIngredient",
    "UserPreferences",
    "UserProfile",
    "PantryStore",
    "PantrySummary",
    "filter_pantry",
    "pantry_summary",
    "ProfileStore",
    "QueryState",
    "RecipeQueryEngine",
    "view",
    "ScanState",
    "ScanWorkflow",
]
