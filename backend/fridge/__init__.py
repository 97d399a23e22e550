"""
FridgeChef Core Module
Ingredient tracking, expiration ordering and AI recipe recommendations
"""

from fridge.models import Ingredient, RecipeSummary, Freshness
from fridge.store import IngredientStore, sort_ingredients
from fridge.persistence import PersistenceGateway, JsonFilePersistence, MemoryPersistence
from fridge.llm import GenerationClient
from fridge.recommend import RecommendationEngine, extract_json_array, parse_recipe_summaries
from fridge.session import FridgeSession
from fridge.errors import FridgeError

__all__ = [
    "Ingredient",
    "RecipeSummary",
    "Freshness",
    "IngredientStore",
    "sort_ingredients",
    "PersistenceGateway",
    "JsonFilePersistence",
    "MemoryPersistence",
    "GenerationClient",
    "RecommendationEngine",
    "extract_json_array",
    "parse_recipe_summaries",
    "FridgeSession",
    "FridgeError",
]
