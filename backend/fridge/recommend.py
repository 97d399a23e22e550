"""
Recommendation Engine
Builds prompts from the ingredient snapshot, calls the generation model and
turns its answers into recipe summaries or recipe text
"""

import json
import logging
from typing import Iterable, Optional, Protocol

from config import MAX_RECIPE_SUGGESTIONS
from fridge.errors import (
    ConfigurationError,
    EmptyStateError,
    FridgeError,
    NoOutputError,
    NoRecipesError,
    ParsingError,
    ResponseFormatError,
    TransportError,
    ValidationError,
)
from fridge.models import Ingredient, RecipeSummary

logger = logging.getLogger(__name__)


class TextGenerator(Protocol):
    @property
    def configured(self) -> bool: ...

    async def generate(self, prompt: str) -> Optional[str]: ...


# =============================================================================
# PROMPTS
# =============================================================================

RECIPE_LIST_PROMPT = """These are the ingredients I currently have: {ingredients}
Suggest at most {max_recipes} dishes I can make with these ingredients.
Answer with a JSON array. Each element must be an object with the fields
"title" (the dish name, a string) and "ingredients" (an array of strings,
listing only ingredients from my list above that the dish uses).
Return only the pure JSON array, with no explanation or extra text.
Example format:
[
  {{
    "title": "Kimchi Stew",
    "ingredients": ["kimchi", "pork", "tofu"]
  }},
  {{
    "title": "Rolled Omelette",
    "ingredients": ["eggs", "carrot", "green onion"]
  }}
]"""

RECIPE_DETAIL_PROMPT = """These are the ingredients I currently have: {ingredients}
Using these ingredients, give me a detailed recipe and cooking method for "{title}".
If any additional ingredients are needed, list them explicitly."""

RECOMMENDATION_PROMPT = """The ingredients currently in my fridge are: {ingredients}.
Recommend recipes I can cook using these ingredients. For each recipe give
its name, a short description, the list of ingredients it needs and the
cooking steps in order."""


def _join_names(names: Iterable[str]) -> str:
    return ", ".join(names)


def build_recipe_list_prompt(names: list[str], max_recipes: int = MAX_RECIPE_SUGGESTIONS) -> str:
    return RECIPE_LIST_PROMPT.format(ingredients=_join_names(names), max_recipes=max_recipes)


def build_recipe_detail_prompt(title: str, names: list[str]) -> str:
    return RECIPE_DETAIL_PROMPT.format(ingredients=_join_names(names), title=title)


def build_recommendation_prompt(names: list[str]) -> str:
    return RECOMMENDATION_PROMPT.format(ingredients=_join_names(names))


# =============================================================================
# RESPONSE HANDLING
# =============================================================================

def extract_json_array(text: str) -> Optional[str]:
    """Return the span from the first '[' to the last ']' inclusive, or None.

    Models do not reliably answer with bare JSON, so anything around the
    outermost brackets is dropped. The prompt only ever asks for an array.
    """
    start = text.find("[")
    end = text.rfind("]")
    if start == -1 or end == -1 or end < start:
        return None
    return text[start:end + 1]


def parse_recipe_summaries(payload: str) -> list[RecipeSummary]:
    """Decode a JSON array of {title, ingredients} objects"""
    try:
        data = json.loads(payload)
    except json.JSONDecodeError as e:
        raise ParsingError(f"Parsing error - malformed JSON: {e.msg}")

    if not isinstance(data, list):
        raise ParsingError("Parsing error - expected a JSON array of recipes.")

    recipes = []
    for index, item in enumerate(data):
        if not isinstance(item, dict):
            raise ParsingError(f"Parsing error - recipe #{index + 1} is not an object.")

        title = item.get("title")
        if not isinstance(title, str) or not title.strip():
            raise ParsingError(f"Parsing error - recipe #{index + 1} has no title.")

        ingredients = item.get("ingredients", [])
        if not isinstance(ingredients, list) or not all(isinstance(i, str) for i in ingredients):
            raise ParsingError(
                f"Parsing error - ingredients of '{title.strip()}' must be a list of strings."
            )

        recipes.append(RecipeSummary(title=title.strip(), ingredients=list(ingredients)))
    return recipes


# =============================================================================
# ENGINE
# =============================================================================

class RecommendationEngine:
    """Two-stage recommendation workflow: recipe list, then one detailed recipe.

    Stateless between calls. Every failure is raised as a FridgeError subclass
    so the caller can turn it into a user-facing message.
    """

    def __init__(self, generator: TextGenerator, max_recipes: int = MAX_RECIPE_SUGGESTIONS):
        self.generator = generator
        self.max_recipes = max_recipes

    @property
    def configured(self) -> bool:
        return self.generator is not None and self.generator.configured

    def _require_configured(self) -> None:
        if not self.configured:
            raise ConfigurationError()

    async def _generate(self, prompt: str) -> str:
        try:
            text = await self.generator.generate(prompt)
        except FridgeError:
            raise
        except Exception as e:
            raise TransportError(str(e) or type(e).__name__) from e

        if text is None or not text.strip():
            raise NoOutputError()
        return text

    async def recommend_recipes(self, ingredients: Iterable[Ingredient]) -> list[RecipeSummary]:
        """Stage 1: ask for up to max_recipes candidates as structured data"""
        self._require_configured()
        names = [ing.name for ing in ingredients]
        if not names:
            raise EmptyStateError()

        logger.info("Requesting recipe list for %d ingredients", len(names))
        text = await self._generate(build_recipe_list_prompt(names, self.max_recipes))

        payload = extract_json_array(text)
        if payload is None:
            logger.warning("Could not extract JSON from response: %r", text)
            raise ResponseFormatError()

        recipes = parse_recipe_summaries(payload)
        if not recipes:
            raise NoRecipesError()

        recipes = [recipe.restricted_to(names) for recipe in recipes[:self.max_recipes]]
        logger.info("Recipe list recommendation successful: %d recipes", len(recipes))
        return recipes

    async def describe_recipe(self, title: str, ingredients: Iterable[Ingredient]) -> str:
        """Stage 2: free-text recipe and method for one dish"""
        self._require_configured()
        if not isinstance(title, str) or not title.strip():
            raise ValidationError("Please choose a recipe.")

        names = [ing.name for ing in ingredients]
        logger.info("Requesting detailed recipe for: %s", title)
        return await self._generate(build_recipe_detail_prompt(title.strip(), names))

    async def recommend_text(self, ingredients: Iterable[Ingredient]) -> str:
        """Single free-text recommendation covering several dishes"""
        self._require_configured()
        names = [ing.name for ing in ingredients]
        if not names:
            raise EmptyStateError()
        return await self._generate(build_recommendation_prompt(names))
