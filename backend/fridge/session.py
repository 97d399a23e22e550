"""
Fridge Session
The state machine presentation layers talk to. It owns the ingredient store
and the single UI state register, and commits recommendation results as
state transitions.
"""

import asyncio
import logging
from datetime import date
from typing import Awaitable, Callable, Optional, Union

from fridge.errors import ConfigurationError, EmptyStateError, FridgeError
from fridge.models import Ingredient
from fridge.recommend import RecommendationEngine
from fridge.state import (
    DetailedRecipeLoaded,
    Error,
    Idle,
    LoadingDetailedRecipe,
    LoadingRecipes,
    RecipesLoaded,
    UiState,
)
from fridge.store import IngredientStore

logger = logging.getLogger(__name__)


def error_message(exc: BaseException) -> str:
    if isinstance(exc, FridgeError):
        return exc.message
    return f"Unexpected error: {exc}" if str(exc) else f"Unexpected error: {type(exc).__name__}"


class FridgeSession:
    """Single owner of the ingredient snapshot and the UI state.

    Each workflow run captures the current generation number when it starts
    and only commits its result if nothing has superseded it since. Resetting
    the state, starting another workflow or changing the ingredient list all
    bump the generation, so late results are dropped instead of overwriting
    newer state.
    """

    def __init__(self, store: IngredientStore, engine: RecommendationEngine):
        self.store = store
        self.engine = engine
        self._generation = 0
        self._state: UiState = Idle()
        if not engine.configured:
            self._state = Error(ConfigurationError().message)
            logger.error("AI model initialization error: API key is not set.")

    @property
    def state(self) -> UiState:
        return self._state

    @property
    def generation(self) -> int:
        return self._generation

    def _supersede(self) -> int:
        self._generation += 1
        return self._generation

    def _commit(self, generation: int, state: UiState) -> bool:
        if generation != self._generation:
            logger.debug("Discarding late %s result for superseded request #%d",
                         type(state).__name__, generation)
            return False
        self._state = state
        return True

    # -------------------------------------------------------------------------
    # Ingredients
    # -------------------------------------------------------------------------

    async def load(self) -> tuple[Ingredient, ...]:
        return await self.store.load()

    def ingredients(self) -> tuple[Ingredient, ...]:
        return self.store.list()

    def _invalidate_recommendation(self) -> None:
        self._supersede()
        if not isinstance(self._state, Idle):
            self._state = Idle()
            logger.info("Ingredient list changed; recommendation reset.")

    async def add_ingredient(self, name: str, expiration_date: Union[date, str]) -> Ingredient:
        ingredient = await self.store.add(name, expiration_date)
        self._invalidate_recommendation()
        return ingredient

    async def remove_ingredient(self, ingredient_id: str) -> bool:
        removed = await self.store.remove(ingredient_id)
        if removed:
            self._invalidate_recommendation()
        return removed

    def reset_ui_state(self) -> UiState:
        self._supersede()
        self._state = Idle()
        logger.info("UI state reset to Idle.")
        return self._state

    # -------------------------------------------------------------------------
    # Recommendation workflow
    # -------------------------------------------------------------------------

    def _precondition_error(self, require_ingredients: bool) -> Optional[Error]:
        if not self.engine.configured:
            return Error(ConfigurationError().message)
        if require_ingredients and not self.store.list():
            return Error(EmptyStateError().message)
        return None

    async def _run(
        self,
        generation: int,
        work: Callable[[], Awaitable[UiState]],
        label: str
    ) -> UiState:
        try:
            result = await work()
        except asyncio.CancelledError:
            logger.warning("%s was cancelled", label)
            self._commit(generation, Error("The request was cancelled. Please try again."))
            raise
        except Exception as e:
            logger.warning("%s failed: %s", label, e)
            result = Error(error_message(e))
        self._commit(generation, result)
        return self._state

    def _begin(self, loading: UiState) -> int:
        generation = self._supersede()
        self._state = loading
        return generation

    async def _recipe_list(self, snapshot: tuple[Ingredient, ...]) -> UiState:
        recipes = await self.engine.recommend_recipes(snapshot)
        return RecipesLoaded(tuple(recipes))

    async def _detailed_recipe(self, title: str, snapshot: tuple[Ingredient, ...]) -> UiState:
        text = await self.engine.describe_recipe(title, snapshot)
        return DetailedRecipeLoaded(text)

    def start_recipe_list(self) -> Optional[asyncio.Task]:
        """Enter LoadingRecipes and run stage 1 in the background.

        Returns None when a precondition fails; the state is then Error and no
        request was sent.
        """
        failure = self._precondition_error(require_ingredients=True)
        if failure is not None:
            self._supersede()
            self._state = failure
            return None

        generation = self._begin(LoadingRecipes())
        snapshot = self.store.list()
        return asyncio.create_task(
            self._run(generation, lambda: self._recipe_list(snapshot), "Recipe list request")
        )

    def start_select_recipe(self, title: str) -> Optional[asyncio.Task]:
        """Enter LoadingDetailedRecipe and run stage 2 in the background"""
        failure = self._precondition_error(require_ingredients=False)
        if failure is None and (not isinstance(title, str) or not title.strip()):
            failure = Error("Please choose a recipe.")
        if failure is not None:
            self._supersede()
            self._state = failure
            return None

        generation = self._begin(LoadingDetailedRecipe())
        snapshot = self.store.list()
        return asyncio.create_task(
            self._run(generation, lambda: self._detailed_recipe(title, snapshot),
                      f"Detailed recipe request for {title}")
        )

    async def request_recipe_list(self) -> UiState:
        task = self.start_recipe_list()
        if task is not None:
            # cancelling the caller leaves the workflow running
            await asyncio.shield(task)
        return self._state

    async def select_recipe(self, title: str) -> UiState:
        task = self.start_select_recipe(title)
        if task is not None:
            # cancelling the caller leaves the workflow running
            await asyncio.shield(task)
        return self._state
