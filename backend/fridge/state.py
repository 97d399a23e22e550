"""
UI State
The closed set of states a presentation layer renders
"""

from dataclasses import dataclass
from typing import Union

from fridge.models import RecipeSummary


@dataclass(frozen=True)
class Idle:
    """Initial state, nothing requested"""
    status = "idle"

    def to_dict(self) -> dict:
        return {"status": self.status}


@dataclass(frozen=True)
class LoadingRecipes:
    status = "loading_recipes"

    def to_dict(self) -> dict:
        return {"status": self.status}


@dataclass(frozen=True)
class RecipesLoaded:
    """Recipe candidates to choose from; never empty"""
    recipes: tuple[RecipeSummary, ...]
    status = "recipes_loaded"

    def __post_init__(self):
        if not self.recipes:
            raise ValueError("RecipesLoaded requires at least one recipe")
        object.__setattr__(self, "recipes", tuple(self.recipes))

    def to_dict(self) -> dict:
        return {
            "status": self.status,
            "recipes": [recipe.to_dict() for recipe in self.recipes]
        }


@dataclass(frozen=True)
class LoadingDetailedRecipe:
    status = "loading_detailed_recipe"

    def to_dict(self) -> dict:
        return {"status": self.status}


@dataclass(frozen=True)
class DetailedRecipeLoaded:
    recipe: str
    status = "detailed_recipe_loaded"

    def to_dict(self) -> dict:
        return {"status": self.status, "recipe": self.recipe}


@dataclass(frozen=True)
class Error:
    message: str
    status = "error"

    def __post_init__(self):
        if not self.message:
            raise ValueError("Error requires a message")

    def to_dict(self) -> dict:
        return {"status": self.status, "message": self.message}


UiState = Union[
    Idle,
    LoadingRecipes,
    RecipesLoaded,
    LoadingDetailedRecipe,
    DetailedRecipeLoaded,
    Error,
]

LOADING_STATES = (LoadingRecipes, LoadingDetailedRecipe)


def is_loading(state: UiState) -> bool:
    return isinstance(state, LOADING_STATES)
