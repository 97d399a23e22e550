"""
Ingredient Store
Owns the canonical ingredient list, keeps it ordered by expiration and persists it
"""

from __future__ import annotations

import asyncio
import logging
from datetime import date
from typing import Callable, Optional, Union

from fridge.models import Ingredient
from fridge.persistence import PersistenceGateway

logger = logging.getLogger(__name__)


def sort_ingredients(items: list[Ingredient], today: date) -> list[Ingredient]:
    """Expired items first (longest overdue first), then soonest to expire"""
    expired = [ing for ing in items if ing.is_expired(today)]
    not_expired = [ing for ing in items if not ing.is_expired(today)]
    expired.sort(key=lambda ing: ing.expiration_date)
    not_expired.sort(key=lambda ing: ing.days_until_expiry(today))
    return expired + not_expired


class IngredientStore:
    """In-memory ingredient list with best-effort persistence.

    The in-memory list is the source of truth for the running session. Every
    add/remove replaces the snapshot, re-sorts it and schedules a background
    write; a failed write is logged and never rolls the mutation back.
    """

    def __init__(
        self,
        persistence: PersistenceGateway,
        today: Callable[[], date] = date.today
    ):
        self.persistence = persistence
        self.today = today
        self._items: tuple[Ingredient, ...] = ()
        self._save_lock = asyncio.Lock()
        self._pending: set[asyncio.Task] = set()

    def list(self) -> tuple[Ingredient, ...]:
        return self._items

    def names(self) -> list[str]:
        return [ing.name for ing in self._items]

    def get(self, ingredient_id: str) -> Optional[Ingredient]:
        for ing in self._items:
            if ing.id == ingredient_id:
                return ing
        return None

    def __len__(self) -> int:
        return len(self._items)

    def _replace(self, items: list[Ingredient]) -> None:
        self._items = tuple(sort_ingredients(items, self.today()))

    async def load(self) -> tuple[Ingredient, ...]:
        """Load the stored list; any failure degrades to an empty list"""
        try:
            loaded = await self.persistence.load_ingredients()
        except Exception as e:
            logger.error("Error loading ingredients: %s", e)
            loaded = None

        if loaded is None:
            logger.info("No saved ingredients found.")
            self._items = ()
        else:
            self._replace(loaded)
            logger.info("Loaded %d ingredients.", len(self._items))
        return self._items

    async def add(self, name: str, expiration_date: Union[date, str]) -> Ingredient:
        """Add an ingredient; raises ValidationError before touching the list"""
        ingredient = Ingredient.create(name, expiration_date)
        self._replace(list(self._items) + [ingredient])
        self._schedule_save()
        logger.info("Added ingredient %s (%s, expires %s)",
                    ingredient.id, ingredient.name, ingredient.expiration_date)
        return ingredient

    async def remove(self, ingredient_id: str) -> bool:
        """Remove by id. Unknown ids are a no-op and return False."""
        remaining = [ing for ing in self._items if ing.id != ingredient_id]
        if len(remaining) == len(self._items):
            return False
        self._replace(remaining)
        self._schedule_save()
        logger.info("Removed ingredient %s", ingredient_id)
        return True

    def _schedule_save(self) -> None:
        task = asyncio.create_task(self._save(self._items))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _save(self, snapshot: tuple[Ingredient, ...]) -> None:
        async with self._save_lock:
            # a newer snapshot has already replaced this one
            if snapshot is not self._items:
                return
            try:
                await self.persistence.save_ingredients(list(snapshot))
                logger.debug("Ingredients saved successfully.")
            except Exception as e:
                logger.error("Error saving ingredients: %s", e)

    async def flush(self) -> None:
        """Wait for background writes still in flight"""
        while self._pending:
            await asyncio.gather(*list(self._pending))
