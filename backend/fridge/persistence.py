"""
Ingredient Persistence
Load and save the ingredient list to durable storage
"""

import asyncio
import json
import logging
import os
from dataclasses import replace
from pathlib import Path
from typing import Optional

from config import INGREDIENTS_PATH
from fridge.errors import FridgeError
from fridge.models import Ingredient, new_ingredient_id

logger = logging.getLogger(__name__)


class PersistenceGateway:
    """Interface the ingredient store saves through.

    load_ingredients returns None when nothing has been stored yet.
    save_ingredients raises on failure; callers decide what to do with it.
    """

    async def load_ingredients(self) -> Optional[list[Ingredient]]:
        raise NotImplementedError

    async def save_ingredients(self, items: list[Ingredient]) -> None:
        raise NotImplementedError


def serialize_ingredients(items: list[Ingredient]) -> dict:
    return {"ingredients": [ing.to_dict() for ing in items]}


def deserialize_ingredients(document: dict) -> list[Ingredient]:
    """Read ingredients from a stored document, skipping malformed records"""
    records = document.get("ingredients", []) if isinstance(document, dict) else document
    if not isinstance(records, list):
        raise ValueError("Stored ingredients are not a list")

    items = []
    seen_ids = set()
    for record in records:
        if not isinstance(record, dict):
            logger.warning("Skipping stored ingredient that is not an object: %r", record)
            continue
        try:
            ingredient = Ingredient.from_dict(record)
        except FridgeError as e:
            logger.warning("Skipping stored ingredient %r: %s", record, e)
            continue
        # millisecond-timestamp ids written by older backends can collide
        if ingredient.id in seen_ids:
            fresh_id = new_ingredient_id()
            logger.warning("Duplicate stored ingredient id %s (%s); reassigned %s",
                           ingredient.id, ingredient.name, fresh_id)
            ingredient = replace(ingredient, id=fresh_id)
        seen_ids.add(ingredient.id)
        items.append(ingredient)
    return items


class JsonFilePersistence(PersistenceGateway):
    """Ingredient list stored in a local JSON file"""

    def __init__(self, path: Path = INGREDIENTS_PATH):
        self.path = Path(path)

    def _read(self) -> Optional[list[Ingredient]]:
        if not self.path.exists():
            return None
        text = self.path.read_text(encoding="utf-8")
        if not text.strip():
            return None
        return deserialize_ingredients(json.loads(text))

    def _write(self, items: list[Ingredient]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp_path.write_text(
            json.dumps(serialize_ingredients(items), indent=2, ensure_ascii=False),
            encoding="utf-8"
        )
        os.replace(tmp_path, self.path)

    async def load_ingredients(self) -> Optional[list[Ingredient]]:
        return await asyncio.to_thread(self._read)

    async def save_ingredients(self, items: list[Ingredient]) -> None:
        await asyncio.to_thread(self._write, list(items))


class MemoryPersistence(PersistenceGateway):
    """Keeps the serialized document in memory"""

    def __init__(self, document: Optional[dict] = None):
        self.document = document
        self.save_count = 0

    async def load_ingredients(self) -> Optional[list[Ingredient]]:
        if self.document is None:
            return None
        return deserialize_ingredients(self.document)

    async def save_ingredients(self, items: list[Ingredient]) -> None:
        # round-trip through JSON so stored data looks like the file backend's
        self.document = json.loads(json.dumps(serialize_ingredients(items)))
        self.save_count += 1
