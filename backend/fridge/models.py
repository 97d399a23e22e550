"""
Fridge Data Model
Defines the Ingredient and RecipeSummary dataclasses and freshness helpers
"""

import uuid
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Optional, Union

from config import NEARING_EXPIRY_DAYS
from fridge.errors import ValidationError


class Freshness(str, Enum):
    """How close an ingredient is to its expiration date"""
    EXPIRED = "expired"
    NEARING_EXPIRY = "nearing_expiry"
    FRESH = "fresh"


def new_ingredient_id() -> str:
    return uuid.uuid4().hex


def parse_expiration_date(value: Union[date, str, None]) -> date:
    """Parse an ISO-8601 calendar date (YYYY-MM-DD) or pass a date through"""
    if isinstance(value, date):
        # datetime is a date subclass; keep the calendar part only
        return date(value.year, value.month, value.day)
    if not isinstance(value, str) or not value.strip():
        raise ValidationError("Expiration date is required (YYYY-MM-DD).")
    try:
        return date.fromisoformat(value.strip())
    except ValueError:
        raise ValidationError(f"Invalid expiration date '{value}'. Use YYYY-MM-DD.")


def clean_name(name: Optional[str]) -> str:
    if not isinstance(name, str) or not name.strip():
        raise ValidationError("Ingredient name is required.")
    return name.strip()


@dataclass(frozen=True)
class Ingredient:
    """A tracked food item"""
    id: str
    name: str
    expiration_date: date

    @classmethod
    def create(cls, name: str, expiration_date: Union[date, str]) -> "Ingredient":
        """Validate user input and build an ingredient with a fresh id"""
        cleaned = clean_name(name)
        parsed = parse_expiration_date(expiration_date)
        return cls(id=new_ingredient_id(), name=cleaned, expiration_date=parsed)

    def days_until_expiry(self, today: date) -> int:
        return (self.expiration_date - today).days

    def is_expired(self, today: date) -> bool:
        return self.expiration_date < today

    def freshness(self, today: date, nearing_days: int = NEARING_EXPIRY_DAYS) -> Freshness:
        if self.is_expired(today):
            return Freshness.EXPIRED
        if self.days_until_expiry(today) <= nearing_days:
            return Freshness.NEARING_EXPIRY
        return Freshness.FRESH

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "expirationDate": self.expiration_date.isoformat()
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Ingredient":
        """Build from a stored record; accepts the legacy expiryDate key and numeric ids"""
        raw_id = data.get("id")
        if raw_id is None or str(raw_id) == "":
            raise ValidationError("Stored ingredient has no id.")
        raw_date = data.get("expirationDate", data.get("expiryDate"))
        return cls(
            id=str(raw_id),
            name=clean_name(data.get("name")),
            expiration_date=parse_expiration_date(raw_date)
        )


@dataclass
class RecipeSummary:
    """A recipe candidate suggested by the AI"""
    title: str
    ingredients: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "title": self.title,
            "ingredients": list(self.ingredients)
        }

    def restricted_to(self, names: list[str]) -> "RecipeSummary":
        """Keep only ingredients the user actually has, using the user's spelling"""
        available = {n.lower(): n for n in names}
        kept = []
        for ingredient in self.ingredients:
            match = available.get(ingredient.strip().lower())
            if match and match not in kept:
                kept.append(match)
        return RecipeSummary(title=self.title, ingredients=kept)
