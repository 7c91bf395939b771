"""Data schemas for the WanderLuxe application."""

from __future__ import annotations

import re
from enum import Enum
from typing import Any, List, Optional, Sequence, Tuple

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    TypeAdapter,
    field_validator,
    model_validator,
)


MAX_INTERESTS = 3

INTEREST_OPTIONS: Tuple[str, ...] = (
    "Culinary & Dining",
    "Spa & Wellness",
    "Adventure",
    "History & Culture",
    "Nightlife",
    "Beach",
    "Shopping",
    "Family Activities",
)


class BudgetTier(str, Enum):
    """Budget level selected on the preferences form."""

    ECONOMY = "Economy"
    STANDARD = "Standard"
    LUXURY = "Luxury"
    ULTRA_LUXURY = "Ultra-Luxury"

    @classmethod
    def _missing_(cls, value: object) -> Optional["BudgetTier"]:
        if not isinstance(value, str):
            return None
        compact = re.sub(r"[^a-z]", "", value.lower())
        for member in cls:
            if compact == re.sub(r"[^a-z]", "", member.value.lower()):
                return member
        return None


DEFAULT_FORM_VALUES = {
    "destination": "Kyoto, Japan",
    "travelers": "2 Adults",
    "duration": "3 Nights",
    "occasion": "Anniversary",
    "budget": BudgetTier.LUXURY.value,
    "interests": ["History & Culture", "Culinary & Dining"],
}


def toggle_interest(
    selected: Sequence[str], interest: str, limit: int = MAX_INTERESTS
) -> List[str]:
    """Return the interest selection after toggling ``interest``.

    Selected interests are removed. Unselected ones are appended only while
    fewer than ``limit`` are chosen; otherwise the selection is unchanged.
    """

    current = list(selected)
    if interest in current:
        return [item for item in current if item != interest]
    if len(current) < limit:
        return [*current, interest]
    return current


class TravelPreferences(BaseModel):
    """A single submission of the travel preferences form."""

    destination: str
    travelers: str
    duration: str
    occasion: Optional[str] = None
    budget: BudgetTier = BudgetTier.STANDARD
    interests: Tuple[str, ...] = ()

    model_config = ConfigDict(frozen=True)

    @field_validator("destination", "travelers", "duration", mode="before")
    @classmethod
    def _require_text(cls, value: object) -> object:
        if isinstance(value, str):
            value = value.strip()
            if not value:
                raise ValueError("must not be blank")
        return value

    @field_validator("budget", mode="before")
    @classmethod
    def _coerce_budget(cls, value: object) -> object:
        if isinstance(value, str) and not isinstance(value, BudgetTier):
            return BudgetTier(value.strip())
        return value

    @field_validator("occasion", mode="before")
    @classmethod
    def _blank_occasion_is_none(cls, value: object) -> object:
        if isinstance(value, str) and not value.strip():
            return None
        return value.strip() if isinstance(value, str) else value

    @field_validator("interests", mode="before")
    @classmethod
    def _strip_interests(cls, value: object) -> object:
        if isinstance(value, (list, tuple)):
            return tuple(str(item).strip() for item in value if str(item).strip())
        return value


def _split_listish(value: str) -> List[str]:
    return [part.strip() for part in re.split(r"[\n,]+", value) if part.strip()]


class OfferPackage(BaseModel):
    """One generated hotel offer package as shown on a results card."""

    id: str
    title: str
    tagline: str
    description: str
    price: str
    currency: str
    perks: List[str] = Field(default_factory=list)
    room_type: str = Field(validation_alias=AliasChoices("room_type", "roomType"))
    cancellation_policy: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("cancellation_policy", "cancellationPolicy"),
    )
    match_score: int = Field(validation_alias=AliasChoices("match_score", "matchScore"))
    tags: List[str] = Field(default_factory=list)

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    @model_validator(mode="before")
    @classmethod
    def _coerce_llm_variants(cls, data: object) -> object:
        """Normalise common deviations in the provider's JSON."""

        if not isinstance(data, dict):
            return data

        payload = dict(data)
        for key in ("perks", "tags"):
            value = payload.get(key)
            if isinstance(value, str):
                payload[key] = _split_listish(value)
            elif isinstance(value, tuple):
                payload[key] = list(value)

        price = payload.get("price")
        if isinstance(price, (int, float)) and not isinstance(price, bool):
            payload["price"] = f"{price:,.0f}" if float(price).is_integer() else f"{price:,.2f}"

        if isinstance(payload.get("id"), int):
            payload["id"] = str(payload["id"])

        return payload

    @property
    def display_price(self) -> str:
        # The model sometimes repeats the symbol inside ``price`` ("$1,200").
        if self.currency and self.price.startswith(self.currency):
            return self.price
        return f"{self.currency}{self.price}"

    @classmethod
    def parse_batch(cls, payload: Any) -> List["OfferPackage"]:
        """Validate a decoded offers payload into a list of packages.

        The provider is asked for a bare JSON array; an object wrapping the
        array under ``"offers"`` is accepted as well.
        """

        if isinstance(payload, dict) and isinstance(payload.get("offers"), list):
            payload = payload["offers"]
        return _OFFER_BATCH_ADAPTER.validate_python(payload)


_OFFER_BATCH_ADAPTER = TypeAdapter(List[OfferPackage])


class GeneratedImage(BaseModel):
    """An image produced for an offer along with the prompt that created it."""

    url: str
    prompt: str



__all__ = [
    "BudgetTier",
    "DEFAULT_FORM_VALUES",
    "GeneratedImage",
    "INTEREST_OPTIONS",
    "MAX_INTERESTS",
    "OfferPackage",
    "TravelPreferences",
    "toggle_interest",
]
