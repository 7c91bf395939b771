"""Concierge agent that turns travel preferences into hotel offer packages."""

from __future__ import annotations

import json
import logging
import time
from typing import Any, Dict, List, Optional

import httpx
from pydantic import ValidationError

from wanderluxe.core.llm import DEFAULT_OFFER_MODEL, GeminiClient, GeminiError
from wanderluxe.schemas import OfferPackage, TravelPreferences

from . import GenerationFailure, format_bullet_lines

_LOGGER = logging.getLogger(__name__)


def _string(description: Optional[str] = None) -> Dict[str, Any]:
    schema: Dict[str, Any] = {"type": "STRING"}
    if description:
        schema["description"] = description
    return schema


OFFER_RESPONSE_SCHEMA: Dict[str, Any] = {
    "type": "ARRAY",
    "items": {
        "type": "OBJECT",
        "properties": {
            "id": _string(),
            "title": _string(),
            "tagline": _string("A catchy 5-10 word hook"),
            "description": _string("2-3 sentences persuasive copy"),
            "price": _string("Total price estimate (e.g. $1,200)"),
            "currency": _string("Currency symbol, e.g. $"),
            "perks": {
                "type": "ARRAY",
                "items": _string(),
                "description": "List of 3-5 inclusions (e.g. Breakfast, Spa Credit)",
            },
            "roomType": _string(),
            "cancellationPolicy": _string(),
            "matchScore": {"type": "INTEGER", "description": "Relevance score 70-100"},
            "tags": {"type": "ARRAY", "items": _string()},
        },
        "required": [
            "id",
            "title",
            "tagline",
            "description",
            "price",
            "currency",
            "perks",
            "roomType",
            "matchScore",
            "tags",
        ],
    },
}


class OfferConcierge:
    """Agent that asks Gemini for three differentiated offer packages."""

    system_prompt = (
        "You are a world-class Hotel Revenue Manager and Creative Director for a "
        "luxury travel brand."
    )
    prompt_version = "offers.concierge.v1"
    package_count = 3

    def __init__(self, client: Optional[GeminiClient] = None, model: Optional[str] = None) -> None:
        self.client = client or GeminiClient()
        self.model = model or DEFAULT_OFFER_MODEL

    def build_prompt(self, prefs: TravelPreferences) -> str:
        profile = format_bullet_lines(
            [
                ("Travelers", prefs.travelers),
                ("Duration", prefs.duration),
                ("Occasion", prefs.occasion),
                ("Budget Level", prefs.budget.value),
                ("Interests", ", ".join(prefs.interests) or None),
            ]
        )
        return (
            f'Create {self.package_count} distinct, high-converting hotel offer packages '
            f'for a trip to "{prefs.destination}".\n\n'
            f"Guest Profile:\n{profile}\n\n"
            "Packages to generate:\n"
            '1. The "Smart Choice" (Great value, fits budget)\n'
            '2. The "Perfect Match" (Aligned perfectly with interests/occasion)\n'
            '3. The "Unforgettable Splurge" (Upsell with premium amenities)\n\n'
            "Give every package a unique id. Be creative with titles and descriptions. "
            "Use persuasive marketing copy.\n"
            "Return strictly JSON."
        )

    async def run(self, prefs: TravelPreferences) -> List[OfferPackage]:
        """Return the generated offer batch for ``prefs``."""

        start = time.perf_counter()
        try:
            response = await self.client.generate_content(
                prompt=self.build_prompt(prefs),
                system=self.system_prompt,
                model=self.model,
                prompt_version=self.prompt_version,
                response_mime_type="application/json",
                response_schema=OFFER_RESPONSE_SCHEMA,
            )
            text = self.client.extract_text(response)
        except (GeminiError, httpx.HTTPError) as exc:
            raise GenerationFailure(f"No data returned from AI: {exc}") from exc

        try:
            offers = OfferPackage.parse_batch(json.loads(text))
        except json.JSONDecodeError as exc:
            raise GenerationFailure(f"Offer payload was not valid JSON: {exc}") from exc
        except ValidationError as exc:
            raise GenerationFailure(
                f"Offer payload could not be validated as OfferPackage list: {exc}"
            ) from exc

        _LOGGER.info(
            "Generated %d offers for %s in %.2fs [prompt_version=%s]",
            len(offers),
            prefs.destination,
            time.perf_counter() - start,
            self.prompt_version,
        )
        return offers


__all__ = ["OFFER_RESPONSE_SCHEMA", "OfferConcierge"]
