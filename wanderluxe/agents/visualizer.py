"""Visualizer agent that renders a room preview for an offer."""

from __future__ import annotations

import logging
import time
from typing import Optional

import httpx

from wanderluxe.core.llm import DEFAULT_IMAGE_MODEL, GeminiClient, GeminiError
from wanderluxe.schemas import GeneratedImage, OfferPackage, TravelPreferences

from . import VisualizationFailure

_LOGGER = logging.getLogger(__name__)

PLACEHOLDER_IMAGE_URL = "https://picsum.photos/800/600?blur=2"


def build_visual_context(offer: OfferPackage, prefs: TravelPreferences) -> str:
    """Describe the room an offer's visualization should show."""

    theme = ", ".join(prefs.interests)
    return f"A {offer.room_type} reflecting the vibe of '{offer.title}'. Theme: {theme}."


class RoomVisualizer:
    """Agent that asks Gemini's image model for a photorealistic room shot."""

    prompt_version = "offers.visualizer.v1"

    def __init__(self, client: Optional[GeminiClient] = None, model: Optional[str] = None) -> None:
        self.client = client or GeminiClient()
        self.model = model or DEFAULT_IMAGE_MODEL

    @staticmethod
    def build_prompt(destination: str, context: str) -> str:
        return (
            "A hyper-realistic, award-winning architectural photography shot of a "
            f"luxury hotel in {destination}.\n"
            f"Context: {context}\n"
            "Lighting: Golden hour, warm, inviting.\n"
            "Style: High-end travel magazine, 8k resolution, cinematic lighting.\n"
            "No text overlay."
        )

    async def run(self, destination: str, context: str) -> GeneratedImage:
        """Return the first inline image Gemini produces as a data URI."""

        prompt = self.build_prompt(destination, context)
        start = time.perf_counter()
        try:
            response = await self.client.generate_content(
                prompt=prompt,
                model=self.model,
                prompt_version=self.prompt_version,
                response_modalities=("TEXT", "IMAGE"),
            )
            mime_type, data = self.client.extract_inline_image(response)
        except (GeminiError, httpx.HTTPError) as exc:
            raise VisualizationFailure(f"No image generated: {exc}") from exc

        _LOGGER.info(
            "Generated %s visualization for %s in %.2fs [prompt_version=%s]",
            mime_type,
            destination,
            time.perf_counter() - start,
            self.prompt_version,
        )
        return GeneratedImage(url=f"data:{mime_type};base64,{data}", prompt=prompt)


__all__ = ["PLACEHOLDER_IMAGE_URL", "RoomVisualizer", "build_visual_context"]
