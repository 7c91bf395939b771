"""Boundary between the offer session and the generative AI provider."""

from __future__ import annotations

from typing import Optional, Protocol, Sequence

from wanderluxe.agents import OfferConcierge, RoomVisualizer
from wanderluxe.core.llm import GeminiClient
from wanderluxe.schemas import OfferPackage, TravelPreferences


class GenerationClient(Protocol):
    """Anything able to produce offer batches and room visualizations."""

    async def generate_offers(self, prefs: TravelPreferences) -> Sequence[OfferPackage]:
        ...

    async def generate_visualization(self, destination: str, context: str) -> str:
        ...


class GeminiGenerationClient:
    """Generation client backed by the Gemini concierge and visualizer agents."""

    def __init__(
        self,
        client: Optional[GeminiClient] = None,
        *,
        concierge: Optional[OfferConcierge] = None,
        visualizer: Optional[RoomVisualizer] = None,
    ) -> None:
        shared = client or GeminiClient()
        self.concierge = concierge or OfferConcierge(shared)
        self.visualizer = visualizer or RoomVisualizer(shared)

    async def generate_offers(self, prefs: TravelPreferences) -> Sequence[OfferPackage]:
        return await self.concierge.run(prefs)

    async def generate_visualization(self, destination: str, context: str) -> str:
        image = await self.visualizer.run(destination, context)
        return image.url


__all__ = ["GeminiGenerationClient", "GenerationClient"]
