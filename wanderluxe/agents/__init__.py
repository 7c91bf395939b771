"""Shared utilities for WanderLuxe's Gemini-backed agents."""

from __future__ import annotations

from typing import Iterable, Optional


class AgentExecutionError(RuntimeError):
    """Raised when an agent cannot return a valid payload."""


class GenerationFailure(AgentExecutionError):
    """Raised when offer generation returns no payload or an unusable one."""


class VisualizationFailure(AgentExecutionError):
    """Raised when the image model returns no inline image."""


def format_bullet_lines(lines: Iterable[tuple[str, Optional[str]]]) -> str:
    """Render ``(label, value)`` pairs as prompt bullets, skipping empty values."""

    rendered = []
    for label, value in lines:
        if value is None:
            continue
        text = str(value).strip()
        if text:
            rendered.append(f"- {label}: {text}")
    return "\n".join(rendered)


from .concierge import OFFER_RESPONSE_SCHEMA, OfferConcierge
from .visualizer import PLACEHOLDER_IMAGE_URL, RoomVisualizer, build_visual_context

__all__ = [
    "AgentExecutionError",
    "GenerationFailure",
    "OFFER_RESPONSE_SCHEMA",
    "OfferConcierge",
    "PLACEHOLDER_IMAGE_URL",
    "RoomVisualizer",
    "VisualizationFailure",
    "build_visual_context",
    "format_bullet_lines",
]
