"""Core utilities for WanderLuxe."""

from .llm import DEFAULT_IMAGE_MODEL, DEFAULT_OFFER_MODEL, GeminiClient, GeminiError

__all__ = [
    "DEFAULT_IMAGE_MODEL",
    "DEFAULT_OFFER_MODEL",
    "GeminiClient",
    "GeminiError",
]
