"""Workflow entry points for orchestrating WanderLuxe agents."""

from .generation import GeminiGenerationClient, GenerationClient
from .offer_session import (
    GENERIC_ERROR_MESSAGE,
    OfferSession,
    SessionSnapshot,
    SessionStatus,
)

__all__ = [
    "GENERIC_ERROR_MESSAGE",
    "GeminiGenerationClient",
    "GenerationClient",
    "OfferSession",
    "SessionSnapshot",
    "SessionStatus",
]
