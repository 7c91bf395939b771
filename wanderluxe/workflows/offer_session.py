"""Session state machine for offer generation and per-offer visualizations."""

from __future__ import annotations

import asyncio
import logging
import os
import time
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Awaitable, Callable, Dict, List, Mapping, Optional, Tuple, TypeVar

from wanderluxe.agents import build_visual_context
from wanderluxe.schemas import OfferPackage, TravelPreferences

from .generation import GeminiGenerationClient, GenerationClient

_LOGGER = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "We couldn't generate offers right now. Please try again."

_TIMEOUT_ENV = os.getenv("OFFER_SESSION_TIMEOUT")
DEFAULT_REQUEST_TIMEOUT: Optional[float] = float(_TIMEOUT_ENV) if _TIMEOUT_ENV else None

T = TypeVar("T")


class SessionStatus(str, Enum):
    IDLE = "idle"
    GENERATING_OFFERS = "generating_offers"
    COMPLETE = "complete"
    ERROR = "error"


@dataclass(frozen=True)
class SessionSnapshot:
    """Read-only view of the session handed to the presentation layer."""

    status: SessionStatus
    offers: Tuple[OfferPackage, ...] = ()
    preferences: Optional[TravelPreferences] = None
    visualizations: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    visualizing_id: Optional[str] = None
    error_message: Optional[str] = None

    @property
    def is_loading(self) -> bool:
        return self.status is SessionStatus.GENERATING_OFFERS

    def image_for(self, offer_id: str, default: Optional[str] = None) -> Optional[str]:
        return self.visualizations.get(offer_id, default)

    def is_visualizing(self, offer_id: str) -> bool:
        return self.visualizing_id == offer_id


SessionListener = Callable[[SessionSnapshot], None]


class OfferSession:
    """Single source of truth for one user's offer search.

    ``request_offers`` supersedes any in-flight batch: each call (and each
    ``reset``) advances a generation counter and completions carrying an older
    counter are discarded. Visualizations run independently per offer id, at
    most one in flight per id, and land only if their batch is still current.
    """

    def __init__(
        self,
        client: Optional[GenerationClient] = None,
        *,
        request_timeout: Optional[float] = DEFAULT_REQUEST_TIMEOUT,
    ) -> None:
        self.client: GenerationClient = client or GeminiGenerationClient()
        self.request_timeout = request_timeout
        self._status = SessionStatus.IDLE
        self._offers: List[OfferPackage] = []
        self._preferences: Optional[TravelPreferences] = None
        self._visualizations: Dict[str, str] = {}
        self._visualizing_id: Optional[str] = None
        self._error_message: Optional[str] = None
        self._generation = 0
        self._pending_visualizations: Dict[str, int] = {}
        self._listeners: List[SessionListener] = []

    @property
    def status(self) -> SessionStatus:
        return self._status

    @property
    def offers(self) -> Tuple[OfferPackage, ...]:
        return tuple(self._offers)

    @property
    def preferences(self) -> Optional[TravelPreferences]:
        return self._preferences

    @property
    def visualizations(self) -> Mapping[str, str]:
        return MappingProxyType(dict(self._visualizations))

    @property
    def visualizing_id(self) -> Optional[str]:
        return self._visualizing_id

    def snapshot(self) -> SessionSnapshot:
        return SessionSnapshot(
            status=self._status,
            offers=tuple(self._offers),
            preferences=self._preferences,
            visualizations=MappingProxyType(dict(self._visualizations)),
            visualizing_id=self._visualizing_id,
            error_message=self._error_message,
        )

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        """Register ``listener`` for state changes and return an unsubscribe callable."""

        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def _notify(self) -> None:
        snapshot = self.snapshot()
        for listener in list(self._listeners):
            listener(snapshot)

    async def _call(self, awaitable: Awaitable[T]) -> T:
        if self.request_timeout is None:
            return await awaitable
        return await asyncio.wait_for(awaitable, self.request_timeout)

    async def request_offers(self, prefs: TravelPreferences) -> SessionSnapshot:
        """Generate a fresh offer batch for ``prefs``, replacing the current one."""

        self._generation += 1
        token = self._generation
        self._status = SessionStatus.GENERATING_OFFERS
        self._preferences = prefs
        self._offers = []
        self._visualizations = {}
        self._visualizing_id = None
        self._error_message = None
        self._notify()

        _LOGGER.info("Requesting offers for %s [generation=%d]", prefs.destination, token)
        start = time.perf_counter()
        try:
            offers = await self._call(self.client.generate_offers(prefs))
        except Exception:  # noqa: BLE001 - surfaced as a generic error state
            if token != self._generation:
                _LOGGER.info("Discarding stale offer failure [generation=%d]", token)
                return self.snapshot()
            _LOGGER.exception("Offer generation failed for %s", prefs.destination)
            self._status = SessionStatus.ERROR
            self._offers = []
            self._error_message = GENERIC_ERROR_MESSAGE
            self._notify()
            return self.snapshot()

        if token != self._generation:
            _LOGGER.info(
                "Discarding stale offer batch [generation=%d, current=%d]",
                token,
                self._generation,
            )
            return self.snapshot()

        self._offers = list(offers)
        self._status = SessionStatus.COMPLETE
        _LOGGER.info(
            "Offer batch ready with %d offers in %.2fs",
            len(self._offers),
            time.perf_counter() - start,
        )
        self._notify()
        return self.snapshot()

    async def request_visualization(self, offer: OfferPackage) -> SessionSnapshot:
        """Generate a room visualization for ``offer`` and store it by offer id."""

        prefs = self._preferences
        if prefs is None:
            _LOGGER.debug("Ignoring visualization for %s: no preferences stored", offer.id)
            return self.snapshot()

        token = self._generation
        if self._pending_visualizations.get(offer.id) == token:
            _LOGGER.debug("Visualization already in flight for %s", offer.id)
            return self.snapshot()

        self._pending_visualizations[offer.id] = token
        self._visualizing_id = offer.id
        self._notify()

        image: Optional[str] = None
        try:
            context = build_visual_context(offer, prefs)
            image = await self._call(
                self.client.generate_visualization(prefs.destination, context)
            )
        except Exception:  # noqa: BLE001 - card falls back to the placeholder
            _LOGGER.exception("Visualization failed for offer %s", offer.id)
        finally:
            if self._pending_visualizations.get(offer.id) == token:
                del self._pending_visualizations[offer.id]
            if self._visualizing_id == offer.id:
                self._visualizing_id = None

        if image is not None:
            if token == self._generation:
                self._visualizations[offer.id] = image
            else:
                _LOGGER.info("Discarding visualization for %s from a previous batch", offer.id)

        self._notify()
        return self.snapshot()

    def reset(self) -> SessionSnapshot:
        """Return to the idle state, dropping every result of the current search."""

        self._generation += 1
        self._status = SessionStatus.IDLE
        self._offers = []
        self._preferences = None
        self._visualizations = {}
        self._visualizing_id = None
        self._error_message = None
        _LOGGER.info("Offer session reset")
        self._notify()
        return self.snapshot()


__all__ = [
    "DEFAULT_REQUEST_TIMEOUT",
    "GENERIC_ERROR_MESSAGE",
    "OfferSession",
    "SessionListener",
    "SessionSnapshot",
    "SessionStatus",
]
