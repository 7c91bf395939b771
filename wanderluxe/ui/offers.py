"""UI helpers for rendering curated offers and their room visualizations."""

from __future__ import annotations

import asyncio
import base64
import binascii
import logging
from typing import Awaitable, Optional, TypeVar, Union

import streamlit as st

from wanderluxe.agents import PLACEHOLDER_IMAGE_URL
from wanderluxe.schemas import OfferPackage, TravelPreferences
from wanderluxe.ui.form import render_preferences_form
from wanderluxe.workflows import (
    GENERIC_ERROR_MESSAGE,
    GenerationClient,
    OfferSession,
    SessionSnapshot,
    SessionStatus,
)

_SESSION_KEY = "offer_session"

_LOGGER = logging.getLogger(__name__)

T = TypeVar("T")


def ensure_offer_session(client: Optional[GenerationClient] = None) -> OfferSession:
    """Return the session stored in Streamlit state, creating it on first use."""

    if _SESSION_KEY not in st.session_state:
        st.session_state[_SESSION_KEY] = OfferSession(client)
    return st.session_state[_SESSION_KEY]


def _run(awaitable: Awaitable[T]) -> T:
    return asyncio.run(awaitable)


def image_source(reference: str) -> Union[str, bytes]:
    """Return something ``st.image`` can draw for an image reference.

    Data URIs are decoded to raw bytes; anything else is passed through as a URL.
    """

    if reference.startswith("data:") and ";base64," in reference:
        payload = reference.split(";base64,", 1)[1]
        try:
            return base64.b64decode(payload, validate=True)
        except (binascii.Error, ValueError):
            _LOGGER.warning("Ignoring malformed data URI image reference")
            return PLACEHOLDER_IMAGE_URL
    return reference


def match_badge(offer: OfferPackage) -> str:
    return f"{offer.match_score}% Match"


def _handle_submit(session: OfferSession, prefs: TravelPreferences) -> SessionSnapshot:
    with st.spinner("Crafting offers…"):
        return _run(session.request_offers(prefs))


def _handle_visualize(session: OfferSession, offer: OfferPackage) -> SessionSnapshot:
    with st.spinner("Dreaming up view..."):
        return _run(session.request_visualization(offer))


def render_offer_card(container, session: OfferSession, snapshot: SessionSnapshot, offer: OfferPackage) -> None:
    """Render one offer card with its visualization slot."""

    with container:
        image = snapshot.image_for(offer.id)
        if image:
            st.image(image_source(image), caption=offer.title, use_container_width=True)
        else:
            st.image(PLACEHOLDER_IMAGE_URL, use_container_width=True)
            if snapshot.is_visualizing(offer.id):
                st.caption("Dreaming up view...")
            elif st.button("✨ Visualize Room", key=f"offer_visualize_{offer.id}"):
                _handle_visualize(session, offer)
                st.rerun()

        st.markdown(f"**⭐ {match_badge(offer)}**")
        if offer.tags:
            st.caption(" · ".join(tag.upper() for tag in offer.tags))
        st.subheader(offer.title)
        st.markdown(f"*{offer.tagline}*")
        st.write(offer.description)
        st.markdown(f"**{offer.room_type}**")
        st.markdown("\n".join(f"- ✅ {perk}" for perk in offer.perks))
        st.caption("Total Estimate")
        st.markdown(f"### {offer.display_price}")
        if offer.cancellation_policy:
            st.caption(offer.cancellation_policy)


def render_results(container, session: OfferSession, snapshot: SessionSnapshot) -> None:
    destination = snapshot.preferences.destination if snapshot.preferences else ""
    with container:
        st.header("Your Curated Collection")
        st.caption(f"Showing {len(snapshot.offers)} exclusive offers for **{destination}**")
        columns = st.columns(3, gap="large") if snapshot.offers else []

    for idx, offer in enumerate(snapshot.offers):
        render_offer_card(columns[idx % len(columns)], session, snapshot, offer)


def render_error(container, session: OfferSession, snapshot: SessionSnapshot) -> None:
    with container:
        st.error("Oops, our concierge is busy.")
        st.caption(snapshot.error_message or GENERIC_ERROR_MESSAGE)
        if st.button("Try Again", key="offer_try_again"):
            session.reset()
            st.rerun()


def render_offers_page(container) -> None:
    """Render the search form, results and error states for the current session."""

    session = ensure_offer_session()
    snapshot = session.snapshot()

    with container:
        header, action = st.columns([5, 1])
        header.title("✈️ WanderLuxe")
        header.caption("AI CONCIERGE ENGINE")
        if snapshot.status is not SessionStatus.IDLE and action.button("↺ New Search", key="offer_new_search"):
            session.reset()
            st.rerun()

        body_area = st.container()

    if snapshot.status in {SessionStatus.IDLE, SessionStatus.GENERATING_OFFERS}:
        copy, form_area = body_area.columns([5, 7], gap="large")
        with copy:
            st.markdown("## Curate the perfect *stay experience.*")
            st.write(
                "Our AI engine analyzes your travel DNA to craft personalized hotel "
                "packages, exclusive perks, and visualize your potential room view in seconds."
            )
        prefs = render_preferences_form(form_area.container(border=True), is_loading=snapshot.is_loading)
        if prefs is not None:
            _handle_submit(session, prefs)
            st.rerun()

    if snapshot.status is SessionStatus.COMPLETE or snapshot.offers:
        render_results(body_area.container(), session, snapshot)

    if snapshot.status is SessionStatus.ERROR:
        render_error(body_area.container(), session, snapshot)


__all__ = [
    "ensure_offer_session",
    "image_source",
    "match_badge",
    "render_offer_card",
    "render_offers_page",
]
