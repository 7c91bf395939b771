"""WanderLuxe Streamlit UI helpers."""

from __future__ import annotations

from .form import build_preferences, ensure_form_state, render_preferences_form
from .offers import ensure_offer_session, render_offer_card, render_offers_page

__all__ = [
    "build_preferences",
    "ensure_form_state",
    "ensure_offer_session",
    "render_offer_card",
    "render_offers_page",
    "render_preferences_form",
]
