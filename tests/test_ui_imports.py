"""Sanity checks for the wanderluxe.ui package exports."""

from __future__ import annotations

def _is_callable(value: object) -> bool:
    return callable(value)


def test_page_renderers_are_exposed() -> None:
    from wanderluxe import ui

    assert _is_callable(ui.render_offers_page)
    assert _is_callable(ui.render_offer_card)
    assert _is_callable(ui.render_preferences_form)


def test_state_initialisers_are_available() -> None:
    from wanderluxe import ui

    assert _is_callable(ui.ensure_form_state)
    assert _is_callable(ui.ensure_offer_session)
