"""UI helpers for the travel preferences form."""

from __future__ import annotations

from typing import Dict, List, Mapping, Optional

import streamlit as st
from pydantic import ValidationError

from wanderluxe.schemas import (
    DEFAULT_FORM_VALUES,
    INTEREST_OPTIONS,
    MAX_INTERESTS,
    BudgetTier,
    TravelPreferences,
    toggle_interest,
)

_FORM_KEY = "_offer_form_state"
_BUDGET_OPTIONS: List[str] = [tier.value for tier in BudgetTier]
_FIELD_LABELS = {
    "destination": "a destination",
    "travelers": "who is travelling",
    "duration": "the trip duration",
}


def ensure_form_state() -> None:
    """Initialise the Streamlit session state backing the preferences form."""

    if _FORM_KEY not in st.session_state:
        st.session_state[_FORM_KEY] = {
            **DEFAULT_FORM_VALUES,
            "interests": list(DEFAULT_FORM_VALUES["interests"]),
        }


def _form_state() -> Dict[str, object]:
    return st.session_state[_FORM_KEY]


def _toggle_interest(state: Dict[str, object], interest: str) -> None:
    state["interests"] = toggle_interest(state.get("interests") or [], interest)


def build_preferences(state: Mapping[str, object]) -> TravelPreferences:
    """Freeze the editable form state into a :class:`TravelPreferences`."""

    return TravelPreferences(
        destination=state.get("destination") or "",
        travelers=state.get("travelers") or "",
        duration=state.get("duration") or "",
        occasion=state.get("occasion") or None,
        budget=state.get("budget") or BudgetTier.STANDARD,
        interests=list(state.get("interests") or []),
    )


def _format_form_error(exc: ValidationError) -> str:
    missing = []
    for error in exc.errors():
        field = str(error["loc"][0]) if error.get("loc") else ""
        label = _FIELD_LABELS.get(field)
        if label and label not in missing:
            missing.append(label)
    if missing:
        return "Add " + " and ".join(missing) + " first."
    return "Check the form and try again."


def render_preferences_form(container, *, is_loading: bool = False) -> Optional[TravelPreferences]:
    """Render the preferences form and return the submitted preferences, if any."""

    state = _form_state()

    with container:
        left, right = st.columns(2)
        state["destination"] = left.text_input(
            "📍 Destination",
            value=str(state.get("destination") or ""),
            placeholder="e.g. Paris, Maldives, NYC",
            key="offer_form_destination",
        )
        state["travelers"] = right.text_input(
            "👥 Travelers",
            value=str(state.get("travelers") or ""),
            placeholder="e.g. 2 Adults, 1 Child",
            key="offer_form_travelers",
        )
        state["duration"] = left.text_input(
            "📅 Duration",
            value=str(state.get("duration") or ""),
            placeholder="e.g. 5 nights",
            key="offer_form_duration",
        )
        state["occasion"] = right.text_input(
            "💝 Occasion",
            value=str(state.get("occasion") or ""),
            placeholder="e.g. Honeymoon, Business, Relax",
            key="offer_form_occasion",
        )

        current_budget = str(state.get("budget") or BudgetTier.STANDARD.value)
        state["budget"] = st.radio(
            "💲 Budget",
            _BUDGET_OPTIONS,
            index=_BUDGET_OPTIONS.index(current_budget) if current_budget in _BUDGET_OPTIONS else 1,
            horizontal=True,
            key="offer_form_budget",
        )

        selected = list(state.get("interests") or [])
        st.markdown(f"**✨ Interests** (max {MAX_INTERESTS})")
        columns = st.columns(4)
        for idx, interest in enumerate(INTEREST_OPTIONS):
            label = f"✓ {interest}" if interest in selected else interest
            columns[idx % len(columns)].button(
                label,
                key=f"offer_form_interest_{idx}",
                on_click=_toggle_interest,
                kwargs={"state": state, "interest": interest},
                use_container_width=True,
            )

        submitted = st.button(
            "Crafting Offers..." if is_loading else "✨ Generate Exclusive Offers",
            type="primary",
            disabled=is_loading,
            key="offer_form_submit",
            use_container_width=True,
        )

    if not submitted:
        return None

    try:
        return build_preferences(state)
    except ValidationError as exc:
        container.warning(_format_form_error(exc))
        return None


__all__ = ["build_preferences", "ensure_form_state", "render_preferences_form"]
