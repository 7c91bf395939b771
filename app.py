"""Streamlit entry point for the WanderLuxe application."""
from __future__ import annotations

import logging
import os

import streamlit as st
from dotenv import load_dotenv

from wanderluxe.ui import ensure_form_state, ensure_offer_session, render_offers_page


def configure() -> None:
    """Configure logging, Streamlit page settings and environment variables."""

    load_dotenv()
    logging.basicConfig(
        level=getattr(logging, os.environ.get("LOG_LEVEL", "INFO").upper(), logging.INFO),
        format="%(asctime)s %(levelname)-8s [%(name)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    st.set_page_config(page_title="WanderLuxe", page_icon="✈️", layout="wide")


def render() -> None:
    """Render the WanderLuxe offer concierge."""

    ensure_form_state()
    ensure_offer_session()
    render_offers_page(st.container())


if __name__ == "__main__":
    configure()
    render()
