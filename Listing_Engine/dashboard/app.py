"""
Listing Engine — Copywriting Dashboard.

Pure UI layer. Every action goes through the ReconciliationController:
    - Generate          -> extraction + one bulk generation call
    - Section cards     -> edit / regenerate / translate one section
    - Sidebar           -> tone, length, emojis, output language, model
    - Export            -> copy as Markdown / HTML, download HTML page
    - Debug log         -> the session's [TAG] trail, oldest first

Usage:
    streamlit run Listing_Engine/dashboard/app.py
"""

import asyncio
import os
import sys

# Load .env before Settings reads the environment
from dotenv import load_dotenv
load_dotenv()

import streamlit as st

# ---------------------------------------------------------------------------
# Path setup
# ---------------------------------------------------------------------------
_PROJECT_ROOT = os.path.dirname(
    os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
)
if _PROJECT_ROOT not in sys.path:
    sys.path.insert(0, _PROJECT_ROOT)

from Listing_Engine.config import configure_logging, get_settings
from Listing_Engine.dashboard.components.content_preview import render_content_preview
from Listing_Engine.dashboard.components.debug_log_panel import render_debug_log
from Listing_Engine.dashboard.components.sidebar import SIDEBAR_KEYS, render_sidebar
from Listing_Engine.saas_core.llm import LLMGateway
from Listing_Engine.session import ReconciliationController, SessionState

# ---------------------------------------------------------------------------
# Page config
# ---------------------------------------------------------------------------
st.set_page_config(
    page_title="Listing Engine",
    page_icon="\U0001f6cd",
    layout="wide",
    initial_sidebar_state="expanded",
)

if "controller" not in st.session_state:
    configure_logging()
    st.session_state["controller"] = ReconciliationController.from_settings()

controller: ReconciliationController = st.session_state["controller"]
session = controller.session


def run(coro):
    """Drive one controller action to completion on a fresh event loop."""
    return asyncio.run(coro)


# ---------------------------------------------------------------------------
# Sidebar — options + model
# ---------------------------------------------------------------------------
with st.sidebar:
    st.title("Listing Engine")
    st.caption("Product copy from any product page")
    st.divider()
    picked = render_sidebar(controller)

if picked is not None:
    settings = get_settings()
    controller.gateway = LLMGateway(
        provider=picked["provider"],
        api_key=settings.api_key_for(picked["provider"]),
        model=picked["model"],
        temperature=settings.LLM_TEMPERATURE,
    )
    controller.extraction_model = (
        settings.EXTRACTION_MODEL if picked["provider"] == settings.LLM_PROVIDER else None
    )

# ---------------------------------------------------------------------------
# Input
# ---------------------------------------------------------------------------
st.header("Product Source")
raw_input = st.text_area(
    "Product URL, page HTML, or plain product text",
    value=session.user_input,
    height=160,
    key="raw_input",
)

col_gen, col_clear, col_reset = st.columns([2, 1, 1])
with col_gen:
    if st.button(
        "Generate",
        type="primary",
        use_container_width=True,
        disabled=not raw_input.strip() or session.is_loading,
    ):
        with st.spinner("Extracting product data and writing copy..."):
            run(controller.generate(raw_input))
        st.rerun()
with col_clear:
    if st.button("Clear", use_container_width=True, disabled=not controller.can_clear):
        controller.clear()
        st.session_state.pop("raw_input", None)
        st.rerun()
with col_reset:
    if st.button("Reset", use_container_width=True, disabled=not controller.can_reset):
        controller.reset()
        for key in ("raw_input", *SIDEBAR_KEYS):
            st.session_state.pop(key, None)
        st.rerun()

if session.error:
    st.error(session.error)

toast = session.pop_toast()
if toast:
    st.toast(toast)

# ---------------------------------------------------------------------------
# Generated content
# ---------------------------------------------------------------------------
st.divider()
if controller.state is SessionState.NO_CONTENT:
    st.info("Paste a product URL, HTML or text above and press Generate.")
else:
    render_content_preview(controller, run)

render_debug_log(session.log)
