"""
Sidebar — customization options, output language and model picker.

Option / language widgets write through the controller (set_options,
set_output_language), which reconciles the generated content right away.

Called from app.py via:
    picked = render_sidebar(controller)
"""

import asyncio

import streamlit as st

from Listing_Engine.config import EMOJIS, LENGTHS, OUTPUT_LANGUAGES, TONES, get_settings
from Listing_Engine.saas_core.llm import PROVIDER_SPECS, get_all_models_flat

SIDEBAR_KEYS = ("opt_tone", "opt_length", "opt_emojis", "opt_output_language")


def _configured_providers() -> set[str]:
    settings = get_settings()
    return {key for key in PROVIDER_SPECS if settings.api_key_for(key)}


def render_sidebar(controller) -> dict | None:
    """
    Render the option controls.

    Returns:
        The selected {provider, model, label} entry, or None when no
        provider has a key configured.
    """
    session = controller.session
    opts = session.options

    st.subheader("Customization")
    tone_values = [t["value"] for t in TONES]
    tone = st.radio(
        "Tone",
        options=tone_values,
        index=tone_values.index(opts.tone),
        format_func=lambda t: t.value,
        captions=[t["tooltip"] for t in TONES],
        key="opt_tone",
    )
    length = st.select_slider(
        "Description length",
        options=LENGTHS,
        value=opts.length,
        format_func=lambda l: l.value,
        key="opt_length",
    )
    emojis = st.radio(
        "Emojis",
        options=EMOJIS,
        index=EMOJIS.index(opts.emojis),
        format_func=lambda e: e.value,
        horizontal=True,
        key="opt_emojis",
    )
    if (tone, length, emojis) != (opts.tone, opts.length, opts.emojis):
        asyncio.run(controller.set_options(tone=tone, length=length, emojis=emojis))

    output_language = st.selectbox(
        "Output language",
        options=OUTPUT_LANGUAGES,
        index=OUTPUT_LANGUAGES.index(session.output_language),
        format_func=lambda o: "Auto (match source)" if o.value == "auto" else o.value,
        key="opt_output_language",
    )
    if output_language is not session.output_language:
        asyncio.run(controller.set_output_language(output_language))

    st.divider()
    st.subheader("Model")
    models = get_all_models_flat(_configured_providers())
    if not models:
        st.warning("No provider API key found. Set GOOGLE_API_KEY (or another provider key) in .env.")
        return None

    default_provider = get_settings().LLM_PROVIDER
    labels = [m["label"] for m in models]
    default_idx = next(
        (i for i, m in enumerate(models) if m["provider"] == default_provider), 0
    )
    label = st.selectbox("Generation model", options=labels, index=default_idx, key="model_selector")
    return models[labels.index(label)]
