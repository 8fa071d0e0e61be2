"""
Content Preview — one editable card per generated section plus export actions.

Each card:
    [text area]                  -> controller.edit_section (no AI call)
    [Regenerate]                 -> controller.regenerate_section
    [language select + Translate]-> controller.translate_section
Busy sections (pending AI call) render their buttons disabled.

Export row: copy as Markdown / HTML (shown in a code box for copying) and
a download button for the standalone HTML page.
"""

import streamlit as st

from Listing_Engine.config import LANGUAGES
from Listing_Engine.core.models import Section
from Listing_Engine.session import SECTION_SHORTCUTS

_TITLES = {
    Section.PHOTO:       "Photo",
    Section.HEADER:      "Header",
    Section.DESCRIPTION: "Description",
    Section.FEATURES:    "Features & Specs",
    Section.REVIEWS:     "Reviews Summary",
}


def _render_photo(controller, run) -> None:
    url = controller.session.content.get(Section.PHOTO) or ""
    if url:
        st.image(url, use_container_width=True)
    else:
        st.caption("No product image found.")
    if st.button("New image link", key="regen_photo", disabled=not url):
        run(controller.regenerate_section(Section.PHOTO))
        st.rerun()


def _render_text_section(controller, run, section: Section) -> None:
    session = controller.session
    content = session.content
    busy = session.is_pending(section)
    tag = content.language_of(section)

    current = content.get(section) or ""
    # Keyed by the stored text so AI results replace the widget value
    text = st.text_area(
        f"{_TITLES[section]} ({tag.value})",
        value=current,
        height=220 if section is Section.DESCRIPTION else 140,
        key=f"edit_{section.value}_{hash(current)}",
        disabled=busy,
    )
    if text != current:
        controller.edit_section(section, text)

    c1, c2, c3 = st.columns([1, 1, 1])
    with c1:
        if st.button("Regenerate", key=f"regen_{section.value}", disabled=busy):
            with st.spinner(f"Regenerating {section.value}..."):
                run(controller.regenerate_section(section))
            st.rerun()
    with c2:
        target = st.selectbox(
            "Translate to",
            options=LANGUAGES,
            index=LANGUAGES.index(tag),
            format_func=lambda l: l.value,
            key=f"lang_{section.value}",
            label_visibility="collapsed",
        )
    with c3:
        if st.button("Translate", key=f"translate_{section.value}", disabled=busy or target is tag):
            with st.spinner(f"Translating {section.value} to {target.value}..."):
                run(controller.translate_section(section, target))
            st.rerun()


def _render_export(controller) -> None:
    st.subheader("Export")
    c1, c2, c3 = st.columns(3)
    with c1:
        if st.button("Copy as Markdown", use_container_width=True):
            st.session_state["_export_preview"] = ("markdown", controller.copy_as_markdown())
    with c2:
        if st.button("Copy as HTML", use_container_width=True):
            st.session_state["_export_preview"] = ("html", controller.copy_as_html())
    with c3:
        download = controller.download_document()
        if download is not None:
            filename, payload = download
            st.download_button(
                "Download HTML",
                data=payload,
                file_name=filename,
                mime="text/html",
                use_container_width=True,
            )

    preview = st.session_state.get("_export_preview")
    if preview:
        language, text = preview
        st.code(text, language=language)


def render_content_preview(controller, run) -> None:
    """Render every present section in canonical order, then the export row."""
    content = controller.session.content
    st.header("Generated Listing")
    st.caption(
        "Shortcut order: "
        + ", ".join(f"{i}={s.value}" for i, s in enumerate(SECTION_SHORTCUTS, start=1))
    )

    for section in content.sections():
        with st.container(border=True):
            st.markdown(f"#### {_TITLES[section]}")
            if section is Section.PHOTO:
                _render_photo(controller, run)
            else:
                _render_text_section(controller, run, section)

    st.divider()
    _render_export(controller)
