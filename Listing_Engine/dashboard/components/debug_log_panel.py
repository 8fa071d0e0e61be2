"""Debug Log Panel — the session's timestamped [TAG] lines, oldest first."""

import streamlit as st


def render_debug_log(log) -> None:
    with st.expander(f"\U0001f41e Debug Log ({len(log)} lines)", expanded=False):
        if not len(log):
            st.caption("Nothing logged yet.")
            return
        st.code("\n".join(log.lines), language="text")
