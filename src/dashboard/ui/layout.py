"""Page layout — sidebar controls and the call header.

``render_sidebar`` draws voice-alert, language and filter controls and
returns the current filter values.  ``render_header`` draws the title bar
with the status indicator and call buttons.
"""

from __future__ import annotations

from dataclasses import dataclass

import streamlit as st

from src.dashboard.ui.cards import status_dot
from src.monitor.announcer import AnnouncementDispatcher
from src.monitor.languages import LanguageSelector
from src.monitor.session import CallSession


@dataclass
class SidebarState:
    """Values collected from sidebar controls."""
    severities: list[str]
    categories: list[str]
    show_dismissed: bool


# ── header ──────────────────────────────────────────────────────────────────


def render_header(session: CallSession) -> None:
    snap = session.snapshot()
    st.markdown(
        '<h1 class="page-title">'
        f"{status_dot(snap.status.value)} Voice Scam Shield</h1>"
        '<p class="page-subtitle">Real-time call protection</p>',
        unsafe_allow_html=True,
    )

    c1, c2, _ = st.columns([1, 1, 4])
    with c1:
        if snap.is_active:
            st.button("End Call", type="primary", on_click=session.end_call, key="btn_end")
        else:
            st.button("Start Demo", type="primary", on_click=session.start_call, key="btn_start")
    with c2:
        st.button(
            "Listening" if snap.listening else "Muted",
            on_click=session.toggle_listening,
            key="btn_listen",
        )


# ── sidebar ─────────────────────────────────────────────────────────────────


def _render_languages(selector: LanguageSelector) -> None:
    st.markdown("##### Languages")
    st.caption(f"Detected: {selector.label_for(selector.detected)}")

    for lang in selector.catalogue.values():
        selected = lang.code in selector.selected
        label = f"{lang.flag} {lang.name}" + ("" if lang.supported else " (soon)")
        st.checkbox(
            label,
            value=selected and lang.supported,
            disabled=not lang.supported,
            key=f"lang_{lang.code}_{selected}",
            on_change=selector.toggle,
            args=(lang.code,),
        )
    st.caption(f"{len(selector.selected)} active")

    b1, b2 = st.columns(2)
    with b1:
        st.button("Enable All", on_click=selector.enable_all, key="lang_all")
    with b2:
        st.button("English Only", on_click=selector.english_only, key="lang_en")


def render_sidebar(
    dispatcher: AnnouncementDispatcher,
    selector: LanguageSelector,
) -> SidebarState:
    """Draw sidebar controls and return current filter selections."""

    with st.sidebar:
        st.markdown('<p class="sidebar-brand">Voice Scam Shield</p>', unsafe_allow_html=True)
        st.caption("Multilingual AI Call Protection")
        st.divider()

        # -- voice alerts --
        voice = st.toggle("Voice alerts", value=dispatcher.voice_enabled, key="voice_toggle")
        if voice != dispatcher.voice_enabled:
            dispatcher.voice_enabled = voice

        st.divider()
        _render_languages(selector)
        st.divider()

        # -- alert history filters --
        st.markdown("##### Filter Alerts")
        severities = st.multiselect(
            "Severity",
            options=["critical", "high", "medium", "low"],
            key="f_severities",
        )
        categories = st.multiselect(
            "Type",
            options=["scam", "synthetic", "suspicious"],
            key="f_categories",
        )
        show_dismissed = st.checkbox("Show dismissed", key="show_dismissed")

    return SidebarState(
        severities=severities,
        categories=categories,
        show_dismissed=show_dismissed,
    )
