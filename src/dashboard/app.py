"""Головний файл дашборду Voice Scam Shield на Streamlit."""

from __future__ import annotations

import time
from datetime import timedelta
from pathlib import Path

import streamlit as st

# ── page config (MUST be the first Streamlit call) ───────────────────────────

st.set_page_config(
    page_title="Voice Scam Shield",
    layout="wide",
    initial_sidebar_state="expanded",
)

# ── inject theme CSS ────────────────────────────────────────────────────────

_CSS_PATH = Path(__file__).resolve().parent / "styles" / "theme.css"
if _CSS_PATH.exists():
    st.markdown(f"<style>{_CSS_PATH.read_text()}</style>", unsafe_allow_html=True)

# ── local imports (after page config) ───────────────────────────────────────

from src.dashboard.data_access import (  # noqa: E402
    alert_stats,
    alerts_frame,
    filter_alerts,
    samples_frame,
)
from src.dashboard.ui.cards import alert_card, all_clear_card, kpi_card  # noqa: E402
from src.dashboard.ui.charts import CHART_CONFIG, risk_gauge, risk_timeline  # noqa: E402
from src.dashboard.ui.layout import render_header, render_sidebar  # noqa: E402
from src.dashboard.ui.state import init_state  # noqa: E402
from src.dashboard.ui.tables import render_alert_table  # noqa: E402

# ── initialise session state ────────────────────────────────────────────────

init_state()

session = st.session_state["session"]
announcer = st.session_state["announcer"]
_interval = st.session_state["tick_interval"]

# ── sidebar + header ────────────────────────────────────────────────────────

sidebar = render_sidebar(session.dispatcher, st.session_state["languages"])
render_header(session)


# ═════════════════════════════════════════════════════════════════════════════
#   LIVE CALL SECTION -- @st.fragment re-runs once per tick interval while a
#   call is active and monitoring is not paused.  Each run processes at most
#   one tick, so a full-page rerun in between never double-ticks.
# ═════════════════════════════════════════════════════════════════════════════

_running = session.is_active and session.listening


@st.fragment(run_every=timedelta(seconds=_interval) if _running else None)
def _live_section() -> None:
    now = time.monotonic()
    if session.is_active and session.listening:
        if now - st.session_state["last_tick"] >= _interval * 0.9:
            session.tick(_interval)
            st.session_state["last_tick"] = now

    for text in announcer.drain():
        st.toast(text, icon="🔊")

    snap = session.snapshot()
    manager = session.manager

    # ── KPI CARDS ───────────────────────────────────────────────────
    status = snap.status.value
    risk = snap.sample.risk_score if snap.sample else 0.0
    conf = snap.sample.confidence if snap.sample else 0.0
    tier_label = snap.tier.label if (snap.tier and snap.is_active) else "Inactive"

    k1, k2, k3, k4 = st.columns(4)
    k1.markdown(kpi_card("Risk score", f"{risk:.0f}%", status), unsafe_allow_html=True)
    k2.markdown(kpi_card("Risk level", tier_label, status), unsafe_allow_html=True)
    k3.markdown(kpi_card("Voice confidence", f"{conf:.0f}%", status), unsafe_allow_html=True)
    k4.markdown(kpi_card("Duration", snap.duration_label, status), unsafe_allow_html=True)

    left, right = st.columns([2, 1])

    # ── CALL + CHARTS ───────────────────────────────────────────────
    with left:
        if snap.is_active:
            caller = snap.caller
            st.markdown(
                f"**Caller** {caller.number} · {caller.location or 'unknown location'} · "
                f"{'Verified' if caller.verified else 'Unverified'}"
            )
            if snap.show_banner:
                st.warning(
                    "**Potential Scam Detected.** Multiple suspicious patterns "
                    "identified. Exercise caution."
                )
            st.plotly_chart(
                risk_gauge(risk, session.thresholds),
                width="stretch",
                config=CHART_CONFIG,
                key="chart_gauge",
            )
        else:
            st.info("No active call. Press **Start Demo** to begin monitoring.")

        fig = risk_timeline(samples_frame(session.samples(), session.thresholds), session.thresholds)
        if fig is not None:
            st.plotly_chart(fig, width="stretch", config=CHART_CONFIG, key="chart_timeline")

    # ── ACTIVE ALERTS ───────────────────────────────────────────────
    with right:
        st.markdown('<p class="section-label">Security Alerts</p>', unsafe_allow_html=True)
        active = manager.active_alerts()
        if not active:
            st.markdown(all_clear_card(), unsafe_allow_html=True)
        for alert in reversed(active):
            st.markdown(alert_card(alert), unsafe_allow_html=True)
            b1, b2 = st.columns(2)
            b1.button(
                "Speak",
                key=f"speak_{alert.alert_id}",
                on_click=session.dispatcher.announce_now,
                args=(alert.alert_id,),
                disabled=alert.announced or not session.dispatcher.voice_enabled,
            )
            b2.button(
                "Dismiss",
                key=f"dismiss_{alert.alert_id}",
                on_click=manager.dismiss,
                args=(alert.alert_id,),
            )

    # ── ALERT HISTORY ───────────────────────────────────────────────
    st.markdown('<div class="section-gap"></div>', unsafe_allow_html=True)
    st.markdown('<p class="section-label">Alert History</p>', unsafe_allow_html=True)

    df_alerts = alerts_frame(manager.history())
    stats = alert_stats(df_alerts)
    st.caption(
        f"{stats['active']} active · {stats['critical']} critical · "
        f"{stats['announced']} spoken · {stats['total']} total"
    )
    render_alert_table(
        filter_alerts(
            df_alerts,
            severities=sidebar.severities or None,
            categories=sidebar.categories or None,
            include_dismissed=sidebar.show_dismissed,
        )
    )


# ── invoke the fragment ─────────────────────────────────────────────────────

_live_section()
