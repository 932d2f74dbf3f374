"""Відображення таблиці історії оповіщень."""

from __future__ import annotations

import pandas as pd
import streamlit as st
from streamlit import column_config as colcfg

from src.dashboard.data_access import sort_alerts

# columns to display (in order)
_DISPLAY_COLS = [
    "created_at",
    "alert_id",
    "category",
    "severity",
    "title",
    "status",
    "announced",
]

_COL_LABELS = {
    "created_at": "Time",
    "alert_id": "ID",
    "category": "Type",
    "severity": "Severity",
    "title": "Title",
    "status": "Status",
    "announced": "Spoken",
}

_COL_CONFIG = {
    "Time": colcfg.DatetimeColumn("Time", format="HH:mm:ss"),
    "Spoken": colcfg.CheckboxColumn("Spoken"),
}


def render_alert_table(df: pd.DataFrame) -> None:
    """Render the full alert history, dismissed alerts included."""
    if df.empty:
        st.info("No alerts raised yet.")
        return

    view = sort_alerts(df)
    cols = [c for c in _DISPLAY_COLS if c in view.columns]
    view = view[cols].rename(columns=_COL_LABELS)

    st.caption(f"Total alerts: {len(view)}")
    st.dataframe(
        view,
        hide_index=True,
        use_container_width=True,
        height=min(len(view) * 36 + 42, 400),
        column_config=_COL_CONFIG,
        key="tbl_alerts",
    )
