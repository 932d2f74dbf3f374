"""Ініціалізація стану сесії."""

from __future__ import annotations

import os
from pathlib import Path

import streamlit as st

from src.monitor.announcer import BufferedAnnouncer
from src.monitor.languages import LanguageSelector, language_listener
from src.monitor.session import build_session
from src.shared.config_loader import load_config
from src.shared.seed import init_seed

ROOT = Path(__file__).resolve().parent.parent.parent.parent
CONFIG_PATH = Path(os.environ.get("SCAMSHIELD_CONFIG", ROOT / "config" / "monitor.yaml"))

_DEFAULTS: dict[str, object] = {
    "f_severities": [],
    "f_categories": [],
    "show_dismissed": True,
    "last_tick": 0.0,
}


def init_state() -> None:
    """Створює сесію дзвінка, оголошувач та вибір мов один раз на вкладку."""
    if "session" not in st.session_state:
        cfg = load_config(CONFIG_PATH)
        announcer = BufferedAnnouncer()
        session = build_session(cfg, init_seed(None), announcer)
        session.load_demo_alerts(cfg["demo_alerts"])
        selector = LanguageSelector.from_config(cfg)
        session.subscribe(language_listener(selector))
        st.session_state["cfg"] = cfg
        st.session_state["announcer"] = announcer
        st.session_state["session"] = session
        st.session_state["languages"] = selector
        st.session_state["tick_interval"] = float(
            cfg["monitor"].get("tick_interval_sec", 1.0)
        )
    for key, value in _DEFAULTS.items():
        if key not in st.session_state:
            st.session_state[key] = value
