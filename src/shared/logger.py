"""Налаштування логування."""

from __future__ import annotations

import logging
import os
import sys

LOG_LEVEL_ENV = "SCAMSHIELD_LOG_LEVEL"


def setup_logging(level: str | None = None) -> None:
    """Налаштовує стандартний логер з лаконічним форматом.

    Args:
        level: Рівень логування (DEBUG, INFO, WARNING, ERROR).  Якщо не
            задано, береться з ``SCAMSHIELD_LOG_LEVEL`` або INFO.
    """
    level = level or os.environ.get(LOG_LEVEL_ENV, "INFO")
    numeric = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(
        level=numeric,
        format="%(asctime)s | %(levelname)-7s | %(name)s | %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stderr,
        force=True,
    )
