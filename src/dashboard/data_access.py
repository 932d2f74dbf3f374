"""Шар перетворення стану сесії у DataFrame та фільтрації."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import asdict

import pandas as pd

from src.contracts.alert import ALERT_CSV_COLUMNS, Alert
from src.contracts.sample import SAMPLE_CSV_COLUMNS, RiskSample
from src.monitor.classifier import DEFAULT_THRESHOLDS, Thresholds, classify

log = logging.getLogger(__name__)

SEVERITY_ORDER = {"critical": 0, "high": 1, "medium": 2, "low": 3}


# ── frames ──────────────────────────────────────────────────────────────────


def samples_frame(
    samples: Sequence[RiskSample],
    thresholds: Thresholds = DEFAULT_THRESHOLDS,
) -> pd.DataFrame:
    """Таблиця вибірок з колонкою ``tier`` та секундою дзвінка."""
    if not samples:
        return pd.DataFrame(columns=[*SAMPLE_CSV_COLUMNS, "tier", "second"])
    df = pd.DataFrame([asdict(s) for s in samples])
    df["timestamp"] = pd.to_datetime(df["timestamp"], utc=True, format="ISO8601", errors="coerce")
    df["tier"] = [classify(v, thresholds).label for v in df["risk_score"]]
    df["second"] = (df["timestamp"] - df["timestamp"].iloc[0]).dt.total_seconds()
    return df


def alerts_frame(alerts: Sequence[Alert]) -> pd.DataFrame:
    """Історія оповіщень з колонкою ``status`` (active | dismissed)."""
    if not alerts:
        return pd.DataFrame(columns=[*ALERT_CSV_COLUMNS, "status"])
    df = pd.DataFrame([asdict(a) for a in alerts])
    df["created_at"] = pd.to_datetime(df["created_at"], utc=True, format="ISO8601", errors="coerce")
    df["status"] = df["dismissed"].map({True: "dismissed", False: "active"})
    return df


# ── filtering ───────────────────────────────────────────────────────────────


def filter_alerts(
    df: pd.DataFrame,
    *,
    severities: list[str] | None = None,
    categories: list[str] | None = None,
    include_dismissed: bool = True,
) -> pd.DataFrame:
    """Застосовує фільтри sidebar до історії оповіщень."""
    if df.empty:
        return df.copy()
    mask = pd.Series(True, index=df.index)
    if severities:
        mask &= df["severity"].isin(severities)
    if categories:
        mask &= df["category"].isin(categories)
    if not include_dismissed:
        mask &= ~df["dismissed"].astype(bool)
    return df.loc[mask].copy()


def sort_alerts(df: pd.DataFrame) -> pd.DataFrame:
    """Critical first, then newest first."""
    if df.empty:
        return df
    view = df.copy()
    view["_sev_ord"] = view["severity"].map(SEVERITY_ORDER).fillna(99)
    view = view.sort_values(["_sev_ord", "created_at"], ascending=[True, False])
    return view.drop(columns=["_sev_ord"])


def alert_stats(df: pd.DataFrame) -> dict[str, int]:
    """Лічильники для KPI карток."""
    if df.empty:
        return {"total": 0, "active": 0, "critical": 0, "announced": 0}
    dismissed = df["dismissed"].astype(bool)
    return {
        "total": int(len(df)),
        "active": int((~dismissed).sum()),
        "critical": int(((df["severity"] == "critical") & ~dismissed).sum()),
        "announced": int(df["announced"].astype(bool).sum()),
    }
