"""Білдери HTML карток: KPI та оповіщення."""

from __future__ import annotations

from html import escape

from src.contracts.alert import Alert

# ── canonical colours ───────────────────────────────────────────────────────

STATUS_COLORS: dict[str, str] = {
    "safe": "#22c55e",
    "warning": "#f59e0b",
    "danger": "#ef4444",
    "inactive": "#6b7280",
}

SEVERITY_STATUS: dict[str, str] = {
    "critical": "danger",
    "high": "warning",
    "medium": "warning",
    "low": "safe",
}

CATEGORY_ICON: dict[str, str] = {
    "scam": "📞",
    "synthetic": "⚠️",
    "suspicious": "🛡️",
}


def status_dot(status: str) -> str:
    color = STATUS_COLORS.get(status, STATUS_COLORS["inactive"])
    return f'<span class="status-dot status-{status}" style="background:{color}"></span>'


def kpi_card(label: str, value: str, status: str = "inactive") -> str:
    """Одна KPI картка (ризик, рівень, впевненість, тривалість)."""
    return (
        f'<div class="kpi-card kpi-{status}">'
        f'  <div class="kpi-label">{escape(label)}</div>'
        f'  <div class="kpi-value">{escape(value)}</div>'
        f"</div>"
    )


def alert_card(alert: Alert) -> str:
    """Картка активного оповіщення; critical пульсує."""
    status = SEVERITY_STATUS.get(alert.severity, "inactive")
    icon = CATEGORY_ICON.get(alert.category, "⚠️")
    pulse = " alert-pulse" if alert.severity == "critical" else ""
    return (
        f'<div class="alert-card alert-{status}{pulse}">'
        f'  <div class="alert-head">'
        f'    <span class="alert-icon">{icon}</span>'
        f'    <span class="alert-title">{escape(alert.title)}</span>'
        f'    <span class="alert-badge">{alert.severity.upper()}</span>'
        f"  </div>"
        f'  <div class="alert-message">{escape(alert.message)}</div>'
        f'  <div class="alert-time">{escape(alert.created_at)}</div>'
        f"</div>"
    )


def all_clear_card() -> str:
    return (
        '<div class="alert-card alert-safe">'
        '  <div class="alert-head"><span class="alert-title">All Clear</span></div>'
        '  <div class="alert-message">No security threats detected. '
        "Your calls are protected.</div>"
        "</div>"
    )
