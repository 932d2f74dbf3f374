"""Canonical enumerations for the monitor contracts."""

from __future__ import annotations

from enum import Enum


class SeverityTier(str, Enum):
    """Live risk-meter tier."""

    SAFE = "safe"
    SUSPICIOUS = "suspicious"
    SCAM_ALERT = "scam_alert"

    @property
    def label(self) -> str:
        return _TIER_LABELS[self]


_TIER_LABELS = {
    SeverityTier.SAFE: "Safe",
    SeverityTier.SUSPICIOUS: "Suspicious",
    SeverityTier.SCAM_ALERT: "Scam Alert",
}


class AlertSeverity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class AlertCategory(str, Enum):
    SCAM = "scam"
    SYNTHETIC = "synthetic"
    SUSPICIOUS = "suspicious"


class StatusLevel(str, Enum):
    """Status indicator colour shown next to the call header."""

    SAFE = "safe"
    WARNING = "warning"
    DANGER = "danger"
    INACTIVE = "inactive"
