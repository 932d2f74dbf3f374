"""Severity classifier — maps a risk score to discrete buckets.

Two instances of the same step function are used: the three-tier live
meter (safe / suspicious / scam alert) and the four-level alert severity
(low / medium / high / critical).  Each threshold is an inclusive upper
bound of the lower bucket, so a score of exactly 30 is still ``safe``.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any

from src.contracts.enums import AlertSeverity, SeverityTier, StatusLevel
from src.shared.config_loader import ConfigError

SCORE_MIN = 0.0
SCORE_MAX = 100.0


@dataclass(frozen=True, slots=True)
class Thresholds:
    suspicious: float = 30.0
    scam_alert: float = 70.0
    alert_medium: float = 30.0
    alert_high: float = 50.0
    alert_critical: float = 70.0
    banner: float = 50.0

    @classmethod
    def from_config(cls, cfg: dict[str, Any] | None) -> Thresholds:
        """Build thresholds from the ``classifier`` config section."""
        cfg = cfg or {}
        live = cfg.get("live", {})
        alert = cfg.get("alert", {})
        d = DEFAULT_THRESHOLDS
        th = cls(
            suspicious=float(live.get("suspicious", d.suspicious)),
            scam_alert=float(live.get("scam_alert", d.scam_alert)),
            alert_medium=float(alert.get("medium", d.alert_medium)),
            alert_high=float(alert.get("high", d.alert_high)),
            alert_critical=float(alert.get("critical", d.alert_critical)),
            banner=float(cfg.get("banner_threshold", d.banner)),
        )
        if not th.suspicious <= th.scam_alert:
            raise ConfigError("classifier.live thresholds must be ascending")
        if not th.alert_medium <= th.alert_high <= th.alert_critical:
            raise ConfigError("classifier.alert thresholds must be ascending")
        return th


DEFAULT_THRESHOLDS = Thresholds()

_TIER_STATUS = {
    SeverityTier.SAFE: StatusLevel.SAFE,
    SeverityTier.SUSPICIOUS: StatusLevel.WARNING,
    SeverityTier.SCAM_ALERT: StatusLevel.DANGER,
}


def clamp_score(risk_score: float) -> float:
    """Clamp to [0, 100]; NaN counts as 0."""
    if math.isnan(risk_score):
        return SCORE_MIN
    return max(SCORE_MIN, min(SCORE_MAX, risk_score))


def classify(risk_score: float, thresholds: Thresholds = DEFAULT_THRESHOLDS) -> SeverityTier:
    score = clamp_score(risk_score)
    if score <= thresholds.suspicious:
        return SeverityTier.SAFE
    if score <= thresholds.scam_alert:
        return SeverityTier.SUSPICIOUS
    return SeverityTier.SCAM_ALERT


def classify_alert(risk_score: float, thresholds: Thresholds = DEFAULT_THRESHOLDS) -> AlertSeverity:
    score = clamp_score(risk_score)
    if score <= thresholds.alert_medium:
        return AlertSeverity.LOW
    if score <= thresholds.alert_high:
        return AlertSeverity.MEDIUM
    if score <= thresholds.alert_critical:
        return AlertSeverity.HIGH
    return AlertSeverity.CRITICAL


def status_for(tier: SeverityTier) -> StatusLevel:
    return _TIER_STATUS[tier]


def show_scam_banner(risk_score: float, thresholds: Thresholds = DEFAULT_THRESHOLDS) -> bool:
    """True when the "Potential Scam Detected" hint should be shown."""
    return clamp_score(risk_score) > thresholds.banner
