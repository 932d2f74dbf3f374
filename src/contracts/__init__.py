"""Monitor contracts — data structures shared by the core, CLI and dashboard."""

from src.contracts.alert import Alert
from src.contracts.enums import AlertCategory, AlertSeverity, SeverityTier, StatusLevel
from src.contracts.sample import RiskSample

__all__ = ["Alert", "AlertCategory", "AlertSeverity", "RiskSample", "SeverityTier", "StatusLevel"]
