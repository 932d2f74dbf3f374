"""Shared fixtures for Voice Scam Shield monitor tests."""

from __future__ import annotations

import random
from collections.abc import Iterable
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from src.contracts.alert import Alert
from src.contracts.sample import RiskSample
from src.monitor.alerts import AlertManager
from src.monitor.announcer import AnnouncementDispatcher, Announcer, immediate_scheduler
from src.monitor.sampler import RiskSampler
from src.monitor.session import CallSession

ROOT = Path(__file__).resolve().parent.parent
CONFIG_PATH = ROOT / "config" / "monitor.yaml"

START = datetime(2026, 2, 26, 10, 0, 0, tzinfo=timezone.utc)

# ── Helpers: contracts with sensible defaults ───────────────────────────


def make_sample(
    *,
    timestamp: str = "2026-02-26T10:00:00Z",
    risk_score: float = 15.0,
    confidence: float = 87.0,
) -> RiskSample:
    return RiskSample(timestamp=timestamp, risk_score=risk_score, confidence=confidence)


def make_alert(
    *,
    alert_id: str = "ALR-0001",
    category: str = "scam",
    severity: str = "critical",
    title: str = "Bank Impersonation Scam",
    message: str = "Do not share account details.",
    created_at: str = "2026-02-26T10:00:00Z",
    dismissed: bool = False,
    announced: bool = False,
) -> Alert:
    return Alert(
        alert_id=alert_id,
        category=category,
        severity=severity,
        title=title,
        message=message,
        created_at=created_at,
        dismissed=dismissed,
        announced=announced,
    )


class ScriptedRandom(random.Random):
    """``random.Random`` whose ``random()`` replays a fixed sequence.

    When the script runs out it starts over.
    """

    def __init__(self, values: Iterable[float]) -> None:
        super().__init__(0)
        self._values = list(values) or [0.0]
        self._pos = 0

    def random(self) -> float:
        value = self._values[self._pos % len(self._values)]
        self._pos += 1
        return value


class RecordingAnnouncer(Announcer):
    def __init__(self) -> None:
        self.spoken: list[str] = []
        self.announced: list[str] = []

    def speak(self, text: str) -> None:
        self.spoken.append(text)

    def announce(self, alert: Alert) -> None:
        self.announced.append(alert.alert_id)
        super().announce(alert)


class FailingAnnouncer(Announcer):
    def __init__(self) -> None:
        self.calls = 0

    def speak(self, text: str) -> None:
        self.calls += 1
        raise ConnectionError("tts backend unreachable")


class FixedClock:
    """Deterministic clock advancing one second per call."""

    def __init__(self, start: datetime = START) -> None:
        self.now = start

    def __call__(self) -> datetime:
        current = self.now
        self.now += timedelta(seconds=1)
        return current


# ── Fixtures ─────────────────────────────────────────────────────────────


@pytest.fixture
def monitor_cfg() -> dict:
    """Minimal config mirroring config/monitor.yaml."""
    return {
        "monitor": {"tick_interval_sec": 1.0, "announce_delay_sec": 1.0, "voice_alerts": True},
        "sampler": {
            "initial_risk": 15.0,
            "initial_confidence": 87.0,
            "max_drift": 5.0,
            "max_decay": 10.0,
            "risk_bounds": [0.0, 95.0],
            "confidence_bounds": [20.0, 100.0],
        },
        "classifier": {
            "live": {"suspicious": 30, "scam_alert": 70},
            "alert": {"medium": 30, "high": 50, "critical": 70},
            "banner_threshold": 50,
        },
        "detection": {"synthetic_confidence_floor": 40.0},
        "caller": {
            "number": "+1 (555) 123-4567",
            "location": "New York, NY",
            "verified": False,
            "voice_authentic": True,
            "language": "en",
        },
        "languages": [
            {"code": "en", "name": "English", "flag": "", "supported": True},
            {"code": "es", "name": "Español", "flag": "", "supported": True},
            {"code": "fr", "name": "Français", "flag": "", "supported": True},
            {"code": "it", "name": "Italiano", "flag": "", "supported": False},
        ],
        "default_languages": ["en", "es"],
        "demo_alerts": [
            {
                "category": "synthetic",
                "severity": "high",
                "title": "Synthetic Voice Detected",
                "message": "AI-generated voice patterns identified.",
            },
            {
                "category": "scam",
                "severity": "critical",
                "title": "Bank Impersonation Scam",
                "message": "Do not share account details.",
            },
        ],
    }


@pytest.fixture
def manager() -> AlertManager:
    return AlertManager(clock=FixedClock())


@pytest.fixture
def announcer() -> RecordingAnnouncer:
    return RecordingAnnouncer()


@pytest.fixture
def dispatcher(manager, announcer) -> AnnouncementDispatcher:
    return AnnouncementDispatcher(manager, announcer, scheduler=immediate_scheduler)


def build_test_session(
    cfg: dict,
    rng: random.Random,
    announcer: Announcer | None = None,
) -> CallSession:
    """Session wired with immediate announcements and a fixed clock."""
    clock = FixedClock()
    manager = AlertManager(clock=clock)
    dispatcher = AnnouncementDispatcher(
        manager, announcer or RecordingAnnouncer(), scheduler=immediate_scheduler
    )
    sampler = RiskSampler(cfg["sampler"], rng)
    return CallSession(cfg, sampler, manager, dispatcher, clock=clock)
