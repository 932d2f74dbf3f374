"""Call session — one monitored call from start to end.

A tick runs Sampler → Classifier → escalation → announcement dispatch and
then notifies listeners with a fresh ``CallSnapshot``.  Ticks are only
processed while a call is active and monitoring is not paused; a tick that
arrives after ``end_call()`` or ``pause()`` is ignored.  The session does
not own a timer: ``src.monitor.scheduler.MonitorRunner`` or the dashboard
fragment drives ``tick()``.
"""

from __future__ import annotations

import logging
import random as _random_mod
import threading
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

from src.contracts.alert import Alert
from src.contracts.enums import AlertCategory, AlertSeverity, SeverityTier, StatusLevel
from src.contracts.sample import RiskSample
from src.monitor.alerts import AlertManager
from src.monitor.announcer import Announcer, AnnouncementDispatcher, Scheduler
from src.monitor.classifier import (
    Thresholds,
    classify,
    classify_alert,
    show_scam_banner,
    status_for,
)
from src.monitor.sampler import RiskSampler

log = logging.getLogger(__name__)

DEFAULT_SYNTHETIC_FLOOR = 40.0

MSG_CALL_STARTED = "Demo call started. Voice Scam Shield is now monitoring for threats."
MSG_CALL_ENDED = "Call ended. Voice Scam Shield monitoring stopped."
MSG_PAUSED = "Monitoring paused"
MSG_RESUMED = "Monitoring resumed"

_DEFAULT_MESSAGES: dict[str, dict[str, str]] = {
    "suspicious": {
        "title": "Suspicious Call Pattern",
        "message": "Multiple suspicious patterns identified. Exercise caution.",
    },
    "scam": {
        "title": "Likely Scam Call",
        "message": "High scam risk detected. Do not share personal or account details.",
    },
    "synthetic": {
        "title": "Synthetic Voice Detected",
        "message": "AI-generated voice patterns identified. "
        "Caller may be using voice cloning technology.",
    },
}

# live tier -> alert category raised when the tier is first reached
_TIER_CATEGORY = {
    SeverityTier.SUSPICIOUS: AlertCategory.SUSPICIOUS,
    SeverityTier.SCAM_ALERT: AlertCategory.SCAM,
}


def format_duration(seconds: float) -> str:
    """``MM:SS`` as shown in the call header."""
    total = max(0, int(seconds))
    mins, secs = divmod(total, 60)
    return f"{mins:02d}:{secs:02d}"


def _utcnow() -> datetime:
    return datetime.now(tz=timezone.utc)


@dataclass(slots=True)
class CallerInfo:
    number: str = "unknown"
    location: str = ""
    verified: bool = False
    voice_authentic: bool = True
    language: str = "en"

    @classmethod
    def from_config(cls, cfg: dict[str, Any]) -> CallerInfo:
        return cls(
            number=str(cfg.get("number", "unknown")),
            location=str(cfg.get("location", "")),
            verified=bool(cfg.get("verified", False)),
            voice_authentic=bool(cfg.get("voice_authentic", True)),
            language=str(cfg.get("language", "en")),
        )


@dataclass(frozen=True, slots=True)
class CallSnapshot:
    """Everything the presentation layer needs to draw the live monitor."""

    is_active: bool
    listening: bool
    duration_sec: float
    duration_label: str
    sample: RiskSample | None
    tier: SeverityTier | None
    status: StatusLevel
    show_banner: bool
    caller: CallerInfo


SnapshotListener = Callable[[CallSnapshot], None]


class CallSession:
    """State of the monitored call plus the per-tick processing."""

    def __init__(
        self,
        cfg: dict[str, Any],
        sampler: RiskSampler,
        manager: AlertManager,
        dispatcher: AnnouncementDispatcher,
        *,
        thresholds: Thresholds | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        detection = cfg.get("detection", {})
        self.sampler = sampler
        self.manager = manager
        self.dispatcher = dispatcher
        self.thresholds = thresholds or Thresholds.from_config(cfg.get("classifier"))
        self.caller = CallerInfo.from_config(cfg.get("caller", {}))
        self.synthetic_floor = float(
            detection.get("synthetic_confidence_floor", DEFAULT_SYNTHETIC_FLOOR)
        )
        custom = detection.get("messages", {})
        self._messages = {
            key: {**defaults, **custom.get(key, {})} for key, defaults in _DEFAULT_MESSAGES.items()
        }
        self._clock = clock or _utcnow

        self._lock = threading.RLock()
        self._listeners: list[SnapshotListener] = []
        self.is_active = False
        self.listening = True
        self.duration_sec = 0.0
        self._history: list[RiskSample] = []
        self._raised_tiers: set[SeverityTier] = set()
        self._synthetic_raised = False

    # ------------------------------------------------------------------
    # Call control
    # ------------------------------------------------------------------

    def start_call(self, start: datetime | None = None) -> bool:
        """Begin monitoring a new call.  Returns False if one is running."""
        with self._lock:
            if self.is_active:
                log.debug("start_call ignored: call already active")
                return False
            self.is_active = True
            self.duration_sec = 0.0
            self._raised_tiers = set()
            self._synthetic_raised = False
            first = self.sampler.initial(start or self._clock())
            self._history = [first]
            log.info("Call started: caller=%s risk=%.1f", self.caller.number, first.risk_score)

            if not self.caller.voice_authentic:
                self._raise_synthetic()
            self._escalate(first)
        self.dispatcher.speak(MSG_CALL_STARTED)
        self.dispatcher.dispatch_due()
        self._notify()
        return True

    def end_call(self) -> bool:
        with self._lock:
            if not self.is_active:
                return False
            self.is_active = False
            log.info(
                "Call ended after %s (%d samples)",
                format_duration(self.duration_sec),
                len(self._history),
            )
            self.duration_sec = 0.0
        self.dispatcher.speak(MSG_CALL_ENDED)
        self._notify()
        return True

    def pause(self) -> None:
        with self._lock:
            if not self.listening:
                return
            self.listening = False
        log.info("Monitoring paused")
        self.dispatcher.speak(MSG_PAUSED)
        self._notify()

    def resume(self) -> None:
        with self._lock:
            if self.listening:
                return
            self.listening = True
        log.info("Monitoring resumed")
        self.dispatcher.speak(MSG_RESUMED)
        self._notify()

    def toggle_listening(self) -> bool:
        """Flip paused/listening; returns the new ``listening`` value."""
        if self.listening:
            self.pause()
        else:
            self.resume()
        return self.listening

    def load_demo_alerts(self, entries: list[dict[str, Any]]) -> list[Alert]:
        """Pre-populate the alert store; due critical alerts are announced at once."""
        raised = self.manager.load_demo_alerts(entries)
        self.dispatcher.dispatch_due()
        self._notify()
        return raised

    # ------------------------------------------------------------------
    # Tick processing
    # ------------------------------------------------------------------

    def tick(self, elapsed_seconds: float = 1.0) -> RiskSample | None:
        """Process one timer tick.  Returns None when the tick is ignored."""
        with self._lock:
            if not (self.is_active and self.listening):
                return None
            current = self.sampler.next(self._history[-1], elapsed_seconds)
            self._history.append(current)
            self.duration_sec += elapsed_seconds
            log.debug(
                "tick %s risk=%.2f conf=%.2f",
                format_duration(self.duration_sec),
                current.risk_score,
                current.confidence,
            )
            self._escalate(current)
        self.dispatcher.dispatch_due()
        self._notify()
        return current

    def _escalate(self, current: RiskSample) -> None:
        tier = classify(current.risk_score, self.thresholds)
        category = _TIER_CATEGORY.get(tier)
        if category is not None and tier not in self._raised_tiers:
            self._raised_tiers.add(tier)
            text = self._messages[category.value]
            self.manager.raise_alert(
                category,
                classify_alert(current.risk_score, self.thresholds),
                text["title"],
                text["message"],
            )
        if not self._synthetic_raised and current.confidence < self.synthetic_floor:
            self._raise_synthetic()

    def _raise_synthetic(self) -> None:
        self._synthetic_raised = True
        text = self._messages[AlertCategory.SYNTHETIC.value]
        self.manager.raise_alert(
            AlertCategory.SYNTHETIC, AlertSeverity.HIGH, text["title"], text["message"]
        )

    # ------------------------------------------------------------------
    # Read side
    # ------------------------------------------------------------------

    @property
    def latest(self) -> RiskSample | None:
        with self._lock:
            return self._history[-1] if self._history else None

    def samples(self) -> list[RiskSample]:
        """Samples of the current call, or of the last one after it ended."""
        with self._lock:
            return list(self._history)

    def snapshot(self) -> CallSnapshot:
        with self._lock:
            current = self._history[-1] if self._history else None
            tier = classify(current.risk_score, self.thresholds) if current else None
            if not self.is_active or tier is None:
                status = StatusLevel.INACTIVE
            else:
                status = status_for(tier)
            return CallSnapshot(
                is_active=self.is_active,
                listening=self.listening,
                duration_sec=self.duration_sec,
                duration_label=format_duration(self.duration_sec),
                sample=current,
                tier=tier,
                status=status,
                show_banner=bool(
                    self.is_active
                    and current
                    and show_scam_banner(current.risk_score, self.thresholds)
                ),
                caller=self.caller,
            )

    def subscribe(self, listener: SnapshotListener) -> Callable[[], None]:
        with self._lock:
            self._listeners.append(listener)

        def _unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return _unsubscribe

    def _notify(self) -> None:
        with self._lock:
            listeners = list(self._listeners)
        if not listeners:
            return
        snap = self.snapshot()
        for listener in listeners:
            try:
                listener(snap)
            except Exception:
                log.exception("Session listener failed")


# ═══════════════════════════════════════════════════════════════════════════
#  Factory
# ═══════════════════════════════════════════════════════════════════════════


def build_session(
    cfg: dict[str, Any],
    rng: _random_mod.Random,
    announcer: Announcer,
    *,
    scheduler: Scheduler | None = None,
    voice_enabled: bool | None = None,
    clock: Callable[[], datetime] | None = None,
) -> CallSession:
    """Wire sampler, alert store and dispatcher from a loaded config."""
    mon = cfg.get("monitor", {})
    manager = AlertManager(clock=clock)
    dispatcher = AnnouncementDispatcher(
        manager,
        announcer,
        delay_sec=float(mon.get("announce_delay_sec", 1.0)),
        scheduler=scheduler,
        voice_enabled=bool(mon.get("voice_alerts", True)) if voice_enabled is None else voice_enabled,
    )
    sampler = RiskSampler(cfg.get("sampler", {}), rng)
    return CallSession(cfg, sampler, manager, dispatcher, clock=clock)
