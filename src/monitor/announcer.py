"""Announcement dispatch — speaks critical alerts, fire-and-forget.

The dispatcher picks due alerts from the ``AlertManager``, flags them as
announced straight away (so repeated polling never selects them again)
and hands the actual speech to a scheduler after a short delay.  Speech
failures are logged and dropped; they never touch alert state.

Real text-to-speech vendors are out of scope: ``LogAnnouncer`` writes the
text to the log, ``BufferedAnnouncer`` queues it for the dashboard.
"""

from __future__ import annotations

import abc
import logging
import threading
from collections import deque
from collections.abc import Callable

from src.contracts.alert import Alert
from src.monitor.alerts import AlertManager

log = logging.getLogger(__name__)

Scheduler = Callable[[float, Callable[[], None]], None]

DEFAULT_ANNOUNCE_DELAY_SEC = 1.0


# ═══════════════════════════════════════════════════════════════════════════
#  Schedulers
# ═══════════════════════════════════════════════════════════════════════════


def thread_scheduler(delay_sec: float, fn: Callable[[], None]) -> None:
    """Run *fn* on a daemon ``threading.Timer`` after *delay_sec*."""
    timer = threading.Timer(delay_sec, fn)
    timer.daemon = True
    timer.start()


def immediate_scheduler(delay_sec: float, fn: Callable[[], None]) -> None:
    """Run *fn* right away, ignoring the delay (batch CLI, tests)."""
    fn()


# ═══════════════════════════════════════════════════════════════════════════
#  Announcers
# ═══════════════════════════════════════════════════════════════════════════


class Announcer(abc.ABC):
    """Speech output collaborator."""

    @abc.abstractmethod
    def speak(self, text: str) -> None:
        ...

    def announce(self, alert: Alert) -> None:
        self.speak(alert.announcement_text())


class LogAnnouncer(Announcer):
    def speak(self, text: str) -> None:
        log.info("[voice] %s", text)


class BufferedAnnouncer(Announcer):
    """Keeps spoken text until the presentation layer drains it."""

    def __init__(self, maxlen: int = 50) -> None:
        self._buf: deque[str] = deque(maxlen=maxlen)
        self._lock = threading.Lock()

    def speak(self, text: str) -> None:
        with self._lock:
            self._buf.append(text)

    def drain(self) -> list[str]:
        with self._lock:
            items = list(self._buf)
            self._buf.clear()
        return items


# ═══════════════════════════════════════════════════════════════════════════
#  Dispatcher
# ═══════════════════════════════════════════════════════════════════════════


class AnnouncementDispatcher:
    """Delivers each critical alert to the announcer at most once."""

    def __init__(
        self,
        manager: AlertManager,
        announcer: Announcer,
        delay_sec: float = DEFAULT_ANNOUNCE_DELAY_SEC,
        scheduler: Scheduler | None = None,
        voice_enabled: bool = True,
    ) -> None:
        self.manager = manager
        self.announcer = announcer
        self.delay_sec = max(0.0, float(delay_sec))
        self.scheduler = scheduler or thread_scheduler
        self._voice_enabled = voice_enabled

    @property
    def voice_enabled(self) -> bool:
        return self._voice_enabled

    @voice_enabled.setter
    def voice_enabled(self, enabled: bool) -> None:
        self._voice_enabled = bool(enabled)
        log.info("Voice alerts %s", "on" if enabled else "off")
        if self._voice_enabled:
            # alerts that became due while muted are spoken now
            self.dispatch_due()

    def dispatch_due(self) -> list[Alert]:
        """Claim every due alert and schedule its announcement.

        With voice alerts off nothing is claimed, so due alerts stay due.
        Claimed alerts are staggered by ``delay_sec`` so two critical alerts
        from the same tick are not spoken on top of each other.
        """
        if not self._voice_enabled:
            return []
        claimed = self.manager.claim_due()
        for idx, alert in enumerate(claimed, start=1):
            self._schedule(alert.alert_id, self.delay_sec * idx)
        if claimed:
            log.info("Scheduled %d announcement(s)", len(claimed))
        return claimed

    def announce_now(self, alert_id: str) -> bool:
        """Manually speak an active, not yet announced alert of any severity."""
        if not self._voice_enabled:
            return False
        alert = self.manager.get(alert_id)
        if alert is None or alert.dismissed:
            return False
        if not self.manager.mark_announced(alert_id):
            return False
        self._schedule(alert_id, 0.0)
        return True

    def speak(self, text: str) -> None:
        """Fire-and-forget status message (call started, paused …)."""
        if not self._voice_enabled:
            return
        self.scheduler(0.0, lambda: self._safe_speak(text))

    # ------------------------------------------------------------------

    def _schedule(self, alert_id: str, delay_sec: float) -> None:
        self.scheduler(delay_sec, lambda: self._deliver(alert_id))

    def _deliver(self, alert_id: str) -> None:
        alert = self.manager.get(alert_id)
        if alert is None or alert.dismissed:
            log.info("Alert %s dismissed before announcement, skipped", alert_id)
            return
        try:
            self.announcer.announce(alert)
        except Exception as exc:
            log.warning("Announcement of %s failed: %s", alert_id, exc)

    def _safe_speak(self, text: str) -> None:
        try:
            self.announcer.speak(text)
        except Exception as exc:
            log.warning("Status announcement failed: %s", exc)
