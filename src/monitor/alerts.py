"""Alert lifecycle manager — append-only alert store.

Per-alert state machine
───────────────────────
  created ──mark_announced──▶ announced
     │                            │
     └──────────dismiss───────────┴──▶ dismissed (terminal)

Alerts are never deleted; dismissed ones stay in ``history()`` for audit.
``announced`` and ``dismissed`` only ever flip from False to True.

The store is touched by the tick thread and by user dismiss actions, so
every access goes through one re-entrant lock.  Callers receive copies;
the only way to change an alert is through this manager.
"""

from __future__ import annotations

import dataclasses
import logging
import threading
from collections.abc import Callable, Iterable
from datetime import datetime, timezone
from typing import Any

from src.contracts.alert import Alert
from src.contracts.enums import AlertCategory, AlertSeverity

log = logging.getLogger(__name__)

AlertListener = Callable[[str, Alert], None]

# Events passed to listeners
RAISED = "raised"
DISMISSED = "dismissed"
ANNOUNCED = "announced"


def _ts(dt: datetime) -> str:
    if dt.microsecond:
        return dt.strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z"
    return dt.strftime("%Y-%m-%dT%H:%M:%SZ")


def _utcnow() -> datetime:
    return datetime.now(tz=timezone.utc)


class AlertManager:
    """Owns every Alert raised during the lifetime of the monitor."""

    def __init__(
        self,
        clock: Callable[[], datetime] | None = None,
        id_prefix: str = "ALR",
    ) -> None:
        self._clock = clock or _utcnow
        self._id_prefix = id_prefix
        self._alerts: list[Alert] = []
        self._by_id: dict[str, Alert] = {}
        self._counter = 0
        self._lock = threading.RLock()
        self._listeners: list[AlertListener] = []

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def raise_alert(
        self,
        category: AlertCategory | str,
        severity: AlertSeverity | str,
        title: str,
        message: str,
    ) -> Alert:
        """Create, store and return a new active, unannounced alert.

        Raises:
            ValueError: If *category* or *severity* is not a known value.
        """
        cat = AlertCategory(category).value
        sev = AlertSeverity(severity).value
        with self._lock:
            self._counter += 1
            alert = Alert(
                alert_id=f"{self._id_prefix}-{self._counter:04d}",
                category=cat,
                severity=sev,
                title=title,
                message=message,
                created_at=_ts(self._clock()),
            )
            self._alerts.append(alert)
            self._by_id[alert.alert_id] = alert
            snapshot = dataclasses.replace(alert)
        log.info("Alert %s raised: [%s/%s] %s", alert.alert_id, sev, cat, title)
        self._notify(RAISED, snapshot)
        return snapshot

    def dismiss(self, alert_id: str) -> bool:
        """Dismiss an alert.  Returns True only if the state changed.

        Unknown ids and already-dismissed alerts are silently ignored.
        """
        with self._lock:
            alert = self._by_id.get(alert_id)
            if alert is None or alert.dismissed:
                return False
            alert.dismissed = True
            snapshot = dataclasses.replace(alert)
        log.info("Alert %s dismissed", alert_id)
        self._notify(DISMISSED, snapshot)
        return True

    def mark_announced(self, alert_id: str) -> bool:
        """Flag an alert as announced.  Returns True only the first time."""
        with self._lock:
            alert = self._by_id.get(alert_id)
            if alert is None or alert.announced:
                return False
            alert.announced = True
            snapshot = dataclasses.replace(alert)
        log.debug("Alert %s marked announced", alert_id)
        self._notify(ANNOUNCED, snapshot)
        return True

    def claim_due(self) -> list[Alert]:
        """Select the due alerts and mark each announced in one step.

        Two pollers calling this concurrently never receive the same alert.
        """
        claimed: list[Alert] = []
        with self._lock:
            for alert in self._alerts:
                if alert.dismissed or alert.announced:
                    continue
                if alert.severity != AlertSeverity.CRITICAL.value:
                    continue
                alert.announced = True
                claimed.append(dataclasses.replace(alert))
        for alert in claimed:
            log.debug("Alert %s claimed for announcement", alert.alert_id)
            self._notify(ANNOUNCED, alert)
        return claimed

    def load_demo_alerts(self, entries: Iterable[dict[str, Any]]) -> list[Alert]:
        """Raise the pre-canned alerts listed under ``demo_alerts``."""
        raised: list[Alert] = []
        for entry in entries:
            raised.append(
                self.raise_alert(
                    entry.get("category", AlertCategory.SUSPICIOUS.value),
                    entry.get("severity", AlertSeverity.MEDIUM.value),
                    entry.get("title", ""),
                    entry.get("message", ""),
                )
            )
        log.info("Loaded %d demo alerts", len(raised))
        return raised

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def active_alerts(self) -> list[Alert]:
        """Non-dismissed alerts in the order they were raised."""
        with self._lock:
            return [dataclasses.replace(a) for a in self._alerts if not a.dismissed]

    def due_for_announcement(self) -> list[Alert]:
        """Active critical alerts that have not been announced yet."""
        with self._lock:
            return [
                dataclasses.replace(a)
                for a in self._alerts
                if not a.dismissed
                and not a.announced
                and a.severity == AlertSeverity.CRITICAL.value
            ]

    def history(self) -> list[Alert]:
        """Every alert ever raised, dismissed ones included."""
        with self._lock:
            return [dataclasses.replace(a) for a in self._alerts]

    def get(self, alert_id: str) -> Alert | None:
        with self._lock:
            alert = self._by_id.get(alert_id)
            return dataclasses.replace(alert) if alert is not None else None

    def __len__(self) -> int:
        with self._lock:
            return len(self._alerts)

    # ------------------------------------------------------------------
    # Observers
    # ------------------------------------------------------------------

    def subscribe(self, listener: AlertListener) -> Callable[[], None]:
        """Register *listener*; returns a function that unregisters it."""
        with self._lock:
            self._listeners.append(listener)

        def _unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return _unsubscribe

    def _notify(self, event: str, alert: Alert) -> None:
        with self._lock:
            listeners = list(self._listeners)
        for listener in listeners:
            try:
                listener(event, alert)
            except Exception:
                log.exception("Alert listener failed on %s for %s", event, alert.alert_id)
