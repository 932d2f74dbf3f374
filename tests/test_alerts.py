"""Tests for src.monitor.alerts — alert store and lifecycle."""

from __future__ import annotations

import threading

import pytest

from src.contracts.enums import AlertCategory, AlertSeverity
from src.monitor.alerts import ANNOUNCED, DISMISSED, RAISED, AlertManager
from tests.conftest import FixedClock

# ═══════════════════════════════════════════════════════════════════════════
#  Raise
# ═══════════════════════════════════════════════════════════════════════════


class TestRaise:
    def test_new_alert_is_active_and_unannounced(self, manager):
        a = manager.raise_alert("scam", "critical", "Bank Impersonation Scam", "Hang up.")
        assert a.alert_id == "ALR-0001"
        assert a.created_at == "2026-02-26T10:00:00Z"
        assert not a.dismissed
        assert not a.announced
        assert manager.active_alerts() == [a]

    def test_ids_are_sequential_and_unique(self, manager):
        ids = [manager.raise_alert("suspicious", "low", "t", "m").alert_id for _ in range(3)]
        assert ids == ["ALR-0001", "ALR-0002", "ALR-0003"]

    def test_custom_id_prefix(self):
        mgr = AlertManager(clock=FixedClock(), id_prefix="VSS")
        assert mgr.raise_alert("scam", "high", "t", "m").alert_id == "VSS-0001"

    def test_accepts_enum_members(self, manager):
        a = manager.raise_alert(AlertCategory.SYNTHETIC, AlertSeverity.HIGH, "t", "m")
        assert (a.category, a.severity) == ("synthetic", "high")

    @pytest.mark.parametrize("category,severity", [("phishing", "high"), ("scam", "urgent")])
    def test_unknown_values_rejected(self, manager, category, severity):
        with pytest.raises(ValueError):
            manager.raise_alert(category, severity, "t", "m")
        assert len(manager) == 0

    def test_returned_copy_does_not_mutate_store(self, manager):
        a = manager.raise_alert("scam", "critical", "t", "m")
        a.dismissed = True
        assert manager.get(a.alert_id).dismissed is False
        assert len(manager.active_alerts()) == 1


# ═══════════════════════════════════════════════════════════════════════════
#  Dismiss
# ═══════════════════════════════════════════════════════════════════════════


class TestDismiss:
    def test_dismiss_removes_from_active(self, manager):
        a = manager.raise_alert("scam", "critical", "t", "m")
        b = manager.raise_alert("synthetic", "high", "t", "m")
        assert manager.dismiss(a.alert_id) is True
        assert [x.alert_id for x in manager.active_alerts()] == [b.alert_id]

    def test_dismiss_is_idempotent(self, manager):
        a = manager.raise_alert("scam", "critical", "t", "m")
        manager.dismiss(a.alert_id)
        before = manager.history()
        assert manager.dismiss(a.alert_id) is False
        assert manager.history() == before

    def test_unknown_id_is_a_noop(self, manager):
        manager.raise_alert("scam", "critical", "t", "m")
        before = manager.history()
        assert manager.dismiss("nonexistent") is False
        assert manager.history() == before

    def test_dismissed_alert_stays_in_history(self, manager):
        a = manager.raise_alert("scam", "critical", "t", "m")
        manager.dismiss(a.alert_id)
        assert manager.active_alerts() == []
        assert [x.alert_id for x in manager.history()] == [a.alert_id]
        assert manager.history()[0].dismissed

    def test_dismissed_critical_is_never_due(self, manager):
        a = manager.raise_alert("scam", "critical", "t", "m")
        manager.dismiss(a.alert_id)
        assert manager.due_for_announcement() == []


# ═══════════════════════════════════════════════════════════════════════════
#  Announcement bookkeeping
# ═══════════════════════════════════════════════════════════════════════════


class TestAnnouncement:
    def test_only_critical_alerts_are_due(self, manager):
        manager.raise_alert("synthetic", "high", "t", "m")
        crit = manager.raise_alert("scam", "critical", "t", "m")
        assert [a.alert_id for a in manager.due_for_announcement()] == [crit.alert_id]

    def test_mark_announced_clears_due(self, manager):
        a = manager.raise_alert("scam", "critical", "t", "m")
        assert [x.alert_id for x in manager.due_for_announcement()] == [a.alert_id]
        assert manager.mark_announced(a.alert_id) is True
        assert manager.due_for_announcement() == []
        assert manager.get(a.alert_id).announced

    def test_mark_announced_is_idempotent(self, manager):
        a = manager.raise_alert("scam", "critical", "t", "m")
        manager.mark_announced(a.alert_id)
        assert manager.mark_announced(a.alert_id) is False
        assert manager.get(a.alert_id).announced

    def test_mark_announced_unknown_id(self, manager):
        assert manager.mark_announced("ALR-9999") is False

    def test_announced_alert_remains_active(self, manager):
        a = manager.raise_alert("scam", "critical", "t", "m")
        manager.mark_announced(a.alert_id)
        assert manager.active_alerts()[0].announced

    def test_claim_due_marks_and_returns(self, manager):
        a = manager.raise_alert("scam", "critical", "t", "m")
        claimed = manager.claim_due()
        assert [x.alert_id for x in claimed] == [a.alert_id]
        assert claimed[0].announced
        assert manager.claim_due() == []

    def test_concurrent_claims_never_duplicate(self, manager):
        for _ in range(50):
            manager.raise_alert("scam", "critical", "t", "m")
        results: list[list[str]] = []
        lock = threading.Lock()

        def worker() -> None:
            got = [a.alert_id for a in manager.claim_due()]
            with lock:
                results.append(got)

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        flat = [i for r in results for i in r]
        assert len(flat) == 50
        assert len(set(flat)) == 50


# ═══════════════════════════════════════════════════════════════════════════
#  Demo alerts and listeners
# ═══════════════════════════════════════════════════════════════════════════


class TestDemoAndListeners:
    def test_load_demo_alerts(self, manager, monitor_cfg):
        raised = manager.load_demo_alerts(monitor_cfg["demo_alerts"])
        assert [a.title for a in raised] == [
            "Synthetic Voice Detected",
            "Bank Impersonation Scam",
        ]
        assert [a.alert_id for a in manager.due_for_announcement()] == [raised[1].alert_id]

    def test_demo_entry_defaults(self, manager):
        (a,) = manager.load_demo_alerts([{"title": "Heads up"}])
        assert (a.category, a.severity) == ("suspicious", "medium")

    def test_listener_receives_events(self, manager):
        events: list[tuple[str, str]] = []
        manager.subscribe(lambda ev, a: events.append((ev, a.alert_id)))
        a = manager.raise_alert("scam", "critical", "t", "m")
        manager.mark_announced(a.alert_id)
        manager.dismiss(a.alert_id)
        manager.dismiss(a.alert_id)
        assert events == [
            (RAISED, a.alert_id),
            (ANNOUNCED, a.alert_id),
            (DISMISSED, a.alert_id),
        ]

    def test_unsubscribe(self, manager):
        events: list[str] = []
        unsubscribe = manager.subscribe(lambda ev, a: events.append(ev))
        unsubscribe()
        unsubscribe()
        manager.raise_alert("scam", "low", "t", "m")
        assert events == []

    def test_failing_listener_does_not_break_store(self, manager):
        def boom(event, alert):
            raise RuntimeError("listener bug")

        manager.subscribe(boom)
        a = manager.raise_alert("scam", "critical", "t", "m")
        assert manager.dismiss(a.alert_id) is True
        assert len(manager) == 1

    def test_claim_notifies_after_releasing_lock(self, manager):
        a = manager.raise_alert("scam", "critical", "t", "m")
        blocked: list[bool] = []

        def on_event(event, alert):
            if event != ANNOUNCED:
                return
            # a dismiss from another thread must not wait for the claim
            worker = threading.Thread(target=manager.dismiss, args=(alert.alert_id,))
            worker.start()
            worker.join(1.0)
            blocked.append(worker.is_alive())

        manager.subscribe(on_event)
        claimed = manager.claim_due()
        assert [x.alert_id for x in claimed] == [a.alert_id]
        assert blocked == [False]
        assert manager.get(a.alert_id).dismissed
