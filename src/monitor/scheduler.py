"""Fixed-period tick timer and the runner that ties it to a call session.

One background thread per running timer, so ticks never overlap.  The
stop flag is checked under the same lock that guards the callback: once
``cancel()`` has returned, no further tick is processed.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable

from src.monitor.session import CallSession

log = logging.getLogger(__name__)


class TickTimer:
    """Calls *callback* every *interval_sec* until cancelled."""

    def __init__(
        self,
        callback: Callable[[], object],
        interval_sec: float,
        name: str = "tick-timer",
    ) -> None:
        if interval_sec <= 0:
            raise ValueError(f"interval_sec must be > 0, got {interval_sec}")
        self.callback = callback
        self.interval_sec = interval_sec
        self.name = name
        self.ticks = 0
        self._lock = threading.RLock()
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def running(self) -> bool:
        with self._lock:
            return self._thread is not None and not self._stop.is_set()

    def start(self) -> None:
        with self._lock:
            if self.running:
                return
            self._stop = threading.Event()
            self._thread = threading.Thread(
                target=self._run, args=(self._stop,), name=self.name, daemon=True
            )
            self._thread.start()
        log.debug("%s started (interval=%.3fs)", self.name, self.interval_sec)

    def cancel(self, timeout: float | None = 2.0) -> None:
        """Stop the timer.  Waits for an in-flight tick to finish."""
        with self._lock:
            self._stop.set()
            thread, self._thread = self._thread, None
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout)
        log.debug("%s cancelled after %d ticks", self.name, self.ticks)

    def _run(self, stop: threading.Event) -> None:
        # Event.wait instead of sleep so cancel() wakes the thread at once
        while not stop.wait(self.interval_sec):
            with self._lock:
                if stop.is_set():
                    break
                try:
                    self.callback()
                except Exception:
                    log.exception("%s: tick callback failed", self.name)
                self.ticks += 1


class MonitorRunner:
    """Starts and cancels the tick timer together with the call state."""

    def __init__(
        self,
        session: CallSession,
        interval_sec: float = 1.0,
        timer_factory: Callable[[Callable[[], object], float], TickTimer] = TickTimer,
    ) -> None:
        self.session = session
        self.interval_sec = interval_sec
        self._timer_factory = timer_factory
        self._timer: TickTimer | None = None

    @property
    def timer(self) -> TickTimer | None:
        return self._timer

    def start_call(self) -> bool:
        started = self.session.start_call()
        if started and self.session.listening:
            self._arm()
        return started

    def end_call(self) -> bool:
        self._disarm()
        return self.session.end_call()

    def pause(self) -> None:
        self._disarm()
        self.session.pause()

    def resume(self) -> None:
        self.session.resume()
        if self.session.is_active:
            self._arm()

    def toggle_listening(self) -> bool:
        if self.session.listening:
            self.pause()
        else:
            self.resume()
        return self.session.listening

    def _arm(self) -> None:
        if self._timer is not None:
            return
        self._timer = self._timer_factory(self._tick, self.interval_sec)
        self._timer.start()

    def _disarm(self) -> None:
        if self._timer is None:
            return
        self._timer.cancel()
        self._timer = None

    def _tick(self) -> None:
        self.session.tick(self.interval_sec)
