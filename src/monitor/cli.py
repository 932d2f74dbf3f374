"""CLI entry-point for the Voice Scam Shield monitor.

Usage examples
--------------
# Batch mode: simulate a 60-tick call instantly, write out/samples.csv:
python -m src.monitor --duration 60

# Live mode: one tick per second until Ctrl+C:
python -m src.monitor --live --duration 0
"""

from __future__ import annotations

import argparse
import logging
import time
from datetime import datetime, timedelta
from pathlib import Path

from src.monitor.announcer import LogAnnouncer, immediate_scheduler
from src.monitor.classifier import classify
from src.monitor.recorder import FORMATS, write_alerts, write_samples
from src.monitor.scheduler import MonitorRunner
from src.monitor.session import CallSession, build_session, format_duration
from src.shared.config_loader import DEFAULT_CONFIG_PATH, load_config
from src.shared.logger import setup_logging
from src.shared.seed import init_seed

log = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="scamshield-monitor",
        description="Voice Scam Shield: simulate a monitored call and record risk/alerts.",
    )
    p.add_argument(
        "--config",
        default=str(DEFAULT_CONFIG_PATH),
        help=f"Path to monitor.yaml (default: {DEFAULT_CONFIG_PATH}).",
    )
    p.add_argument(
        "--seed",
        type=int,
        default=42,
        help="Random seed for a reproducible call (default: 42). Use -1 for OS entropy.",
    )
    p.add_argument(
        "--duration",
        type=int,
        default=60,
        help="Number of ticks to run. In --live mode 0 means until Ctrl+C (default: 60).",
    )
    p.add_argument(
        "--tick-interval-ms",
        type=int,
        default=None,
        help="Tick period in ms. Defaults to monitor.tick_interval_sec from the config.",
    )
    p.add_argument(
        "--live",
        action="store_true",
        default=False,
        help="Real-time mode: ticks driven by a background timer.",
    )
    p.add_argument(
        "--no-voice",
        action="store_true",
        default=False,
        help="Disable voice announcements of critical alerts.",
    )
    p.add_argument(
        "--seed-demo-alerts",
        action="store_true",
        default=False,
        help="Pre-populate the alert store with the demo_alerts from the config.",
    )
    p.add_argument(
        "--out-dir",
        default="out",
        help="Output directory for samples and alerts (default: out/).",
    )
    p.add_argument(
        "--format",
        choices=list(FORMATS),
        default="csv",
        help="Output format: csv (default) or jsonl.",
    )
    p.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: INFO).",
    )
    return p


class SimulatedClock:
    """Clock for batch runs; moves only when the tick loop advances it."""

    def __init__(self, start: datetime) -> None:
        self.now = start

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)

    def __call__(self) -> datetime:
        return self.now


def _run_batch(
    session: CallSession, ticks: int, interval_sec: float, clock: SimulatedClock
) -> None:
    session.start_call(start=clock())
    for _ in range(ticks):
        clock.advance(interval_sec)
        session.tick(interval_sec)
    session.end_call()


def _run_live(session: CallSession, ticks: int, interval_sec: float) -> None:
    runner = MonitorRunner(session, interval_sec=interval_sec)
    runner.start_call()
    print("  Press Ctrl+C to stop.")
    try:
        while ticks <= 0 or len(session.samples()) <= ticks:
            time.sleep(min(interval_sec, 0.25))
    except KeyboardInterrupt:
        print("\nMonitor stopped by user.")
    finally:
        runner.end_call()


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level)

    cfg = load_config(args.config)
    mon = cfg["monitor"]
    rng = init_seed(None if args.seed < 0 else args.seed)
    interval_sec = (
        args.tick_interval_ms / 1000.0
        if args.tick_interval_ms is not None
        else float(mon.get("tick_interval_sec", 1.0))
    )

    clock: SimulatedClock | None = None
    if not args.live:
        raw = str(mon.get("start_time", "2026-02-26T10:00:00Z"))
        clock = SimulatedClock(datetime.fromisoformat(raw.replace("Z", "+00:00")))

    session = build_session(
        cfg,
        rng,
        LogAnnouncer(),
        # batch ticks are not real time, so announcement delays are meaningless
        scheduler=None if args.live else immediate_scheduler,
        voice_enabled=False if args.no_voice else None,
        clock=clock,
    )
    if args.seed_demo_alerts:
        session.load_demo_alerts(cfg["demo_alerts"])

    if clock is None:
        print(f"Monitor live mode (interval {interval_sec:.3f}s, caller {session.caller.number})")
        _run_live(session, args.duration, interval_sec)
    else:
        _run_batch(session, args.duration, interval_sec, clock)

    samples = session.samples()
    alerts = session.manager.history()
    out = Path(args.out_dir)
    samples_path = write_samples(samples, out / "samples", args.format)
    alerts_path = write_alerts(alerts, out / "alerts", args.format)

    final = samples[-1] if samples else None
    print(f"Call complete: {len(samples)} samples -> {samples_path}")
    if final is not None:
        elapsed = max(0, len(samples) - 1) * interval_sec
        print(
            f"  duration {format_duration(elapsed)}, final risk {final.risk_score:.1f} "
            f"({classify(final.risk_score, session.thresholds).label}), "
            f"confidence {final.confidence:.1f}"
        )
    announced = sum(1 for a in alerts if a.announced)
    print(f"  alerts: {len(alerts)} raised, {announced} announced -> {alerts_path}")


if __name__ == "__main__":
    main()
