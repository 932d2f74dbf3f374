"""Writers for the sample and alert history of a call."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path

from src.contracts.alert import Alert
from src.contracts.sample import RiskSample

log = logging.getLogger(__name__)

FORMATS = ("csv", "jsonl")


def _write_csv(header: str, rows: list[str], path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8", newline="") as fh:
        fh.write(header + "\n")
        for row in rows:
            fh.write(row + "\n")


def _write_jsonl(lines: list[str], path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as fh:
        for line in lines:
            fh.write(line + "\n")


def write_samples(samples: Sequence[RiskSample], path: Path, fmt: str = "csv") -> Path:
    """Write *samples* as CSV (with header) or JSONL.  Returns the path used."""
    if fmt == "jsonl":
        path = path.with_suffix(".jsonl")
        _write_jsonl([s.to_json() for s in samples], path)
    elif fmt == "csv":
        path = path.with_suffix(".csv")
        _write_csv(RiskSample.csv_header(), [s.to_csv_row() for s in samples], path)
    else:
        raise ValueError(f"Unknown format '{fmt}', expected one of {FORMATS}")
    log.info("Wrote %d samples to %s", len(samples), path)
    return path


def write_alerts(alerts: Sequence[Alert], path: Path, fmt: str = "csv") -> Path:
    """Write the alert history as CSV (with header) or JSONL."""
    if fmt == "jsonl":
        path = path.with_suffix(".jsonl")
        _write_jsonl([a.to_json() for a in alerts], path)
    elif fmt == "csv":
        path = path.with_suffix(".csv")
        _write_csv(Alert.csv_header(), [a.to_csv_row() for a in alerts], path)
    else:
        raise ValueError(f"Unknown format '{fmt}', expected one of {FORMATS}")
    log.info("Wrote %d alerts to %s", len(alerts), path)
    return path
