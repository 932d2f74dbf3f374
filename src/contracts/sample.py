"""RiskSample — one per-tick observation produced by the sampler."""

from __future__ import annotations

import csv
import io
import json
from dataclasses import asdict, dataclass

SAMPLE_CSV_COLUMNS: list[str] = ["timestamp", "risk_score", "confidence"]


@dataclass(frozen=True, slots=True)
class RiskSample:
    """Immutable risk/confidence reading for a single tick."""

    timestamp: str      # ISO-8601 UTC  e.g. "2026-02-26T10:00:00Z"
    risk_score: float   # 0..100
    confidence: float   # 0..100, voice authenticity confidence

    # ── serialisation ─────────────────────────────────────────────────────

    def to_csv_row(self) -> str:
        buf = io.StringIO()
        writer = csv.writer(buf)
        writer.writerow([getattr(self, c) for c in SAMPLE_CSV_COLUMNS])
        return buf.getvalue().rstrip("\r\n")

    def to_json(self) -> str:
        return json.dumps(asdict(self), ensure_ascii=False, separators=(",", ":"))

    @staticmethod
    def csv_header() -> str:
        return ",".join(SAMPLE_CSV_COLUMNS)
