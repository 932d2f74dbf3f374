"""Модель оповіщення (Alert)."""

from __future__ import annotations

import csv
import io
import json
from dataclasses import asdict, dataclass

ALERT_CSV_COLUMNS: list[str] = [
    "alert_id",
    "category",
    "severity",
    "title",
    "message",
    "created_at",
    "dismissed",
    "announced",
]


@dataclass(slots=True)
class Alert:
    """Оповіщення для користувача з власним життєвим циклом.

    Only ``AlertManager`` creates alerts and flips ``dismissed`` /
    ``announced``; both flags are one-way.
    """

    alert_id: str  # e.g. "ALR-0001"
    category: str  # scam | synthetic | suspicious
    severity: str  # low | medium | high | critical
    title: str
    message: str
    created_at: str  # ISO-8601
    dismissed: bool = False
    announced: bool = False

    @property
    def is_active(self) -> bool:
        return not self.dismissed

    def announcement_text(self) -> str:
        """Text spoken for this alert by an announcer."""
        return f"Security alert: {self.title}. {self.message}"

    # ── serialisation ────────────────────────────────────────────────────

    def to_csv_row(self) -> str:
        buf = io.StringIO()
        writer = csv.writer(buf)
        writer.writerow([getattr(self, c) for c in ALERT_CSV_COLUMNS])
        return buf.getvalue().rstrip("\r\n")

    def to_json(self) -> str:
        return json.dumps(asdict(self), ensure_ascii=False, separators=(",", ":"))

    @staticmethod
    def csv_header() -> str:
        return ",".join(ALERT_CSV_COLUMNS)
