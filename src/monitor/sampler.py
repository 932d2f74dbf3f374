"""Signal sampler — produces one noisy RiskSample per tick.

The sampler does not analyse audio.  It models a bounded random walk:
risk drifts upwards by at most ``max_drift`` per tick and voice
authenticity confidence decays by at most ``max_decay``.  All randomness
comes from an injected generator so a call can be replayed exactly.
"""

from __future__ import annotations

import logging
import math
import random as _random_mod
from datetime import datetime, timedelta
from typing import Any

from src.contracts.sample import RiskSample
from src.shared.config_loader import ConfigError

log = logging.getLogger(__name__)

DEFAULT_RISK_BOUNDS: tuple[float, float] = (0.0, 95.0)
DEFAULT_CONFIDENCE_BOUNDS: tuple[float, float] = (20.0, 100.0)
DEFAULT_MAX_DRIFT = 5.0
DEFAULT_MAX_DECAY = 10.0


def _ts(dt: datetime) -> str:
    # milliseconds only for sub-second tick intervals
    if dt.microsecond:
        return dt.strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z"
    return dt.strftime("%Y-%m-%dT%H:%M:%SZ")


def _parse_ts(iso: str) -> datetime:
    return datetime.fromisoformat(iso.replace("Z", "+00:00"))


def _clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))


def _bounds(raw: Any, name: str, default: tuple[float, float]) -> tuple[float, float]:
    if raw is None:
        return default
    try:
        lo, hi = (float(v) for v in raw)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"sampler.{name} must be a [lo, hi] pair, got {raw!r}") from exc
    if not 0.0 <= lo <= hi <= 100.0:
        raise ConfigError(f"sampler.{name} must satisfy 0 <= lo <= hi <= 100, got {raw!r}")
    return lo, hi


# ═══════════════════════════════════════════════════════════════════════════
#  Pure step function
# ═══════════════════════════════════════════════════════════════════════════


def sample(
    previous: RiskSample,
    elapsed_seconds: float,
    rng: _random_mod.Random,
    *,
    max_drift: float = DEFAULT_MAX_DRIFT,
    max_decay: float = DEFAULT_MAX_DECAY,
    risk_bounds: tuple[float, float] = DEFAULT_RISK_BOUNDS,
    confidence_bounds: tuple[float, float] = DEFAULT_CONFIDENCE_BOUNDS,
) -> RiskSample:
    """Return the sample that follows *previous* after *elapsed_seconds*.

    Two values are drawn from ``rng.random()`` per call, drift first and
    decay second.  Scripted generators in tests rely on that order.
    """
    drift = rng.random() * max_drift
    decay = rng.random() * max_decay
    return RiskSample(
        timestamp=_ts(_parse_ts(previous.timestamp) + timedelta(seconds=elapsed_seconds)),
        risk_score=round(_clamp(previous.risk_score + drift, *risk_bounds), 2),
        confidence=round(_clamp(previous.confidence - decay, *confidence_bounds), 2),
    )


# ═══════════════════════════════════════════════════════════════════════════
#  Configured sampler
# ═══════════════════════════════════════════════════════════════════════════


class RiskSampler:
    """Sampler bound to the ``sampler`` config section and one RNG."""

    def __init__(self, cfg: dict[str, Any], rng: _random_mod.Random) -> None:
        self.rng = rng
        self.max_drift = float(cfg.get("max_drift", DEFAULT_MAX_DRIFT))
        self.max_decay = float(cfg.get("max_decay", DEFAULT_MAX_DECAY))
        if self.max_drift < 0 or self.max_decay < 0 or math.isnan(self.max_drift + self.max_decay):
            raise ConfigError("sampler.max_drift and sampler.max_decay must be >= 0")
        self.risk_bounds = _bounds(cfg.get("risk_bounds"), "risk_bounds", DEFAULT_RISK_BOUNDS)
        self.confidence_bounds = _bounds(
            cfg.get("confidence_bounds"), "confidence_bounds", DEFAULT_CONFIDENCE_BOUNDS
        )
        self.initial_risk = _clamp(float(cfg.get("initial_risk", 15.0)), *self.risk_bounds)
        self.initial_confidence = _clamp(
            float(cfg.get("initial_confidence", 87.0)), *self.confidence_bounds
        )
        log.debug(
            "Sampler init: risk=%.1f conf=%.1f drift<=%.1f decay<=%.1f",
            self.initial_risk,
            self.initial_confidence,
            self.max_drift,
            self.max_decay,
        )

    def initial(self, start: datetime) -> RiskSample:
        """First sample of a call, taken at *start*."""
        return RiskSample(
            timestamp=_ts(start),
            risk_score=self.initial_risk,
            confidence=self.initial_confidence,
        )

    def next(self, previous: RiskSample, elapsed_seconds: float = 1.0) -> RiskSample:
        return sample(
            previous,
            elapsed_seconds,
            self.rng,
            max_drift=self.max_drift,
            max_decay=self.max_decay,
            risk_bounds=self.risk_bounds,
            confidence_bounds=self.confidence_bounds,
        )
