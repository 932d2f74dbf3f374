"""Tests for src.monitor.sampler — bounded random walk."""

from __future__ import annotations

import random
from datetime import datetime, timezone

import pytest

from src.monitor.sampler import RiskSampler, sample
from src.shared.config_loader import ConfigError
from src.shared.seed import init_seed
from tests.conftest import START, ScriptedRandom, make_sample

# ═══════════════════════════════════════════════════════════════════════════
#  Pure step function
# ═══════════════════════════════════════════════════════════════════════════


class TestSampleStep:
    def test_drift_then_decay(self):
        prev = make_sample(risk_score=20.0, confidence=80.0)
        nxt = sample(prev, 1.0, ScriptedRandom([0.5, 0.2]))
        assert nxt.risk_score == 22.5  # 0.5 * 5
        assert nxt.confidence == 78.0  # 0.2 * 10

    def test_timestamp_advances_by_elapsed(self):
        prev = make_sample(timestamp="2026-02-26T10:00:59Z")
        nxt = sample(prev, 2.0, ScriptedRandom([0.0]))
        assert nxt.timestamp == "2026-02-26T10:01:01Z"

    def test_sub_second_ticks_keep_milliseconds(self):
        s = make_sample(timestamp="2026-02-26T10:00:00Z")
        rng = ScriptedRandom([0.0])
        s = sample(s, 0.25, rng)
        assert s.timestamp == "2026-02-26T10:00:00.250Z"
        s = sample(sample(s, 0.25, rng), 0.5, rng)
        assert s.timestamp == "2026-02-26T10:00:01Z"

    def test_zero_draws_keep_values(self):
        prev = make_sample(risk_score=40.0, confidence=60.0)
        nxt = sample(prev, 1.0, ScriptedRandom([0.0]))
        assert (nxt.risk_score, nxt.confidence) == (40.0, 60.0)

    def test_risk_clamped_at_upper_bound(self):
        prev = make_sample(risk_score=94.0)
        nxt = sample(prev, 1.0, ScriptedRandom([0.99, 0.0]))
        assert nxt.risk_score == 95.0

    def test_confidence_clamped_at_floor(self):
        prev = make_sample(confidence=22.0)
        nxt = sample(prev, 1.0, ScriptedRandom([0.0, 0.99]))
        assert nxt.confidence == 20.0

    def test_custom_bounds(self):
        prev = make_sample(risk_score=48.0, confidence=55.0)
        nxt = sample(
            prev,
            1.0,
            ScriptedRandom([0.9, 0.9]),
            risk_bounds=(0.0, 50.0),
            confidence_bounds=(50.0, 100.0),
        )
        assert nxt.risk_score == 50.0
        assert nxt.confidence == 50.0

    def test_previous_sample_untouched(self):
        prev = make_sample(risk_score=10.0)
        sample(prev, 1.0, ScriptedRandom([0.5]))
        assert prev.risk_score == 10.0

    def test_bounds_hold_over_long_walk(self):
        rng = random.Random(7)
        s = make_sample()
        for _ in range(500):
            nxt = sample(s, 1.0, rng)
            assert 0.0 <= nxt.risk_score <= 95.0
            assert 20.0 <= nxt.confidence <= 100.0
            assert nxt.risk_score - s.risk_score <= 5.0 + 0.01
            assert nxt.risk_score >= s.risk_score
            assert s.confidence - nxt.confidence <= 10.0 + 0.01
            assert nxt.confidence <= s.confidence
            s = nxt

    def test_same_seed_same_walk(self):
        def walk(seed: int) -> list[float]:
            rng = init_seed(seed)
            s = make_sample()
            out = []
            for _ in range(20):
                s = sample(s, 1.0, rng)
                out.append(s.risk_score)
            return out

        assert walk(42) == walk(42)
        assert walk(42) != walk(43)


# ═══════════════════════════════════════════════════════════════════════════
#  Configured sampler
# ═══════════════════════════════════════════════════════════════════════════


class TestRiskSampler:
    def test_initial_sample(self, monitor_cfg):
        sampler = RiskSampler(monitor_cfg["sampler"], random.Random(0))
        first = sampler.initial(START)
        assert first.timestamp == "2026-02-26T10:00:00Z"
        assert first.risk_score == 15.0
        assert first.confidence == 87.0

    def test_initial_values_clamped_into_bounds(self):
        sampler = RiskSampler(
            {"initial_risk": 120, "initial_confidence": 5}, random.Random(0)
        )
        first = sampler.initial(datetime(2026, 1, 1, tzinfo=timezone.utc))
        assert first.risk_score == 95.0
        assert first.confidence == 20.0

    def test_next_uses_configured_limits(self):
        sampler = RiskSampler({"max_drift": 2.0, "max_decay": 4.0}, ScriptedRandom([1.0]))
        nxt = sampler.next(make_sample(risk_score=10.0, confidence=90.0))
        assert nxt.risk_score == 12.0
        assert nxt.confidence == 86.0

    def test_empty_config_uses_defaults(self):
        sampler = RiskSampler({}, random.Random(0))
        assert sampler.max_drift == 5.0
        assert sampler.max_decay == 10.0
        assert sampler.risk_bounds == (0.0, 95.0)
        assert sampler.confidence_bounds == (20.0, 100.0)

    @pytest.mark.parametrize(
        "cfg",
        [
            {"max_drift": -1},
            {"max_decay": -0.5},
            {"risk_bounds": [80, 10]},
            {"confidence_bounds": [0, 120]},
            {"risk_bounds": "high"},
        ],
    )
    def test_invalid_config_rejected(self, cfg):
        with pytest.raises(ConfigError):
            RiskSampler(cfg, random.Random(0))
