"""Ініціалізація генератора випадкових чисел для відтворюваних демо-дзвінків."""

from __future__ import annotations

import logging
import random

log = logging.getLogger(__name__)


def init_seed(seed: int | None) -> random.Random:
    """Return a dedicated ``random.Random`` for the risk sampler.

    With ``seed=None`` the generator is seeded from the OS, which is what the
    live dashboard wants.  A fixed seed makes a whole call replayable, so the
    CLI defaults to one.
    """
    if seed is None:
        log.info("Random seed not set; sampler uses OS entropy")
        return random.Random()
    rng = random.Random(seed)
    log.info("Random seed initialised: %d", seed)
    return rng
