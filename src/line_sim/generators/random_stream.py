"""Seeded pseudo-random stream for reproducible simulation runs."""

from __future__ import annotations

import math
from collections.abc import Sequence
from typing import TypeVar

T = TypeVar("T")

# Linear congruential generator parameters
LCG_MULTIPLIER = 9301
LCG_INCREMENT = 49297
LCG_MODULUS = 233280


class RandomStream:
    """
    Linear congruential generator with the draws the line model needs.

    Two streams built from the same seed produce the same sequence; that is
    the only guarantee. Streams from different seeds are not required to be
    independent beyond what the LCG provides.
    """

    def __init__(self, seed: int) -> None:
        self.seed = seed
        self._state = seed

    def uniform(self) -> float:
        """
        Next variate in [0, 1).

        Returns:
            state / modulus after advancing the recurrence once.
        """
        self._state = (self._state * LCG_MULTIPLIER + LCG_INCREMENT) % LCG_MODULUS
        return self._state / LCG_MODULUS

    def exponential(self, mean: float) -> float:
        """
        Exponential variate via inverse CDF: -ln(1 - U) * mean.

        A uniform draw of exactly 0 yields 0.
        """
        return -math.log(1.0 - self.uniform()) * mean

    def choice(self, items: Sequence[T]) -> T:
        """Uniform pick from a non-empty ordered sequence."""
        if not items:
            raise ValueError("Cannot choose from an empty sequence")
        idx = math.floor(self.uniform() * len(items))
        return items[idx]
