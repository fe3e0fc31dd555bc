"""Generators module for the random variates driving the simulation."""

from line_sim.generators.random_stream import (
    LCG_INCREMENT,
    LCG_MODULUS,
    LCG_MULTIPLIER,
    RandomStream,
)

__all__ = [
    "LCG_INCREMENT",
    "LCG_MODULUS",
    "LCG_MULTIPLIER",
    "RandomStream",
]
