"""
Seeded pseudo-random generator shared by the synthetic series.

The recurrence (multiplier 9301, increment 49297, modulus 233280) must be kept
exactly as is: weekly series are compared against golden values computed with it.
"""

import math

from attribution_sim.schema import AttributionModel, ConversionWindow

MULTIPLIER = 9301
INCREMENT = 49297
MODULUS = 233280

MODEL_SEED_OFFSET = {
    AttributionModel.LAST_CLICK: 5,
    AttributionModel.POSITION_BASED: 5,
    AttributionModel.TIME_DECAY: 11,
    AttributionModel.BAYESIAN_MMM: 17,
}


class LinearCongruentialGenerator:
    """Deterministic generator returning floats in [0, 1)."""

    def __init__(self, seed: int):
        self.seed = int(seed)

    def next(self) -> float:
        """Advance the state and return the next value."""
        self.seed = (self.seed * MULTIPLIER + INCREMENT) % MODULUS
        return self.seed / MODULUS

    def __iter__(self):
        return self

    def __next__(self) -> float:
        return self.next()


def series_seed(total_spend: float, model: AttributionModel, window: ConversionWindow) -> int:
    """Initial seed for a weekly series: floor(spend / 1000 + model offset + window)."""
    return math.floor(total_spend / 1000 + MODEL_SEED_OFFSET[AttributionModel(model)] + int(window))
