"""
Synthetic weekly series.

Generates a seeded weekly ROAS/CAC series from blended outputs, an "optimized"
projection of that series, and per-channel ROAS curves. Values are rounded the
way they are charted: ROAS to 2 decimals, CAC to whole currency units.
"""

import logging
from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, List, Sequence

from attribution_sim.lcg import LinearCongruentialGenerator, series_seed
from attribution_sim.schema import (
    CHANNELS,
    AttributionModel,
    Channel,
    ChannelOutput,
    ChannelWeeklyRow,
    ConversionWindow,
    Level,
    WeeklyPoint,
)

logger = logging.getLogger(__name__)

DEFAULT_WEEK_COUNT = 12

LAG_FACTOR: Dict[ConversionWindow, float] = {
    ConversionWindow.DAYS_7: 0.6,
    ConversionWindow.DAYS_14: 0.8,
    ConversionWindow.DAYS_30: 1.0,
}

SATURATION_FACTOR: Dict[Level, float] = {
    Level.LOW: 1.05,
    Level.MEDIUM: 1.0,
    Level.HIGH: 0.9,
}

NOISE_AMPLITUDE: Dict[Level, float] = {
    Level.LOW: 0.04,
    Level.MEDIUM: 0.08,
    Level.HIGH: 0.14,
}

TREND_DRIFT: Dict[AttributionModel, float] = {
    AttributionModel.LAST_CLICK: 0.005,
    AttributionModel.POSITION_BASED: 0.005,
    AttributionModel.TIME_DECAY: 0.01,
    AttributionModel.BAYESIAN_MMM: 0.015,
}

# Share of the efficiency gain realized in the optimized projection
UPLIFT_REALIZATION = 0.65
MIN_RAMP = 0.8
MAX_RAMP = 1.1


def week_label(week_index: int) -> str:
    return f"W{week_index}"


def round_half_up(value: float, places: int = 0) -> float:
    """Round the exact binary value of a float, with ties going away from zero."""
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(value).quantize(quantum, rounding=ROUND_HALF_UP))


def generate_weekly_series(
    blended_roas: float,
    blended_cac: float,
    window: ConversionWindow,
    saturation: Level,
    noise: Level,
    model: AttributionModel,
    total_spend: float,
    week_count: int = DEFAULT_WEEK_COUNT,
) -> List[WeeklyPoint]:
    """
    Generate a seeded synthetic weekly ROAS/CAC series.

    Identical arguments always produce an identical series.

    Args:
        blended_roas: Blended ROAS across channels (0 falls back to 1)
        blended_cac: Blended CAC across channels (0 falls back to 1)
        window: Conversion window
        saturation: Saturation assumption
        noise: Noise assumption
        model: Attribution model
        total_spend: Total spend, used to seed the generator
        week_count: Number of weeks to generate

    Returns:
        week_count WeeklyPoints labelled W1..Wn
    """
    if week_count < 1:
        raise ValueError(f"week_count must be at least 1, got {week_count}")

    window = ConversionWindow(window)
    model = AttributionModel(model)

    base_roas = blended_roas or 1
    base_cac = blended_cac or 1

    lag_factor = LAG_FACTOR[window]
    saturation_factor = SATURATION_FACTOR[Level(saturation)]
    noise_amplitude = NOISE_AMPLITUDE[Level(noise)]
    trend_drift = TREND_DRIFT[model]

    seed = series_seed(total_spend, model, window)
    rng = LinearCongruentialGenerator(seed)
    logger.debug(f"Weekly series seed={seed} for model={model.value} window={int(window)}")

    starting_roas = base_roas * lag_factor * saturation_factor
    starting_cac = base_cac / (lag_factor * saturation_factor or 1)

    series = []
    for week_index in range(1, week_count + 1):
        centered_index = week_index - (week_count / 2 + 0.5)
        structural_trend = 1 + trend_drift * centered_index

        # Draw order matters: shock, mmm noise, then cac jitter
        shock = 1 + (rng.next() - 0.5) * 2 * noise_amplitude
        mmm_noise = 1 + (rng.next() - 0.5) * noise_amplitude * 1.5
        roas = starting_roas * structural_trend * shock * mmm_noise
        cac = starting_cac * (2 - structural_trend) * (1 + (rng.next() - 0.5) * noise_amplitude)

        series.append(
            WeeklyPoint(
                week=week_label(week_index),
                roas=round_half_up(roas, 2),
                cac=round_half_up(max(cac, 1)),
            )
        )

    return series


def project_optimized_series(series: Sequence[WeeklyPoint], gain: float) -> List[WeeklyPoint]:
    """
    Project the series under a reallocated budget.

    Args:
        series: Current weekly series
        gain: Efficiency gain for the model (see budget.efficiency_gain)

    Returns:
        Same-length series with uplifted ROAS and reduced CAC
    """
    uplift = 1 + gain * UPLIFT_REALIZATION
    weeks = len(series)
    mid_point = weeks / 2 + 0.5

    optimized = []
    for idx, point in enumerate(series):
        ramp = 0.9 + (idx + 1 - mid_point) * 0.01
        bounded_ramp = max(MIN_RAMP, min(MAX_RAMP, ramp))

        optimized.append(
            WeeklyPoint(
                week=point.week,
                roas=round_half_up(point.roas * uplift * bounded_ramp, 2),
                cac=round_half_up(point.cac / (uplift * bounded_ramp or 1)),
            )
        )

    return optimized


def project_channel_series(
    week_labels: Sequence[str], outputs: Sequence[ChannelOutput]
) -> List[ChannelWeeklyRow]:
    """
    Spread each channel's ROAS across the weeks with a small drift per channel.

    Args:
        week_labels: Labels of the weekly series
        outputs: Channel outputs; a missing or zero ROAS falls back to 1

    Returns:
        One ChannelWeeklyRow per week label
    """
    weeks = len(week_labels)
    if not weeks:
        return []

    by_channel = {o.channel: o for o in outputs}
    base_roas = {
        ch: (by_channel[ch].roas or 1) if ch in by_channel else 1 for ch in CHANNELS
    }

    rows = []
    for idx, week in enumerate(week_labels):
        variance = 1 + (idx - weeks / 2) * 0.01
        roas: Dict[Channel, float] = {}
        for channel_idx, ch in enumerate(CHANNELS):
            channel_drift = 1 + (channel_idx - 1) * 0.03
            roas[ch] = round_half_up(base_roas[ch] * variance * channel_drift, 2)
        rows.append(ChannelWeeklyRow(week=week, roas=roas))

    return rows
