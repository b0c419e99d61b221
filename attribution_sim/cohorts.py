"""
Cohort lag table: how conversion credit accrues in the weeks after a touch.
"""

from typing import Dict, List, Tuple

from attribution_sim.schema import CohortRow, ConversionWindow, Level

BASE_CURVES: Dict[ConversionWindow, Tuple[float, ...]] = {
    ConversionWindow.DAYS_7: (0.55, 0.8, 0.95, 1.0),
    ConversionWindow.DAYS_14: (0.35, 0.6, 0.8, 0.92, 0.98, 1.0),
    ConversionWindow.DAYS_30: (0.18, 0.35, 0.55, 0.72, 0.85, 0.93, 0.97, 1.0),
}

NOISE_ADJUST: Dict[Level, float] = {
    Level.LOW: 0.01,
    Level.MEDIUM: 0.03,
    Level.HIGH: 0.06,
}

LOWER_FUNNEL_NOTE = "Short-lag, lower-funnel dominated conversions."
MIXED_NOTE = "Mix of retargeting and some prospecting-driven conversions."
PROSPECTING_NOTE = "Longer-lag, prospecting-heavy cohorts with higher modeled incremental lift."


def bucket_label(idx: int) -> str:
    return f"Week {idx}–{idx + 1}"


def bucket_note(idx: int) -> str:
    if idx == 0:
        return LOWER_FUNNEL_NOTE
    if idx < 3:
        return MIXED_NOTE
    return PROSPECTING_NOTE


def build_cohort_curve(window: ConversionWindow, noise: Level) -> List[CohortRow]:
    """
    Build the cumulative/incremental conversion-lag table.

    Args:
        window: Conversion window; selects a 4, 6 or 8 bucket curve
        noise: Noise assumption; tilts the curve slightly around its midpoint

    Returns:
        CohortRows with non-decreasing cumulative values clamped to [0, 1]
    """
    curve = BASE_CURVES[ConversionWindow(window)]
    noise_adjust = NOISE_ADJUST[Level(noise)]

    rows = []
    prev = 0.0
    for idx, cum in enumerate(curve):
        adjusted = max(0.0, min(1.0, cum + (idx - len(curve) / 2) * noise_adjust * 0.1))
        incremental = max(0.0, adjusted - prev)
        prev = adjusted

        rows.append(
            CohortRow(
                bucket=bucket_label(idx),
                cumulative=adjusted,
                incremental=incremental,
                note=bucket_note(idx),
            )
        )

    return rows
