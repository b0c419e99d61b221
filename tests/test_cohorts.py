"""
Tests for the cohort lag table.
"""

import itertools

import pytest

from attribution_sim.cohorts import (
    LOWER_FUNNEL_NOTE,
    MIXED_NOTE,
    NOISE_ADJUST,
    PROSPECTING_NOTE,
    build_cohort_curve,
)
from attribution_sim.schema import ConversionWindow, Level


@pytest.mark.parametrize(
    "window,expected_rows",
    [(ConversionWindow.DAYS_7, 4), (ConversionWindow.DAYS_14, 6), (ConversionWindow.DAYS_30, 8)],
)
def test_row_count_by_window(window, expected_rows):
    assert len(build_cohort_curve(window, Level.MEDIUM)) == expected_rows


def test_seven_day_window_scenario():
    rows = build_cohort_curve(ConversionWindow.DAYS_7, Level.HIGH)

    assert len(rows) == 4
    assert rows[0].bucket == "Week 0–1"
    assert rows[-1].bucket == "Week 3–4"
    assert 0.0 <= rows[-1].cumulative <= 1.0


def test_cumulative_non_decreasing_and_ends_at_one():
    for window, noise in itertools.product(ConversionWindow, Level):
        rows = build_cohort_curve(window, noise)
        cumulative = [row.cumulative for row in rows]

        assert cumulative == sorted(cumulative)
        assert cumulative[-1] == pytest.approx(1.0, abs=NOISE_ADJUST[noise] * 0.1)


def test_incremental_is_difference_of_cumulative():
    rows = build_cohort_curve(ConversionWindow.DAYS_14, Level.MEDIUM)

    assert rows[0].incremental == pytest.approx(rows[0].cumulative)
    for prev, row in zip(rows, rows[1:]):
        assert row.incremental == pytest.approx(row.cumulative - prev.cumulative)


def test_noise_tilts_first_bucket():
    """Noise pulls early buckets down around the curve midpoint."""
    rows = build_cohort_curve(ConversionWindow.DAYS_30, Level.MEDIUM)

    # 0.18 + (0 - 4) * 0.03 * 0.1
    assert rows[0].cumulative == pytest.approx(0.168)


def test_notes():
    rows = build_cohort_curve(ConversionWindow.DAYS_30, Level.LOW)

    assert rows[0].note == LOWER_FUNNEL_NOTE
    assert rows[1].note == MIXED_NOTE
    assert rows[2].note == MIXED_NOTE
    assert all(row.note == PROSPECTING_NOTE for row in rows[3:])
