"""
Tests for the budget reallocation planner.
"""

import logging

import numpy as np
import pytest

from attribution_sim.budget import (
    MIN_AFTER_SHARE,
    _enforce_floor,
    derive_budget_plan,
    efficiency_gain,
    summarize_budget_plan,
)
from attribution_sim.schema import CHANNELS, AttributionModel, Channel


def test_plan_has_one_row_per_channel(default_spend):
    plan = derive_budget_plan(default_spend, AttributionModel.BAYESIAN_MMM)

    assert [row.channel for row in plan] == list(CHANNELS)


def test_default_plan_reference_values(default_spend):
    """Default spend under Bayesian MMM moves budget from Meta to Search and LinkedIn."""
    plan = {row.channel: row for row in derive_budget_plan(default_spend, AttributionModel.BAYESIAN_MMM)}

    assert plan[Channel.META].before == pytest.approx(120000)
    assert plan[Channel.META].after == pytest.approx(113516.25)
    assert plan[Channel.GOOGLE_SEARCH].after == pytest.approx(94095.0)
    assert plan[Channel.LINKEDIN].after == pytest.approx(62388.75)


def test_totals_preserved(spend_distributions):
    """Sum of after matches sum of before for every non-empty spend mix."""
    for spend in spend_distributions:
        for model in AttributionModel:
            plan = derive_budget_plan(spend, model)
            total_before = sum(row.before for row in plan)
            total_after = sum(row.after for row in plan)

            assert total_before == pytest.approx(sum(spend.values()), rel=1e-6)
            assert total_after == pytest.approx(total_before, rel=1e-6)


def test_after_share_floor(spend_distributions):
    """No channel ends up below 8% of the total."""
    for spend in spend_distributions:
        for model in AttributionModel:
            plan = derive_budget_plan(spend, model)
            total = sum(row.after for row in plan)
            for row in plan:
                assert row.after / total >= MIN_AFTER_SHARE - 1e-9


def test_floor_applied_when_channel_has_no_spend():
    """Last click with no LinkedIn spend would otherwise dip just under the floor."""
    spend = {Channel.META: 45000, Channel.GOOGLE_SEARCH: 55000, Channel.LINKEDIN: 0}
    plan = {row.channel: row for row in derive_budget_plan(spend, AttributionModel.LAST_CLICK)}

    assert plan[Channel.LINKEDIN].after == pytest.approx(100000 * MIN_AFTER_SHARE)


def test_all_zero_spend(zero_spend_input):
    """Zero total falls back to 1 without division errors."""
    plan = derive_budget_plan(zero_spend_input.spend, AttributionModel.LAST_CLICK)

    assert all(row.before == 0 for row in plan)
    assert sum(row.after for row in plan) == pytest.approx(1.0)
    assert all(np.isfinite(row.after) for row in plan)


def test_bayesian_reallocates_more(default_spend):
    bayes = derive_budget_plan(default_spend, AttributionModel.BAYESIAN_MMM)
    position = derive_budget_plan(default_spend, AttributionModel.POSITION_BASED)

    assert bayes[0].after < position[0].after < default_spend[Channel.META]


def test_spend_keys_accept_names():
    plan = derive_budget_plan({"Meta": 100, "Google Search": 100, "LinkedIn": 100}, "time_decay")

    assert sum(row.after for row in plan) == pytest.approx(300)


def test_efficiency_gain():
    assert efficiency_gain(AttributionModel.BAYESIAN_MMM) == 0.18
    assert efficiency_gain(AttributionModel.TIME_DECAY) == 0.14
    assert efficiency_gain(AttributionModel.LAST_CLICK) == 0.11
    assert efficiency_gain(AttributionModel.POSITION_BASED) == 0.11


class TestEnforceFloor:
    """Test the final floor pass."""

    def test_unchanged_when_above_floor(self):
        shares = np.array([0.5, 0.3, 0.2])
        assert np.allclose(_enforce_floor(shares, 0.08), shares)

    def test_lifts_and_rebalances(self):
        shares = np.array([0.9, 0.05, 0.05])
        floored = _enforce_floor(shares, 0.08)

        assert floored.sum() == pytest.approx(1.0)
        assert floored[1] == pytest.approx(0.08)
        assert floored[2] == pytest.approx(0.08)
        assert floored[0] == pytest.approx(0.84)


def test_summarize_budget_plan(default_spend):
    plan = derive_budget_plan(default_spend, AttributionModel.BAYESIAN_MMM)
    summary = summarize_budget_plan(plan, AttributionModel.BAYESIAN_MMM)

    assert summary.total_before == pytest.approx(270000)
    assert summary.total_after == pytest.approx(270000)
    assert summary.efficiency_gain == 0.18
    assert sum(summary.share_shift.values()) == pytest.approx(0.0, abs=1e-12)
    assert summary.share_shift[Channel.META] < 0
    assert summary.share_shift[Channel.LINKEDIN] > 0


def test_missing_channel_named(default_spend):
    del default_spend[Channel.LINKEDIN]

    with pytest.raises(ValueError, match="LinkedIn"):
        derive_budget_plan(default_spend, AttributionModel.BAYESIAN_MMM)


def test_floor_correction_is_not_a_warning(caplog):
    """Lifting a zero-spend channel to the floor is expected, not alarming."""
    spend = {Channel.META: 45000, Channel.GOOGLE_SEARCH: 55000, Channel.LINKEDIN: 0}

    with caplog.at_level(logging.DEBUG, logger="attribution_sim.budget"):
        derive_budget_plan(spend, AttributionModel.LAST_CLICK)

    assert any("floor" in record.getMessage() for record in caplog.records)
    assert all(record.levelno < logging.WARNING for record in caplog.records)
