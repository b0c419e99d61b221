"""
Budget reallocation planner.

Produces a directional before/after plan that moves spend away from channels an
attribution model tends to over-credit towards under-credited demand creation.
Totals are preserved; the plan is indicative, not an optimizer.
"""

import logging
from typing import Dict, List, Mapping

import numpy as np
from pydantic import BaseModel, ConfigDict, Field

from attribution_sim.schema import (
    CHANNELS,
    AttributionModel,
    BudgetPlanRow,
    Channel,
    missing_channels,
)

logger = logging.getLogger(__name__)

MIN_AFTER_SHARE = 0.08

UNDER_CREDITED_BASE: Dict[Channel, float] = {
    Channel.META: 0.35,
    Channel.GOOGLE_SEARCH: 0.2,
    Channel.LINKEDIN: 0.45,
}

EFFICIENCY_GAIN: Dict[AttributionModel, float] = {
    AttributionModel.LAST_CLICK: 0.11,
    AttributionModel.POSITION_BASED: 0.11,
    AttributionModel.TIME_DECAY: 0.14,
    AttributionModel.BAYESIAN_MMM: 0.18,
}


def over_credited_base(model: AttributionModel) -> Dict[Channel, float]:
    """Share above which a channel is treated as over-credited."""
    last_click = AttributionModel(model) == AttributionModel.LAST_CLICK
    return {
        Channel.META: 0.4 if last_click else 0.3,
        Channel.GOOGLE_SEARCH: 0.55 if last_click else 0.45,
        Channel.LINKEDIN: 0.15,
    }


def reallocation_intensity(model: AttributionModel) -> float:
    return 0.35 if AttributionModel(model) == AttributionModel.BAYESIAN_MMM else 0.28


def efficiency_gain(model: AttributionModel) -> float:
    """Headline blended-CAC improvement claimed for reallocating under a model."""
    return EFFICIENCY_GAIN[AttributionModel(model)]


def _enforce_floor(shares: np.ndarray, floor: float) -> np.ndarray:
    """
    Lift shares below the floor and take the deficit from the rest, pro rata.

    Args:
        shares: Shares summing to 1
        floor: Minimum share per channel

    Returns:
        Shares summing to 1 with every entry >= floor
    """
    shares = shares.copy()
    pinned = np.zeros(len(shares), dtype=bool)

    while True:
        below = (shares < floor) & ~pinned
        if not below.any():
            return shares

        pinned |= below
        shares[pinned] = floor
        free = ~pinned
        remaining = 1.0 - floor * pinned.sum()
        free_total = shares[free].sum()
        if free_total > 0:
            shares[free] = shares[free] / free_total * remaining


def derive_budget_plan(spend: Mapping[Channel, float], model: AttributionModel) -> List[BudgetPlanRow]:
    """
    Derive a directional reallocation of the current spend.

    Args:
        spend: Current spend per channel
        model: Attribution model driving which channels are over-credited

    Returns:
        One BudgetPlanRow per channel, in fixed channel order

    Raises:
        ValueError: If spend omits a channel
    """
    spend = {Channel(ch): amount for ch, amount in spend.items()}
    missing = missing_channels(spend)
    if missing:
        raise ValueError(f"Spend is missing channels: {', '.join(missing)}")

    total = sum(spend[ch] for ch in CHANNELS) or 1

    over_credited = over_credited_base(model)
    intensity = reallocation_intensity(model)

    before_shares = np.array([spend[ch] / total for ch in CHANNELS])
    after_shares = np.empty(len(CHANNELS))

    pool = 0.0
    for i, ch in enumerate(CHANNELS):
        give_back = max(0.0, before_shares[i] - over_credited[ch]) * intensity
        after_shares[i] = max(MIN_AFTER_SHARE, before_shares[i] - give_back)
        pool += give_back

    under_weights = np.array([UNDER_CREDITED_BASE[ch] for ch in CHANNELS])
    after_shares += under_weights / under_weights.sum() * pool

    after_shares = after_shares / (after_shares.sum() or 1)

    floored = _enforce_floor(after_shares, MIN_AFTER_SHARE)
    if not np.allclose(floored, after_shares):
        logger.debug(
            f"Budget plan lifted channels to the {MIN_AFTER_SHARE:.0%} floor for model={AttributionModel(model).value}"
        )
    after_shares = floored

    logger.debug(f"Budget plan for total={total}: pool={pool:.4f}, intensity={intensity}")

    return [
        BudgetPlanRow(
            channel=ch,
            before=float(before_shares[i] * total),
            after=float(after_shares[i] * total),
        )
        for i, ch in enumerate(CHANNELS)
    ]


class BudgetPlanSummary(BaseModel):
    """Headline figures for a budget plan."""

    model_config = ConfigDict(frozen=True)

    total_before: float
    total_after: float
    share_shift: Dict[Channel, float] = Field(
        description="Change in share of total per channel (after - before)"
    )
    efficiency_gain: float = Field(description="Modeled blended-CAC improvement")


def summarize_budget_plan(plan: List[BudgetPlanRow], model: AttributionModel) -> BudgetPlanSummary:
    """
    Summarize a plan into totals and per-channel share shifts.

    Args:
        plan: Result of derive_budget_plan
        model: Model the plan was derived for

    Returns:
        BudgetPlanSummary
    """
    total_before = sum(row.before for row in plan)
    total_after = sum(row.after for row in plan)
    before_norm = total_before or 1
    after_norm = total_after or 1

    return BudgetPlanSummary(
        total_before=total_before,
        total_after=total_after,
        share_shift={row.channel: row.after / after_norm - row.before / before_norm for row in plan},
        efficiency_gain=efficiency_gain(model),
    )
