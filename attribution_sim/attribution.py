"""
Channel performance simulator.

Maps channel spend and the categorical assumptions into per-channel ROAS, CAC,
attributed and incremental conversions, and a certainty label. The formulas are
hand-tuned constants intended to look plausible; they are not fitted to data.
"""

import logging
from typing import Dict, List

from pydantic import BaseModel, ConfigDict, Field

from attribution_sim.schema import (
    CHANNELS,
    AttributionModel,
    Certainty,
    Channel,
    ChannelOutput,
    ConversionWindow,
    Level,
    SimulationInput,
)

logger = logging.getLogger(__name__)

# Revenue credited to a single modeled conversion
REVENUE_PER_CONVERSION = 500.0

# Spend at which the saturation penalty reaches its base factor
SATURATION_SPEND_SCALE = 100000.0

BASE_EFFICIENCY: Dict[Channel, float] = {
    Channel.META: 3.2,
    Channel.GOOGLE_SEARCH: 4.0,
    Channel.LINKEDIN: 2.4,
}

PROSPECTING_WEIGHT: Dict[Channel, float] = {
    Channel.META: 0.45,
    Channel.GOOGLE_SEARCH: 0.2,
    Channel.LINKEDIN: 0.7,
}

RETARGETING_BIAS: Dict[Channel, float] = {
    Channel.META: 0.2,
    Channel.GOOGLE_SEARCH: 0.35,
    Channel.LINKEDIN: 0.1,
}

WINDOW_MULTIPLIER: Dict[ConversionWindow, float] = {
    ConversionWindow.DAYS_7: 0.8,
    ConversionWindow.DAYS_14: 0.95,
    ConversionWindow.DAYS_30: 1.1,
}

SATURATION_BASE: Dict[Level, float] = {
    Level.LOW: 0.1,
    Level.MEDIUM: 0.25,
    Level.HIGH: 0.45,
}

NOISE_FACTOR: Dict[Level, float] = {
    Level.LOW: 0.05,
    Level.MEDIUM: 0.12,
    Level.HIGH: 0.22,
}

# Hand-authored shares; rows are intentionally not re-normalized to 1.0
MODEL_WEIGHTS: Dict[AttributionModel, Dict[Channel, float]] = {
    AttributionModel.LAST_CLICK: {
        Channel.META: 0.3,
        Channel.GOOGLE_SEARCH: 0.55,
        Channel.LINKEDIN: 0.15,
    },
    AttributionModel.POSITION_BASED: {
        Channel.META: 0.4,
        Channel.GOOGLE_SEARCH: 0.4,
        Channel.LINKEDIN: 0.2,
    },
    AttributionModel.TIME_DECAY: {
        Channel.META: 0.35,
        Channel.GOOGLE_SEARCH: 0.45,
        Channel.LINKEDIN: 0.2,
    },
    AttributionModel.BAYESIAN_MMM: {
        Channel.META: 0.38,
        Channel.GOOGLE_SEARCH: 0.32,
        Channel.LINKEDIN: 0.3,
    },
}

MIN_SHARE = 0.05
MAX_SHARE = 0.7


def window_multiplier(window: ConversionWindow) -> float:
    """Longer windows credit more revenue to a touch."""
    return WINDOW_MULTIPLIER[ConversionWindow(window)]


def saturation_penalty(level: Level, spend: float) -> float:
    """
    Diminishing-returns multiplier for a channel's spend.

    Args:
        level: Saturation assumption
        spend: Channel spend

    Returns:
        Multiplier in [1 - (base + 0.15), 1]
    """
    normalized_spend = spend / SATURATION_SPEND_SCALE
    base = SATURATION_BASE[Level(level)]
    return 1 - min(base * normalized_spend, base + 0.15)


def noise_factor(level: Level) -> float:
    return NOISE_FACTOR[Level(level)]


def model_weights(model: AttributionModel) -> Dict[Channel, float]:
    return MODEL_WEIGHTS[AttributionModel(model)]


def classify_certainty(
    model: AttributionModel, window: ConversionWindow, noise: Level
) -> Certainty:
    """
    Categorical certainty for the chosen assumptions.

    High requires the Bayesian MMM with a 30-day window and low noise; high noise
    or a 7-day window is Low; everything else is Medium.
    """
    if (
        model == AttributionModel.BAYESIAN_MMM
        and window == ConversionWindow.DAYS_30
        and noise == Level.LOW
    ):
        return Certainty.HIGH
    if noise == Level.HIGH or window == ConversionWindow.DAYS_7:
        return Certainty.LOW
    return Certainty.MEDIUM


def _simulate_channel(
    channel: Channel, spend: float, sim_input: SimulationInput, certainty: Certainty
) -> ChannelOutput:
    prospecting = PROSPECTING_WEIGHT[channel]
    retargeting = RETARGETING_BIAS[channel]
    noise = noise_factor(sim_input.noise)
    is_last_click = sim_input.model == AttributionModel.LAST_CLICK

    effective_roas = (
        BASE_EFFICIENCY[channel]
        * window_multiplier(sim_input.window)
        * saturation_penalty(sim_input.saturation, spend)
        * (1 + (prospecting - retargeting) * 0.2)
    )

    # Retargeting-heavy channels gain credit under noisy, last-click style rules
    bias_scale = 1.2 if is_last_click else 0.8
    noisy_share = model_weights(sim_input.model)[channel] + (retargeting - prospecting) * noise * bias_scale
    bounded_share = max(MIN_SHARE, min(MAX_SHARE, noisy_share))

    modeled_revenue = spend * effective_roas
    blended_roas = modeled_revenue / max(spend, 1)
    conversions = modeled_revenue / REVENUE_PER_CONVERSION

    incremental_share = (
        prospecting * 0.6
        + (1 - retargeting) * 0.2
        + (0.2 if sim_input.model == AttributionModel.BAYESIAN_MMM else 0.1)
    )
    incremental_revenue = modeled_revenue * incremental_share * (1 - noise * 0.4)

    return ChannelOutput(
        channel=channel,
        roas=blended_roas * bounded_share,
        cac=spend / max(conversions, 1),
        attributed_conversions=conversions * bounded_share,
        incremental_conversions=incremental_revenue / REVENUE_PER_CONVERSION,
        certainty=certainty,
    )


def simulate_attribution(sim_input: SimulationInput) -> List[ChannelOutput]:
    """
    Simulate per-channel performance under the given assumptions.

    Args:
        sim_input: Spend and categorical assumptions

    Returns:
        One ChannelOutput per channel, in fixed channel order
    """
    certainty = classify_certainty(sim_input.model, sim_input.window, sim_input.noise)
    outputs = [
        _simulate_channel(channel, sim_input.spend[channel], sim_input, certainty)
        for channel in CHANNELS
    ]
    logger.debug(
        f"Simulated {len(outputs)} channels for model={sim_input.model.value} "
        f"window={int(sim_input.window)} certainty={certainty.value}"
    )
    return outputs


class BlendedSummary(BaseModel):
    """Cross-channel totals derived from the channel outputs."""

    model_config = ConfigDict(frozen=True)

    total_spend: float
    total_revenue: float = Field(description="Attribution-adjusted revenue")
    total_conversions: float = Field(description="Sum of attributed conversions")
    blended_roas: float
    blended_cac: float


def summarize_outputs(sim_input: SimulationInput, outputs: List[ChannelOutput]) -> BlendedSummary:
    """
    Blend channel outputs into headline ROAS, CAC and revenue.

    Args:
        sim_input: Input the outputs were simulated from
        outputs: Result of simulate_attribution

    Returns:
        BlendedSummary with divide-by-zero guarded ratios
    """
    total_spend = sim_input.total_spend
    total_revenue = sum(o.roas * sim_input.spend[o.channel] for o in outputs)
    total_conversions = sum(o.attributed_conversions for o in outputs)

    return BlendedSummary(
        total_spend=total_spend,
        total_revenue=total_revenue,
        total_conversions=total_conversions,
        blended_roas=total_revenue / max(total_spend, 1),
        blended_cac=total_spend / max(total_conversions, 1),
    )
