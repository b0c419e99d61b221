"""
Scenario pipeline.

Runs every simulation stage for one SimulationInput in dependency order and
exposes the results as pandas DataFrames for chart and table rendering. Also
provides scenario grids and single-channel spend sweeps built on the same
pipeline.
"""

import itertools
import logging
from typing import Iterable, List, Optional

import pandas as pd
from pydantic import BaseModel, ConfigDict

from attribution_sim.attribution import BlendedSummary, simulate_attribution, summarize_outputs
from attribution_sim.budget import (
    BudgetPlanSummary,
    derive_budget_plan,
    efficiency_gain,
    summarize_budget_plan,
)
from attribution_sim.cohorts import build_cohort_curve
from attribution_sim.config import DEFAULT_SPEND_RANGES, SpendRange
from attribution_sim.schema import (
    CHANNELS,
    AttributionModel,
    BudgetPlanRow,
    Channel,
    ChannelOutput,
    ChannelWeeklyRow,
    CohortRow,
    ConversionWindow,
    Level,
    SimulationInput,
    WeeklyPoint,
)
from attribution_sim.series import (
    DEFAULT_WEEK_COUNT,
    generate_weekly_series,
    project_channel_series,
    project_optimized_series,
)

logger = logging.getLogger(__name__)


class ScenarioResult(BaseModel):
    """Every derived output for a single SimulationInput."""

    model_config = ConfigDict(frozen=True)

    input: SimulationInput
    outputs: List[ChannelOutput]
    summary: BlendedSummary
    budget_plan: List[BudgetPlanRow]
    budget_summary: BudgetPlanSummary
    weekly: List[WeeklyPoint]
    weekly_optimized: List[WeeklyPoint]
    channel_weekly: List[ChannelWeeklyRow]
    cohorts: List[CohortRow]

    def channel_frame(self) -> pd.DataFrame:
        """Channel performance, one row per channel."""
        return pd.DataFrame(
            [
                {
                    "channel": o.channel.value,
                    "spend": self.input.spend[o.channel],
                    "roas": o.roas,
                    "cac": o.cac,
                    "attributed_conversions": o.attributed_conversions,
                    "incremental_conversions": o.incremental_conversions,
                    "certainty": o.certainty.value,
                }
                for o in self.outputs
            ]
        ).set_index("channel")

    def budget_frame(self) -> pd.DataFrame:
        """Before/after spend with the change per channel."""
        df = pd.DataFrame(
            [
                {"channel": row.channel.value, "before": row.before, "after": row.after}
                for row in self.budget_plan
            ]
        ).set_index("channel")
        df["change"] = df["after"] - df["before"]
        return df

    def weekly_frame(self) -> pd.DataFrame:
        """Current and optimized weekly series side by side."""
        current = pd.DataFrame([p.model_dump() for p in self.weekly]).set_index("week")
        optimized = pd.DataFrame([p.model_dump() for p in self.weekly_optimized]).set_index("week")
        return current.join(optimized, rsuffix="_optimized")

    def channel_series_frame(self) -> pd.DataFrame:
        """Weekly ROAS per channel, one column per channel."""
        return pd.DataFrame(
            [
                {"week": row.week, **{ch.value: row.roas[ch] for ch in CHANNELS}}
                for row in self.channel_weekly
            ]
        ).set_index("week")

    def cohort_frame(self) -> pd.DataFrame:
        return pd.DataFrame([row.model_dump() for row in self.cohorts]).set_index("bucket")


def run_scenario(sim_input: SimulationInput, week_count: int = DEFAULT_WEEK_COUNT) -> ScenarioResult:
    """
    Run the full simulation pipeline for one input.

    Args:
        sim_input: Spend and categorical assumptions
        week_count: Length of the weekly series

    Returns:
        ScenarioResult with all derived outputs
    """
    outputs = simulate_attribution(sim_input)
    summary = summarize_outputs(sim_input, outputs)

    budget_plan = derive_budget_plan(sim_input.spend, sim_input.model)
    budget_summary = summarize_budget_plan(budget_plan, sim_input.model)

    weekly = generate_weekly_series(
        summary.blended_roas,
        summary.blended_cac,
        sim_input.window,
        sim_input.saturation,
        sim_input.noise,
        sim_input.model,
        summary.total_spend,
        week_count=week_count,
    )
    weekly_optimized = project_optimized_series(weekly, efficiency_gain(sim_input.model))
    channel_weekly = project_channel_series([p.week for p in weekly], outputs)
    cohorts = build_cohort_curve(sim_input.window, sim_input.noise)

    logger.debug(
        f"Scenario run: total_spend={summary.total_spend:.0f} blended_roas={summary.blended_roas:.3f} "
        f"blended_cac={summary.blended_cac:.1f}"
    )

    return ScenarioResult(
        input=sim_input,
        outputs=outputs,
        summary=summary,
        budget_plan=budget_plan,
        budget_summary=budget_summary,
        weekly=weekly,
        weekly_optimized=weekly_optimized,
        channel_weekly=channel_weekly,
        cohorts=cohorts,
    )


def run_scenario_grid(
    base_input: SimulationInput,
    models: Optional[Iterable[AttributionModel]] = None,
    windows: Optional[Iterable[ConversionWindow]] = None,
    saturations: Optional[Iterable[Level]] = None,
    noises: Optional[Iterable[Level]] = None,
) -> pd.DataFrame:
    """
    Pre-compute scenarios for every combination of assumptions.

    Dimensions left as None are held at the base input's value.

    Args:
        base_input: Spend and default assumptions
        models: Attribution models to compare
        windows: Conversion windows to compare
        saturations: Saturation levels to compare
        noises: Noise levels to compare

    Returns:
        DataFrame with one row per scenario
    """
    models = list(models) if models is not None else [base_input.model]
    windows = list(windows) if windows is not None else [base_input.window]
    saturations = list(saturations) if saturations is not None else [base_input.saturation]
    noises = list(noises) if noises is not None else [base_input.noise]

    records = []
    for model, window, saturation, noise in itertools.product(models, windows, saturations, noises):
        sim_input = SimulationInput(
            spend=base_input.spend,
            model=model,
            window=window,
            saturation=saturation,
            noise=noise,
        )
        result = run_scenario(sim_input)
        records.append(
            {
                "model": sim_input.model.value,
                "window": int(sim_input.window),
                "saturation": sim_input.saturation.value,
                "noise": sim_input.noise.value,
                "total_revenue": result.summary.total_revenue,
                "blended_roas": result.summary.blended_roas,
                "blended_cac": result.summary.blended_cac,
                "efficiency_gain": result.budget_summary.efficiency_gain,
                "certainty": result.outputs[0].certainty.value,
            }
        )

    logger.info(f"Computed {len(records)} scenarios")
    return pd.DataFrame(records)


def spend_response_curve(
    base_input: SimulationInput,
    channel: Channel,
    spend_range: Optional[SpendRange] = None,
) -> pd.DataFrame:
    """
    Sweep one channel's spend and record its modeled performance.

    Args:
        base_input: Input whose other assumptions are held fixed
        channel: Channel to sweep
        spend_range: Range to sweep (defaults to the channel's slider range)

    Returns:
        DataFrame indexed by spend with roas, cac, conversion and blended columns
    """
    try:
        channel = Channel(channel)
    except ValueError as e:
        raise ValueError(f"Unknown channel: {channel}") from e

    spend_range = spend_range or DEFAULT_SPEND_RANGES[channel]

    records = []
    for spend in spend_range.values():
        sim_input = base_input.with_spend(channel, float(spend))
        outputs = simulate_attribution(sim_input)
        summary = summarize_outputs(sim_input, outputs)
        output = next(o for o in outputs if o.channel == channel)
        records.append(
            {
                "spend": float(spend),
                "roas": output.roas,
                "cac": output.cac,
                "attributed_conversions": output.attributed_conversions,
                "incremental_conversions": output.incremental_conversions,
                "blended_roas": summary.blended_roas,
            }
        )

    return pd.DataFrame(records).set_index("spend")
