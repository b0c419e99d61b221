"""
Marketing Attribution What-If Simulator.

This package provides:
1. Deterministic channel performance simulation under attribution assumptions
2. Directional budget reallocation plans
3. Seeded synthetic weekly series, optimized and per-channel projections
4. Cohort lag tables and scenario comparison utilities
"""

from attribution_sim.attribution import BlendedSummary, simulate_attribution, summarize_outputs
from attribution_sim.budget import (
    BudgetPlanSummary,
    derive_budget_plan,
    efficiency_gain,
    summarize_budget_plan,
)
from attribution_sim.cohorts import build_cohort_curve
from attribution_sim.config import SimulatorConfig, SpendRange, load_config
from attribution_sim.lcg import LinearCongruentialGenerator
from attribution_sim.scenario import (
    ScenarioResult,
    run_scenario,
    run_scenario_grid,
    spend_response_curve,
)
from attribution_sim.schema import (
    CHANNELS,
    AttributionModel,
    BudgetPlanRow,
    Certainty,
    Channel,
    ChannelOutput,
    ChannelWeeklyRow,
    CohortRow,
    ConversionWindow,
    InvalidInputError,
    Level,
    SimulationInput,
    WeeklyPoint,
    build_input,
)
from attribution_sim.series import (
    generate_weekly_series,
    project_channel_series,
    project_optimized_series,
)

__version__ = "0.1.0"

__all__ = [
    # Schema
    "CHANNELS",
    "AttributionModel",
    "BudgetPlanRow",
    "Certainty",
    "Channel",
    "ChannelOutput",
    "ChannelWeeklyRow",
    "CohortRow",
    "ConversionWindow",
    "InvalidInputError",
    "Level",
    "SimulationInput",
    "WeeklyPoint",
    "build_input",
    # Simulation
    "BlendedSummary",
    "simulate_attribution",
    "summarize_outputs",
    # Budget
    "BudgetPlanSummary",
    "derive_budget_plan",
    "efficiency_gain",
    "summarize_budget_plan",
    # Series
    "LinearCongruentialGenerator",
    "generate_weekly_series",
    "project_channel_series",
    "project_optimized_series",
    # Cohorts
    "build_cohort_curve",
    # Scenarios
    "ScenarioResult",
    "run_scenario",
    "run_scenario_grid",
    "spend_response_curve",
    # Config
    "SimulatorConfig",
    "SpendRange",
    "load_config",
]
