"""
Simulator configuration.

Default scenario and spend slider ranges are read from the `simulator` section of
a YAML file via MLflow ModelConfig, e.g. example_config.yaml.
"""

from typing import Dict

import numpy as np
from mlflow.models import ModelConfig
from pydantic import BaseModel, Field, model_validator

from attribution_sim.schema import (
    CHANNELS,
    AttributionModel,
    Channel,
    ConversionWindow,
    Level,
    SimulationInput,
)
from attribution_sim.series import DEFAULT_WEEK_COUNT


class SpendRange(BaseModel):
    """Range a channel's spend can be swept across."""

    min_spend: float = Field(ge=0, description="Lowest spend value")
    max_spend: float = Field(description="Highest spend value")
    step: float = Field(gt=0, description="Increment between values")

    @model_validator(mode="after")
    def _check_bounds(self):
        if self.max_spend < self.min_spend:
            raise ValueError(
                f"max_spend ({self.max_spend}) must not be below min_spend ({self.min_spend})"
            )
        return self

    def values(self) -> np.ndarray:
        """Spend values from min to max inclusive."""
        n_steps = int(np.floor((self.max_spend - self.min_spend) / self.step + 1e-9))
        return self.min_spend + self.step * np.arange(n_steps + 1)


DEFAULT_SPEND: Dict[Channel, float] = {
    Channel.META: 120000.0,
    Channel.GOOGLE_SEARCH: 90000.0,
    Channel.LINKEDIN: 60000.0,
}

DEFAULT_SPEND_RANGES: Dict[Channel, SpendRange] = {
    Channel.META: SpendRange(min_spend=20000, max_spend=250000, step=5000),
    Channel.GOOGLE_SEARCH: SpendRange(min_spend=20000, max_spend=250000, step=5000),
    Channel.LINKEDIN: SpendRange(min_spend=15000, max_spend=200000, step=5000),
}


class SimulatorConfig(BaseModel):
    """Defaults for the what-if simulator."""

    spend: Dict[Channel, float] = Field(default_factory=lambda: dict(DEFAULT_SPEND))
    model: AttributionModel = AttributionModel.BAYESIAN_MMM
    window: ConversionWindow = ConversionWindow.DAYS_30
    saturation: Level = Level.MEDIUM
    noise: Level = Level.MEDIUM
    week_count: int = Field(default=DEFAULT_WEEK_COUNT, ge=1)
    spend_ranges: Dict[Channel, SpendRange] = Field(
        default_factory=lambda: dict(DEFAULT_SPEND_RANGES)
    )

    @classmethod
    def from_config(cls, raw_config: ModelConfig) -> "SimulatorConfig":
        """
        Load configuration from MLflow ModelConfig object.

        Args:
            raw_config: MLflow ModelConfig object with a `simulator` section

        Returns:
            SimulatorConfig instance
        """
        try:
            section = raw_config.get("simulator")
        except KeyError as e:
            raise ValueError("Config is missing the 'simulator' section") from e

        defaults = section.get("defaults", {})
        spend_ranges = dict(DEFAULT_SPEND_RANGES)
        for name, bounds in section.get("spend_ranges", {}).items():
            spend_ranges[Channel(name)] = SpendRange(
                min_spend=bounds["min"],
                max_spend=bounds["max"],
                step=bounds.get("step", 5000),
            )

        return cls(
            spend=defaults.get("spend", dict(DEFAULT_SPEND)),
            model=defaults.get("model", AttributionModel.BAYESIAN_MMM),
            window=defaults.get("window", ConversionWindow.DAYS_30),
            saturation=defaults.get("saturation", Level.MEDIUM),
            noise=defaults.get("noise", Level.MEDIUM),
            week_count=section.get("week_count", DEFAULT_WEEK_COUNT),
            spend_ranges=spend_ranges,
        )

    def default_input(self) -> SimulationInput:
        """SimulationInput for the configured default scenario."""
        return SimulationInput(
            spend={ch: self.spend.get(ch, DEFAULT_SPEND[ch]) for ch in CHANNELS},
            model=self.model,
            window=self.window,
            saturation=self.saturation,
            noise=self.noise,
        )


def load_config(config_path: str) -> SimulatorConfig:
    """Load a SimulatorConfig from a YAML file."""
    return SimulatorConfig.from_config(ModelConfig(development_config=str(config_path)))
