"""
Data model for the attribution what-if simulator.

This module defines the categorical assumptions a visitor can change, the
immutable simulation input, and the plain output records produced by the
simulation stages. Every record is regenerated from a SimulationInput on each
run; nothing here is mutated after construction.
"""

import math
from enum import Enum, IntEnum
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_serializer, field_validator


class Channel(str, Enum):
    """Paid media channels, in display order."""

    META = "Meta"
    GOOGLE_SEARCH = "Google Search"
    LINKEDIN = "LinkedIn"


CHANNELS = tuple(Channel)


class AttributionModel(str, Enum):
    """Rule used to split conversion credit across channels."""

    LAST_CLICK = "last_click"
    POSITION_BASED = "position_based"
    TIME_DECAY = "time_decay"
    BAYESIAN_MMM = "bayesian_mmm"


class ConversionWindow(IntEnum):
    """Days after a touch during which a conversion is still credited."""

    DAYS_7 = 7
    DAYS_14 = 14
    DAYS_30 = 30


class Level(str, Enum):
    """Low/medium/high setting shared by saturation and noise assumptions."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class Certainty(str, Enum):
    """Categorical confidence attached to a channel estimate."""

    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


class InvalidInputError(ValueError):
    """Raised when simulation assumptions fall outside the supported domain."""


def missing_channels(keys: Iterable) -> List[str]:
    """Names of channels absent from a spend mapping or key collection."""
    present = set(keys)
    return [channel.value for channel in CHANNELS if channel not in present]


class SimulationInput(BaseModel):
    """User-adjustable assumptions for one simulation run."""

    model_config = ConfigDict(frozen=True)

    spend: Mapping[Channel, float] = Field(description="Monthly spend per channel")
    model: AttributionModel = Field(default=AttributionModel.BAYESIAN_MMM)
    window: ConversionWindow = Field(default=ConversionWindow.DAYS_30)
    saturation: Level = Field(default=Level.MEDIUM)
    noise: Level = Field(default=Level.MEDIUM)

    @field_validator("spend")
    @classmethod
    def _check_spend(cls, value: Mapping[Channel, float]) -> Mapping[Channel, float]:
        missing = missing_channels(value)
        if missing:
            raise ValueError(f"Spend is missing channels: {', '.join(missing)}")

        for channel, amount in value.items():
            if not math.isfinite(amount):
                raise ValueError(f"Spend for {channel.value} must be finite, got {amount}")
            if amount < 0:
                raise ValueError(f"Spend for {channel.value} must be non-negative, got {amount}")

        # Fixed channel order regardless of how the mapping was supplied; read-only
        return MappingProxyType({channel: float(value[channel]) for channel in CHANNELS})

    @field_serializer("spend")
    def _serialize_spend(self, value: Mapping[Channel, float]) -> Dict[Channel, float]:
        return dict(value)

    @property
    def total_spend(self) -> float:
        """Sum of spend across all channels."""
        return sum(self.spend.values())

    def with_spend(self, channel: Channel, amount: float) -> "SimulationInput":
        """Return a copy of this input with one channel's spend replaced."""
        spend = dict(self.spend)
        spend[Channel(channel)] = amount
        return SimulationInput(
            spend=spend,
            model=self.model,
            window=self.window,
            saturation=self.saturation,
            noise=self.noise,
        )


def build_input(
    spend: Dict,
    model=AttributionModel.BAYESIAN_MMM,
    window=ConversionWindow.DAYS_30,
    saturation=Level.MEDIUM,
    noise=Level.MEDIUM,
) -> SimulationInput:
    """
    Build a SimulationInput from raw values (strings, ints, enum members).

    Args:
        spend: Mapping of channel name (or Channel) to spend amount
        model: Attribution model name
        window: Conversion window in days
        saturation: Saturation level name
        noise: Noise level name

    Returns:
        Validated SimulationInput

    Raises:
        InvalidInputError: If any value is outside the supported domain
    """
    try:
        return SimulationInput(
            spend=spend,
            model=model,
            window=window,
            saturation=saturation,
            noise=noise,
        )
    except ValidationError as e:
        raise InvalidInputError(f"Invalid simulation input: {e}") from e


class ChannelOutput(BaseModel):
    """Modeled performance for a single channel."""

    model_config = ConfigDict(frozen=True)

    channel: Channel
    roas: float = Field(description="Attributed revenue / spend")
    cac: float = Field(description="Spend per modeled conversion")
    attributed_conversions: float
    incremental_conversions: float
    certainty: Certainty


class BudgetPlanRow(BaseModel):
    """Directional before/after spend for one channel."""

    model_config = ConfigDict(frozen=True)

    channel: Channel
    before: float
    after: float


class WeeklyPoint(BaseModel):
    """One synthetic week of blended ROAS and CAC."""

    model_config = ConfigDict(frozen=True)

    week: str
    roas: float
    cac: float


class ChannelWeeklyRow(BaseModel):
    """One synthetic week of ROAS per channel."""

    model_config = ConfigDict(frozen=True)

    week: str
    roas: Dict[Channel, float]


class CohortRow(BaseModel):
    """One conversion-lag bucket of the cohort table."""

    model_config = ConfigDict(frozen=True)

    bucket: str
    cumulative: float = Field(ge=0.0, le=1.0)
    incremental: float = Field(ge=0.0, le=1.0)
    note: Optional[str] = None
