"""
Pytest configuration and fixtures for simulator tests.
"""

import pytest

from attribution_sim.schema import (
    AttributionModel,
    Channel,
    ConversionWindow,
    Level,
    SimulationInput,
)


@pytest.fixture
def default_spend():
    """Spend the page opens with."""
    return {
        Channel.META: 120000.0,
        Channel.GOOGLE_SEARCH: 90000.0,
        Channel.LINKEDIN: 60000.0,
    }


@pytest.fixture
def default_input(default_spend):
    """Default scenario: Bayesian MMM, 30-day window, medium saturation and noise."""
    return SimulationInput(
        spend=default_spend,
        model=AttributionModel.BAYESIAN_MMM,
        window=ConversionWindow.DAYS_30,
        saturation=Level.MEDIUM,
        noise=Level.MEDIUM,
    )


@pytest.fixture
def zero_spend_input():
    """Scenario with no spend on any channel."""
    return SimulationInput(
        spend={Channel.META: 0, Channel.GOOGLE_SEARCH: 0, Channel.LINKEDIN: 0},
        model=AttributionModel.LAST_CLICK,
        window=ConversionWindow.DAYS_7,
        saturation=Level.LOW,
        noise=Level.HIGH,
    )


@pytest.fixture
def spend_distributions():
    """Assorted spend mixes, including lopsided and single-channel ones."""
    return [
        {Channel.META: 120000, Channel.GOOGLE_SEARCH: 90000, Channel.LINKEDIN: 60000},
        {Channel.META: 250000, Channel.GOOGLE_SEARCH: 20000, Channel.LINKEDIN: 15000},
        {Channel.META: 20000, Channel.GOOGLE_SEARCH: 250000, Channel.LINKEDIN: 15000},
        {Channel.META: 20000, Channel.GOOGLE_SEARCH: 20000, Channel.LINKEDIN: 200000},
        {Channel.META: 45000, Channel.GOOGLE_SEARCH: 55000, Channel.LINKEDIN: 0},
        {Channel.META: 100000, Channel.GOOGLE_SEARCH: 0, Channel.LINKEDIN: 0},
        {Channel.META: 0, Channel.GOOGLE_SEARCH: 0, Channel.LINKEDIN: 5000},
        {Channel.META: 1, Channel.GOOGLE_SEARCH: 1, Channel.LINKEDIN: 1},
    ]
