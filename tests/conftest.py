"""Shared fixtures for the fair scheduler tests."""

import pytest

from fair_scheduler.config import Config, PainMultipliers, ValidationRules
from fair_scheduler.options import generate_options


@pytest.fixture
def four_team_options():
    """4 teams, 2 games per round, 3 rounds: every team plays once per round."""
    return generate_options(4, 2, 3, ValidationRules())


@pytest.fixture
def busy_four_team_options():
    """4 teams, 4 games per round, 2 rounds: 24 options per round, 576 combos."""
    return generate_options(4, 4, 2, ValidationRules())


@pytest.fixture
def default_config():
    return Config(workers=1, progress_interval=0.05, report_interval=0.05)


@pytest.fixture
def slots_only_config():
    return Config(
        pain=PainMultipliers.disabled(total_slots_deviation=1.0),
        workers=1,
        progress_interval=0.05,
        report_interval=0.05,
    )
