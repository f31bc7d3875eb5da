"""
Tests for option generation.
"""

import pytest

from fair_scheduler.config import ValidationRules
from fair_scheduler.exceptions import ConfigurationError, InfeasibleRoundError
from fair_scheduler.options import generate_options, generate_round_options
from fair_scheduler.round_robin import build_matchups


def test_four_team_options(four_team_options):
    """Test the small league: two orderings per round, both valid."""
    option_set = four_team_options
    assert option_set.games == build_matchups(4)
    assert option_set.round_count == 3
    assert option_set.option_counts == [2, 2, 2]
    assert option_set.team_count == 4
    assert option_set.game_slot_count == 2

    first, second = option_set.options_by_round[0]
    assert first.games == (2, 3)
    assert second.games == (3, 2)
    assert first.slot_by_team == ((0,), (1,), (1,), (0,))


def test_validation_metadata_recorded(four_team_options):
    assert four_team_options.validation["no_triple_headers"] is True
    assert four_team_options.validation["max_idle_slots"] == 2
    assert "show_failure_reasons" not in four_team_options.validation


def test_every_option_is_valid(busy_four_team_options):
    """Test that only lineups satisfying the rules are kept."""
    assert busy_four_team_options.option_counts == [24, 24]

    strict = generate_options(4, 4, 2, ValidationRules(max_slot_span=3))
    for round_options in strict.options_by_round:
        assert 0 < len(round_options) < 24
        for option in round_options:
            for slots in option.slot_by_team:
                assert slots[-1] - slots[0] + 1 <= 3


def test_infeasible_round():
    """Test that contradictory rules leave a round without options."""
    rules = ValidationRules(no_double_headers=True, no_triple_headers=False, max_idle_slots=0, max_slot_span=None)
    with pytest.raises(InfeasibleRoundError) as excinfo:
        generate_options(4, 4, 2, rules)
    assert excinfo.value.round_index == 0
    assert excinfo.value.permutations == 24


def test_round_must_cover_every_team():
    with pytest.raises(ConfigurationError, match="no games for team"):
        generate_round_options(0, [0], build_matchups(4), 4, ValidationRules())


def test_identical_rounds_share_options():
    """Test that repeated rounds are enumerated once."""
    option_set = generate_options(4, 2, 4)
    assert option_set.options_by_round[3] == option_set.options_by_round[0]


def test_parallel_generation_matches_serial(busy_four_team_options):
    parallel = generate_options(4, 4, 2, ValidationRules(), workers=2)
    assert parallel.options_by_round == busy_four_team_options.options_by_round


def test_failure_reasons_logged(caplog):
    rules = ValidationRules(max_slot_span=3, show_failure_reasons=True)
    with caplog.at_level("INFO", logger="fair_scheduler.options"):
        generate_options(4, 4, 1, rules)
    assert any("Cannot play" in record.getMessage() for record in caplog.records)
