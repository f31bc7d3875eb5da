"""
Tests for the option set and search result files.
"""

import json

import pytest

from fair_scheduler.config import ValidationRules
from fair_scheduler.exceptions import ConfigurationError
from fair_scheduler.options import generate_options
from fair_scheduler.search import ExhaustiveSearch
from fair_scheduler.utils.option_format import (
    load_option_set,
    option_set_from_dict,
    save_option_set,
    save_search_result,
)


def test_option_file(tmp_path):
    """Test that an option set survives a trip through its file."""
    option_set = generate_options(4, 4, 2, ValidationRules(max_slot_span=3))
    path = tmp_path / "options" / "league.json"
    save_option_set(option_set, path)

    data = json.loads(path.read_text())
    assert set(data) == {"validation", "games", "optionsByRound"}
    assert data["games"][0] == [0, 1]
    assert data["validation"]["max_slot_span"] == 3
    option = data["optionsByRound"][0][0]
    assert set(option) == {"games", "slotByTeam"}

    # One option per line
    lines = path.read_text().splitlines()
    assert sum(1 for line in lines if '"slotByTeam"' in line) == sum(option_set.option_counts)

    loaded = load_option_set(path)
    assert loaded.games == option_set.games
    assert loaded.options_by_round == option_set.options_by_round
    assert loaded.validation == option_set.validation


def test_malformed_option_set(tmp_path):
    with pytest.raises(ConfigurationError, match="Malformed"):
        option_set_from_dict({"games": [[0, 1]]})
    with pytest.raises(ConfigurationError, match="Malformed game"):
        option_set_from_dict({"games": [[0, 1, 2]], "optionsByRound": [[{"games": [0], "slotByTeam": [[0]]}]]})
    with pytest.raises(ConfigurationError, match="has no options"):
        option_set_from_dict({"games": [[0, 1]], "optionsByRound": [[]]})

    path = tmp_path / "bad.json"
    path.write_text("not json")
    with pytest.raises(ConfigurationError, match="Invalid JSON"):
        load_option_set(path)


def test_search_result_file(tmp_path, four_team_options, slots_only_config):
    result = ExhaustiveSearch(four_team_options, slots_only_config).run()
    path = tmp_path / "best.json"
    save_search_result(result, four_team_options, path)

    data = json.loads(path.read_text())
    assert data["comboIndex"] == 7
    assert data["indices"] == [1, 1, 1]
    assert data["score"] == 0.0
    assert data["complete"] is True
    assert data["schedule"] == [[[1, 2], [0, 3]], [[1, 3], [0, 2]], [[2, 3], [0, 1]]]
    assert data["breakdown"]["teamStats"]["total_slots"] == [3, 3, 3, 3]
