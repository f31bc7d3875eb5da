"""
Option set and search result file format.

An option set is stored as JSON:

    {
      "validation": {...},
      "games": [[0, 1], [0, 2], ...],
      "optionsByRound": [
        [
          {"games": [4, 7, 9], "slotByTeam": [[0], [1], ...]},
          ...
        ],
        ...
      ]
    }

Each option is written on a single line to keep large files readable.
"""

from typing import List, Optional, Dict, Any
import json
from pathlib import Path

from ..exceptions import ConfigurationError
from ..models import Option, OptionSet, SearchResult


def option_to_dict(option: Option) -> Dict[str, Any]:
    return {
        "games": list(option.games),
        "slotByTeam": [list(slots) for slots in option.slot_by_team],
    }


def option_from_dict(data: Dict[str, Any]) -> Option:
    return Option(
        games=tuple(data["games"]),
        slot_by_team=tuple(tuple(slots) for slots in data["slotByTeam"]),
    )


def option_set_from_dict(data: Dict[str, Any]) -> OptionSet:
    try:
        games = [tuple(game) for game in data["games"]]
        options_by_round = [
            [option_from_dict(option) for option in round_options]
            for round_options in data["optionsByRound"]
        ]
    except (KeyError, TypeError) as e:
        raise ConfigurationError(f"Malformed option set: {e}") from e
    for game in games:
        if len(game) != 2:
            raise ConfigurationError(f"Malformed game {list(game)}: expected a pair of teams")
    return OptionSet(games=games, options_by_round=options_by_round, validation=data.get("validation", {}))


def load_option_set(path: Path) -> OptionSet:
    """Load an option set from a JSON file"""
    try:
        with open(path, "r") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Invalid JSON in {path}: {e}") from e
    return option_set_from_dict(data)


def save_option_set(option_set: OptionSet, path: Path) -> None:
    """Save an option set with one option per line"""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    lines = ["{"]
    lines.append(f'  "validation": {json.dumps(option_set.validation)},')
    lines.append(f'  "games": {json.dumps([list(g) for g in option_set.games])},')
    lines.append('  "optionsByRound": [')
    round_blocks = []
    for round_options in option_set.options_by_round:
        option_lines = ",\n".join(
            f"      {json.dumps(option_to_dict(option), separators=(',', ':'))}"
            for option in round_options
        )
        round_blocks.append("    [\n" + option_lines + "\n    ]")
    lines.append(",\n".join(round_blocks))
    lines.append("  ]")
    lines.append("}")

    with open(path, "w") as f:
        f.write("\n".join(lines) + "\n")


def search_result_to_dict(result: SearchResult, option_set: OptionSet) -> Dict[str, Any]:
    schedule: Optional[List] = None
    if result.best_indices is not None:
        combo = option_set.combo_from_indices(result.best_indices)
        schedule = [[list(pair) for pair in round_games] for round_games in option_set.schedule_for(combo)]
    return {
        "strategy": result.strategy,
        "comboIndex": result.best_combo_index,
        "indices": result.best_indices,
        "score": result.best_score if result.found else None,
        "breakdown": result.breakdown.to_dict() if result.breakdown else None,
        "schedule": schedule,
        "evaluated": result.evaluated,
        "totalCombinations": result.total_combinations,
        "startComboIndex": result.start_combo_index,
        "elapsed": round(result.elapsed, 3),
        "complete": result.complete,
        "failedWorkers": {str(w): msg for w, msg in result.failed_workers.items()},
    }


def save_search_result(result: SearchResult, option_set: OptionSet, path: Path) -> None:
    """Save the best combo, its schedule and score breakdown as JSON"""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        json.dump(search_result_to_dict(result, option_set), f, indent=2)
