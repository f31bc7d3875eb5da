"""
Per-option fairness statistics.

Stats are pure functions of an option and the configuration, so they are
computed once per option and reused by every combo that references it.

Which stats get computed is decided by a small dependency graph: a stat is
needed when any factor reading it has a weight, and the uneven team
unhappiness composite reads every stat with a composite weight, even if
that stat's own factor is switched off.
"""

from dataclasses import dataclass
from typing import Dict, FrozenSet, Optional, Sequence, Tuple

import numpy as np

from .config import PainMultipliers, StatsSettings
from .exceptions import ConfigurationError
from .models import Matchup, Option, OptionSet

STAT_NAMES: Tuple[str, ...] = (
    "double_headers",
    "triple_headers",
    "total_slots",
    "double_byes",
    "triple_byes",
    "early_weeks",
    "late_weeks",
)


@dataclass(frozen=True)
class FactorSpec:
    """A scoring factor: which stats it reads and which weights drive it."""
    stats: Tuple[str, ...]
    count_weight: Optional[str]
    deviation_weight: Optional[str]


# Scoring order: cheapest and most discriminating first
FACTORS: Dict[str, FactorSpec] = {
    "double_headers": FactorSpec(("double_headers",), "double_header_count", "double_header_deviation"),
    "triple_headers": FactorSpec(("triple_headers",), "triple_header_count", "triple_header_deviation"),
    "total_slots": FactorSpec(("total_slots",), "total_slot_count", "total_slots_deviation"),
    "double_byes": FactorSpec(("double_byes",), "double_bye_count", "double_bye_deviation"),
    "triple_byes": FactorSpec(("triple_byes",), "triple_bye_count", "triple_bye_deviation"),
    "early_late": FactorSpec(("early_weeks", "late_weeks"), None, "early_late_deviation"),
}

# Default weight of each stat inside the uneven team unhappiness composite
_COMPOSITE_DEFAULTS: Dict[str, Tuple[str, float]] = {
    "double_headers": ("double_header_count", 1.0),
    "triple_headers": ("triple_header_count", 1.0),
    "total_slots": ("total_slot_count", 1.0),
    "double_byes": ("double_bye_count", 1.0),
    "triple_byes": ("triple_bye_count", 1.0),
    "early_weeks": ("early_late_deviation", 0.5),
    "late_weeks": ("early_late_deviation", 0.5),
}


def weight(pain: PainMultipliers, name: Optional[str]) -> Optional[float]:
    """A multiplier's value, or None when it is absent, null or zero."""
    if name is None:
        return None
    value = getattr(pain, name)
    return value if value else None


def factor_active(pain: PainMultipliers, spec: FactorSpec) -> bool:
    return weight(pain, spec.count_weight) is not None or weight(pain, spec.deviation_weight) is not None


def composite_weights(pain: PainMultipliers) -> Dict[str, float]:
    """Per-stat weights of the uneven team unhappiness composite (empty when it is off)."""
    if not pain.uneven_team_unhappiness:
        return {}
    unknown = set(pain.unhappiness_weights) - set(STAT_NAMES)
    if unknown:
        raise ConfigurationError(f"Unknown stats in unhappiness_weights: {sorted(unknown)}")

    weights: Dict[str, float] = {}
    for stat, (multiplier, scale) in _COMPOSITE_DEFAULTS.items():
        if stat in pain.unhappiness_weights:
            value = pain.unhappiness_weights[stat]
        else:
            base = weight(pain, multiplier)
            value = base * scale if base is not None else None
        if value:
            weights[stat] = value
    return weights


def required_stats(pain: PainMultipliers) -> FrozenSet[str]:
    """Resolve the stat dependency graph for a set of multipliers."""
    needed = set()
    for spec in FACTORS.values():
        if factor_active(pain, spec):
            needed.update(spec.stats)
    needed.update(composite_weights(pain))
    return frozenset(needed)


@dataclass
class OptionStats:
    """Per-team stat arrays for one option; None when not required."""
    team_matchups: np.ndarray
    double_headers: Optional[np.ndarray] = None
    triple_headers: Optional[np.ndarray] = None
    total_slots: Optional[np.ndarray] = None
    double_byes: Optional[np.ndarray] = None
    triple_byes: Optional[np.ndarray] = None
    early_weeks: Optional[np.ndarray] = None
    late_weeks: Optional[np.ndarray] = None

    def get(self, stat: str) -> np.ndarray:
        values = getattr(self, stat)
        if values is None:
            raise ConfigurationError(f"Stat '{stat}' was not computed for this option")
        return values


def _count_gaps(slots: Sequence[int], min_idle: int) -> int:
    return sum(1 for i in range(len(slots) - 1) if slots[i + 1] - slots[i] - 1 >= min_idle)


def calculate_stats(
    option: Option,
    games: Sequence[Matchup],
    team_count: int,
    game_slot_count: int,
    required: FrozenSet[str],
    settings: StatsSettings,
) -> OptionStats:
    slot_by_team = option.slot_by_team
    if len(slot_by_team) != team_count:
        raise ConfigurationError(
            f"Option {list(option.games)} has slots for {len(slot_by_team)} teams, expected {team_count}"
        )
    idle = [team for team, slots in enumerate(slot_by_team) if not slots]
    if idle:
        raise ConfigurationError(f"Option {list(option.games)} has no games for team(s) {idle}")

    def per_team(fn) -> np.ndarray:
        return np.array([fn(slots) for slots in slot_by_team], dtype=np.int64)

    team_matchups = np.zeros((team_count, team_count), dtype=np.int64)
    for game_index in option.games:
        a, b = games[game_index]
        team_matchups[a, b] += 1
        team_matchups[b, a] += 1
    stats = OptionStats(team_matchups=team_matchups)

    if "double_headers" in required:
        stats.double_headers = per_team(
            lambda s: sum(1 for i in range(len(s) - 1) if s[i + 1] - s[i] == 1))

    if "triple_headers" in required:
        stats.triple_headers = per_team(
            lambda s: sum(1 for i in range(len(s) - 2) if s[i + 1] - s[i] == 1 and s[i + 2] - s[i + 1] == 1))

    if "total_slots" in required:
        stats.total_slots = per_team(lambda s: s[-1] - s[0] + 1)

    if "double_byes" in required:
        stats.double_byes = per_team(lambda s: _count_gaps(s, settings.double_bye_idle_slots))

    if "triple_byes" in required:
        stats.triple_byes = per_team(lambda s: _count_gaps(s, settings.triple_bye_idle_slots))

    # Whether a team plays early/late at all this round, not how often
    k = settings.early_late_slots
    if "early_weeks" in required:
        stats.early_weeks = per_team(lambda s: int(s[0] < k))
    if "late_weeks" in required:
        stats.late_weeks = per_team(lambda s: int(s[-1] >= game_slot_count - k))

    return stats


def annotate_option_set(option_set: OptionSet, pain: PainMultipliers,
                        settings: Optional[StatsSettings] = None) -> FrozenSet[str]:
    """Compute stats for every option in place. Returns the computed stat names."""
    settings = settings or StatsSettings()
    required = required_stats(pain)
    team_count = option_set.team_count
    game_slot_count = option_set.game_slot_count
    for round_options in option_set.options_by_round:
        for option in round_options:
            option.stats = calculate_stats(
                option, option_set.games, team_count, game_slot_count, required, settings
            )
    return required
