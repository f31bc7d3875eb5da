"""
Combo scoring: aggregate per-option stats across rounds into one unfairness score.

Higher scores are worse. Each factor adds `sum(per-team totals) * count weight`
and/or `stdev(per-team totals) * deviation weight`. After every factor the
running score is compared against `stop_if_above`, and scoring stops as soon
as it is exceeded. All components are non-negative, so a pruned (partial)
score is never higher than the full score, and it exceeds `stop_if_above`
exactly when the full score does.
"""

import math
from dataclasses import dataclass, field
from typing import Dict, List, Optional

import numpy as np

from .config import PainMultipliers
from .exceptions import ConfigurationError
from .models import Combo, OptionSet
from .stats import FACTORS, STAT_NAMES, composite_weights, factor_active, weight


@dataclass
class ScoreBreakdown:
    """Sub-score of every contributing factor plus the aggregated per-team stats"""
    components: Dict[str, float] = field(default_factory=dict)
    total: float = 0.0
    team_stats: Dict[str, List[int]] = field(default_factory=dict)
    team_matchups: List[List[int]] = field(default_factory=list)

    def to_dict(self) -> Dict:
        return {
            "components": {k: round(v, 6) for k, v in self.components.items()},
            "total": round(self.total, 6),
            "teamStats": self.team_stats,
            "teamMatchups": self.team_matchups,
        }


class ComboScorer:
    """Scores combos of one option per round. Options must already carry stats."""

    def __init__(self, option_set: OptionSet, pain: PainMultipliers):
        self.option_set = option_set
        self.pain = pain
        self.team_count = option_set.team_count
        self.round_count = option_set.round_count

        self._factors = [
            (name, spec, weight(pain, spec.count_weight), weight(pain, spec.deviation_weight))
            for name, spec in FACTORS.items()
            if factor_active(pain, spec)
        ]
        self._composite = composite_weights(pain)
        self._matchup_weight = weight(pain, "matchup_imbalance")

        # Every pair should meet about the same number of times
        pair_count = self.team_count * (self.team_count - 1) // 2
        expected = self.round_count * option_set.game_slot_count / pair_count
        self._matchup_range = (math.floor(expected), math.ceil(expected))
        self._pairs = np.triu_indices(self.team_count, 1)

    def score(self, combo: Combo, stop_if_above: float = math.inf) -> float:
        """Score a combo; returns early with a partial score once it exceeds stop_if_above."""
        return self._evaluate(combo, stop_if_above, None)

    def breakdown(self, combo: Combo) -> ScoreBreakdown:
        """Score a combo in full and report every factor's contribution."""
        result = ScoreBreakdown()
        result.total = self._evaluate(combo, math.inf, result)
        return result

    def _check_combo(self, combo: Combo) -> None:
        if len(combo) != self.round_count:
            raise ConfigurationError(f"Combo has {len(combo)} options, expected one per round ({self.round_count})")
        for r, option in enumerate(combo):
            if len(option.slot_by_team) != self.team_count:
                raise ConfigurationError(f"Option in round {r} is missing a team")
            if option.stats is None:
                raise ConfigurationError(f"Option in round {r} has no precomputed stats")

    def _evaluate(self, combo: Combo, stop_if_above: float, report: Optional[ScoreBreakdown]) -> float:
        self._check_combo(combo)

        totals: Dict[str, np.ndarray] = {}

        def total(stat: str) -> np.ndarray:
            if stat not in totals:
                totals[stat] = sum(option.stats.get(stat) for option in combo)
            return totals[stat]

        score = 0.0
        for name, spec, count_weight, deviation_weight in self._factors:
            if name == "early_late":
                # Only unfairness matters here, not counts
                component = (total("early_weeks").std() + total("late_weeks").std()) * deviation_weight / 2
            else:
                values = total(spec.stats[0])
                component = 0.0
                if count_weight is not None:
                    component += values.sum() * count_weight
                if deviation_weight is not None:
                    component += values.std() * deviation_weight
            score += component
            if report is not None:
                report.components[name] = float(component)
            if score > stop_if_above:
                return float(score)

        if self._composite:
            pain_by_team = sum(total(stat) * w for stat, w in self._composite.items())
            component = pain_by_team.std() * self.pain.uneven_team_unhappiness
            score += component
            if report is not None:
                report.components["uneven_team_unhappiness"] = float(component)
            if score > stop_if_above:
                return float(score)

        if self._matchup_weight is not None or report is not None:
            team_matchups = sum(option.stats.team_matchups for option in combo)
            if self._matchup_weight is not None:
                counts = team_matchups[self._pairs]
                low, high = self._matchup_range
                unbalanced = np.count_nonzero((counts < low) | (counts > high))
                component = unbalanced * self._matchup_weight
                score += component
                if report is not None:
                    report.components["matchup_imbalance"] = float(component)
            if report is not None:
                report.team_stats = {stat: total(stat).tolist() for stat in self._stats_present(combo)}
                report.team_matchups = team_matchups.tolist()

        return float(score)

    @staticmethod
    def _stats_present(combo: Combo) -> List[str]:
        stats = combo[0].stats
        return [name for name in STAT_NAMES if getattr(stats, name) is not None]
