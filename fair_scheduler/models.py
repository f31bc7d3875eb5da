"""
Data models for the fair scheduler.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Dict, Any, Tuple, Sequence, TYPE_CHECKING

from .exceptions import ConfigurationError, IncompleteSearchError

if TYPE_CHECKING:
    from .stats import OptionStats
    from .scoring import ScoreBreakdown


Matchup = Tuple[int, int]


@dataclass
class Option:
    """One valid assignment of a round's matchups to time slots."""
    games: Tuple[int, ...]
    slot_by_team: Tuple[Tuple[int, ...], ...]
    stats: Optional["OptionStats"] = field(default=None, compare=False, repr=False)

    def matchups(self, games: Sequence[Matchup]) -> List[Matchup]:
        """Resolve matchup indices into team pairs, in slot order."""
        return [games[g] for g in self.games]


Combo = Sequence[Option]


@dataclass
class OptionSet:
    """
    The global matchup list plus every valid option of every round.

    This is the artifact handed from option generation to the search stage.
    """
    games: List[Matchup]
    options_by_round: List[List[Option]]
    validation: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if not self.games:
            raise ConfigurationError("Option set has no games")
        if not self.options_by_round:
            raise ConfigurationError("Option set has no rounds")
        for r, round_options in enumerate(self.options_by_round):
            if not round_options:
                raise ConfigurationError(f"Round {r} has no options")

    @property
    def team_count(self) -> int:
        return max(team for game in self.games for team in game) + 1

    @property
    def game_slot_count(self) -> int:
        return len(self.options_by_round[0][0].games)

    @property
    def round_count(self) -> int:
        return len(self.options_by_round)

    @property
    def option_counts(self) -> List[int]:
        return [len(round_options) for round_options in self.options_by_round]

    def combo_from_indices(self, indices: Sequence[int]) -> List[Option]:
        return [self.options_by_round[r][i] for r, i in enumerate(indices)]

    def schedule_for(self, combo: Combo) -> List[List[Matchup]]:
        """Team pairs per round, in slot order."""
        return [option.matchups(self.games) for option in combo]


@dataclass
class SearchResult:
    """Outcome of a combo search"""
    best_indices: Optional[List[int]]
    best_combo_index: Optional[int]
    best_score: float
    evaluated: int
    total_combinations: int
    start_combo_index: int = 0
    elapsed: float = 0.0
    improvements: int = 0
    strategy: str = ""
    complete: bool = True
    failed_workers: Dict[int, str] = field(default_factory=dict)
    breakdown: Optional["ScoreBreakdown"] = None

    @property
    def found(self) -> bool:
        return self.best_indices is not None

    @property
    def rate(self) -> float:
        return self.evaluated / self.elapsed if self.elapsed > 0 else 0.0

    def raise_if_incomplete(self) -> None:
        if not self.complete:
            failed = ", ".join(f"worker {w}: {msg}" for w, msg in sorted(self.failed_workers.items()))
            raise IncompleteSearchError(
                f"Search did not cover the whole combo space ({failed or 'unknown failure'})"
            )
