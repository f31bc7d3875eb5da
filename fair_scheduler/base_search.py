"""Base search interface for all combo search strategies"""

import logging
import math
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, List, Optional

from .codec import ComboCodec
from .config import Config
from .models import OptionSet, SearchResult
from .scoring import ComboScorer
from .stats import annotate_option_set

logger = logging.getLogger(__name__)


@dataclass
class SearchMetadata:
    """Metadata about a search strategy"""
    name: str
    version: str
    parallel: bool = False
    description: str = ""


@dataclass
class SearchEvent:
    """Notice emitted while searching"""
    kind: str  # "seed", "best" or "progress"
    score: float
    evaluated: int = 0
    combo_index: Optional[int] = None
    indices: Optional[List[int]] = None


Reporter = Callable[[SearchEvent], None]


@dataclass
class SearchState:
    """Running best while a search is in progress"""
    best_score: float = math.inf
    best_combo_index: Optional[int] = None
    evaluated: int = 0
    improvements: int = 0


class BaseSearch(ABC):
    """
    Abstract base class for combo searches.

    Annotates the option set with stats, seeds the best score from a known
    combo when given, and delegates the scan itself to subclasses.
    """

    def __init__(
        self,
        option_set: OptionSet,
        config: Config,
        start: int = 0,
        seed: Optional[int] = None,
        reporter: Optional[Reporter] = None,
    ):
        self.option_set = option_set
        self.config = config
        self.codec = ComboCodec.for_option_set(option_set)
        self.start = self.codec.check_index(start) if start else 0
        self.seed = self.codec.check_index(seed) if seed is not None else None
        self.reporter = reporter
        self.start_time: Optional[float] = None

        annotate_option_set(option_set, config.pain, config.stats)
        self.scorer = ComboScorer(option_set, config.pain)

    @property
    def total_combinations(self) -> int:
        return self.codec.total_combinations

    def emit(self, event: SearchEvent) -> None:
        if self.reporter is not None:
            self.reporter(event)
        elif event.kind == "progress":
            done = self.start + event.evaluated
            logger.info(
                "...evaluated %s/%s (%.1f%%); best score so far: %.3f",
                f"{done:,}", f"{self.total_combinations:,}",
                done * 100 / self.total_combinations, event.score,
            )
        else:
            logger.info(
                "Combo #%s (%s) has a score of %.3f",
                f"{event.combo_index:,}", self.codec.format_indices(event.indices), event.score,
            )

    def new_best(self, state: SearchState, combo_index: int, score: float) -> None:
        state.best_score = score
        state.best_combo_index = combo_index
        state.improvements += 1
        self.emit(SearchEvent(
            kind="best", score=score, evaluated=state.evaluated, combo_index=combo_index,
            indices=self.codec.indices_from_combo_index(combo_index),
        ))

    def _seed_state(self) -> SearchState:
        state = SearchState()
        if self.seed is not None:
            indices = self.codec.indices_from_combo_index(self.seed)
            state.best_score = self.scorer.score(self.option_set.combo_from_indices(indices))
            state.best_combo_index = self.seed
            self.emit(SearchEvent(kind="seed", score=state.best_score, combo_index=self.seed, indices=indices))
        return state

    def run(self) -> SearchResult:
        """Scan every combo from `start` onwards and return the best one found."""
        self.start_time = time.time()
        logger.info(
            "Evaluating %s combinations with %s%s",
            f"{self.total_combinations:,}", self.get_metadata().name,
            f" starting from combo index {self.start:,}" if self.start else "",
        )
        state = self._seed_state()
        result = self._search(state)
        result.elapsed = time.time() - self.start_time
        result.strategy = self.get_metadata().name

        if result.best_combo_index is not None:
            result.best_indices = self.codec.indices_from_combo_index(result.best_combo_index)
            result.breakdown = self.scorer.breakdown(self.option_set.combo_from_indices(result.best_indices))

        logger.info(
            "Evaluated %s combinations in %.0fs (%s per second)",
            f"{result.evaluated:,}", result.elapsed, f"{round(result.rate):,}",
        )
        return result

    def _result(self, state: SearchState, complete: bool = True) -> SearchResult:
        return SearchResult(
            best_indices=None,
            best_combo_index=state.best_combo_index,
            best_score=state.best_score,
            evaluated=state.evaluated,
            total_combinations=self.total_combinations,
            start_combo_index=self.start,
            improvements=state.improvements,
            complete=complete,
        )

    @abstractmethod
    def _search(self, state: SearchState) -> SearchResult:
        """Scan the combo space, updating `state`, and build the result."""
        pass

    @classmethod
    @abstractmethod
    def get_metadata(cls) -> SearchMetadata:
        """Return metadata about this strategy."""
        pass
