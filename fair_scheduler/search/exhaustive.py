"""Single-stream exhaustive search over the cartesian product of round options."""

import itertools
import time
from typing import Iterator, List

from ..base_search import BaseSearch, SearchEvent, SearchMetadata, SearchState
from ..models import Option, SearchResult
from ..registry import registry

# How many combos to score between clock checks
_CLOCK_STRIDE = 4096


@registry.register("exhaustive")
class ExhaustiveSearch(BaseSearch):
    """
    Scores every combo in combo index order in the current process.

    Any combo scoring at or below the best so far becomes the new best, so
    among equal scores the last one in index order wins.
    """

    def _combos(self) -> Iterator[List[Option]]:
        if self.start == 0:
            # product() varies the last round fastest, matching combo index order
            return itertools.product(*self.option_set.options_by_round)
        return (self.option_set.combo_from_indices(indices) for indices in self.codec.iter_indices(self.start))

    def _search(self, state: SearchState) -> SearchResult:
        score_combo = self.scorer.score
        interval = self.config.report_interval
        next_report = time.monotonic() + interval

        for combo_index, combo in enumerate(self._combos(), self.start):
            score = score_combo(combo, state.best_score)
            state.evaluated += 1
            if score <= state.best_score:
                self.new_best(state, combo_index, score)

            if state.evaluated % _CLOCK_STRIDE == 0 and time.monotonic() >= next_report:
                next_report = time.monotonic() + interval
                self.emit(SearchEvent(kind="progress", score=state.best_score, evaluated=state.evaluated))

        return self._result(state)

    @classmethod
    def get_metadata(cls) -> SearchMetadata:
        return SearchMetadata(
            name="exhaustive",
            version="1.0",
            parallel=False,
            description="Single-process scan of every combo with early-exit scoring",
        )
