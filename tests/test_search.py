"""
Tests for the exhaustive and parallel searches.
"""

import queue
from dataclasses import replace

import pytest

from fair_scheduler.base_search import SearchState
from fair_scheduler.exceptions import ComboIndexError, ConfigurationError, IncompleteSearchError
from fair_scheduler.registry import registry
from fair_scheduler.search import ExhaustiveSearch, ParallelSearch, find_best_combo
from fair_scheduler.search.messages import ComboFound, UpdateBestScore
from fair_scheduler.search.worker import _drain_inbox, first_index


def all_scores(option_set, search):
    """Full score of every combo, in combo index order."""
    codec = search.codec
    return [
        search.scorer.score(option_set.combo_from_indices(codec.indices_from_combo_index(i)))
        for i in range(codec.total_combinations)
    ]


def test_four_team_scenario(four_team_options, slots_only_config):
    """Test that every team can be given the same total slot count."""
    result = ExhaustiveSearch(four_team_options, slots_only_config).run()

    assert result.complete
    assert result.evaluated == 8
    assert result.total_combinations == 8
    assert result.best_score == 0.0
    assert result.breakdown.team_stats["total_slots"] == [3, 3, 3, 3]
    assert result.strategy == "exhaustive"


def test_ties_keep_the_last_combo(four_team_options, slots_only_config):
    """Test that a combo scoring equal to the best replaces it."""
    result = ExhaustiveSearch(four_team_options, slots_only_config).run()
    assert result.best_combo_index == 7
    assert result.best_indices == [1, 1, 1]
    assert result.improvements == 8


def test_exhaustive_finds_minimum(busy_four_team_options, default_config):
    search = ExhaustiveSearch(busy_four_team_options, default_config)
    result = search.run()
    scores = all_scores(busy_four_team_options, search)

    best = min(scores)
    assert result.best_score == best
    assert result.best_combo_index == max(i for i, s in enumerate(scores) if s == best)
    assert result.evaluated == 576
    assert result.breakdown.total == pytest.approx(best)


def test_resume_from_start(busy_four_team_options, default_config):
    search = ExhaustiveSearch(busy_four_team_options, default_config, start=100)
    result = search.run()
    scores = all_scores(busy_four_team_options, search)

    assert result.evaluated == 476
    assert result.start_combo_index == 100
    assert result.best_score == min(scores[100:])
    assert result.best_combo_index >= 100


def test_seed_sets_initial_best(busy_four_team_options, default_config):
    """Test that a known best combo is scored first and reported."""
    full = ExhaustiveSearch(busy_four_team_options, default_config).run()
    events = []

    last = full.total_combinations - 1
    search = ExhaustiveSearch(busy_four_team_options, default_config, start=last,
                              seed=full.best_combo_index, reporter=events.append)
    result = search.run()

    assert events[0].kind == "seed"
    assert events[0].combo_index == full.best_combo_index
    assert result.evaluated == 1
    assert result.best_score == full.best_score


def test_bad_start_rejected(four_team_options, default_config):
    with pytest.raises(ComboIndexError, match="out of range"):
        ExhaustiveSearch(four_team_options, default_config, start=8)


def test_first_index():
    """Test that worker strides cover every index from start exactly once."""
    for worker_count in (1, 2, 3, 5):
        for start in (0, 1, 7, 10):
            covered = []
            for worker_id in range(worker_count):
                covered.extend(range(first_index(worker_id, worker_count, start), 40, worker_count))
            assert sorted(covered) == list(range(start, 40))


def test_single_worker_matches_exhaustive(busy_four_team_options, default_config):
    exhaustive = ExhaustiveSearch(busy_four_team_options, default_config).run()
    parallel = ParallelSearch(busy_four_team_options, default_config).run()

    assert parallel.complete
    assert parallel.best_score == exhaustive.best_score
    assert parallel.best_combo_index == exhaustive.best_combo_index
    assert parallel.best_indices == exhaustive.best_indices
    assert parallel.evaluated == exhaustive.evaluated


@pytest.mark.parametrize("workers", [2, 3])
def test_parallel_finds_same_score(busy_four_team_options, default_config, workers):
    exhaustive = ExhaustiveSearch(busy_four_team_options, default_config).run()
    config = replace(default_config, workers=workers)
    parallel = ParallelSearch(busy_four_team_options, config, start=10).run()

    assert parallel.complete
    assert parallel.evaluated == 566
    assert parallel.best_score == exhaustive.best_score


def test_worker_failure_marks_result_incomplete(busy_four_team_options, default_config):
    """Test that a crashed worker is reported instead of silently skipped."""
    config = replace(default_config, workers=2)
    search = ParallelSearch(busy_four_team_options, config)
    # Options without stats make the scorer raise inside the workers
    busy_four_team_options.options_by_round[0][1].stats = None

    result = search.run()

    assert not result.complete
    assert sorted(result.failed_workers) == [0, 1]
    assert "no precomputed stats" in result.failed_workers[0]
    assert result.evaluated < result.total_combinations
    with pytest.raises(IncompleteSearchError):
        result.raise_if_incomplete()


def test_registry():
    assert registry.list_strategies() == ["exhaustive", "parallel"]
    assert registry.default_strategy(1) == "exhaustive"
    assert registry.default_strategy(4) == "parallel"
    assert registry.get_metadata("parallel").parallel


def test_find_best_combo(four_team_options, slots_only_config):
    result = find_best_combo(four_team_options, slots_only_config)
    assert result.strategy == "exhaustive"
    assert result.best_score == 0.0

    with pytest.raises(ConfigurationError, match="Unknown search strategy"):
        find_best_combo(four_team_options, slots_only_config, strategy="random")


class ListInbox:
    """Stands in for a worker's inbox queue."""

    def __init__(self):
        self.messages = []

    def put(self, message):
        self.messages.append(message)


def test_worker_keeps_tightest_threshold():
    """Test that a worker only ever lowers its pruning threshold."""
    inbox = queue.Queue()
    inbox.put(UpdateBestScore(5.0))
    inbox.put(UpdateBestScore(3.0))
    inbox.put(UpdateBestScore(3.5))
    assert _drain_inbox(inbox, 4.0) == 3.0
    assert inbox.empty()

    inbox.put(UpdateBestScore(6.0))
    assert _drain_inbox(inbox, 4.0) == 4.0
    assert _drain_inbox(queue.Queue(), 4.0) == 4.0


def test_coordinator_broadcasts_strict_improvements(busy_four_team_options, default_config):
    """Test that only a strictly better global best reaches the running workers."""
    search = ParallelSearch(busy_four_team_options, replace(default_config, workers=3))
    search._evaluated = [0, 0, 0]
    search._finished = {2}
    search._failures = {}
    inboxes = [ListInbox(), ListInbox(), ListInbox()]
    state = SearchState(best_score=5.0)

    search._handle(ComboFound(0, 10, 4.0), inboxes, state)
    assert state.best_score == 4.0
    assert state.best_combo_index == 10
    assert [len(inbox.messages) for inbox in inboxes] == [1, 1, 0]
    assert inboxes[1].messages[0] == UpdateBestScore(4.0)

    # A tie is adopted but not broadcast
    search._handle(ComboFound(1, 20, 4.0), inboxes, state)
    assert state.best_combo_index == 20
    assert [len(inbox.messages) for inbox in inboxes] == [1, 1, 0]

    search._handle(ComboFound(0, 30, 6.0), inboxes, state)
    assert state.best_score == 4.0
    assert state.best_combo_index == 20
    assert state.improvements == 2
    assert [len(inbox.messages) for inbox in inboxes] == [1, 1, 0]
