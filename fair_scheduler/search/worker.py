"""
Worker process for the parallel search.

Worker w of W scans combo indices i >= start with i % W == w. It never
blocks on the coordinator: best-score updates are drained from its inbox
whenever it reports progress, and until then it prunes with the last
threshold it knew about.
"""

import queue
import time
import traceback

from ..codec import ComboCodec
from ..scoring import ComboScorer
from .messages import ComboFound, Progress, UpdateBestScore, WorkerDone, WorkerFailed, WorkerTask

# How many combos to score between clock checks
_CLOCK_STRIDE = 1024


def first_index(worker_id: int, worker_count: int, start: int) -> int:
    """Smallest combo index >= start assigned to this worker."""
    return start + (worker_id - start) % worker_count


def _drain_inbox(inbox, best_score: float) -> float:
    while True:
        try:
            message = inbox.get_nowait()
        except queue.Empty:
            return best_score
        if isinstance(message, UpdateBestScore) and message.score < best_score:
            best_score = message.score


def scan(task: WorkerTask, inbox, results) -> None:
    option_set = task.option_set
    options_by_round = option_set.options_by_round
    codec = ComboCodec.for_option_set(option_set)
    score_combo = ComboScorer(option_set, task.config.pain).score
    interval = task.config.progress_interval

    best_score = task.best_score
    best_combo_index = None
    evaluated = 0
    next_sync = time.monotonic() + interval

    start = first_index(task.worker_id, task.worker_count, task.start_combo_index)
    for combo_index in range(start, codec.total_combinations, task.worker_count):
        indices = codec.indices_from_combo_index(combo_index)
        combo = [options_by_round[r][i] for r, i in enumerate(indices)]
        score = score_combo(combo, best_score)
        evaluated += 1

        if score <= best_score:
            best_score = score
            best_combo_index = combo_index
            results.put(ComboFound(task.worker_id, combo_index, score))

        if evaluated % _CLOCK_STRIDE == 0 and time.monotonic() >= next_sync:
            next_sync = time.monotonic() + interval
            results.put(Progress(task.worker_id, evaluated, best_score))
            best_score = _drain_inbox(inbox, best_score)

    results.put(WorkerDone(task.worker_id, evaluated, best_score, best_combo_index))


def run_worker(task: WorkerTask, inbox, results) -> None:
    """Process entry point; failures are reported to the coordinator, not raised."""
    try:
        scan(task, inbox, results)
    except Exception as exc:
        results.put(WorkerFailed(task.worker_id, repr(exc), traceback.format_exc()))
