"""
Partitioned parallel search.

The combo index space is split into W strided partitions, one per worker
process. Workers report combos at or below their local best; whenever the
global best strictly improves the coordinator broadcasts it so every
worker's pruning threshold tightens. Worker failures leave their stride
unscanned and mark the result incomplete.
"""

import logging
import multiprocessing as mp
import queue
import time
from typing import Dict, List, Set

from ..base_search import BaseSearch, SearchEvent, SearchMetadata, SearchState
from ..models import SearchResult
from ..registry import registry
from .messages import ComboFound, Progress, UpdateBestScore, WorkerDone, WorkerFailed, WorkerTask
from .worker import run_worker

logger = logging.getLogger(__name__)

# Seconds to wait on the result queue before checking worker liveness
_POLL_TIMEOUT = 0.5


@registry.register("parallel")
class ParallelSearch(BaseSearch):
    """Strided multi-process scan with best-score broadcast."""

    @property
    def worker_count(self) -> int:
        return self.config.workers

    def _search(self, state: SearchState) -> SearchResult:
        ctx = mp.get_context("spawn")
        results: mp.Queue = ctx.Queue()
        inboxes: List[mp.Queue] = [ctx.Queue() for _ in range(self.worker_count)]
        processes: Dict[int, mp.Process] = {}

        self._evaluated = [0] * self.worker_count
        self._finished: Set[int] = set()
        self._failures: Dict[int, str] = {}

        logger.info("Using %d workers", self.worker_count)
        try:
            for worker_id in range(self.worker_count):
                task = WorkerTask(
                    worker_id=worker_id,
                    worker_count=self.worker_count,
                    option_set=self.option_set,
                    config=self.config,
                    start_combo_index=self.start,
                    best_score=state.best_score,
                )
                proc = ctx.Process(target=run_worker, args=(task, inboxes[worker_id], results), daemon=True)
                proc.start()
                processes[worker_id] = proc

            next_report = time.monotonic() + self.config.report_interval
            while len(self._finished) < self.worker_count:
                try:
                    message = results.get(timeout=_POLL_TIMEOUT)
                except queue.Empty:
                    self._reap(processes, results, inboxes, state)
                else:
                    self._handle(message, inboxes, state)

                if time.monotonic() >= next_report:
                    next_report = time.monotonic() + self.config.report_interval
                    self.emit(SearchEvent(kind="progress", score=state.best_score, evaluated=state.evaluated))
        finally:
            for proc in processes.values():
                proc.join(timeout=1.0)
                if proc.is_alive():
                    proc.terminate()
                    proc.join()
            for inbox in inboxes:
                inbox.cancel_join_thread()
                inbox.close()
            results.close()

        if self._failures:
            logger.error(
                "%d of %d workers failed; their share of the combo space was not fully scanned",
                len(self._failures), self.worker_count,
            )
        result = self._result(state, complete=not self._failures)
        result.failed_workers = dict(self._failures)
        return result

    def _handle(self, message, inboxes: List[mp.Queue], state: SearchState) -> None:
        if isinstance(message, ComboFound):
            if message.score <= state.best_score:
                improved = message.score < state.best_score
                self.new_best(state, message.combo_index, message.score)
                if improved:
                    for worker_id, inbox in enumerate(inboxes):
                        if worker_id not in self._finished:
                            inbox.put(UpdateBestScore(message.score))
        elif isinstance(message, Progress):
            self._count(state, message.worker_id, message.evaluated)
        elif isinstance(message, WorkerDone):
            self._count(state, message.worker_id, message.evaluated)
            self._finished.add(message.worker_id)
        elif isinstance(message, WorkerFailed):
            logger.error("Worker %d error: %s\n%s", message.worker_id, message.error, message.details)
            self._failures[message.worker_id] = message.error
            self._finished.add(message.worker_id)

    def _count(self, state: SearchState, worker_id: int, evaluated: int) -> None:
        self._evaluated[worker_id] = evaluated
        state.evaluated = sum(self._evaluated)

    def _reap(self, processes: Dict[int, mp.Process], results: mp.Queue,
              inboxes: List[mp.Queue], state: SearchState) -> None:
        """Detect workers that exited without a final report."""
        dead = [w for w, proc in processes.items() if w not in self._finished and not proc.is_alive()]
        if not dead:
            return
        # A worker's last messages may still be buffered in the queue
        while True:
            try:
                self._handle(results.get_nowait(), inboxes, state)
            except queue.Empty:
                break
        for worker_id in dead:
            if worker_id not in self._finished:
                code = processes[worker_id].exitcode
                logger.error("Worker %d exited with code %s without reporting", worker_id, code)
                self._failures[worker_id] = f"exited with code {code}"
                self._finished.add(worker_id)

    @classmethod
    def get_metadata(cls) -> SearchMetadata:
        return SearchMetadata(
            name="parallel",
            version="1.0",
            parallel=True,
            description="Strided multi-process scan sharing the best score between workers",
        )
