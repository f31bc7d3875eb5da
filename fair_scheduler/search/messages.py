"""Messages exchanged between the parallel search coordinator and its workers."""

from dataclasses import dataclass
from typing import Optional

from ..config import Config
from ..models import OptionSet


@dataclass
class WorkerTask:
    """Everything a worker needs to scan its stride of the combo space"""
    worker_id: int
    worker_count: int
    option_set: OptionSet  # already annotated with stats
    config: Config
    start_combo_index: int
    best_score: float


# Coordinator -> worker

@dataclass
class UpdateBestScore:
    score: float


# Worker -> coordinator

@dataclass
class ComboFound:
    """A combo scoring at or below the worker's current best"""
    worker_id: int
    combo_index: int
    score: float


@dataclass
class Progress:
    worker_id: int
    evaluated: int
    best_score: float


@dataclass
class WorkerDone:
    worker_id: int
    evaluated: int
    best_score: float
    best_combo_index: Optional[int]


@dataclass
class WorkerFailed:
    worker_id: int
    error: str
    details: str
