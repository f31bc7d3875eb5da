"""CLI utilities shared by the commands"""

import json
from dataclasses import replace
from pathlib import Path
from typing import Optional, List

import click

from ..base_search import SearchEvent
from ..codec import ComboCodec
from ..config import Config, load_config
from ..models import OptionSet
from ..scoring import ComboScorer
from ..utils.logging_setup import setup_logging


def resolve_config(config_path: Optional[str], workers: Optional[int] = None) -> Config:
    """Load configuration, apply CLI overrides and set up logging."""
    cfg = load_config(Path(config_path) if config_path else None)
    if workers is not None:
        cfg = replace(cfg, workers=workers)
    setup_logging(cfg.log_level, cfg.log_file)
    return cfg


def format_schedule(option_set: OptionSet, indices: List[int]) -> str:
    combo = option_set.combo_from_indices(indices)
    rows = [json.dumps([list(pair) for pair in round_games]) for round_games in option_set.schedule_for(combo)]
    return "[" + ",\n ".join(rows) + "]"


def echo_combo(option_set: OptionSet, scorer: ComboScorer, indices: List[int],
               combo_index: int, score: float) -> None:
    click.echo(f"Combo #{combo_index:,} ({ComboCodec.format_indices(indices)}) has a score of {score:.3f}")
    click.echo(format_schedule(option_set, indices))
    breakdown = scorer.breakdown(option_set.combo_from_indices(indices))
    components = ", ".join(f"{name}: {value:.3f}" for name, value in breakdown.components.items())
    click.echo(f"  {components}")
    click.echo()


def make_reporter(option_set: OptionSet, scorer: ComboScorer, total: int, start: int, quiet: bool):
    """Build a search reporter that prints every new best combo."""

    def report(event: SearchEvent) -> None:
        if event.kind == "progress":
            done = start + event.evaluated
            click.echo(
                f"...evaluated {done:,}/{total:,} ({done * 100 / total:.1f}%); "
                f"best score so far: {event.score:.3f}"
            )
        elif quiet:
            click.echo(f"Combo #{event.combo_index:,} has a score of {event.score:.3f}")
        else:
            if event.kind == "seed":
                click.echo("Starting with best combo found so far:")
            echo_combo(option_set, scorer, event.indices, event.combo_index, event.score)

    return report
