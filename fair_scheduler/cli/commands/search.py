"""Search and score commands"""

from pathlib import Path
from typing import Optional

import click

from ...codec import ComboCodec
from ...scoring import ComboScorer
from ...search import build_search
from ...stats import annotate_option_set
from ...utils.error_handling import handle_cli_errors
from ...utils.option_format import load_option_set, save_search_result
from ..utils import echo_combo, format_schedule, make_reporter, resolve_config


@click.command()
@click.argument("options_file", type=click.Path(exists=True))
@click.option("--config", "-c", "config_path", type=click.Path(exists=True), help="Configuration JSON file")
@click.option("--strategy", "-s", help="Search strategy (defaults to parallel when workers > 1)")
@click.option("--workers", "-w", type=int, default=None, help="Worker processes (defaults from config)")
@click.option("--start", help="Resume from a combo: integer (commas allowed) or indices like 12-45-3")
@click.option("--best", help="Known best combo so far, same formats as --start")
@click.option("--output", "-o", type=click.Path(), help="Write the best combo as JSON")
@click.option("--quiet", "-q", is_flag=True, help="Do not print the schedule of every improved combo")
@click.option("--strict", is_flag=True, help="Fail when a worker crashed and part of the space was not scanned")
def search(
    options_file: str,
    config_path: Optional[str],
    strategy: Optional[str],
    workers: Optional[int],
    start: Optional[str],
    best: Optional[str],
    output: Optional[str],
    quiet: bool,
    strict: bool,
):
    """Find the fairest combination of round options in OPTIONS_FILE."""
    with handle_cli_errors():
        cfg = resolve_config(config_path, workers)
        option_set = load_option_set(Path(options_file))
        codec = ComboCodec.for_option_set(option_set)
        start_index = codec.parse(start) if start else 0
        seed_index = codec.parse(best) if best else None

        searcher = build_search(option_set, cfg, strategy=strategy, start=start_index, seed=seed_index)
        searcher.reporter = make_reporter(option_set, searcher.scorer, codec.total_combinations, start_index, quiet)

        click.echo(f"Evaluating {codec.total_combinations:,} combinations "
                   f"with the {searcher.get_metadata().name} strategy")
        if start_index:
            click.echo(f"Starting from combo index {start_index:,}")
        click.echo()

        result = searcher.run()

        done = result.start_combo_index + result.evaluated
        click.echo(f"Evaluated {done:,} combinations in {result.elapsed:.0f}s ({round(result.rate):,} per second)")
        if not result.complete:
            click.echo(f"Warning: {len(result.failed_workers)} worker(s) failed; search is incomplete", err=True)

        if not result.found:
            click.echo("No combination was evaluated")
        else:
            click.echo(f"The best schedule (combo #{result.best_combo_index:,}, "
                       f"{codec.format_indices(result.best_indices)}) scores {result.best_score:.3f}:")
            click.echo(format_schedule(option_set, result.best_indices))

        if output:
            save_search_result(result, option_set, Path(output))
            click.echo(f"Result saved to {output}")

        if strict:
            result.raise_if_incomplete()
        elif not result.complete:
            raise SystemExit(3)


@click.command()
@click.argument("options_file", type=click.Path(exists=True))
@click.argument("combo")
@click.option("--config", "-c", "config_path", type=click.Path(exists=True), help="Configuration JSON file")
def score(options_file: str, combo: str, config_path: Optional[str]):
    """Score one COMBO (integer or indices like 12-45-3) and show its breakdown."""
    with handle_cli_errors():
        cfg = resolve_config(config_path)
        option_set = load_option_set(Path(options_file))
        codec = ComboCodec.for_option_set(option_set)
        combo_index = codec.parse(combo)
        indices = codec.indices_from_combo_index(combo_index)

        annotate_option_set(option_set, cfg.pain, cfg.stats)
        scorer = ComboScorer(option_set, cfg.pain)
        total = scorer.score(option_set.combo_from_indices(indices))
        echo_combo(option_set, scorer, indices, combo_index, total)

        breakdown = scorer.breakdown(option_set.combo_from_indices(indices))
        for stat, values in breakdown.team_stats.items():
            click.echo(f"{stat:>15}: {values}")
