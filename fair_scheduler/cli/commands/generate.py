"""Generate command: build the option set for a league"""

from dataclasses import replace
from pathlib import Path
from typing import Optional

import click

from ...options import generate_options
from ...utils.error_handling import handle_cli_errors
from ...utils.option_format import save_option_set
from ..utils import resolve_config


@click.command()
@click.argument("teams", type=int)
@click.argument("games_per_round", type=int)
@click.argument("rounds", type=int)
@click.option("--output", "-o", type=click.Path(), required=True, help="Where to write the option set JSON")
@click.option("--config", "-c", "config_path", type=click.Path(exists=True), help="Configuration JSON file")
@click.option("--workers", "-w", type=int, default=None, help="Rounds to enumerate in parallel (defaults from config)")
@click.option("--no-double-headers/--allow-double-headers", default=None,
              help="Reject lineups where a team plays two slots in a row")
@click.option("--no-triple-headers/--allow-triple-headers", default=None,
              help="Reject lineups where a team plays three slots in a row")
@click.option("--max-idle-slots", type=int, default=None, help="Longest allowed bye between a team's games")
@click.option("--max-slot-span", type=int, default=None, help="Most slots a team may have to stay, first to last game")
@click.option("--max-gap-instances", type=int, default=None, help="Most byes of exactly --max-idle-slots per team")
@click.option("--show-failure-reasons", is_flag=True, help="Log why each rejected lineup failed")
def generate(
    teams: int,
    games_per_round: int,
    rounds: int,
    output: str,
    config_path: Optional[str],
    workers: Optional[int],
    no_double_headers: Optional[bool],
    no_triple_headers: Optional[bool],
    max_idle_slots: Optional[int],
    max_slot_span: Optional[int],
    max_gap_instances: Optional[int],
    show_failure_reasons: bool,
):
    """Enumerate the valid lineups of every round for TEAMS teams."""
    with handle_cli_errors():
        cfg = resolve_config(config_path, workers)

        overrides = {
            "no_double_headers": no_double_headers,
            "no_triple_headers": no_triple_headers,
            "max_idle_slots": max_idle_slots,
            "max_slot_span": max_slot_span,
            "max_gap_instance_count": max_gap_instances,
        }
        rules = replace(cfg.validation, **{k: v for k, v in overrides.items() if v is not None})
        if show_failure_reasons:
            rules = replace(rules, show_failure_reasons=True)

        click.echo(f"Generating options for {teams} teams, {games_per_round} games per round, {rounds} rounds")
        option_set = generate_options(teams, games_per_round, rounds, rules, workers=cfg.workers)

        for r, count in enumerate(option_set.option_counts):
            click.echo(f"{count:,} possibilities in round {r}")
        total = 1
        for count in option_set.option_counts:
            total *= count
        click.echo(f"{total:,} possible combinations")

        save_option_set(option_set, Path(output))
        click.echo(f"Options saved to {output}")
