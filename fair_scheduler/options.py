"""
Option repository: every valid lineup of every round.

For each round all orderings of the round's matchups are enumerated and
validated; the valid ones become that round's options. A round without a
single valid option makes the whole configuration infeasible.
"""

import logging
import time
from concurrent.futures import ProcessPoolExecutor, as_completed
from dataclasses import asdict
from typing import Dict, List, Optional, Sequence, Tuple

from .config import ValidationRules
from .exceptions import ConfigurationError, InfeasibleRoundError
from .models import Matchup, Option, OptionSet
from .permutations import Permutations
from .round_robin import build_matchups, partition_rounds
from .validator import LineupValidator

logger = logging.getLogger(__name__)

# How many permutations to examine between clock checks
_CLOCK_STRIDE = 4096


def _check_round_covers_teams(round_index: int, round_games: Sequence[int],
                              games: Sequence[Matchup], team_count: int) -> None:
    present = {team for g in round_games for team in games[g]}
    missing = sorted(set(range(team_count)) - present)
    if missing:
        raise ConfigurationError(
            f"Round {round_index} has no games for team(s) {missing}; every team must play in every round"
        )


def generate_round_options(
    round_index: int,
    round_games: Sequence[int],
    games: Sequence[Matchup],
    team_count: int,
    rules: ValidationRules,
    progress_interval: float = 10.0,
) -> List[Option]:
    """
    Enumerate and validate all orderings of one round's matchups.

    Args:
        round_index: Position of the round (for messages only)
        round_games: Matchup indices played in this round
        games: Global matchup list
        team_count: Number of teams
        rules: Validation rules
        progress_interval: Seconds between progress log lines

    Returns:
        The valid options, in enumeration order

    Raises:
        ConfigurationError: if some team does not play in the round
        InfeasibleRoundError: if no ordering satisfies the rules
    """
    _check_round_covers_teams(round_index, round_games, games, team_count)

    validator = LineupValidator(games, team_count, rules)
    permutations = Permutations(round_games)
    total = len(permutations)
    options: List[Option] = []
    examined = 0
    next_report = time.monotonic() + progress_interval

    for lineup in permutations:
        if rules.show_failure_reasons:
            slot_by_team, reason = validator.explain(lineup)
            if reason:
                logger.info(reason)
        else:
            slot_by_team = validator.validate(lineup)
        if slot_by_team is not None:
            options.append(Option(games=lineup, slot_by_team=slot_by_team))

        examined += 1
        if examined % _CLOCK_STRIDE == 0 and time.monotonic() >= next_report:
            next_report = time.monotonic() + progress_interval
            logger.info(
                "...round %d: evaluated %s/%s (%.1f%%); found %s possible options so far",
                round_index, f"{examined:,}", f"{total:,}", examined * 100 / total, f"{len(options):,}",
            )

    if not options:
        raise InfeasibleRoundError(round_index, total)
    logger.info("%s possibilities in round %d", f"{len(options):,}", round_index)
    return options


def _round_job(args: Tuple) -> Tuple[int, List[Option]]:
    """Process pool entry point; must be at module level to be picklable."""
    round_index = args[0]
    return round_index, generate_round_options(*args)


def generate_options(
    team_count: int,
    games_per_round: int,
    round_count: int,
    rules: Optional[ValidationRules] = None,
    workers: int = 1,
    progress_interval: float = 10.0,
) -> OptionSet:
    """
    Build the option set for a round-robin league.

    Rounds with an identical matchup sequence are enumerated once. With
    workers > 1 distinct rounds are enumerated in parallel processes.
    """
    rules = rules or ValidationRules()
    games = build_matchups(team_count)
    rounds = partition_rounds(team_count, games_per_round, round_count)

    distinct: Dict[Tuple[int, ...], int] = {}
    for r, round_games in enumerate(rounds):
        distinct.setdefault(tuple(round_games), r)

    total = sum(len(Permutations(key)) for key in distinct)
    logger.info(
        "Generating options for %d teams, %d games per round, %d rounds (%s orderings to examine)",
        team_count, games_per_round, round_count, f"{total:,}",
    )

    jobs = [(r, list(key), games, team_count, rules, progress_interval) for key, r in distinct.items()]
    found: Dict[int, List[Option]] = {}

    if workers <= 1 or len(jobs) == 1:
        for job in jobs:
            round_index, options = _round_job(job)
            found[round_index] = options
    else:
        with ProcessPoolExecutor(max_workers=min(workers, len(jobs))) as executor:
            futures = {executor.submit(_round_job, job): job[0] for job in jobs}
            for future in as_completed(futures):
                round_index, options = future.result()
                found[round_index] = options

    options_by_round = [list(found[distinct[tuple(round_games)]]) for round_games in rounds]
    combos = 1
    for round_options in options_by_round:
        combos *= len(round_options)
    logger.info("Found %s possible combinations in total", f"{combos:,}")

    validation = {k: v for k, v in asdict(rules).items() if k != "show_failure_reasons"}
    return OptionSet(games=games, options_by_round=options_by_round, validation=validation)
