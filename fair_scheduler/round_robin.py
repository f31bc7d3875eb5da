"""Round-robin decomposition of a league into rounds of matchups.

Matchups are indexed by their position in the global matchup list, which
contains every pair of teams exactly once in lexicographic order:

    [(0,1), (0,2), (0,3), (1,2), (1,3), (2,3)]   # 4 teams

Rotation groups come from the circle method; each group has every team
playing exactly once. Rounds concatenate consecutive groups.
"""

from typing import Dict, List, Tuple

from .exceptions import ConfigurationError
from .models import Matchup


def validate_team_count(team_count: int) -> None:
    if team_count % 2 != 0:
        raise ConfigurationError(f"Round-robin partitioning requires an even number of teams, got {team_count}")
    if team_count < 2:
        raise ConfigurationError("Number of teams must be at least 2")


def build_matchups(team_count: int) -> List[Matchup]:
    """Every unique pair of teams, in lexicographic order."""
    return [(i, j) for i in range(team_count) for j in range(i + 1, team_count)]


def round_robin_groups(team_count: int) -> List[List[int]]:
    """
    Generates rotation groups using the circle method.

    Team 0 stays fixed while the others rotate one position per group.
    Position i is paired with position team_count-1-i.

    Returns:
        team_count-1 groups of matchup indices; together they cover
        every matchup exactly once
    """
    validate_team_count(team_count)
    index_for_matchup: Dict[Tuple[int, int], int] = {
        pair: i for i, pair in enumerate(build_matchups(team_count))
    }

    teams = list(range(team_count))
    groups: List[List[int]] = []
    for _ in range(team_count - 1):
        group = []
        for i in range(team_count // 2):
            a, b = teams[i], teams[team_count - 1 - i]
            group.append(index_for_matchup[(min(a, b), max(a, b))])
        groups.append(group)
        teams.insert(1, teams.pop())  # rotate
    return groups


def partition_rounds(team_count: int, games_per_round: int, round_count: int) -> List[List[int]]:
    """
    Split the matchups into rounds of games_per_round matchup indices.

    Each round takes games_per_round / (team_count/2) consecutive rotation
    groups, wrapping around to the first group after the last one.
    """
    validate_team_count(team_count)
    group_size = team_count // 2
    if games_per_round < group_size or games_per_round % group_size != 0:
        raise ConfigurationError(
            f"games_per_round must be a positive multiple of {group_size} for {team_count} teams, "
            f"got {games_per_round}"
        )
    if round_count < 1:
        raise ConfigurationError("round_count must be at least 1")

    groups = round_robin_groups(team_count)
    groups_per_round = games_per_round // group_size

    rounds: List[List[int]] = []
    group_index = 0
    for _ in range(round_count):
        round_games: List[int] = []
        for _ in range(groups_per_round):
            round_games.extend(groups[group_index])
            group_index = (group_index + 1) % len(groups)
        rounds.append(round_games)
    return rounds
