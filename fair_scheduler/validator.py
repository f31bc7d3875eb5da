"""Structural validation of a single lineup (ordering of a round's matchups)."""

from typing import List, Optional, Sequence, Tuple

from .config import ValidationRules
from .models import Matchup

SlotByTeam = Tuple[Tuple[int, ...], ...]


class LineupValidator:
    """
    Accepts or rejects lineups against a set of ValidationRules.

    A lineup is a sequence of matchup indices; position i is time slot i.
    """

    def __init__(self, games: Sequence[Matchup], team_count: int, rules: ValidationRules):
        self.games = list(games)
        self.team_count = team_count
        self.rules = rules

    def slots_by_team(self, lineup: Sequence[int]) -> SlotByTeam:
        """Ascending slot indices at which each team plays."""
        slots: List[List[int]] = [[] for _ in range(self.team_count)]
        for slot, game_index in enumerate(lineup):
            a, b = self.games[game_index]
            slots[a].append(slot)
            slots[b].append(slot)
        return tuple(tuple(s) for s in slots)

    def validate(self, lineup: Sequence[int]) -> Optional[SlotByTeam]:
        """Return the per-team slot mapping if the lineup is valid, else None."""
        slot_by_team = self.slots_by_team(lineup)
        if self._first_violation(slot_by_team, explain=False) is None:
            return slot_by_team
        return None

    def explain(self, lineup: Sequence[int]) -> Tuple[Optional[SlotByTeam], Optional[str]]:
        """Like validate(), but also returns a human-readable rejection reason."""
        slot_by_team = self.slots_by_team(lineup)
        reason = self._first_violation(slot_by_team, explain=True)
        if reason is None:
            return slot_by_team, None
        lineup_str = str([list(self.games[g]) for g in lineup])
        return None, f"Cannot play {lineup_str} because {reason}"

    def _first_violation(self, slot_by_team: SlotByTeam, explain: bool) -> Optional[str]:
        rules = self.rules
        for team, slots in enumerate(slot_by_team):
            if not slots:
                continue
            gaps = [slots[i] - slots[i - 1] - 1 for i in range(1, len(slots))]

            if rules.max_slot_span is not None:
                span = slots[-1] - slots[0] + 1
                if span > rules.max_slot_span:
                    return (f"team {team} must be present for {span} time slots "
                            f"(maximum allowed is {rules.max_slot_span} time slots)") if explain else ""

            if rules.no_double_headers and 0 in gaps:
                return f"there's a double header for team {team}" if explain else ""

            if rules.no_triple_headers:
                for i in range(len(gaps) - 1):
                    if gaps[i] == 0 and gaps[i + 1] == 0:
                        return f"there's a triple header for team {team}" if explain else ""

            if rules.max_idle_slots is not None:
                for gap in gaps:
                    if gap > rules.max_idle_slots:
                        return (f"team {team} has a {gap}-slot bye "
                                f"(maximum allowed is a {rules.max_idle_slots}-slot bye)") if explain else ""

                if rules.max_gap_instance_count is not None:
                    longest = gaps.count(rules.max_idle_slots)
                    if longest > rules.max_gap_instance_count:
                        return (f"team {team} has {longest} byes of {rules.max_idle_slots} slots "
                                f"(maximum allowed is {rules.max_gap_instance_count})") if explain else ""
        return None
