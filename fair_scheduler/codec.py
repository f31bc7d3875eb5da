"""
Mixed-radix codec between a combo index and a per-round option index vector.

Round 0 is the most significant digit; each round's radix is its option
count. Python integers are exact, so products in the billions are safe;
floats and bools are refused because they cannot carry large indices exactly.
"""

import re
from typing import Iterator, List, Sequence

from .exceptions import ComboIndexError
from .models import Option, OptionSet


def _require_int(value, what: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        # numpy integers expose __index__
        try:
            return int(value.__index__())
        except AttributeError:
            raise ComboIndexError(f"{what} must be an integer, got {value!r}") from None
    return value


class ComboCodec:
    """Bijection between [0, total_combinations) and option index vectors."""

    def __init__(self, option_counts: Sequence[int]):
        if not option_counts:
            raise ComboIndexError("At least one round is required")
        self.option_counts = [_require_int(c, "option count") for c in option_counts]
        for r, count in enumerate(self.option_counts):
            if count < 1:
                raise ComboIndexError(f"Round {r} has no options")

        # Place value of each round: product of all later rounds' counts
        self.place_values: List[int] = [1] * len(self.option_counts)
        for r in range(len(self.option_counts) - 2, -1, -1):
            self.place_values[r] = self.place_values[r + 1] * self.option_counts[r + 1]
        self.total_combinations = self.place_values[0] * self.option_counts[0]

    @classmethod
    def for_option_set(cls, option_set: OptionSet) -> "ComboCodec":
        return cls(option_set.option_counts)

    @property
    def round_count(self) -> int:
        return len(self.option_counts)

    def check_index(self, combo_index) -> int:
        combo_index = _require_int(combo_index, "combo index")
        if not 0 <= combo_index < self.total_combinations:
            raise ComboIndexError(
                f"combo index {combo_index:,} out of range [0, {self.total_combinations:,})"
            )
        return combo_index

    def indices_from_combo_index(self, combo_index) -> List[int]:
        remaining = self.check_index(combo_index)
        indices = [0] * self.round_count
        for r in range(self.round_count - 1, -1, -1):
            remaining, indices[r] = divmod(remaining, self.option_counts[r])
        return indices

    def combo_index_from_indices(self, indices: Sequence[int]) -> int:
        if len(indices) != self.round_count:
            raise ComboIndexError(f"Expected {self.round_count} option indices, got {len(indices)}")
        combo_index = 0
        for r, value in enumerate(indices):
            value = _require_int(value, f"option index for round {r}")
            if not 0 <= value < self.option_counts[r]:
                raise ComboIndexError(
                    f"Option index {value} out of range for round {r} (0..{self.option_counts[r] - 1})"
                )
            combo_index += value * self.place_values[r]
        return combo_index

    def iter_indices(self, start: int = 0) -> Iterator[List[int]]:
        """Odometer over index vectors from `start` to the end, in combo index order."""
        if start == self.total_combinations:
            return
        indices = self.indices_from_combo_index(start)
        last = self.round_count - 1
        while True:
            yield list(indices)
            r = last
            while r >= 0:
                indices[r] += 1
                if indices[r] < self.option_counts[r]:
                    break
                indices[r] = 0
                r -= 1
            if r < 0:
                return

    def parse(self, text: str) -> int:
        """
        Parse a combo reference into a combo index.

        Accepts an integer ("121604611", commas allowed: "121,604,611") or an
        option index vector ("12-45-3-78-23-56").
        """
        text = text.strip()
        if "-" in text:
            parts = text.split("-")
            if not all(re.fullmatch(r"\d+", p) for p in parts):
                raise ComboIndexError(f"Invalid index vector: {text!r}")
            return self.combo_index_from_indices([int(p) for p in parts])
        digits = text.replace(",", "").replace("_", "")
        if not re.fullmatch(r"\d+", digits):
            raise ComboIndexError(f"Invalid combo index: {text!r}")
        return self.check_index(int(digits))

    @staticmethod
    def format_indices(indices: Sequence[int]) -> str:
        return "-".join(str(i) for i in indices)


def combo_from_indices(option_set: OptionSet, indices: Sequence[int]) -> List[Option]:
    ComboCodec.for_option_set(option_set).combo_index_from_indices(indices)
    return option_set.combo_from_indices(indices)


def combo_from_index(option_set: OptionSet, combo_index: int) -> List[Option]:
    indices = ComboCodec.for_option_set(option_set).indices_from_combo_index(combo_index)
    return option_set.combo_from_indices(indices)
