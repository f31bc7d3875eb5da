"""
Tests for the combo index codec.
"""

import numpy as np
import pytest

from fair_scheduler.codec import ComboCodec, combo_from_index, combo_from_indices
from fair_scheduler.exceptions import ComboIndexError


def test_place_values():
    """Test place values and total combinations."""
    codec = ComboCodec([3, 1, 4])
    assert codec.place_values == [4, 4, 1]
    assert codec.total_combinations == 12
    assert codec.round_count == 3


def test_bijection():
    """Test that both directions agree over the whole space."""
    codec = ComboCodec([3, 1, 4])
    assert codec.indices_from_combo_index(7) == [1, 0, 3]

    seen = set()
    for combo_index in range(codec.total_combinations):
        indices = codec.indices_from_combo_index(combo_index)
        assert codec.combo_index_from_indices(indices) == combo_index
        seen.add(tuple(indices))
    assert len(seen) == 12


def test_large_space_is_exact():
    """Test indices beyond 2**53 round-trip exactly."""
    codec = ComboCodec([10 ** 6] * 4)
    assert codec.total_combinations == 10 ** 24
    last = codec.total_combinations - 1
    assert codec.indices_from_combo_index(last) == [999999] * 4
    assert codec.combo_index_from_indices([999999] * 4) == last
    assert codec.indices_from_combo_index(10 ** 18 + 7) == [0, 1, 0, 7]


def test_out_of_range():
    """Test range checks in both directions."""
    codec = ComboCodec([3, 1, 4])
    with pytest.raises(ComboIndexError, match="out of range"):
        codec.indices_from_combo_index(12)
    with pytest.raises(ComboIndexError):
        codec.indices_from_combo_index(-1)
    with pytest.raises(ComboIndexError):
        codec.combo_index_from_indices([3, 0, 0])
    with pytest.raises(ComboIndexError, match="Expected 3"):
        codec.combo_index_from_indices([0, 0])


def test_non_integers_rejected():
    """Test that floats and bools cannot be used as indices."""
    codec = ComboCodec([3, 1, 4])
    with pytest.raises(ComboIndexError):
        codec.indices_from_combo_index(3.0)
    with pytest.raises(ComboIndexError):
        codec.indices_from_combo_index(True)
    assert codec.indices_from_combo_index(np.int64(7)) == [1, 0, 3]


def test_parse():
    """Test the accepted combo reference formats."""
    codec = ComboCodec([3, 1, 4])
    assert codec.parse("7") == 7
    assert codec.parse("1,1") == 11
    assert codec.parse(" 1-0-3 ") == 7
    with pytest.raises(ComboIndexError):
        codec.parse("12")
    with pytest.raises(ComboIndexError):
        codec.parse("1-x-3")
    with pytest.raises(ComboIndexError):
        codec.parse("seven")


def test_iter_indices_follows_index_order():
    """Test the odometer from an arbitrary start."""
    codec = ComboCodec([3, 1, 4])
    vectors = list(codec.iter_indices(5))
    assert len(vectors) == 7
    assert [codec.combo_index_from_indices(v) for v in vectors] == list(range(5, 12))
    assert list(codec.iter_indices(12)) == []


def test_combo_lookup(four_team_options):
    """Test resolving options from indices and combo indices."""
    combo = combo_from_index(four_team_options, 5)
    assert combo == combo_from_indices(four_team_options, [1, 0, 1])
    assert combo[0] is four_team_options.options_by_round[0][1]
    with pytest.raises(ComboIndexError):
        combo_from_indices(four_team_options, [2, 0, 0])
