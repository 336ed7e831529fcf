"""
Tests for round_half_up.
"""
import pytest

from rounding import round_half_up


@pytest.mark.parametrize("value, places, expected", [
    (112.5, 0, 113.0),
    (0.5, 0, 1.0),
    (2.5, 0, 3.0),
    (2.125, 2, 2.13),
    (4.875, 2, 4.88),
    (3.5, 2, 3.5),
    (112.4, 0, 112.0),
])
def test_ties_round_up(value, places, expected):
    assert round_half_up(value, places) == expected


def test_uses_exact_binary_value():
    # 2.675 is stored as 2.67499999..., so it is not a tie
    assert round_half_up(2.675, 2) == 2.67
