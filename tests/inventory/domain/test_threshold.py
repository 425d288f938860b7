"""Tests for the low stock predicate."""

import pytest
from inventory.stock.threshold import is_low


@pytest.mark.parametrize(
    "quantity, threshold, expected",
    [
        (4, 5, True),
        (5, 5, False),
        (6, 5, False),
        (-3, 0, True),
        (0, 0, False),
    ],
)
def test_is_low_is_strict(quantity, threshold, expected):
    assert is_low(quantity, threshold) is expected


def test_is_low_has_no_memory():
    assert is_low(1, 5) is True
    assert is_low(1, 5) is True
