"""Tests for transaction amount normalization."""

import pytest
from inventory.stock.ledger import coerce_amount
from protean.exceptions import ValidationError


class TestCoerceAmount:
    def test_none_is_zero(self):
        assert coerce_amount(None, "amount_consumed") == 0

    def test_empty_string_is_zero(self):
        assert coerce_amount("", "amount_consumed") == 0

    def test_int_passes_through(self):
        assert coerce_amount(7, "amount_consumed") == 7

    def test_integral_float_accepted(self):
        assert coerce_amount(3.0, "amount_consumed") == 3

    def test_numeric_string_accepted(self):
        assert coerce_amount(" 12 ", "amount_restocked") == 12

    @pytest.mark.parametrize("value", [2.5, "2.5", "abc", "1e3", "\u00b2", "\u2460", True, [1], {"n": 1}])
    def test_non_whole_numbers_rejected(self, value):
        with pytest.raises(ValidationError) as exc:
            coerce_amount(value, "amount_consumed")
        assert "amount_consumed" in str(exc.value)

    @pytest.mark.parametrize("value", [-1, -4.0, "-3"])
    def test_negative_rejected(self, value):
        with pytest.raises(ValidationError) as exc:
            coerce_amount(value, "amount_restocked")
        assert "Amount cannot be negative" in str(exc.value)

    def test_superscript_digit_is_a_validation_error(self):
        with pytest.raises(ValidationError) as exc:
            coerce_amount("²", "amount_consumed")
        assert "Amount must be a whole number" in str(exc.value)
