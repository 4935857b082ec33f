"""Tests for per-field type inference."""

import pytest

from dataclysm.io.cells import (
    cell_kind,
    infer_cell,
    is_missing_cell,
    is_number_cell,
    parse_number,
    stringify_cell,
)


class TestInferCell:

    @pytest.mark.parametrize("raw", ["", "null", "NULL", "Null", "nan", "NaN", "NAN"])
    def test_null_literals(self, raw):
        assert infer_cell(raw) is None

    def test_integer(self):
        value = infer_cell("42")
        assert value == 42
        assert isinstance(value, int) and not isinstance(value, bool)

    def test_decimal(self):
        assert infer_cell("3.14") == pytest.approx(3.14)
        assert isinstance(infer_cell("3.14"), float)

    @pytest.mark.parametrize("raw,expected", [
        ("-7", -7),
        ("+5", 5),
        ("0", 0),
        (".5", 0.5),
        ("5.", 5.0),
        ("1e3", 1000.0),
        ("-2.5E-2", -0.025),
    ])
    def test_numeric_grammar(self, raw, expected):
        assert infer_cell(raw) == pytest.approx(expected)

    @pytest.mark.parametrize("raw", ["0x10", "1_000", "inf", "-Infinity", "1 000", "12abc", "1.2.3", "--1", "e5"])
    def test_non_numbers_stay_strings(self, raw):
        assert infer_cell(raw) == raw

    @pytest.mark.parametrize("raw,expected", [
        ("true", True),
        ("TRUE", True),
        ("True", True),
        ("false", False),
        ("FALSE", False),
    ])
    def test_booleans(self, raw, expected):
        assert infer_cell(raw) is expected

    def test_plain_string(self):
        assert infer_cell("abc") == "abc"

    def test_yes_is_not_boolean(self):
        assert infer_cell("yes") == "yes"


class TestHelpers:

    def test_parse_number_rejects_blank(self):
        assert parse_number("") is None
        assert parse_number("   ") is None

    def test_bool_is_not_number(self):
        assert is_number_cell(1)
        assert is_number_cell(1.5)
        assert not is_number_cell(True)
        assert not is_number_cell("1")

    def test_missing(self):
        assert is_missing_cell(None)
        assert is_missing_cell("")
        assert not is_missing_cell(0)
        assert not is_missing_cell(False)

    def test_cell_kind(self):
        assert cell_kind(None) is None
        assert cell_kind("") is None
        assert cell_kind(False) == "boolean"
        assert cell_kind(3) == "number"
        assert cell_kind("x") == "string"

    def test_stringify(self):
        assert stringify_cell(None) == ""
        assert stringify_cell(True) == "true"
        assert stringify_cell(False) == "false"
        assert stringify_cell(42) == "42"
        assert stringify_cell(3.14) == "3.14"
        assert stringify_cell("N/A") == "N/A"


class TestHugeNumbers:

    def test_integer_beyond_float_range_stays_string(self):
        raw = "1" * 5000
        assert parse_number(raw) is None
        assert infer_cell(raw) == raw

    def test_large_finite_integer_keeps_int_type(self):
        value = infer_cell("9" * 300)
        assert value == int("9" * 300)
        assert isinstance(value, int)

    def test_leading_zeros_past_digit_limit(self):
        assert parse_number("0" * 5000 + "1") == 1

    def test_stringify_huge_int(self):
        assert stringify_cell(10 ** 5000) == "1" + "0" * 5000
        assert stringify_cell(-(10 ** 5000) - 7) == "-1" + "0" * 4999 + "7"
