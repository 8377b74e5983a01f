"""
Tests for the input accumulator and the calculator session.
"""

import pytest

from keypad_calc.accumulator import Calculator, apply_token
from keypad_calc.evaluator import ERROR_TOKEN
from keypad_calc.models import InvalidTokenError, Token


def press_all(tokens, buffer="0"):
    for token in tokens:
        buffer = apply_token(buffer, token)
    return buffer


class TestFreshEntry:
    """Test input on a clear or error display."""

    def test_digit_replaces_zero(self):
        assert apply_token("0", "7") == "7"

    def test_operator_replaces_zero(self):
        assert apply_token("0", "-") == "-"

    def test_decimal_on_zero(self):
        assert apply_token("0", ".") == "0."

    def test_digit_after_error_starts_new_number(self):
        assert apply_token(ERROR_TOKEN, "3") == "3"

    def test_operator_after_error_starts_new_entry(self):
        assert apply_token(ERROR_TOKEN, "+") == "+"

    def test_negative_entry(self):
        assert press_all(["-", "5", "+", "2", "="]) == "-3"


class TestOperators:
    """Test operator entry and chaining."""

    def test_operator_appended_with_spaces(self):
        assert press_all(["5", "+"]) == "5 + "

    def test_operator_replacement(self):
        assert press_all(["5", "+", "-"]) == "5 - "

    def test_chaining_evaluates_so_far(self):
        assert press_all(["2", "+", "3", "*"]) == "5 * "

    def test_chained_result_is_left_to_right(self):
        assert press_all(["2", "+", "3", "*", "4", "="]) == "20"

    def test_chaining_formats_fraction(self):
        assert press_all(["7", "/", "2", "+"]) == "3.50 + "

    def test_chaining_from_negative_result(self):
        assert press_all(["3", "-", "5", "+", "1", "="]) == "-1"

    def test_division_by_zero_halts_chain(self):
        assert press_all(["5", "/", "0", "+"]) == ERROR_TOKEN

    def test_percent(self):
        assert press_all(["5", "0", "%", "="]) == "0.50"

    def test_percent_discards_second_operand(self):
        assert press_all(["2", "0", "0", "%", "9", "="]) == "2"


class TestEquals:
    """Test evaluation on equals."""

    def test_equals(self):
        assert press_all(["1", "2", "+", "3", "="]) == "15"

    def test_division_by_zero(self):
        assert press_all(["5", "/", "0", "="]) == ERROR_TOKEN

    def test_equals_on_zero(self):
        assert apply_token("0", "=") == "0"

    def test_equals_on_error(self):
        assert apply_token(ERROR_TOKEN, "=") == ERROR_TOKEN

    def test_equals_with_trailing_operator(self):
        assert press_all(["5", "+", "="]) == ERROR_TOKEN

    def test_tie_rounds_up(self):
        assert press_all(["5", "/", "8", "="]) == "0.63"
        assert press_all(["1", "/", "8", "="]) == "0.13"

    def test_chained_tie_rounds_up(self):
        assert press_all(["5", "/", "8", "+"]) == "0.63 + "

    def test_digit_after_result_appends(self):
        assert press_all(["2", "+", "2", "=", "1"]) == "41"


class TestClear:
    """Test clear from any state."""

    @pytest.mark.parametrize("buffer", ["0", "12", "5 + ", "3.5 * 2", ERROR_TOKEN])
    def test_clear_resets(self, buffer):
        assert apply_token(buffer, "C") == "0"


class TestBackspace:
    """Test backspace semantics."""

    def test_backspace_on_zero_is_noop(self):
        assert apply_token("0", "←") == "0"

    def test_backspace_removes_last_char(self):
        assert apply_token("123", "←") == "12"

    def test_backspace_to_empty_resets(self):
        assert apply_token("7", "←") == "0"

    def test_backspace_on_error_resets(self):
        assert apply_token(ERROR_TOKEN, "←") == "0"

    def test_backspace_then_operator_replaces(self):
        assert press_all(["5", "+", "←", "*"]) == "5 * "


class TestDecimal:
    """Test decimal point guarding."""

    def test_decimal_appended(self):
        assert press_all(["3", "."]) == "3."

    def test_second_decimal_ignored(self):
        assert press_all(["3", ".", "1", "."]) == "3.1"

    def test_decimal_twice_in_a_row_ignored(self):
        assert press_all(["3", ".", "."]) == "3."

    def test_decimal_allowed_in_next_operand(self):
        assert press_all(["1", ".", "5", "+", "2", "."]) == "1.50 + 2."

    def test_decimal_right_after_operator_ignored(self):
        assert press_all(["4", "+", "."]) == "4 + "

    def test_decimal_after_sign_ignored(self):
        assert press_all(["-", "."]) == "-"

    def test_decimal_result(self):
        assert press_all([".", "5", "+", "1", "="]) == "1.50"


class TestTokens:
    """Test token validation."""

    def test_unknown_token_raises_error(self):
        with pytest.raises(InvalidTokenError):
            apply_token("0", "x")

    def test_enum_tokens_accepted(self):
        assert apply_token("0", Token.NINE) == "9"


class TestCalculator:
    """Test the calculator session."""

    def setup_method(self):
        self.rendered = []
        self.calc = Calculator(sink=self.rendered.append)

    def test_initial_display(self):
        assert self.calc.display == "0"
        assert not self.calc.is_error

    def test_sink_receives_every_display(self):
        self.calc.feed(["1", "+", "2", "="])
        assert self.rendered == ["1", "1 + ", "1 + 2", "3"]

    def test_press_key_maps_keyboard(self):
        for key in ["9", "/", "3", "Enter"]:
            self.calc.press_key(key)
        assert self.calc.display == "3"

    def test_press_key_ignores_unmapped(self):
        assert self.calc.press_key("a") is None
        assert self.rendered == []

    def test_escape_clears(self):
        self.calc.feed(["5", "/", "0", "="])
        assert self.calc.is_error
        self.calc.press_key("Escape")
        assert self.calc.display == "0"

    def test_clear(self):
        self.calc.feed(["4", "2"])
        assert self.calc.clear() == "0"

    def test_recovers_after_error(self):
        self.calc.feed(["5", "/", "0", "=", "8"])
        assert self.calc.display == "8"

    def test_press_accepts_raw_strings(self):
        assert self.calc.press("7") == "7"
        assert self.rendered == ["7"]

    def test_press_rejects_unknown_token(self):
        with pytest.raises(InvalidTokenError):
            self.calc.press("x")
        assert self.calc.display == "0"
        assert self.rendered == []

    def test_without_sink(self):
        calc = Calculator()
        assert calc.feed(["6", "*", "7", "="]) == "42"
