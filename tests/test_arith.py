"""Tests for the /eval arithmetic evaluator."""

import pytest

from netero.arith import (
    I64_MAX,
    I64_MIN,
    DivisionByZero,
    EmptyExpression,
    InvalidToken,
    MismatchedParens,
    evaluate,
    format_eval_error,
)


class TestValues:
    @pytest.mark.parametrize(
        "expr, expected",
        [
            ("2+3*4", 14),
            ("(2+3)*4", 20),
            ("--5", 5),
            ("-(2+3)", -5),
            ("10 - 4 - 3", 3),
            ("100 / 10 / 5", 2),
            ("  7 *\t( 1 + 1 ) ", 14),
            ("17 % 5", 2),
            ("0", 0),
        ],
    )
    def test_evaluates(self, expr, expected):
        assert evaluate(expr) == expected

    def test_division_truncates_toward_zero(self):
        assert evaluate("7/2") == 3
        assert evaluate("-7/2") == -3
        assert evaluate("7/-2") == -3

    def test_remainder_takes_dividend_sign(self):
        assert evaluate("-7%2") == -1
        assert evaluate("7%-2") == 1

    def test_extreme_values_in_range(self):
        assert evaluate(str(I64_MAX)) == I64_MAX
        assert evaluate("-9223372036854775807-1") == I64_MIN


class TestErrors:
    def test_division_by_zero(self):
        with pytest.raises(DivisionByZero):
            evaluate("7/0")

    def test_modulo_by_zero(self):
        with pytest.raises(DivisionByZero):
            evaluate("7 % (3-3)")

    @pytest.mark.parametrize("expr", ["", "   ", "2+", "5%", "(", "-"])
    def test_empty(self, expr):
        with pytest.raises(EmptyExpression):
            evaluate(expr)

    def test_unclosed_paren(self):
        with pytest.raises(MismatchedParens):
            evaluate("(2+3")

    def test_unexpected_close_paren_is_invalid_token(self):
        with pytest.raises(InvalidToken) as exc:
            evaluate("2+3)")
        assert exc.value.char == ")"

    def test_trailing_garbage(self):
        with pytest.raises(InvalidToken) as exc:
            evaluate("2 3")
        assert exc.value.char == "3"

    def test_letter(self):
        with pytest.raises(InvalidToken) as exc:
            evaluate("2*x")
        assert exc.value.char == "x"

    def test_unary_plus_not_supported(self):
        with pytest.raises(InvalidToken) as exc:
            evaluate("+1")
        assert exc.value.char == "+"


class TestOverflow:
    def test_add_overflow(self):
        with pytest.raises(InvalidToken) as exc:
            evaluate(f"{I64_MAX}+1")
        assert exc.value.char == "+"

    def test_sub_overflow(self):
        with pytest.raises(InvalidToken) as exc:
            evaluate(f"-{I64_MAX}-2")
        assert exc.value.char == "-"

    def test_mul_overflow(self):
        with pytest.raises(InvalidToken) as exc:
            evaluate("3000000000*4000000000")
        assert exc.value.char == "*"

    def test_literal_too_large(self):
        with pytest.raises(InvalidToken) as exc:
            evaluate("9223372036854775808")
        assert exc.value.char == "9"

    def test_negating_min_overflows(self):
        with pytest.raises(InvalidToken) as exc:
            evaluate("-(-9223372036854775807-1)")
        assert exc.value.char == "-"

    def test_min_divided_by_minus_one(self):
        with pytest.raises(InvalidToken) as exc:
            evaluate("(-9223372036854775807-1)/-1")
        assert exc.value.char == "/"


class TestMessages:
    def test_english(self):
        assert format_eval_error(DivisionByZero()) == "division by zero"
        assert format_eval_error(InvalidToken("x")) == "invalid token: 'x'"

    def test_spanish(self):
        assert format_eval_error(EmptyExpression(), "es") == "expresión vacía"
        assert (
            format_eval_error(MismatchedParens(), "es") == "paréntesis desbalanceados"
        )

    def test_unknown_language_falls_back_to_english(self):
        assert format_eval_error(EmptyExpression(), "xx") == "empty expression"
