import pytest

from radius.agent.expression import (
    MALFORMED_MESSAGE,
    NO_EXPRESSION_MESSAGE,
    NON_NUMERIC_MESSAGE,
    ExpressionError,
    calculate_expression,
    clean_expression,
    evaluate,
    format_number,
)


@pytest.mark.parametrize(
    ("expression", "expected"),
    [
        ("3 * (12 + 4)", 48),
        ("2 + 3 * 4", 14),
        ("(2 + 3) * 4", 20),
        ("10 - 4 - 3", 3),
        ("2 ^ 3 ^ 2", 512),
        ("-2 ^ 2", -4),
        ("2 ^ -1", 0.5),
        ("17 % 5", 2),
        ("-(3 + 1)", -4),
        (".5 + .25", 0.75),
    ],
)
def test_evaluate_respects_precedence(expression: str, expected: float) -> None:
    """evaluate follows standard operator precedence and associativity."""
    assert evaluate(expression) == pytest.approx(expected)


@pytest.mark.parametrize("expression", ["2 +", "(1 + 2", "1 2", "1.2.3", "* 4", "()"])
def test_evaluate_rejects_malformed(expression: str) -> None:
    """evaluate raises ExpressionError when the grammar is not followed."""
    with pytest.raises(ExpressionError):
        evaluate(expression)


def test_clean_expression_strips_text_and_separators() -> None:
    """clean_expression keeps arithmetic characters and drops thousand separators."""
    assert clean_expression("What is 1,200 + 30?").strip() == "1200 + 30"


def test_clean_expression_none_without_digits() -> None:
    """clean_expression returns None when no digit survives sanitising."""
    assert clean_expression("hello there") is None
    assert clean_expression("( + )") is None


def test_calculate_expression_success() -> None:
    """calculate_expression reports the sanitised expression and its result."""
    assert calculate_expression("3 * (12 + 4)") == "The expression 3 * (12 + 4) evaluates to **48**."
    assert "**4**" in calculate_expression("2+2")


def test_calculate_expression_no_expression() -> None:
    """calculate_expression explains when nothing solvable is present."""
    assert calculate_expression("no numbers here") == NO_EXPRESSION_MESSAGE


def test_calculate_expression_malformed() -> None:
    """calculate_expression returns a message instead of raising on bad syntax."""
    assert calculate_expression("Solve 150 monthly at 5% for 3 years") == MALFORMED_MESSAGE


@pytest.mark.parametrize("expression", ["1 / 0", "5 % 0", "10 ^ 400", "(0 - 8) ^ 0.5"])
def test_calculate_expression_non_numeric(expression: str) -> None:
    """Division by zero, overflow and complex results are reported as unsupported."""
    assert calculate_expression(expression) == NON_NUMERIC_MESSAGE


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (48.0, "48"),
        (0.1 + 0.2, "0.3"),
        (1.23456789, "1.2345679"),
        (1000.0, "1,000"),
        (1234567.891234, "1,234,567.8912"),
        (-2500.5, "-2,500.5"),
    ],
)
def test_format_number(value: float, expected: str) -> None:
    """format_number groups large values and trims small ones to 8 significant digits."""
    assert format_number(value) == expected


def test_calculate_expression_deep_nesting_is_malformed() -> None:
    """Pathologically nested parentheses are rejected instead of exhausting the stack."""
    deep = "(" * 2000 + "1+1" + ")" * 2000
    assert calculate_expression(deep) == MALFORMED_MESSAGE
    assert calculate_expression("-" * 2000 + "1") == MALFORMED_MESSAGE


def test_calculate_expression_moderate_nesting_still_evaluates() -> None:
    nested = "(" * 50 + "1+1" + ")" * 50
    assert calculate_expression(nested).endswith("evaluates to **2**.")


def test_negative_zero_is_rendered_as_zero() -> None:
    """A zero result never shows a minus sign."""
    assert format_number(-0.0) == "0"
    assert calculate_expression("0 * -1").endswith("evaluates to **0**.")
