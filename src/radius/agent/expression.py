"""Sandboxed arithmetic evaluation for the ``math`` intent.

Only numbers, parentheses and the operators ``+ - * / % ^`` are understood.
The parser is a small recursive-descent evaluator over this grammar::

    expr  := term (('+' | '-') term)*
    term  := unary (('*' | '/' | '%') unary)*
    unary := ('+' | '-') unary | power
    power := atom ('^' unary)?
    atom  := NUMBER | '(' expr ')'

``^`` is exponentiation and binds tighter than unary minus on its left
(``-2^2 == -4``) and is right-associative (``2^3^2 == 512``).
"""

import logging
import math
import re
from typing import List, Optional

logger = logging.getLogger(__name__)

_DISALLOWED = re.compile(r"[^0-9+\-*/%^().,\s]")
_TOKEN = re.compile(r"\s*(?:(\d+\.?\d*|\.\d+)|(.))")

# Parentheses, signs and powers together may nest at most this deep
MAX_NESTING = 64

NO_EXPRESSION_MESSAGE = (
    "I could not detect a solvable expression. Try something like `3 * (12 + 4)`."
)
MALFORMED_MESSAGE = (
    "That expression seems malformed. Try using only numbers and standard operators."
)
NON_NUMERIC_MESSAGE = (
    "That expression resolves to a non-numeric result, which I do not support yet."
)


class ExpressionError(ValueError):
    """Raised when an expression cannot be parsed."""


def _tokenize(expression: str) -> List[str]:
    tokens: List[str] = []
    for number, symbol in _TOKEN.findall(expression):
        if number:
            tokens.append(number)
        elif symbol.strip():
            tokens.append(symbol)
    return tokens


class _Parser:
    def __init__(self, expression: str) -> None:
        self._tokens = _tokenize(expression)
        self._pos = 0
        self._depth = 0

    def _peek(self) -> Optional[str]:
        if self._pos < len(self._tokens):
            return self._tokens[self._pos]
        return None

    def _take(self) -> str:
        token = self._peek()
        if token is None:
            raise ExpressionError("unexpected end of expression")
        self._pos += 1
        return token

    def parse(self) -> float:
        value = self._expr()
        if self._peek() is not None:
            raise ExpressionError(f"unexpected token {self._peek()!r}")
        return value

    def _expr(self) -> float:
        value = self._term()
        while self._peek() in ("+", "-"):
            if self._take() == "+":
                value = value + self._term()
            else:
                value = value - self._term()
        return value

    def _term(self) -> float:
        value = self._unary()
        while self._peek() in ("*", "/", "%"):
            op = self._take()
            right = self._unary()
            if op == "*":
                value = value * right
            elif op == "/":
                value = value / right
            else:
                value = math.fmod(value, right)
        return value

    def _unary(self) -> float:
        # Every nested sign, power or parenthesis passes through here
        self._depth += 1
        if self._depth > MAX_NESTING:
            raise ExpressionError("expression is nested too deeply")
        try:
            return self._signed()
        finally:
            self._depth -= 1

    def _signed(self) -> float:
        if self._peek() == "-":
            self._take()
            return -self._unary()
        if self._peek() == "+":
            self._take()
            return self._unary()
        return self._power()

    def _power(self) -> float:
        base = self._atom()
        if self._peek() == "^":
            self._take()
            return math.pow(base, self._unary())
        return base

    def _atom(self) -> float:
        token = self._take()
        if token == "(":
            value = self._expr()
            if self._take() != ")":
                raise ExpressionError("missing closing parenthesis")
            return value
        if token[0].isdigit() or token[0] == ".":
            return float(token)
        raise ExpressionError(f"unexpected token {token!r}")


def clean_expression(text: str) -> Optional[str]:
    """Reduce free text to arithmetic characters; None if nothing usable remains."""
    candidate = _DISALLOWED.sub("", text).replace(",", "")
    if not candidate.strip():
        return None
    if not re.search(r"[0-9]", candidate):
        return None
    return candidate


def evaluate(expression: str) -> float:
    """Evaluate a cleaned expression.

    Raises:
        ExpressionError: the expression does not follow the grammar.
        ZeroDivisionError, ValueError, OverflowError: the arithmetic itself fails.
    """
    return _Parser(expression).parse()


def format_number(value: float) -> str:
    if value == 0:
        value = 0.0
    if abs(value) >= 1000:
        text = f"{value:,.4f}"
        return text.rstrip("0").rstrip(".")
    return format(value, ".8g")


def calculate_expression(text: str) -> str:
    """Evaluate the arithmetic in ``text`` and describe the result.

    Never raises; every failure is reported as a readable message.
    """
    expression = clean_expression(text)
    if not expression:
        return NO_EXPRESSION_MESSAGE

    try:
        result = evaluate(expression)
    except ExpressionError as e:
        logger.debug("Malformed expression %r: %s", expression, e)
        return MALFORMED_MESSAGE
    except (ZeroDivisionError, OverflowError, ValueError) as e:
        logger.debug("Expression %r has no numeric result: %s", expression, e)
        return NON_NUMERIC_MESSAGE

    if not math.isfinite(result):
        return NON_NUMERIC_MESSAGE

    return f"The expression {expression.strip()} evaluates to **{format_number(result)}**."
