"""
Chained expression evaluator.

Expressions are reduced strictly left to right with no operator precedence:
``"2 + 3 * 4"`` is ``(2 + 3) * 4 = 20``. Failures never escape as exceptions;
they come back as an ``Err`` and render as the error token.
"""

import math
from decimal import ROUND_HALF_UP, Context, Decimal

import structlog

from keypad_calc.config import settings
from keypad_calc.lexer import tokenize
from keypad_calc.models import (
    CalculatorError,
    DivisionByZeroError,
    Err,
    InvalidExpressionError,
    Lexeme,
    NumberLexeme,
    Ok,
    Operator,
    OperatorLexeme,
    Result,
)

logger = structlog.get_logger()

ERROR_TOKEN = "Error."

# Wide enough to quantize any finite float exactly
_ROUNDING = Context(prec=400, rounding=ROUND_HALF_UP)


# =============================================================================
# Arithmetic
# =============================================================================

def _apply(a: float, operator: Operator, b: float | None) -> float:
    """Apply one operator, raising on failure."""
    if operator is Operator.PERCENT:
        return a / 100
    if b is None:
        raise InvalidExpressionError(f"Missing operand after {operator.value!r}")
    if operator is Operator.ADD:
        return a + b
    if operator is Operator.SUBTRACT:
        return a - b
    if operator is Operator.MULTIPLY:
        return a * b
    if operator is Operator.DIVIDE:
        if b == 0:
            raise DivisionByZeroError("Division by zero")
        return a / b
    raise InvalidExpressionError(f"Unsupported operator: {operator!r}")


def perform_calculation(a: float, operator: Operator | str, b: float | None) -> Result:
    """
    Apply a single operator to two operands.

    ``%`` is a percent, not a modulus: it returns ``a / 100`` and ignores
    ``b``. Division by zero and unknown operators yield an ``Err``.
    """
    try:
        op = Operator(operator)
    except ValueError:
        return Err(reason=f"Unsupported operator: {operator!r}")

    try:
        value = _apply(a, op, b)
    except CalculatorError as e:
        return Err(reason=str(e))

    if not math.isfinite(value):
        return Err(reason="Result is not finite")
    return Ok(value)


# =============================================================================
# Evaluation
# =============================================================================

def _reduce(lexemes: list[Lexeme]) -> float:
    """Left fold over ``number (operator number)*``."""
    if not lexemes:
        raise InvalidExpressionError("Empty expression")

    first = lexemes[0]
    if not isinstance(first, NumberLexeme):
        raise InvalidExpressionError("Expression must start with a number")

    accumulator = first.value
    index = 1
    while index < len(lexemes):
        lexeme = lexemes[index]
        if not isinstance(lexeme, OperatorLexeme):
            raise InvalidExpressionError(f"Missing operator before {lexeme.text!r}")

        operand = lexemes[index + 1] if index + 1 < len(lexemes) else None
        if isinstance(operand, OperatorLexeme):
            raise InvalidExpressionError("Two operators in a row")

        accumulator = _apply(
            accumulator,
            lexeme.operator,
            operand.value if operand is not None else None,
        )
        index += 2

    if not math.isfinite(accumulator):
        raise InvalidExpressionError("Result is not finite")
    return accumulator


def evaluate(buffer: str) -> Result:
    """
    Evaluate a display buffer as a chained expression.

    Returns ``Ok(value)`` or ``Err`` for anything that is not a well formed
    chain: a non-numeric operand, a missing operand (a trailing ``%`` is
    allowed since its operand is unused), a zero divisor, or a non-finite
    result.
    """
    try:
        value = _reduce(tokenize(buffer))
    except CalculatorError as e:
        logger.info("Evaluation failed", buffer=buffer, reason=str(e))
        return Err(reason=str(e))

    logger.debug("Evaluated", buffer=buffer, value=value)
    return Ok(value)


# =============================================================================
# Formatting
# =============================================================================

def format_result(result: Result | float, decimal_places: int | None = None) -> str:
    """
    Render a result for the display.

    Errors render as the error token. Numbers are rounded to
    ``decimal_places`` (default from settings, normally 2); a zero fraction
    is dropped (``4.0`` -> ``"4"``), otherwise all places are kept
    (``4.5`` -> ``"4.50"``). Ties round away from zero (``0.625`` -> ``"0.63"``).
    """
    if isinstance(result, Err):
        return ERROR_TOKEN

    value = result.value if isinstance(result, Ok) else float(result)
    if not math.isfinite(value):
        return ERROR_TOKEN

    places = settings.decimal_places if decimal_places is None else decimal_places
    exponent = Decimal(1).scaleb(-places)
    text = format(Decimal(value).quantize(exponent, context=_ROUNDING), "f")
    integer, _, fraction = text.partition(".")

    if not fraction or int(fraction) == 0:
        return "0" if integer == "-0" else integer
    return text


def calculate(a: float, operator: Operator | str, b: float | None) -> str:
    """Apply one operator and format the result for the display."""
    return format_result(perform_calculation(a, operator, b))
