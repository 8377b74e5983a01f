"""
Lexer for display buffers.

Turns a buffer such as ``"-2.5 * 4 + "`` into a flat sequence of number and
operator lexemes. The lexer does not check that numbers and operators
alternate; that is the evaluator's job.
"""

from keypad_calc.models import (
    OPERATOR_CHARS,
    InvalidExpressionError,
    Lexeme,
    NumberLexeme,
    Operator,
    OperatorLexeme,
)

NUMBER_CHARS = frozenset("0123456789.")
SIGN_CHARS = frozenset("+-")


def tokenize(buffer: str) -> list[Lexeme]:
    """
    Split a buffer into number and operator lexemes.

    A ``+`` or ``-`` directly followed by a digit or decimal point is read as
    the sign of a number when an operand is expected, so ``"-2 + 3"`` lexes
    as ``[-2, +, 3]``.

    Raises:
        InvalidExpressionError: on a character outside the keypad alphabet
            or a number that does not parse (``"1.2.3"``, ``"."``).
    """
    lexemes: list[Lexeme] = []
    expect_operand = True
    pos = 0
    length = len(buffer)

    while pos < length:
        char = buffer[pos]

        if char.isspace():
            pos += 1
            continue

        signed = (
            expect_operand
            and char in SIGN_CHARS
            and pos + 1 < length
            and buffer[pos + 1] in NUMBER_CHARS
        )

        if char in NUMBER_CHARS or signed:
            end = pos + 1
            while end < length and buffer[end] in NUMBER_CHARS:
                end += 1
            text = buffer[pos:end]
            lexemes.append(NumberLexeme(value=_parse_number(text), text=text))
            expect_operand = False
            pos = end
        elif char in OPERATOR_CHARS:
            lexemes.append(OperatorLexeme(operator=Operator(char)))
            expect_operand = True
            pos += 1
        else:
            raise InvalidExpressionError(f"Unexpected character {char!r} at {pos}")

    return lexemes


def _parse_number(text: str) -> float:
    try:
        return float(text)
    except ValueError:
        raise InvalidExpressionError(f"Not a number: {text!r}") from None


def last_segment(buffer: str) -> str:
    """Return the operand text after the last operator, without whitespace."""
    for index in range(len(buffer) - 1, -1, -1):
        if buffer[index] in OPERATOR_CHARS and not _is_sign(buffer, index):
            return buffer[index + 1:].strip()
    return buffer.strip()


def _is_sign(buffer: str, index: int) -> bool:
    # A sign is a +/- at the start of the buffer or right after another
    # operator, not one surrounded by spaces.
    if buffer[index] not in SIGN_CHARS:
        return False
    before = buffer[:index].rstrip()
    return not before or before[-1] in OPERATOR_CHARS


def ends_with_operator(buffer: str) -> bool:
    """True when the buffer, ignoring whitespace, ends in an operator character."""
    stripped = "".join(buffer.split())
    return bool(stripped) and stripped[-1] in OPERATOR_CHARS
