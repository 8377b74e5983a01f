"""
Core data models for Keypad Calc.

Defines the key tokens, operators, the tagged evaluation result, the lexemes
produced by the lexer, and the request/response schemas of the HTTP API.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Union

from pydantic import BaseModel, Field


# =============================================================================
# Exceptions
# =============================================================================

class CalculatorError(Exception):
    """Base exception for calculator errors."""
    pass


class InvalidExpressionError(CalculatorError):
    """Raised when a buffer cannot be read as a chained expression."""
    pass


class DivisionByZeroError(InvalidExpressionError):
    """Raised when a division step has a zero divisor."""
    pass


class InvalidTokenError(CalculatorError, ValueError):
    """Raised when input is not one of the keypad tokens."""
    pass


# =============================================================================
# Enums
# =============================================================================

class Operator(str, Enum):
    """Binary operators, applied strictly left to right."""
    ADD = "+"
    SUBTRACT = "-"
    MULTIPLY = "*"
    DIVIDE = "/"
    PERCENT = "%"  # first operand / 100, second operand unused


OPERATOR_CHARS = frozenset(op.value for op in Operator)


class Token(str, Enum):
    """One atomic unit of keypad input."""
    ZERO = "0"
    ONE = "1"
    TWO = "2"
    THREE = "3"
    FOUR = "4"
    FIVE = "5"
    SIX = "6"
    SEVEN = "7"
    EIGHT = "8"
    NINE = "9"
    DECIMAL = "."
    ADD = "+"
    SUBTRACT = "-"
    MULTIPLY = "*"
    DIVIDE = "/"
    PERCENT = "%"
    EQUALS = "="
    CLEAR = "C"
    BACKSPACE = "←"

    @classmethod
    def parse(cls, value: "Token | str") -> "Token":
        """Coerce a raw string to a token, raising InvalidTokenError otherwise."""
        try:
            return cls(value)
        except ValueError:
            raise InvalidTokenError(f"Unknown token: {value!r}") from None

    @property
    def is_operator(self) -> bool:
        return self.value in OPERATOR_CHARS


# =============================================================================
# Evaluation Results
# =============================================================================

@dataclass(frozen=True)
class Ok:
    """Successful evaluation."""
    value: float


@dataclass(frozen=True)
class Err:
    """
    Failed evaluation: an invalid expression.

    Division by zero, a non-numeric or missing operand and a non-finite
    result are all the same kind of error to the user and render as the
    error token. ``reason`` is diagnostic text for logs only.
    """
    reason: str = ""


Result = Union[Ok, Err]


# =============================================================================
# Lexemes
# =============================================================================

@dataclass(frozen=True)
class NumberLexeme:
    """A numeric operand as it appeared in the buffer."""
    value: float
    text: str


@dataclass(frozen=True)
class OperatorLexeme:
    """A binary operator."""
    operator: Operator


Lexeme = Union[NumberLexeme, OperatorLexeme]


# =============================================================================
# API Models
# =============================================================================

class PressRequest(BaseModel):
    """Request model for applying a token to a display buffer."""
    display: str = Field("0", max_length=1024)
    token: str = Field(..., min_length=1, max_length=8)


class KeyRequest(BaseModel):
    """Request model for applying a keyboard key to a display buffer."""
    display: str = Field("0", max_length=1024)
    key: str = Field(..., min_length=1, max_length=32)


class EvaluateRequest(BaseModel):
    """Request model for evaluating a chained expression."""
    expression: str = Field(..., min_length=1, max_length=1024)


class DisplayState(BaseModel):
    """Display buffer returned to the keypad."""
    display: str
    is_error: bool = False


class KeyResult(DisplayState):
    """Display buffer after a keyboard key, flagging ignored keys."""
    ignored: bool = False
