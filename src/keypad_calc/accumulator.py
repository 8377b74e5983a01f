"""
Input accumulator for the keypad.

``apply_token`` is a pure reducer ``(buffer, token) -> buffer``; the
``Calculator`` session wraps it, keeps the current buffer, and pushes every
new display string to a rendering sink.
"""

from typing import Callable, Iterable, Optional

import structlog

from keypad_calc.evaluator import ERROR_TOKEN, evaluate, format_result
from keypad_calc.keymap import key_to_token
from keypad_calc.lexer import ends_with_operator, last_segment
from keypad_calc.models import Err, Token

logger = structlog.get_logger()

INITIAL_DISPLAY = "0"

DisplaySink = Callable[[str], None]


# =============================================================================
# Reducer
# =============================================================================

def apply_token(buffer: str, token: Token | str) -> str:
    """
    Return the buffer that results from pressing ``token``.

    Raises:
        InvalidTokenError: if ``token`` is not a keypad token.
    """
    return _transition(buffer, Token.parse(token))


def _transition(buffer: str, token: Token) -> str:
    if token is Token.EQUALS:
        return format_result(evaluate(buffer))

    if token is Token.CLEAR:
        return INITIAL_DISPLAY

    if buffer in (INITIAL_DISPLAY, ERROR_TOKEN):
        if token is Token.BACKSPACE:
            return INITIAL_DISPLAY
        if token is Token.DECIMAL:
            return "0."
        return token.value

    if token.is_operator:
        return _apply_operator(buffer, token)

    if token is Token.BACKSPACE:
        return buffer[:-1] or INITIAL_DISPLAY

    if token is Token.DECIMAL:
        segment = last_segment(buffer).lstrip("+-")
        if segment and "." not in segment:
            return buffer + "."
        return buffer

    return buffer + token.value


def _apply_operator(buffer: str, token: Token) -> str:
    if ends_with_operator(buffer):
        # Replace the pending operator rather than stacking a second one
        return "".join(buffer.split())[:-1] + f" {token.value} "

    result = evaluate(buffer)
    if isinstance(result, Err):
        return ERROR_TOKEN
    return f"{format_result(result)} {token.value} "


# =============================================================================
# Session
# =============================================================================

class Calculator:
    """
    A keypad session holding the display buffer.

    Every applied token is forwarded to ``sink`` (if any) with the new
    display text, the way a button click updates an on-screen display.
    """

    def __init__(self, sink: Optional[DisplaySink] = None, initial: str = INITIAL_DISPLAY):
        self.sink = sink
        self._display = initial

    @property
    def display(self) -> str:
        return self._display

    @property
    def is_error(self) -> bool:
        return self._display == ERROR_TOKEN

    def press(self, token: Token | str) -> str:
        """Apply a token and return the new display."""
        token = Token.parse(token)
        previous = self._display
        self._display = _transition(previous, token)
        logger.debug(
            "Token applied",
            token=token.value,
            before=previous,
            display=self._display,
        )
        if self.sink is not None:
            self.sink(self._display)
        return self._display

    def press_key(self, key: str) -> Optional[str]:
        """
        Apply a keyboard key.

        Returns the new display, or None when the key has no mapping and
        was ignored.
        """
        token = key_to_token(key)
        if token is None:
            logger.debug("Key ignored", key=key)
            return None
        return self.press(token)

    def feed(self, tokens: Iterable[Token | str]) -> str:
        """Apply tokens in order and return the final display."""
        for token in tokens:
            self.press(token)
        return self._display

    def clear(self) -> str:
        return self.press(Token.CLEAR)
