"""Keyboard key names to keypad tokens."""

from typing import Optional

from keypad_calc.models import Token

# Named keys, as reported by browser keydown events
NAMED_KEYS: dict[str, Token] = {
    "Enter": Token.EQUALS,
    "Escape": Token.CLEAR,
    "Backspace": Token.BACKSPACE,
}

# Keys that map to the token with the same character
DIRECT_KEYS = frozenset("0123456789+-*/%.")


def key_to_token(key: str) -> Optional[Token]:
    """Map a key name to a token, or None if the key is ignored."""
    if key in NAMED_KEYS:
        return NAMED_KEYS[key]
    if key in DIRECT_KEYS:
        return Token(key)
    return None
