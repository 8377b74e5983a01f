"""
Keypad Calc - a keypad calculator with a chained left-to-right evaluator.

A single display buffer is driven by discrete key tokens (digits, operators,
decimal point, equals, clear, backspace). Operators are applied strictly in
the order they are entered, with no precedence.
"""

__version__ = "1.0.0"
__author__ = "Keypad Calc Team"
