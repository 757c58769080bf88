"""
Lexeme classification for expression strings.

Each ``next_is_*`` helper looks at the text starting at ``cursor`` and
returns the length of the lexeme it recognizes, or 0 when the text does not
start with that class of lexeme. ``classify`` tries them in a fixed order
and wraps the first match in a Token.
"""

import re
from typing import Optional

from .errors import MalformedNumberError
from .tokens import (
    BINARY_OPERATORS,
    FUNCTION_NAMES,
    SYMBOLIC_VARIABLE,
    UNARY_OPERATORS,
    Token,
    TokenKind,
)

_UNSIGNED_NUMBER = re.compile(r'(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?')
_DATASET = re.compile(r'\[(\d+)\]')


def next_is_number(expression: str, cursor: int = 0, last_was_operator: bool = True) -> int:
    """Length of the numeric literal at cursor, or 0.

    A leading sign belongs to the number only when the previous token was an
    operator (or there was no previous token); otherwise it is left for the
    binary operator.

    Raises:
        MalformedNumberError: digits are followed by a second decimal point
            or by an exponent marker without digits.
    """
    start = cursor
    if (last_was_operator and cursor < len(expression)
            and expression[cursor] in UNARY_OPERATORS):
        cursor += 1

    match = _UNSIGNED_NUMBER.match(expression, cursor)
    if match is None:
        return 0

    end = match.end()
    if end < len(expression) and expression[end] in '.eE':
        bad = expression[start:end + 1]
        raise MalformedNumberError(
            f"Malformed number '{bad}' at position {start}", position=start)
    return end - start


def next_is_dataset(expression: str, cursor: int = 0) -> int:
    """Length of a ``[n]`` dataset reference at cursor, or 0."""
    match = _DATASET.match(expression, cursor)
    return match.end() - cursor if match else 0


def next_is_function(expression: str, cursor: int = 0) -> int:
    """Length of a builtin function name at cursor (case-insensitive), or 0."""
    for name in FUNCTION_NAMES:
        if expression[cursor:cursor + len(name)].lower() == name:
            return len(name)
    return 0


def next_is_operator(expression: str, cursor: int = 0) -> int:
    if cursor < len(expression) and expression[cursor] in BINARY_OPERATORS:
        return 1
    return 0


def next_is_variable(expression: str, cursor: int = 0) -> int:
    """1 if the symbolic variable stands alone at cursor, else 0."""
    if cursor >= len(expression) or expression[cursor].lower() != SYMBOLIC_VARIABLE:
        return 0
    following = expression[cursor + 1:cursor + 2]
    if following and (following.isalnum() or following == '_'):
        return 0
    return 1


def classify(expression: str, cursor: int, last_was_operator: bool) -> Optional[Token]:
    """Classify the lexeme starting at cursor.

    Returns:
        The Token for the lexeme, or None when nothing matches.
    """
    length = next_is_number(expression, cursor, last_was_operator)
    if length:
        text = expression[cursor:cursor + length]
        return Token(TokenKind.NUMBER, text, cursor, float(text))

    length = next_is_dataset(expression, cursor)
    if length:
        text = expression[cursor:cursor + length]
        return Token(TokenKind.DATASET, text, cursor, int(text[1:-1]))

    length = next_is_function(expression, cursor)
    if length:
        text = expression[cursor:cursor + length]
        return Token(TokenKind.FUNCTION, text, cursor, text.lower())

    if next_is_operator(expression, cursor):
        symbol = expression[cursor]
        if last_was_operator and symbol in UNARY_OPERATORS:
            return Token(TokenKind.UNARY_OPERATOR, symbol, cursor, symbol)
        return Token(TokenKind.OPERATOR, symbol, cursor, symbol)

    char = expression[cursor:cursor + 1]
    if char == '(':
        return Token(TokenKind.OPEN_PAREN, char, cursor, char)
    if char == ')':
        return Token(TokenKind.CLOSE_PAREN, char, cursor, char)

    if next_is_variable(expression, cursor):
        return Token(TokenKind.VARIABLE, char, cursor, SYMBOLIC_VARIABLE)

    return None
