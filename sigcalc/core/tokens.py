"""
Token model and the fixed operator/function tables shared by the parser
and both evaluators.
"""

from dataclasses import dataclass
from enum import Enum, auto
from types import MappingProxyType
from typing import Any


class TokenKind(Enum):
    """Lexeme classes recognized by the classifier."""

    NUMBER = auto()          # Signed/unsigned decimal literal
    DATASET = auto()         # [<index>] reference into the registry
    FUNCTION = auto()        # Builtin function name
    OPERATOR = auto()        # Binary + - * / ^
    UNARY_OPERATOR = auto()  # Prefix - or +
    OPEN_PAREN = auto()
    CLOSE_PAREN = auto()
    VARIABLE = auto()        # Symbolic variable (symbolic mode only)


@dataclass(frozen=True)
class Token:
    """A classified substring of the expression."""

    kind: TokenKind
    text: str
    position: int
    value: Any = None

    @property
    def is_operand(self) -> bool:
        return self.kind in OPERAND_KINDS

    @property
    def is_operator(self) -> bool:
        return self.kind in (TokenKind.OPERATOR, TokenKind.UNARY_OPERATOR)

    def __str__(self) -> str:
        if self.kind == TokenKind.UNARY_OPERATOR:
            return f"u{self.value}"
        return self.text


OPERAND_KINDS = frozenset({TokenKind.NUMBER, TokenKind.DATASET, TokenKind.VARIABLE})

BINARY_OPERATORS = frozenset('+-*/^')
UNARY_OPERATORS = frozenset('-+')

# Binary precedence; unary operators share the top level with '^'
PRECEDENCE = MappingProxyType({
    '+': 1,
    '-': 1,
    '*': 2,
    '/': 2,
    '^': 3,
})
UNARY_PRECEDENCE = 3

RIGHT_ASSOCIATIVE = frozenset('^')

SYMBOLIC_VARIABLE = 's'

# Functions that accept either a scalar or a signal (applied to y values)
ELEMENTWISE_FUNCTIONS = (
    'sin', 'cos', 'tan',
    'asin', 'acos', 'atan',
    'sinh', 'cosh', 'tanh',
    'sqrt', 'exp', 'log', 'log10', 'abs',
)

# Functions that only make sense for a whole signal
DATASET_FUNCTIONS = ('integral', 'ddt', 'rms', 'fft')

# Longest first so that prefix matching prefers 'log10' over 'log'
FUNCTION_NAMES = tuple(sorted(ELEMENTWISE_FUNCTIONS + DATASET_FUNCTIONS,
                              key=len, reverse=True))


def precedence(token: Token) -> int:
    """Binding strength of an operator token."""
    if token.kind == TokenKind.UNARY_OPERATOR:
        return UNARY_PRECEDENCE
    return PRECEDENCE[token.value]


def is_right_associative(token: Token) -> bool:
    if token.kind == TokenKind.UNARY_OPERATOR:
        return True
    return token.value in RIGHT_ASSOCIATIVE
