"""
Exception hierarchy for expression parsing and evaluation.

Every error raised while converting or evaluating an expression derives from
ExpressionError, which itself is a ValueError so callers that already guard
evaluation with ``except ValueError`` keep working. The message of each
exception is the human-readable description reported to the user.
"""

from typing import Any, Dict, Optional


class ExpressionError(ValueError):
    """Base class for all expression problems."""

    def __init__(self, message: str, position: Optional[int] = None,
                 context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.position = position
        self.context = context or {}


# Syntax errors: the text itself cannot be turned into a postfix queue

class ExpressionSyntaxError(ExpressionError):
    """The expression text is not well formed."""


class EmptyExpressionError(ExpressionSyntaxError):
    """Nothing to evaluate."""


class UnrecognizedTokenError(ExpressionSyntaxError):
    """No lexeme class matches at the cursor."""


class UnbalancedParenthesesError(ExpressionSyntaxError):
    """Opening and closing parenthesis counts differ."""


class MismatchedParenthesisError(ExpressionSyntaxError):
    """A ')' has no matching '(' on the operator stack."""


class MalformedNumberError(ExpressionSyntaxError):
    """A numeric literal is incomplete or has trailing garbage."""


class FunctionSyntaxError(ExpressionSyntaxError):
    """A builtin function name is not followed by its argument list."""


# Semantic errors: well-formed text that cannot be evaluated

class ExpressionSemanticError(ExpressionError):
    """The expression parsed but cannot be evaluated."""


class InvalidDatasetIndexError(ExpressionSemanticError):
    """A dataset reference points outside the registry."""

    def __init__(self, message: str, index: Optional[int] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.index = index


class SignalLengthMismatchError(ExpressionSemanticError):
    """A binary operation received signals with different point counts."""

    def __init__(self, message: str, left_count: Optional[int] = None,
                 right_count: Optional[int] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.left_count = left_count
        self.right_count = right_count


class MalformedExpressionError(ExpressionSemanticError):
    """Wrong number of operands for an operator, or left over at the end."""


class UnsupportedOperationError(ExpressionSemanticError):
    """The operation is not defined for the operand types involved."""


class UnsupportedSymbolicOperationError(UnsupportedOperationError):
    """Division or exponentiation by a symbolic value, and similar."""


class InvalidFunctionArgumentError(ExpressionSemanticError):
    """A builtin function received an argument type it cannot handle."""


__all__ = [
    "ExpressionError",
    "ExpressionSyntaxError",
    "EmptyExpressionError",
    "UnrecognizedTokenError",
    "UnbalancedParenthesesError",
    "MismatchedParenthesisError",
    "MalformedNumberError",
    "FunctionSyntaxError",
    "ExpressionSemanticError",
    "InvalidDatasetIndexError",
    "SignalLengthMismatchError",
    "MalformedExpressionError",
    "UnsupportedOperationError",
    "UnsupportedSymbolicOperationError",
    "InvalidFunctionArgumentError",
]
