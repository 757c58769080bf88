"""
Symbolic evaluation of postfix queues in the single variable ``s``.

Operands are scalars or raw term strings (see ``terms``). Scalar-only
operations are computed directly; anything touching a term string builds a
new raw term string.
"""

from typing import Dict

import numpy as np

from ..core.errors import UnsupportedOperationError, UnsupportedSymbolicOperationError
from ..core.evaluator import Operand, StackEvaluator, scalar_function, scalar_operation
from ..core.tokens import SYMBOLIC_VARIABLE, Token
from ..logging import get_logger
from .terms import (
    break_apart_terms,
    combine_like_terms,
    find_powers_and_coefficients,
    join_raw_terms,
    to_monomials,
)

logger = get_logger(__name__)

# Largest exponent a multi-term base is expanded to
MAX_EXPANSION_POWER = 64


def _as_raw(operand: Operand) -> str:
    if operand.is_scalar:
        return repr(operand.value)
    return operand.value


def _concatenate(first: str, second: str) -> str:
    if second.startswith(('+', '-')):
        return first + second
    return f"{first}+{second}"


def _negate(raw: str) -> str:
    pairs = find_powers_and_coefficients(break_apart_terms(raw))
    return join_raw_terms((power, -coefficient) for power, coefficient in pairs)


def _scale(raw: str, factor: float) -> str:
    pairs = find_powers_and_coefficients(break_apart_terms(raw))
    with np.errstate(all='ignore'):
        return join_raw_terms(
            (power, float(np.float64(coefficient) * factor)) for power, coefficient in pairs)


def _multiply(first: Dict[int, float], second: Dict[int, float]) -> Dict[int, float]:
    """Distribute every term of first over every term of second."""
    return combine_like_terms(
        (p1 + p2, c1 * c2)
        for p1, c1 in first.items()
        for p2, c2 in second.items()
    )


class SymbolicEvaluator(StackEvaluator):
    """Reduces a postfix queue to a raw term string."""

    def evaluate_raw(self, queue) -> str:
        """Evaluate and return the raw (not yet simplified) term string."""
        raw = _as_raw(self.evaluate(queue))
        logger.debug(f"Raw symbolic result: {raw}")
        return raw

    def push_dataset(self, token: Token) -> Operand:
        raise UnsupportedOperationError(
            f"Dataset reference '{token.text}' at position {token.position} "
            "is not allowed in symbolic expressions",
            position=token.position)

    def push_variable(self, token: Token) -> Operand:
        return Operand.symbolic(SYMBOLIC_VARIABLE)

    def apply_operator(self, token: Token, left: Operand, right: Operand) -> Operand:
        symbol = token.value
        if left.is_scalar and right.is_scalar:
            return Operand.scalar(scalar_operation(symbol, left.value, right.value))

        if symbol == '+':
            return Operand.symbolic(_concatenate(_as_raw(left), _as_raw(right)))
        if symbol == '-':
            return Operand.symbolic(_concatenate(_as_raw(left), _negate(_as_raw(right))))
        if symbol == '*':
            if left.is_scalar:
                return Operand.symbolic(_scale(right.value, left.value))
            if right.is_scalar:
                return Operand.symbolic(_scale(left.value, right.value))
            product = _multiply(to_monomials(left.value), to_monomials(right.value))
            return Operand.symbolic(join_raw_terms(product))
        if symbol == '/':
            if right.is_symbolic:
                raise UnsupportedSymbolicOperationError(
                    f"Division by a symbolic value at position {token.position} is not supported",
                    position=token.position)
            with np.errstate(all='ignore'):
                reciprocal = float(np.float64(1.0) / np.float64(right.value))
            return Operand.symbolic(_scale(left.value, reciprocal))
        return self._power(token, left, right)

    def _power(self, token: Token, base: Operand, exponent: Operand) -> Operand:
        if exponent.is_symbolic:
            raise UnsupportedSymbolicOperationError(
                f"Exponentiation by a symbolic value at position {token.position} is not supported",
                position=token.position)
        if not float(exponent.value).is_integer():
            raise UnsupportedSymbolicOperationError(
                f"Symbolic values can only be raised to integer powers "
                f"(got {exponent.value:g} at position {token.position})",
                position=token.position)

        n = int(exponent.value)
        monomials = to_monomials(base.value)
        if not monomials:
            # Base simplified to zero: 0^n as a scalar (1, 0 or inf)
            return Operand.scalar(scalar_operation('^', 0.0, float(n)))
        if n == 0:
            return Operand.symbolic('1.0')

        if len(monomials) == 1:
            with np.errstate(all='ignore'):
                raised = {
                    power * n: float(np.power(np.float64(coefficient), float(n)))
                    for power, coefficient in monomials.items()
                }
            return Operand.symbolic(join_raw_terms(raised))

        if n < 0:
            raise UnsupportedSymbolicOperationError(
                f"Negative powers of a multi-term expression at position {token.position} "
                "are not supported",
                position=token.position)
        if n > MAX_EXPANSION_POWER:
            raise UnsupportedSymbolicOperationError(
                f"Cannot expand a multi-term expression to power {n} at position {token.position} "
                f"(limit is {MAX_EXPANSION_POWER})",
                position=token.position)

        result = {0: 1.0}
        for _ in range(n):
            result = _multiply(result, monomials)
        return Operand.symbolic(join_raw_terms(result))

    def negate(self, operand: Operand) -> Operand:
        if operand.is_scalar:
            return Operand.scalar(-operand.value)
        return Operand.symbolic(_negate(operand.value))

    def apply_function(self, token: Token, operand: Operand) -> Operand:
        if operand.is_symbolic:
            raise UnsupportedSymbolicOperationError(
                f"Function '{token.value}' at position {token.position} cannot take "
                "a symbolic argument",
                position=token.position)
        return Operand.scalar(scalar_function(token, operand.value))
