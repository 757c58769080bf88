"""
Polynomial term handling for single-variable symbolic results.

Raw term strings are what the symbolic evaluator passes around: additive
terms such as ``2.0*s^3-1.5*s^1+4.0``. This module splits them into
(power, coefficient) monomials, combines like powers and renders the
canonical form, e.g. ``2*s^3 - 1.5*s + 4``.
"""

import math
from typing import Dict, Iterable, List, Mapping, Tuple, Union

from ..core.errors import ExpressionSyntaxError
from ..core.tokens import SYMBOLIC_VARIABLE

DEFAULT_PRECISION = 15

# Relative size below which a summed coefficient counts as cancelled
CANCELLATION_TOLERANCE = 1e-12

Monomials = Union[Mapping[int, float], Iterable[Tuple[int, float]]]


def break_apart_terms(expression: str) -> List[str]:
    """Split an expression into its additive terms, each keeping its sign.

    A '+' or '-' directly after '^', '*' or an exponent marker belongs to
    the current term rather than starting a new one.
    """
    s = ''.join(expression.split())
    terms: List[str] = []
    start = 0
    for i in range(1, len(s)):
        if s[i] in '+-' and s[i - 1] not in '^*eE+-':
            terms.append(s[start:i])
            start = i
    terms.append(s[start:])
    return [t for t in terms if t and t not in '+-']


def _factor_power(factor: str, term: str) -> int:
    suffix = factor[1:]
    if not suffix:
        return 1
    if not suffix.startswith('^'):
        raise ExpressionSyntaxError(f"Unrecognized term '{term}'")
    try:
        exponent = float(suffix[1:])
    except ValueError:
        raise ExpressionSyntaxError(f"Invalid exponent in term '{term}'") from None
    if not exponent.is_integer():
        raise ExpressionSyntaxError(f"Non-integer exponent in term '{term}'")
    return int(exponent)


def find_powers_and_coefficients(terms: Iterable[str]) -> List[Tuple[int, float]]:
    """Extract (power, coefficient) from each term.

    A term is a product of numeric factors and variable factors (``s`` or
    ``s^n``) with an optional leading sign; numeric factors multiply into the
    coefficient and variable exponents add up.
    """
    result = []
    for term in terms:
        sign = -1.0 if term.startswith('-') else 1.0
        body = term[1:] if term[:1] in ('+', '-') else term

        coefficient = sign
        power = 0
        for factor in body.split('*'):
            if factor[:1].lower() == SYMBOLIC_VARIABLE:
                power += _factor_power(factor, term)
                continue
            try:
                coefficient *= float(factor)
            except ValueError:
                raise ExpressionSyntaxError(f"Unrecognized term '{term}'") from None
        result.append((power, coefficient))
    return result


def _cancelled(total: float, magnitude: float) -> bool:
    # inf and nan never cancel; an overflowed magnitude leaves exact zero only
    if not math.isfinite(total):
        return False
    if not math.isfinite(magnitude):
        return total == 0.0
    return abs(total) <= CANCELLATION_TOLERANCE * magnitude


def combine_like_terms(pairs: Iterable[Tuple[int, float]]) -> Dict[int, float]:
    """Sum coefficients per power and drop the powers that cancel out."""
    sums: Dict[int, float] = {}
    magnitudes: Dict[int, float] = {}
    for power, coefficient in pairs:
        sums[power] = sums.get(power, 0.0) + coefficient
        magnitudes[power] = magnitudes.get(power, 0.0) + abs(coefficient)

    return {
        power: total for power, total in sums.items()
        if not _cancelled(total, magnitudes[power])
    }


def _items(monomials: Monomials) -> List[Tuple[int, float]]:
    if isinstance(monomials, Mapping):
        return list(monomials.items())
    return list(monomials)


def to_monomials(expression: str) -> Dict[int, float]:
    """Raw or rendered expression to a {power: coefficient} mapping."""
    return combine_like_terms(find_powers_and_coefficients(break_apart_terms(expression)))


def join_raw_terms(monomials: Monomials) -> str:
    """Build a raw term string. Coefficients keep full float precision."""
    pieces = []
    for power, coefficient in _items(monomials):
        text = repr(float(coefficient))
        if power != 0:
            text = f"{text}*{SYMBOLIC_VARIABLE}^{power}"
        if pieces and not text.startswith('-'):
            text = '+' + text
        pieces.append(text)
    return ''.join(pieces) or '0.0'


def render_polynomial(monomials: Monomials, precision: int = DEFAULT_PRECISION) -> str:
    """Canonical text of a polynomial, highest power first."""
    items = sorted(_items(monomials), key=lambda item: item[0], reverse=True)
    if not items:
        return '0'

    parts = []
    for power, coefficient in items:
        number = f"{abs(coefficient):.{precision}g}"
        if power == 0:
            body = number
        else:
            variable = SYMBOLIC_VARIABLE if power == 1 else f"{SYMBOLIC_VARIABLE}^{power}"
            body = variable if number == '1' else f"{number}*{variable}"

        negative = coefficient < 0
        if not parts:
            parts.append(('-' if negative else '') + body)
        else:
            parts.append((' - ' if negative else ' + ') + body)
    return ''.join(parts)


def simplify(expression: str, precision: int = DEFAULT_PRECISION) -> str:
    """Combine like terms of an expression and render it canonically."""
    return render_polynomial(to_monomials(expression), precision)
