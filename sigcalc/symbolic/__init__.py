"""Single-variable polynomial algebra for transfer-function style expressions."""
from .evaluator import SymbolicEvaluator
from .terms import (
    break_apart_terms,
    combine_like_terms,
    find_powers_and_coefficients,
    render_polynomial,
    simplify,
)

__all__ = [
    'SymbolicEvaluator',
    'break_apart_terms',
    'combine_like_terms',
    'find_powers_and_coefficients',
    'render_polynomial',
    'simplify',
]
