"""
Entry point for solving user expressions.

ExpressionTree ties the converter and the two evaluators together. The
``evaluate*`` methods raise ExpressionError; the ``solve*`` methods never do
and report problems as a message string instead, which is what user-facing
callers display.
"""

from dataclasses import dataclass
from typing import Optional, Union

from ..logging import get_logger
from ..symbolic.evaluator import SymbolicEvaluator
from ..symbolic.terms import DEFAULT_PRECISION, simplify
from .dataset import DatasetRegistry, Signal, SignalList
from .errors import ExpressionError
from .evaluator import NumericEvaluator
from .shunting_yard import to_postfix

logger = get_logger(__name__)

Result = Union[float, Signal, str]


@dataclass(frozen=True)
class Solution:
    """Outcome of a solve call: a value or an error message, never both."""

    value: Optional[Result] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class ExpressionTree:
    """Parses and evaluates expressions against a dataset registry.

    Args:
        registry: Signals addressable as ``[0]``, ``[1]``, ... (may be None
            for purely scalar or symbolic use)
        precision: Significant digits used when rendering symbolic results
    """

    def __init__(self, registry: Optional[DatasetRegistry] = None,
                 precision: int = DEFAULT_PRECISION):
        self._registry = registry if registry is not None else SignalList()
        self.precision = precision

    @property
    def registry(self) -> DatasetRegistry:
        return self._registry

    def evaluate(self, expression: str, x_axis_factor: float = 1.0) -> Union[float, Signal]:
        """Evaluate a numeric expression.

        Args:
            expression: Infix expression; datasets are referenced as ``[i]``
            x_axis_factor: Multiplier applied to the x axis of every
                referenced dataset

        Returns:
            A float for scalar-only expressions, otherwise a new Signal

        Raises:
            ExpressionError: on any syntax or semantic problem
        """
        queue = to_postfix(expression)
        evaluator = NumericEvaluator(self._registry, x_axis_factor)
        return evaluator.evaluate_result(queue)

    def evaluate_symbolic(self, expression: str) -> str:
        """Evaluate an expression in ``s`` and return its canonical polynomial.

        Raises:
            ExpressionError: on any syntax or semantic problem
        """
        queue = to_postfix(expression)
        raw = SymbolicEvaluator().evaluate_raw(queue)
        return simplify(raw, self.precision)

    def solve(self, expression: str, x_axis_factor: float = 1.0) -> Solution:
        """Like evaluate(), reporting failures in Solution.error."""
        try:
            return Solution(value=self.evaluate(expression, x_axis_factor))
        except ExpressionError as e:
            logger.info(f"Failed to solve {expression!r}: {e}")
            return Solution(error=str(e))

    def solve_symbolic(self, expression: str) -> Solution:
        """Like evaluate_symbolic(), reporting failures in Solution.error."""
        try:
            return Solution(value=self.evaluate_symbolic(expression))
        except ExpressionError as e:
            logger.info(f"Failed to solve {expression!r} symbolically: {e}")
            return Solution(error=str(e))


def solve(expression: str, registry: Optional[DatasetRegistry] = None,
          x_axis_factor: float = 1.0) -> Solution:
    """Solve a numeric expression with a throwaway ExpressionTree."""
    return ExpressionTree(registry).solve(expression, x_axis_factor)


def solve_symbolic(expression: str, precision: int = DEFAULT_PRECISION) -> Solution:
    """Solve a symbolic expression with a throwaway ExpressionTree."""
    return ExpressionTree(precision=precision).solve_symbolic(expression)
