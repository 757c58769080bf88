from typing import Dict, List, Optional

from ..logging import get_logger
from .dataset import DatasetRegistry, Signal
from .errors import ExpressionError
from .expression_tree import ExpressionTree, Result
from ..symbolic.terms import DEFAULT_PRECISION

logger = get_logger(__name__)


class Equation:
    def __init__(self, eq_id: str, expression: str = "", symbolic: bool = False):
        self.id = eq_id
        self.expression = expression
        self.symbolic = symbolic
        self.result: Optional[Result] = None
        self.error: Optional[str] = None

    @property
    def signal(self) -> Optional[Signal]:
        """The result when it is a signal, else None."""
        return self.result if isinstance(self.result, Signal) else None


class _ChainedRegistry:
    """A base registry followed by the results of already evaluated equations."""

    def __init__(self, base: DatasetRegistry):
        self._base = base
        self._extra: List[Optional[Signal]] = []

    def size(self) -> int:
        return self._base.size() + len(self._extra)

    def get(self, index: int) -> Optional[Signal]:
        base_size = self._base.size()
        if index < base_size:
            return self._base.get(index)
        return self._extra[index - base_size]

    def append(self, signal: Optional[Signal]) -> None:
        self._extra.append(signal)


def _to_registry_units(signal: Optional[Signal], x_axis_factor: float) -> Optional[Signal]:
    # Referencing a dataset applies the x axis factor, so undo it on stored results
    if signal is None or x_axis_factor in (0.0, 1.0):
        return signal
    stored = signal.copy()
    stored.scale_x(1.0 / x_axis_factor)
    return stored


class EquationManager:
    """
    Manages an ordered collection of equations (math channels).

    Equation k may reference the signal results of equations 0..k-1 as
    datasets, numbered after the base registry.
    """
    def __init__(self, precision: int = DEFAULT_PRECISION):
        self.precision = precision
        self.equations: Dict[str, Equation] = {}
        self._next_eq_idx = 0
        self._base_size = 0

    def add_equation(self, expression: str = "", symbolic: bool = False) -> Equation:
        eq_id = f"eq{self._next_eq_idx}"
        self._next_eq_idx += 1
        eq = Equation(eq_id, expression, symbolic)
        self.equations[eq_id] = eq
        return eq

    def remove_equation(self, eq_id: str):
        if eq_id in self.equations:
            del self.equations[eq_id]

    def update_expression(self, eq_id: str, expression: str):
        if eq_id in self.equations:
            self.equations[eq_id].expression = expression
            self.equations[eq_id].result = None
            self.equations[eq_id].error = None

    def dataset_index(self, eq_id: str) -> Optional[int]:
        """Index under which an equation's result is referenced, as of the last evaluate_all()."""
        for position, key in enumerate(self.equations):
            if key == eq_id:
                return self._base_size + position
        return None

    def evaluate_all(self, registry: DatasetRegistry, x_axis_factor: float = 1.0):
        """
        Evaluates all equations in insertion order.

        Every equation occupies one dataset slot after the base registry,
        whether or not it produced a signal; slots without a signal cannot be
        referenced.
        """
        self._base_size = registry.size()
        chained = _ChainedRegistry(registry)
        tree = ExpressionTree(chained, self.precision)

        for eq in self.equations.values():
            eq.result = None
            eq.error = None
            if not eq.expression.strip():
                chained.append(None)
                continue

            try:
                if eq.symbolic:
                    eq.result = tree.evaluate_symbolic(eq.expression)
                else:
                    eq.result = tree.evaluate(eq.expression, x_axis_factor)
            except ExpressionError as e:
                eq.error = str(e)
                logger.info(f"{eq.id} failed: {eq.error}")

            chained.append(_to_registry_units(eq.signal, x_axis_factor))
