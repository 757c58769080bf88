import math

import numpy as np
import pytest

from sigcalc.core.dataset import Signal, SignalList
from sigcalc.core.errors import (
    InvalidDatasetIndexError,
    InvalidFunctionArgumentError,
    MalformedExpressionError,
    SignalLengthMismatchError,
    UnsupportedOperationError,
)
from sigcalc.core.evaluator import NumericEvaluator, Operand, OperandKind
from sigcalc.core.shunting_yard import to_postfix


def evaluate(expression, registry=None, x_axis_factor=1.0):
    evaluator = NumericEvaluator(registry if registry is not None else SignalList(), x_axis_factor)
    return evaluator.evaluate_result(to_postfix(expression))


# ── Scalars ───────────────────────────────────────────────────────────────────

@pytest.mark.parametrize("expression, expected", [
    ("2+3*4", 14.0),
    ("(2+3)*4", 20.0),
    ("2^3^2", 512.0),
    ("10-4-3", 3.0),
    ("-2*3", -6.0),
    ("-(2+3)", -5.0),
    ("+4", 4.0),
    ("1.5e2/3", 50.0),
])
def test_scalar_arithmetic(expression, expected) -> None:
    assert evaluate(expression) == pytest.approx(expected)


def test_scalar_functions() -> None:
    assert evaluate("cos(0)") == pytest.approx(1.0)
    assert evaluate("SQRT(16)") == pytest.approx(4.0)
    assert evaluate("log10(1000)") == pytest.approx(3.0)
    assert evaluate("abs(-2.5)") == pytest.approx(2.5)


def test_division_by_zero_is_not_an_error() -> None:
    assert evaluate("1/0") == math.inf
    assert evaluate("-1/0") == -math.inf
    assert math.isnan(evaluate("0/0"))


def test_negative_sqrt_and_log_give_nan() -> None:
    assert math.isnan(evaluate("sqrt(-1)"))
    assert math.isnan(evaluate("log(-1)"))


def test_dataset_function_rejects_scalar() -> None:
    with pytest.raises(InvalidFunctionArgumentError, match="'rms'"):
        evaluate("rms(2)")


# ── Signals ───────────────────────────────────────────────────────────────────

def test_dataset_referenced_twice_doubles(registry) -> None:
    result = evaluate("[0]+[0]", registry)
    assert np.array_equal(result.y, [2, 4, 6])
    assert np.array_equal(result.x, [0, 1, 2])


def test_signal_scalar_overloads(registry) -> None:
    assert np.array_equal(evaluate("[0]*2", registry).y, [2, 4, 6])
    assert np.array_equal(evaluate("2*[0]", registry).y, [2, 4, 6])
    assert np.allclose(evaluate("6/[0]", registry).y, [6, 3, 2])
    assert np.array_equal(evaluate("[0]-1", registry).y, [0, 1, 2])
    assert np.array_equal(evaluate("[0]^2", registry).y, [1, 4, 9])


def test_signal_signal_overload(registry) -> None:
    result = evaluate("[1]/[0]", registry)
    assert np.allclose(result.y, [10, 10, 10])


def test_unary_minus_on_signal(registry) -> None:
    assert np.array_equal(evaluate("-[0]", registry).y, [-1, -2, -3])


def test_elementwise_function_on_signal(registry) -> None:
    result = evaluate("sqrt([0]*[0])", registry)
    assert np.allclose(result.y, [1, 2, 3])
    assert np.array_equal(result.x, [0, 1, 2])


def test_signal_function(registry) -> None:
    result = evaluate("integral([0])", registry)
    assert np.allclose(result.y, [0.0, 1.5, 4.0])


def test_x_axis_factor_applied_to_clone(registry) -> None:
    result = evaluate("[0]", registry, x_axis_factor=0.5)
    assert np.array_equal(result.x, [0, 0.5, 1.0])
    # The registry copy is untouched
    assert np.array_equal(registry.get(0).x, [0, 1, 2])


def test_registry_never_mutated(registry) -> None:
    before = registry.get(0).y.copy()
    evaluate("-[0]*3+1", registry)
    assert np.array_equal(registry.get(0).y, before)


def test_division_by_zero_in_signal(signal_factory) -> None:
    registry = SignalList([signal_factory([0.0, 1.0, -1.0])])
    result = evaluate("1/[0]", registry)
    assert np.isinf(result.y[0])
    assert result.y[1] == 1.0


# ── Errors ────────────────────────────────────────────────────────────────────

def test_invalid_dataset_index(registry) -> None:
    with pytest.raises(InvalidDatasetIndexError, match=r"\[5\]") as exc_info:
        evaluate("[5]", registry)
    assert exc_info.value.index == 5
    assert registry.size() == 2


def test_empty_registry_slot(signal_factory) -> None:
    registry = SignalList([None])
    with pytest.raises(InvalidDatasetIndexError, match="no data"):
        evaluate("[0]", registry)


def test_signal_length_mismatch(signal_factory) -> None:
    registry = SignalList([signal_factory([1, 2, 3]), signal_factory([1, 2])])
    with pytest.raises(SignalLengthMismatchError) as exc_info:
        evaluate("[0]+[1]", registry)
    assert (exc_info.value.left_count, exc_info.value.right_count) == (3, 2)


def test_missing_operand() -> None:
    with pytest.raises(MalformedExpressionError, match="Missing operand"):
        evaluate("2*")


def test_leftover_operands() -> None:
    with pytest.raises(MalformedExpressionError, match="2 operands remain"):
        evaluate("2 3")


def test_empty_parentheses() -> None:
    with pytest.raises(MalformedExpressionError):
        evaluate("()")


def test_symbolic_variable_rejected() -> None:
    with pytest.raises(UnsupportedOperationError, match="symbolic"):
        evaluate("s+1")


def test_operand_constructors() -> None:
    assert Operand.scalar(3).kind == OperandKind.SCALAR
    assert Operand.scalar(3).value == 3.0
    signal = Signal([0, 1], [0, 1])
    assert Operand.signal(signal).is_signal
    assert Operand.symbolic("s").is_symbolic
