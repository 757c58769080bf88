"""
Postfix queue evaluation.

Both evaluation modes walk the queue with one stack of Operand values. The
StackEvaluator base class owns the walk, the arity checks and the final
single-result check; NumericEvaluator and the symbolic evaluator only
supply the type-dependent overloads.
"""

from dataclasses import dataclass
from enum import Enum, auto
from types import MappingProxyType
from typing import Any, Deque, List, Union

import numpy as np

from ..logging import get_logger
from . import signal_ops
from .dataset import DatasetRegistry, Signal
from .errors import (
    InvalidDatasetIndexError,
    InvalidFunctionArgumentError,
    MalformedExpressionError,
    SignalLengthMismatchError,
    UnsupportedOperationError,
)
from .tokens import Token, TokenKind

logger = get_logger(__name__)


class OperandKind(Enum):
    SCALAR = auto()
    SIGNAL = auto()
    SYMBOLIC = auto()


@dataclass(frozen=True)
class Operand:
    """One evaluation stack entry: a scalar, an owned signal or a raw symbolic term string."""

    kind: OperandKind
    value: Any

    @classmethod
    def scalar(cls, value: float) -> "Operand":
        return cls(OperandKind.SCALAR, float(value))

    @classmethod
    def signal(cls, value: Signal) -> "Operand":
        return cls(OperandKind.SIGNAL, value)

    @classmethod
    def symbolic(cls, value: str) -> "Operand":
        return cls(OperandKind.SYMBOLIC, value)

    @property
    def is_scalar(self) -> bool:
        return self.kind == OperandKind.SCALAR

    @property
    def is_signal(self) -> bool:
        return self.kind == OperandKind.SIGNAL

    @property
    def is_symbolic(self) -> bool:
        return self.kind == OperandKind.SYMBOLIC


BINARY_UFUNCS = MappingProxyType({
    '+': np.add,
    '-': np.subtract,
    '*': np.multiply,
    '/': np.divide,
    '^': np.power,
})

ELEMENTWISE_UFUNCS = MappingProxyType({
    'sin': np.sin,
    'cos': np.cos,
    'tan': np.tan,
    'asin': np.arcsin,
    'acos': np.arccos,
    'atan': np.arctan,
    'sinh': np.sinh,
    'cosh': np.cosh,
    'tanh': np.tanh,
    'sqrt': np.sqrt,
    'exp': np.exp,
    'log': np.log,
    'log10': np.log10,
    'abs': np.abs,
})

SIGNAL_FUNCTIONS = MappingProxyType({
    'integral': signal_ops.integral,
    'ddt': signal_ops.derivative,
    'rms': signal_ops.rms,
    'fft': signal_ops.fft,
})


def scalar_operation(symbol: str, left: float, right: float) -> float:
    """Apply a binary operator to two scalars with IEEE-754 semantics."""
    with np.errstate(all='ignore'):
        return float(BINARY_UFUNCS[symbol](np.float64(left), np.float64(right)))


def scalar_function(token: Token, value: float) -> float:
    """Apply an elementwise builtin to a scalar.

    Raises:
        InvalidFunctionArgumentError: the function needs a whole signal.
    """
    name = token.value
    if name not in ELEMENTWISE_UFUNCS:
        raise InvalidFunctionArgumentError(
            f"Function '{name}' at position {token.position} requires a dataset argument",
            position=token.position)
    with np.errstate(all='ignore'):
        return float(ELEMENTWISE_UFUNCS[name](np.float64(value)))


class StackEvaluator:
    """Walks a postfix queue; subclasses provide the operand overloads."""

    def evaluate(self, queue: Deque[Token]) -> Operand:
        """Consume the queue and return the single remaining operand.

        Raises:
            MalformedExpressionError: an operator lacks operands, or the
                queue does not reduce to exactly one value.
        """
        stack: List[Operand] = []
        while queue:
            token = queue.popleft()
            stack.append(self._evaluate_token(token, stack))

        if not stack:
            raise MalformedExpressionError("Expression contains no operands")
        if len(stack) > 1:
            raise MalformedExpressionError(
                f"Expression does not reduce to a single value ({len(stack)} operands remain)")
        return stack[0]

    def _evaluate_token(self, token: Token, stack: List[Operand]) -> Operand:
        kind = token.kind
        if kind == TokenKind.NUMBER:
            return Operand.scalar(token.value)
        if kind == TokenKind.DATASET:
            return self.push_dataset(token)
        if kind == TokenKind.VARIABLE:
            return self.push_variable(token)
        if kind == TokenKind.OPERATOR:
            right = self._pop(stack, token)
            left = self._pop(stack, token)
            return self.apply_operator(token, left, right)
        if kind == TokenKind.UNARY_OPERATOR:
            operand = self._pop(stack, token)
            if token.value == '+':
                return operand
            return self.negate(operand)
        if kind == TokenKind.FUNCTION:
            return self.apply_function(token, self._pop(stack, token))
        raise MalformedExpressionError(
            f"Unexpected '{token.text}' at position {token.position}", position=token.position)

    @staticmethod
    def _pop(stack: List[Operand], token: Token) -> Operand:
        if not stack:
            raise MalformedExpressionError(
                f"Missing operand for '{token.text}' at position {token.position}",
                position=token.position)
        return stack.pop()

    def push_dataset(self, token: Token) -> Operand:
        raise NotImplementedError

    def push_variable(self, token: Token) -> Operand:
        raise NotImplementedError

    def apply_operator(self, token: Token, left: Operand, right: Operand) -> Operand:
        raise NotImplementedError

    def negate(self, operand: Operand) -> Operand:
        raise NotImplementedError

    def apply_function(self, token: Token, operand: Operand) -> Operand:
        raise NotImplementedError


class NumericEvaluator(StackEvaluator):
    """Evaluates postfix queues over scalars and registry signals."""

    def __init__(self, registry: DatasetRegistry, x_axis_factor: float = 1.0):
        self._registry = registry
        self._x_axis_factor = x_axis_factor

    def evaluate_result(self, queue: Deque[Token]) -> Union[float, Signal]:
        """Evaluate and unwrap the result operand."""
        result = self.evaluate(queue)
        return result.value

    def push_dataset(self, token: Token) -> Operand:
        index = token.value
        size = self._registry.size() if self._registry is not None else 0
        if index >= size:
            raise InvalidDatasetIndexError(
                f"Invalid dataset index [{index}] at position {token.position} "
                f"({size} datasets available)",
                index=index, position=token.position)

        source = self._registry.get(index)
        if source is None:
            raise InvalidDatasetIndexError(
                f"Dataset [{index}] has no data", index=index, position=token.position)

        signal = source.copy()
        signal.scale_x(self._x_axis_factor)
        logger.debug(f"Resolved dataset [{index}] ({len(signal)} points)")
        return Operand.signal(signal)

    def push_variable(self, token: Token) -> Operand:
        raise UnsupportedOperationError(
            f"Symbolic variable '{token.text}' at position {token.position} "
            "is only valid in symbolic expressions",
            position=token.position)

    def apply_operator(self, token: Token, left: Operand, right: Operand) -> Operand:
        symbol = token.value
        if left.is_scalar and right.is_scalar:
            return Operand.scalar(scalar_operation(symbol, left.value, right.value))

        ufunc = BINARY_UFUNCS[symbol]
        if left.is_signal and right.is_signal:
            if len(left.value) != len(right.value):
                raise SignalLengthMismatchError(
                    f"Operator '{symbol}' at position {token.position} requires signals "
                    f"with equal point counts ({len(left.value)} != {len(right.value)})",
                    left_count=len(left.value), right_count=len(right.value),
                    position=token.position)
            with np.errstate(all='ignore'):
                y = ufunc(left.value.y, right.value.y)
            return Operand.signal(left.value.with_y(y))

        with np.errstate(all='ignore'):
            if left.is_signal:
                return Operand.signal(left.value.with_y(ufunc(left.value.y, right.value)))
            return Operand.signal(right.value.with_y(ufunc(left.value, right.value.y)))

    def negate(self, operand: Operand) -> Operand:
        if operand.is_scalar:
            return Operand.scalar(-operand.value)
        return Operand.signal(operand.value.with_y(-operand.value.y))

    def apply_function(self, token: Token, operand: Operand) -> Operand:
        name = token.value
        if operand.is_scalar:
            return Operand.scalar(scalar_function(token, operand.value))

        if name in SIGNAL_FUNCTIONS:
            return Operand.signal(SIGNAL_FUNCTIONS[name](operand.value))
        with np.errstate(all='ignore'):
            y = ELEMENTWISE_UFUNCS[name](operand.value.y)
        return Operand.signal(operand.value.with_y(y))
