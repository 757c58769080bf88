"""
Infix to postfix conversion (Dijkstra's shunting-yard algorithm).

The converter walks the expression with the classifier and keeps its
working state in a ParserState that lives only for one conversion.
"""

from collections import deque
from dataclasses import dataclass, field
from typing import Deque, List

from ..logging import get_logger
from .classifier import classify
from .errors import (
    EmptyExpressionError,
    FunctionSyntaxError,
    MismatchedParenthesisError,
    UnbalancedParenthesesError,
    UnrecognizedTokenError,
)
from .tokens import Token, TokenKind, is_right_associative, precedence

logger = get_logger(__name__)


@dataclass
class ParserState:
    """Working state for one infix to postfix conversion."""

    operator_stack: List[Token] = field(default_factory=list)
    output: Deque[Token] = field(default_factory=deque)
    last_was_operator: bool = True

    def pop_to_output(self) -> None:
        self.output.append(self.operator_stack.pop())


def parentheses_balanced(expression: str) -> bool:
    """True when the expression has as many ')' as '('.

    Ordering is left to the converter: ')(' passes here and fails later
    as a mismatched parenthesis.
    """
    return expression.count('(') == expression.count(')')


def _process_operator(state: ParserState, token: Token) -> None:
    current = precedence(token)
    right = is_right_associative(token)
    while state.operator_stack and state.operator_stack[-1].is_operator:
        top = precedence(state.operator_stack[-1])
        if top > current or (top == current and not right):
            state.pop_to_output()
        else:
            break
    state.operator_stack.append(token)


def _process_close_parenthesis(state: ParserState, token: Token) -> None:
    while state.operator_stack and state.operator_stack[-1].kind != TokenKind.OPEN_PAREN:
        state.pop_to_output()

    if not state.operator_stack:
        raise MismatchedParenthesisError(
            f"Unmatched ')' at position {token.position}", position=token.position)

    state.operator_stack.pop()
    if state.operator_stack and state.operator_stack[-1].kind == TokenKind.FUNCTION:
        state.pop_to_output()


def _check_function_call(expression: str, token: Token) -> None:
    cursor = token.position + len(token.text)
    while cursor < len(expression) and expression[cursor].isspace():
        cursor += 1
    if cursor >= len(expression) or expression[cursor] != '(':
        raise FunctionSyntaxError(
            f"Function '{token.value}' at position {token.position} must be followed by '('",
            position=token.position)


def _process_token(state: ParserState, expression: str, token: Token) -> None:
    kind = token.kind
    if token.is_operand:
        state.output.append(token)
        state.last_was_operator = False
    elif kind == TokenKind.FUNCTION:
        _check_function_call(expression, token)
        state.operator_stack.append(token)
        state.last_was_operator = True
    elif token.is_operator:
        _process_operator(state, token)
        state.last_was_operator = True
    elif kind == TokenKind.OPEN_PAREN:
        state.operator_stack.append(token)
        state.last_was_operator = True
    else:
        _process_close_parenthesis(state, token)
        state.last_was_operator = False


def to_postfix(expression: str) -> Deque[Token]:
    """Convert an infix expression to a postfix token queue.

    Raises:
        EmptyExpressionError: nothing but whitespace.
        UnbalancedParenthesesError: the parenthesis pre-check failed.
        MismatchedParenthesisError: a ')' closes nothing on the stack.
        UnrecognizedTokenError: no lexeme class matches at some position.
        MalformedNumberError: a numeric literal is incomplete.
        FunctionSyntaxError: a function name is not followed by '('.
    """
    if not expression or not expression.strip():
        raise EmptyExpressionError("Empty expression")

    if not parentheses_balanced(expression):
        raise UnbalancedParenthesesError("Imbalanced parentheses")

    state = ParserState()
    cursor = 0
    while cursor < len(expression):
        if expression[cursor].isspace():
            cursor += 1
            continue

        token = classify(expression, cursor, state.last_was_operator)
        if token is None:
            raise UnrecognizedTokenError(
                f"Unrecognized character '{expression[cursor]}' at position {cursor}",
                position=cursor)

        _process_token(state, expression, token)
        cursor += len(token.text)

    # Equal counts and no unmatched ')' leave no '(' on the stack
    while state.operator_stack:
        state.pop_to_output()

    logger.debug(f"Postfix for {expression!r}: {' '.join(str(t) for t in state.output)}")
    return state.output
