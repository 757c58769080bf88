import pytest

from sigcalc.core.errors import (
    EmptyExpressionError,
    FunctionSyntaxError,
    MismatchedParenthesisError,
    UnbalancedParenthesesError,
    UnrecognizedTokenError,
)
from sigcalc.core.shunting_yard import parentheses_balanced, to_postfix
from sigcalc.core.tokens import TokenKind


def postfix(expression: str) -> str:
    return " ".join(str(token) for token in to_postfix(expression))


def test_precedence() -> None:
    assert postfix("2+3*4") == "2 3 4 * +"
    assert postfix("2*3+4") == "2 3 * 4 +"


def test_left_associativity() -> None:
    assert postfix("8-4-2") == "8 4 - 2 -"
    assert postfix("8/4/2") == "8 4 / 2 /"


def test_power_is_right_associative() -> None:
    assert postfix("2^3^2") == "2 3 2 ^ ^"


def test_parentheses_override_precedence() -> None:
    assert postfix("(2+3)*4") == "2 3 + 4 *"


def test_function_popped_after_its_argument() -> None:
    assert postfix("sin([0])*2") == "[0] sin 2 *"
    assert postfix("sqrt(abs(-4))") == "-4 abs sqrt"


def test_unary_minus_binds_looser_than_power() -> None:
    # -[0]^2 is -([0]^2)
    assert postfix("-[0]^2") == "[0] 2 ^ u-"
    assert postfix("-[0]*2") == "[0] u- 2 *"


def test_signed_number_after_operator() -> None:
    assert postfix("2--3") == "2 -3 -"
    assert postfix("2*(-3)") == "2 -3 *"


def test_whitespace_ignored() -> None:
    assert postfix("  1 +\t2 ") == "1 2 +"


def test_queue_tokens_keep_positions() -> None:
    queue = to_postfix("1 + [2]")
    tokens = list(queue)
    assert [t.kind for t in tokens] == [TokenKind.NUMBER, TokenKind.DATASET, TokenKind.OPERATOR]
    assert [t.position for t in tokens] == [0, 4, 2]


def test_parentheses_balanced() -> None:
    assert parentheses_balanced("((1)+(2))")
    assert not parentheses_balanced("(1+2")
    assert not parentheses_balanced("1+2)")
    # Only the counts are compared here
    assert parentheses_balanced(")(")


def test_unbalanced_parentheses() -> None:
    with pytest.raises(UnbalancedParenthesesError):
        to_postfix("(1+2")
    with pytest.raises(UnbalancedParenthesesError):
        to_postfix("1+2)")


def test_close_before_open_is_mismatched() -> None:
    # Counts match, but the first ')' has no '(' on the stack
    with pytest.raises(MismatchedParenthesisError, match="position 0") as exc_info:
        to_postfix(")(")
    assert exc_info.value.position == 0

    with pytest.raises(MismatchedParenthesisError, match="position 3"):
        to_postfix("(1))+(2")


def test_unrecognized_character_reports_position() -> None:
    with pytest.raises(UnrecognizedTokenError, match="position 2") as exc_info:
        to_postfix("1 # 2")
    assert exc_info.value.position == 2


def test_function_requires_parenthesis() -> None:
    with pytest.raises(FunctionSyntaxError, match="'sin'"):
        to_postfix("sin 2")


def test_empty_expression() -> None:
    with pytest.raises(EmptyExpressionError):
        to_postfix("   ")
