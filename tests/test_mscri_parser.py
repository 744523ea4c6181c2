import pytest

from mscri.mscri_datatypes import Literal, Name, UnaryOp, BinaryOp, TokenType
from mscri.mscri_parser import ExpressionParser, parse_expression
from mscri.mscri_printer import Printer
from mscri.mscri_tokenizer import TokenCursor


def parse(src):
    expr, _rest = parse_expression(src)
    return expr


def shape(src):
    """Fully parenthesized rendering of the parsed tree."""
    return Printer().pformat(parse(src))


# Test cases: (id, source, expected_rendering)
PRECEDENCE_CASES = [
    ("mul_over_add", "2 + 3 * 4", "(2 + (3 * 4))"),
    ("parens", "(2 + 3) * 4", "((2 + 3) * 4)"),
    ("add_left_assoc", "1 - 2 - 3", "((1 - 2) - 3)"),
    ("mul_left_assoc", "8 / 4 / 2", "((8 / 4) / 2)"),
    ("mod_with_mul", "7 % 4 * 2", "((7 % 4) * 2)"),
    ("pow_left_fold", "2 ^ 3 ^ 2", "((2 ^ 3) ^ 2)"),
    ("pow_over_mul", "2 * 3 ^ 2", "(2 * (3 ^ 2))"),
    ("unary_binds_tighter_than_pow", "-2 ^ 2", "(-2 ^ 2)"),
    ("unary_in_pow_rhs", "2 ^ -1", "(2 ^ -1)"),
    ("compare_over_equality", "1 < 2 == 3 > 4", "((1 < 2) == (3 > 4))"),
    ("compare_left_assoc", "1 < 2 < 3", "((1 < 2) < 3)"),
    ("and_over_or", "a or b and c", "(a or (b and c))"),
    ("equality_over_and", "a == 1 and b != 2", "((a == 1) and (b != 2))"),
    ("or_left_assoc", "a or b or c", "((a or b) or c)"),
    ("not_binds_tight", "not a and b", "(not a and b)"),
    ("nested_unary", "- - + 1", "--+1"),
    ("string_concat", "\"a\" + 1", "(\"a\" + 1)"),
]


@pytest.mark.parametrize("case_id, source, expected", PRECEDENCE_CASES, ids=[c[0] for c in PRECEDENCE_CASES])
def test_precedence_and_associativity(case_id, source, expected):
    assert shape(source) == expected


def test_literal_nodes():
    assert parse("42") == Literal(42.0)
    assert parse("'hi'") == Literal("hi")
    assert parse("true") == Literal(1.0)
    assert parse("false") == Literal(0.0)


def test_literal_equality_distinguishes_text_from_number():
    assert Literal("1") != Literal(1.0)


def test_identifier_becomes_name():
    assert parse("count") == Name("count")


def test_explicit_tree():
    assert parse("-x + 2 * y") == BinaryOp(
        "+",
        UnaryOp("-", Name("x")),
        BinaryOp("*", Literal(2.0), Name("y")),
    )


def test_nodes_carry_location():
    expr = parse("1 + x")
    assert expr.loc == {'line': 1, 'col': 3}
    assert expr.left.loc == {'line': 1, 'col': 1}
    assert expr.right.loc == {'line': 1, 'col': 5}


def test_missing_close_paren_is_tolerated():
    expr, rest = parse_expression("(1 + 2")
    assert expr == BinaryOp("+", Literal(1.0), Literal(2.0))
    assert rest.type is TokenType.EOF


def test_unexpected_token_yields_zero_and_is_not_consumed():
    expr, rest = parse_expression(")")
    assert expr == Literal(0.0)
    assert rest.is_delimiter(")")


def test_missing_right_operand_yields_zero():
    expr, rest = parse_expression("1 +")
    assert expr == BinaryOp("+", Literal(1.0), Literal(0.0))
    assert rest.type is TokenType.EOF


def test_parser_stops_at_statement_keywords():
    cursor = TokenCursor.from_source("1 + 2 then print 3")
    expr = ExpressionParser(cursor).parse_expression()
    assert expr == BinaryOp("+", Literal(1.0), Literal(2.0))
    assert cursor.current.is_keyword("then")


def test_parser_stops_at_newline():
    cursor = TokenCursor.from_source("1\n+ 2")
    assert ExpressionParser(cursor).parse_expression() == Literal(1.0)
    assert cursor.current.type is TokenType.NEWLINE
