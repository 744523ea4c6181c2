"""
Precedence-climbing parser for Mscri expressions.

Builds an expression tree from the shared token cursor, tightest binding
first:

    primary  <- number | string | true | false | identifier | '(' expr ')'
    unary    <- ('-' | '+' | 'not') unary | primary
    power    <- unary ('^' unary)*
    term     <- power (('*' | '/' | '%') power)*
    sum      <- term (('+' | '-') term)*
    compare  <- sum (('<' | '>' | '<=' | '>=') sum)*
    equality <- compare (('==' | '!=') compare)*
    and      <- equality ('and' equality)*
    or       <- and ('or' and)*

Every binary tier folds left to right, `^` included, so `2 ^ 3 ^ 2`
groups as `(2 ^ 3) ^ 2`. The parser never fails: a token that cannot
start a primary becomes the literal 0 and is left unconsumed, and a
missing `)` is tolerated.
"""

from typing import Callable, Tuple

from mscri.mscri_datatypes import Expr, Literal, Name, UnaryOp, BinaryOp, Token, TokenType
from mscri.mscri_tokenizer import TokenCursor


class ExpressionParser:
    def __init__(self, cursor: TokenCursor):
        self.cursor = cursor

    def parse_expression(self) -> Expr:
        return self.parse_or()

    def _fold(self, operand: Callable[[], Expr], matches: Callable[[Token], bool]) -> Expr:
        left = operand()
        while matches(self.cursor.current):
            op_token = self.cursor.advance()
            right = operand()
            left = BinaryOp(op_token.text, left, right, op_token)
        return left

    def parse_or(self) -> Expr:
        return self._fold(self.parse_and, lambda t: t.is_keyword('or'))

    def parse_and(self) -> Expr:
        return self._fold(self.parse_equality, lambda t: t.is_keyword('and'))

    def parse_equality(self) -> Expr:
        return self._fold(self.parse_comparison, lambda t: t.is_operator('==', '!='))

    def parse_comparison(self) -> Expr:
        return self._fold(self.parse_addition, lambda t: t.is_operator('<', '>', '<=', '>='))

    def parse_addition(self) -> Expr:
        return self._fold(self.parse_multiplication, lambda t: t.is_operator('+', '-'))

    def parse_multiplication(self) -> Expr:
        return self._fold(self.parse_power, lambda t: t.is_operator('*', '/', '%'))

    def parse_power(self) -> Expr:
        return self._fold(self.parse_unary, lambda t: t.is_operator('^'))

    def parse_unary(self) -> Expr:
        tok = self.cursor.current
        if tok.is_operator('-', '+') or tok.is_keyword('not'):
            self.cursor.advance()
            return UnaryOp(tok.text, self.parse_unary(), tok)
        return self.parse_primary()

    def parse_primary(self) -> Expr:
        tok = self.cursor.current
        match tok.type:
            case TokenType.NUMBER:
                self.cursor.advance()
                return Literal(tok.number, tok)
            case TokenType.STRING:
                self.cursor.advance()
                return Literal(tok.text, tok)
            case TokenType.KEYWORD if tok.text in ('true', 'false'):
                self.cursor.advance()
                return Literal(1.0 if tok.text == 'true' else 0.0, tok)
            case TokenType.IDENTIFIER:
                self.cursor.advance()
                return Name(tok.text, tok)
            case TokenType.DELIMITER if tok.text == '(':
                self.cursor.advance()
                inner = self.parse_expression()
                if self.cursor.current.is_delimiter(')'):
                    self.cursor.advance()
                return inner
        return Literal(0.0, tok)


def parse_expression(source: str) -> Tuple[Expr, Token]:
    """Parses one expression from `source`; returns it with the first unconsumed token."""
    cursor = TokenCursor.from_source(source)
    expr = ExpressionParser(cursor).parse_expression()
    return expr, cursor.current
