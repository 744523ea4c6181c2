"""
Defines the core data types for the Mscri language runtime.

This module provides the token type produced by the tokenizer, the
expression tree nodes produced by the parser, and the Environment that
holds a session's variable bindings.

Runtime values are plain Python objects: a Number is a ``float`` and a
Text is a ``str``. Booleans are represented as ``1.0`` and ``0.0``.
"""

import enum
from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Optional, Union

Value = Union[float, str]


class TokenType(enum.Enum):
    NUMBER = "number"
    STRING = "string"
    IDENTIFIER = "identifier"
    KEYWORD = "keyword"
    OPERATOR = "operator"
    DELIMITER = "delimiter"
    EOF = "eof"
    NEWLINE = "newline"


@dataclass(frozen=True)
class Token:
    """A classified lexical unit with its 1-based source position."""
    type: TokenType
    text: str
    number: Optional[float] = None
    line: int = 1
    col: int = 1

    def is_keyword(self, *words: str) -> bool:
        return self.type is TokenType.KEYWORD and self.text in words

    def is_operator(self, *ops: str) -> bool:
        return self.type is TokenType.OPERATOR and self.text in ops

    def is_delimiter(self, text: str) -> bool:
        return self.type is TokenType.DELIMITER and self.text == text

    @property
    def loc(self) -> Dict[str, int]:
        return {'line': self.line, 'col': self.col}


# =================================================================
# Expression tree
# =================================================================

class Expr:
    """Base class for expression tree nodes."""
    loc: Optional[Dict[str, int]] = None

    def _with_loc(self, token: Optional[Token]) -> 'Expr':
        if token is not None:
            self.loc = token.loc
        return self


class Literal(Expr):
    """A number, string, or boolean literal, already reduced to a Value."""
    def __init__(self, value: Value, token: Optional[Token] = None):
        self.value = value
        self._with_loc(token)

    def __repr__(self) -> str:
        return f"Literal({self.value!r})"

    def __eq__(self, other):
        return isinstance(other, Literal) and type(self.value) is type(other.value) and self.value == other.value


class Name(Expr):
    """A variable read, e.g. `x` in `print x + 1`."""
    def __init__(self, text: str, token: Optional[Token] = None):
        self.text = text
        self._with_loc(token)

    def __repr__(self) -> str:
        return f"Name<{self.text!r}>"

    def __eq__(self, other):
        return isinstance(other, Name) and self.text == other.text

    def __hash__(self):
        return hash(self.text)


class UnaryOp(Expr):
    """A prefix operator applied to one operand: `-`, `+` or `not`."""
    def __init__(self, op: str, operand: Expr, token: Optional[Token] = None):
        self.op = op
        self.operand = operand
        self._with_loc(token)

    def __repr__(self) -> str:
        return f"UnaryOp({self.op!r}, {self.operand!r})"

    def __eq__(self, other):
        return isinstance(other, UnaryOp) and self.op == other.op and self.operand == other.operand


class BinaryOp(Expr):
    """An infix operator applied to two operands."""
    def __init__(self, op: str, left: Expr, right: Expr, token: Optional[Token] = None):
        self.op = op
        self.left = left
        self.right = right
        self._with_loc(token)

    def __repr__(self) -> str:
        return f"BinaryOp({self.op!r}, {self.left!r}, {self.right!r})"

    def __eq__(self, other):
        return (
            isinstance(other, BinaryOp)
            and self.op == other.op
            and self.left == other.left
            and self.right == other.right
        )


# =================================================================
# Environment
# =================================================================

class Environment:
    """The single, unscoped name-to-value store of an interpreter session.

    Assigning an existing name overwrites its value in place; there is no
    nesting, shadowing or deletion. Values are immutable Python objects, so
    a lookup never hands out storage shared with another binding.
    """
    def __init__(self, bindings: Optional[Dict[str, Value]] = None):
        self.bindings: Dict[str, Value] = {}
        for name, value in (bindings or {}).items():
            self.assign(name, value)

    def lookup(self, name: str) -> Optional[Value]:
        """Returns the value bound to `name`, or None when it is unbound."""
        return self.bindings.get(name)

    def assign(self, name: str, value: Value):
        if not isinstance(name, str):
            raise TypeError(f"Variable name must be a str, not {type(name)}")
        if isinstance(value, bool) or not isinstance(value, (float, int, str)):
            raise TypeError(f"Unsupported value type: {type(value).__name__}")
        if isinstance(value, int):
            value = float(value)
        self.bindings[name] = value

    def names(self) -> List[str]:
        return list(self.bindings)

    def snapshot(self) -> Dict[str, Value]:
        return dict(self.bindings)

    def __contains__(self, name: Any) -> bool:
        return name in self.bindings

    def __len__(self) -> int:
        return len(self.bindings)

    def __iter__(self) -> Iterator[str]:
        return iter(self.bindings)

    def __repr__(self) -> str:
        return f"Environment({self.bindings!r})"
