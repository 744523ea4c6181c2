"""
The core Mscri interpreter, containing the Evaluator and the statement Dispatcher.
"""
import sys
from typing import Any, Dict, List, Optional

from mscri.mscri_datatypes import (
    Environment, Expr, Literal, Name, UnaryOp, BinaryOp, TokenType, Value
)
from mscri.mscri_parser import ExpressionParser
from mscri.mscri_printer import Printer
from mscri.mscri_tokenizer import TokenCursor


class Evaluator:
    """Reduces expression trees to values against an Environment.

    Output is not written anywhere directly: `print` results and
    diagnostics are appended to `side_effects` as
    `{'topics': [...], 'message': str}` records for the caller to route.
    """

    def __init__(self, environment: Optional[Environment] = None, stdlib=None, debug: bool = False):
        if stdlib is None:
            from mscri.mscri_runtime import StdLib
            stdlib = StdLib()
        self.environment = environment if environment is not None else Environment()
        self.stdlib = stdlib
        self.debug = debug
        self.side_effects: List[Dict[str, Any]] = []
        self.printer = Printer()

    def _dbg(self, *parts):
        if self.debug:
            try:
                print("[DBG]", *parts, file=sys.stderr)
            except Exception:
                pass

    def emit(self, topic: str, message: str):
        self.side_effects.append({'topics': [topic], 'message': message})

    def eval(self, node: Expr) -> Value:
        """Evaluates `node`; operands are always evaluated left to right."""
        match node:
            case Literal(value=value):
                return value
            case Name(text=name):
                return self._read_variable(name)
            case UnaryOp(op=op, operand=operand):
                return self.stdlib.unary(op, self.eval(operand))
            case BinaryOp():
                return self._eval_binary(node)
        raise TypeError(f"Cannot evaluate {type(node).__name__}")

    def _eval_binary(self, node: BinaryOp) -> Value:
        # Left-folded chains grow down the left spine; walk it with a stack
        # so `1 + 1 + ... + 1` does not recurse once per operator.
        spine = []
        while isinstance(node, BinaryOp):
            spine.append(node)
            node = node.left
        acc = self.eval(node)
        # Both sides run before combining, so `and`/`or` never short-circuit.
        while spine:
            op_node = spine.pop()
            rhs = self.eval(op_node.right)
            acc = self.stdlib.binary(op_node.op, acc, rhs)
        return acc

    def _read_variable(self, name: str) -> Value:
        value = self.environment.lookup(name)
        if value is None:
            self.emit('stderr', f"Error: Variable '{name}' not defined")
            return 0.0
        return value

    def is_true(self, value: Value) -> bool:
        """Truth of an `if` condition: only a nonzero Number is true."""
        return isinstance(value, float) and value != 0


class Dispatcher:
    """Executes statements pulled one at a time from a token cursor.

    Recognized statements are `let NAME = EXPR`, `print EXPR` and
    `if EXPR then STATEMENT endif`. Keeps no state between statements
    beyond the evaluator's Environment.
    """

    def __init__(self, cursor: TokenCursor, evaluator: Evaluator):
        self.cursor = cursor
        self.evaluator = evaluator
        self.parser = ExpressionParser(cursor)

    def run(self):
        """Executes statements until end of input."""
        while True:
            self.execute_statement()
            if self.cursor.at_end():
                return

    def execute_statement(self):
        cursor = self.cursor
        cursor.skip_newlines()
        tok = cursor.current
        if tok.type is TokenType.EOF:
            return

        match tok.text if tok.type is TokenType.KEYWORD else None:
            case 'let':
                self._exec_let()
            case 'print':
                self._exec_print()
            case 'if':
                self._exec_if()
            case _:
                self._drop_line()

    def _exec_let(self):
        cursor = self.cursor
        cursor.advance()
        if not cursor.check(TokenType.IDENTIFIER):
            self.evaluator._dbg("let", "abandoned at", cursor.current.text)
            return
        name = cursor.advance().text
        if not cursor.check(TokenType.OPERATOR, '='):
            self.evaluator._dbg("let", name, "abandoned at", cursor.current.text)
            return
        cursor.advance()
        value = self.evaluator.eval(self.parser.parse_expression())
        self.evaluator.environment.assign(name, value)
        self.evaluator._dbg("let", name, "=", repr(value))

    def _exec_print(self):
        self.cursor.advance()
        value = self.evaluator.eval(self.parser.parse_expression())
        self.evaluator.emit('stdout', self.evaluator.printer.pformat(value))

    def _exec_if(self):
        cursor = self.cursor
        cursor.advance()
        condition = self.evaluator.eval(self.parser.parse_expression())
        if not cursor.current.is_keyword('then'):
            return
        cursor.advance()

        if self.evaluator.is_true(condition):
            cursor.skip_newlines()
            if not cursor.current.is_keyword('endif'):
                self.execute_statement()
        else:
            self.evaluator._dbg("if", "condition false, skipping to endif")

        # Token-level scan: whatever remains of the then-clause is discarded.
        while not cursor.at_end() and not cursor.current.is_keyword('endif'):
            cursor.advance()
        if cursor.current.is_keyword('endif'):
            cursor.advance()

    def _drop_line(self):
        # Stops before `endif` too, so an unrecognized then-clause cannot hide its terminator.
        cursor = self.cursor
        self.evaluator._dbg("dropping line", cursor.current.line, "at", repr(cursor.current.text))
        cursor.advance()
        while not (cursor.at_end() or cursor.check(TokenType.NEWLINE) or cursor.current.is_keyword('endif')):
            cursor.advance()
