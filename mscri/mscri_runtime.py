# mscri_runtime.py

from dataclasses import dataclass, field
from typing import Any, Dict, List, Literal, Optional

import numpy as np

from mscri.mscri_config import MscriConfig, load_config
from mscri.mscri_datatypes import Environment, Token, Value
from mscri.mscri_interpreter import Dispatcher, Evaluator
from mscri.mscri_printer import format_general
from mscri.mscri_tokenizer import Lexer, TokenCursor


# ===================================================================
# 1. Operators
# ===================================================================

def _num(value: Value) -> float:
    """Numeric view of a value: Text coerces to 0."""
    return value if isinstance(value, float) else 0.0


def _flag(cond) -> float:
    return 1.0 if cond else 0.0


def _ieee(ufunc, a: float, b: float) -> float:
    # Division by zero, overflow and invalid operations yield inf/nan rather than raising.
    with np.errstate(all='ignore'):
        return float(ufunc(np.float64(a), np.float64(b)))


class StdLib:
    """Python implementations of the Mscri operators."""

    def __init__(self):
        self.binary_ops = {
            '+': self._add,
            '-': self._sub,
            '*': self._mul,
            '/': self._div,
            '%': self._mod,
            '^': self._pow,
            '==': self._eq,
            '!=': self._neq,
            '<': self._lt,
            '>': self._gt,
            '<=': self._lte,
            '>=': self._gte,
            'and': self._and,
            'or': self._or,
        }
        self.unary_ops = {
            '-': self._neg,
            '+': self._pos,
            'not': self._not,
        }

    def binary(self, op: str, a: Value, b: Value) -> Value:
        func = self.binary_ops.get(op)
        if func is None:
            return 0.0
        return func(a, b)

    def unary(self, op: str, x: Value) -> Value:
        func = self.unary_ops.get(op)
        if func is None:
            return 0.0
        return func(x)

    # --- Arithmetic ---
    def _add(self, a, b):
        if isinstance(a, str) or isinstance(b, str):
            left = a if isinstance(a, str) else format_general(a)
            right = b if isinstance(b, str) else format_general(b)
            return left + right
        return _ieee(np.add, a, b)
    def _sub(self, a, b): return _ieee(np.subtract, _num(a), _num(b))
    def _mul(self, a, b): return _ieee(np.multiply, _num(a), _num(b))
    def _div(self, a, b): return _ieee(np.divide, _num(a), _num(b))
    def _mod(self, a, b): return _ieee(np.fmod, _num(a), _num(b))
    def _pow(self, b, e): return _ieee(np.power, _num(b), _num(e))

    # --- Comparison ---
    def _eq(self, a, b): return _flag(_num(a) == _num(b))
    def _neq(self, a, b): return _flag(_num(a) != _num(b))
    def _lt(self, a, b): return _flag(_num(a) < _num(b))
    def _gt(self, a, b): return _flag(_num(a) > _num(b))
    def _lte(self, a, b): return _flag(_num(a) <= _num(b))
    def _gte(self, a, b): return _flag(_num(a) >= _num(b))

    # --- Logic ---
    def _and(self, a, b): return _flag(_num(a) != 0 and _num(b) != 0)
    def _or(self, a, b): return _flag(_num(a) != 0 or _num(b) != 0)

    # --- Unary ---
    def _neg(self, x): return -_num(x)
    def _pos(self, x): return _num(x)
    def _not(self, x): return _flag(_num(x) == 0)


# ===================================================================
# 2. Execution
# ===================================================================

@dataclass
class ExecutionResult:
    """The structured result of a script execution."""
    status: Literal['success', 'error']
    error_message: Optional[str] = None
    error_token: Optional[Dict[str, Any]] = None
    side_effects: List[Dict] = field(default_factory=list)

    def _messages(self, topic: str) -> List[str]:
        return [e.get('message', '') for e in self.side_effects if e.get('topics') == [topic]]

    @property
    def stdout(self) -> List[str]:
        """Lines written by `print`, in order."""
        return self._messages('stdout')

    @property
    def stderr(self) -> List[str]:
        """Diagnostics and error reports, in order."""
        return self._messages('stderr')

    def format_error(self) -> str:
        """Formats an error message with line and column if available."""
        if self.status != 'error':
            return ""
        msg = str(self.error_message or "Unknown error")
        if self.error_token and 'line' in self.error_token:
            line = self.error_token.get('line')
            col = self.error_token.get('col')
            if not msg.startswith("Error on line "):
                col_info = f", col {col}" if col is not None else ""
                return f"Error on line {line}{col_info}: {msg}"
        return msg


class ScriptRunner:
    """One interpreter session: tokenizes and executes Mscri source.

    The runner owns the session's Environment, so bindings made by one
    `handle_script`/`handle_line` call are visible to the next.
    """

    def __init__(self, config: Optional[MscriConfig] = None, environment: Optional[Environment] = None):
        self.config = config if config is not None else load_config()
        self.environment = environment if environment is not None else Environment()
        self.stdlib = StdLib()
        self.evaluator = Evaluator(self.environment, self.stdlib, debug=self.config.debug)
        self.evaluator._dbg("session start", f"max_lexeme_length={self.config.max_lexeme_length}")

    def _cursor(self, source: str) -> TokenCursor:
        return TokenCursor(Lexer(source, self.config.max_lexeme_length))

    def handle_script(self, source_code: str) -> ExecutionResult:
        """Runs every statement of `source_code` (file mode)."""
        return self._execute(source_code, lambda d: d.run())

    def handle_line(self, line: str) -> ExecutionResult:
        """Runs the first statement of one REPL line; the rest of the line is ignored."""
        return self._execute(line, lambda d: d.execute_statement())

    def _execute(self, source_code: str, step) -> ExecutionResult:
        self.evaluator.side_effects = []
        dispatcher = None
        try:
            dispatcher = Dispatcher(self._cursor(source_code), self.evaluator)
            step(dispatcher)
        except Exception as e:
            token = dispatcher.cursor.current if dispatcher is not None else None
            err_msg, err_token = self._format_runtime_error(e, source_code, token)
            return ExecutionResult(
                status='error',
                error_message=err_msg,
                error_token=err_token,
                side_effects=self.evaluator.side_effects
            )
        return ExecutionResult(status='success', side_effects=self.evaluator.side_effects)

    def _format_runtime_error(self, e: Exception, source: str, token: Optional[Token]):
        match e:
            case RecursionError():
                msg = "InternalError: expression nested too deeply"
            case _:
                msg = f"InternalError: {e}"
        if token is None:
            return msg, None
        context = self._source_context(source, token.line, token.col)
        if context:
            msg = f"{msg}\n{context}"
        return msg, token.loc

    def _source_context(self, source: str, line: int, col: Optional[int], radius: int = 2) -> str:
        lines = source.splitlines()
        if not line or line < 1 or line > len(lines):
            return ""
        start = max(1, line - radius)
        end = min(len(lines), line + radius)
        width = len(str(end))
        out = []
        for i in range(start, end + 1):
            prefix = ">" if i == line else " "
            ln = str(i).rjust(width)
            out.append(f"{prefix} {ln} | {lines[i - 1]}")
            if i == line and col is not None:
                caret = " " * max(col - 1, 0)
                out.append(f"  {' ' * width} | {caret}^")
        return "\n".join(out)
