"""
Formatting for Mscri values and expression trees.
"""
import math

from mscri.mscri_datatypes import Literal, Name, UnaryOp, BinaryOp


def format_general(number: float) -> str:
    """C-style `%g`: six significant digits, exponent form when needed."""
    return "%g" % number


def format_number(number: float) -> str:
    """The `print` form of a Number: integral values lose their decimal point."""
    if math.isfinite(number) and number == math.trunc(number):
        return "%.0f" % number
    return format_general(number)


class Printer:
    """Formats Mscri values as `print` writes them, and expression trees as source."""

    def __init__(self):
        self._handlers = self._create_handlers()

    def pformat(self, obj) -> str:
        """Public entry point to format an object."""
        return self._get_handler(obj)(obj)

    def _get_handler(self, obj):
        handler = self._handlers.get(type(obj))
        if handler is not None:
            return handler
        return repr

    def _create_handlers(self):
        return {
            float: self._pformat_number,
            int: self._pformat_number,
            str: self._pformat_str,
            Literal: self._pformat_literal,
            Name: self._pformat_name,
            UnaryOp: self._pformat_unary,
            BinaryOp: self._pformat_binary,
        }

    def _pformat_number(self, obj):
        return format_number(float(obj))

    def _pformat_str(self, obj):
        return obj

    # --- Expression trees ---

    def _pformat_literal(self, obj):
        if isinstance(obj.value, str):
            escaped = obj.value.replace('\\', '\\\\').replace('"', '\\"')
            escaped = escaped.replace('\n', '\\n').replace('\t', '\\t')
            return f'"{escaped}"'
        return format_number(obj.value)

    def _pformat_name(self, obj):
        return obj.text

    def _pformat_unary(self, obj):
        operand = self.pformat(obj.operand)
        if obj.op == 'not':
            return f"not {operand}"
        return f"{obj.op}{operand}"

    def _pformat_binary(self, obj):
        return f"({self.pformat(obj.left)} {obj.op} {self.pformat(obj.right)})"
