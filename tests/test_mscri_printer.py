import math

import pytest

from mscri.mscri_datatypes import Literal, Name, UnaryOp, BinaryOp
from mscri.mscri_printer import Printer, format_general, format_number


@pytest.fixture
def printer():
    return Printer()


# Test cases: (id, object, expected_string)
FORMAT_TEST_CASES = [
    ("integral", 7.0, "7"),
    ("negative_integral", -12.0, "-12"),
    ("zero", 0.0, "0"),
    ("negative_zero", -0.0, "-0"),
    ("fraction", 2.5, "2.5"),
    ("six_significant_digits", 3.14159265, "3.14159"),
    ("large_integral", 1e10, "10000000000"),
    ("small_fraction", 0.0001, "0.0001"),
    ("tiny_fraction", 1.5e-7, "1.5e-07"),
    ("inf", math.inf, "inf"),
    ("negative_inf", -math.inf, "-inf"),
    ("nan", math.nan, "nan"),
    ("text", "hello world", "hello world"),
    ("text_raw", "a\tb", "a\tb"),
    ("int", 3, "3"),
]


@pytest.mark.parametrize("case_id, obj, expected", FORMAT_TEST_CASES, ids=[c[0] for c in FORMAT_TEST_CASES])
def test_pformat_values(printer, case_id, obj, expected):
    assert printer.pformat(obj) == expected


@pytest.mark.parametrize("number, expected", [
    (5.0, "5"),
    (1000000.0, "1e+06"),
    (123456.0, "123456"),
    (0.5, "0.5"),
])
def test_format_general_is_c_percent_g(number, expected):
    assert format_general(number) == expected


def test_format_number_uses_integer_form_only_for_integral_values():
    assert format_number(1000000.0) == "1000000"
    assert format_number(1000000.5) == "1e+06"


def test_pformat_expression_tree(printer):
    tree = BinaryOp(
        "or",
        UnaryOp("not", Name("done")),
        BinaryOp("==", Literal('say "hi"\n'), Literal(2.5)),
    )
    assert printer.pformat(tree) == '(not done or ("say \\"hi\\"\\n" == 2.5))'


def test_pformat_unknown_falls_back_to_repr(printer):
    assert printer.pformat(None) == "None"
