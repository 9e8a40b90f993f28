import pytest

from swift_reformat.buffer import OutputBuffer
from swift_reformat.constants import OPERATOR_TABLE
from swift_reformat.operators import is_unary_minus, match_operator


@pytest.mark.parametrize(
    ("source", "start", "expected"),
    [
        ("a+=<b", 1, "+=<"),
        ("a+++=b", 1, "+++="),
        ("a+++b", 1, "+++"),
        ("a+b", 1, "+"),
        ("a->b", 1, "->"),
        ("a<<=b", 1, "<<="),
        ("a<||?b", 1, "<||?"),
        ("a>>-b", 1, ">>-"),
        ("a&&=b", 1, "&&="),
        ("a!==b", 1, "!=="),
        ("a===b", 1, "==="),
        ("a|||b", 1, "|||"),
    ],
)
def test_match_operator_prefers_longest(source, start, expected):
    assert match_operator(source, start) == expected


@pytest.mark.parametrize(
    ("source", "start"),
    [("x-1", 1), ("!x", 0), ("a&b", 1), ("^x", 0), ("~x", 0), ("a.b", 1), ("", 0)],
)
def test_match_operator_without_table_entry(source, start):
    assert match_operator(source, start) is None


def test_operator_table_is_sorted_longest_first():
    for spellings in OPERATOR_TABLE.values():
        lengths = [len(spelling) for spelling in spellings]
        assert lengths == sorted(lengths, reverse=True)


def test_operator_table_is_read_only():
    with pytest.raises(TypeError):
        OPERATOR_TABLE["?"] = ("?",)


@pytest.mark.parametrize(
    "output",
    ["", "x = ", "foo(", "[", "a, ", "return ", "case ", "x in ", "a ? ", "a: ", "\n  "],
)
def test_minus_is_a_sign(output):
    assert is_unary_minus(OutputBuffer(output), "-1", 0) is True


@pytest.mark.parametrize("output", ["x ", "x", "foo()", "a[0] ", "1"])
def test_minus_is_an_operator(output):
    assert is_unary_minus(OutputBuffer(output), "-1", 0) is False


def test_minus_in_scientific_notation():
    assert is_unary_minus(OutputBuffer("1e"), "-5", 0) is True
    assert is_unary_minus(OutputBuffer("value"), "-x", 0) is False
