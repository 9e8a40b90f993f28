"""Operator lookup and unary-minus detection."""

from __future__ import annotations

from .buffer import OutputBuffer
from .constants import NEGATIVE_CHECK_KEYS, NEGATIVE_CHECK_SIGNS, OPERATOR_TABLE
from .scanners import is_word_char


def match_operator(source: str, start: int) -> str | None:
    """Return the longest operator spelling that matches at `start`.

    Args:
        source: Text being formatted.
        start: Index of the operator's leading character.

    Returns:
        str | None: The matched operator, or None when the leading character
            has no table entry or none of its spellings match.

    Examples:
        match_operator("a+=<b", 1)  # "+=<"
        match_operator("x-1", 1)  # None, a lone "-" is not in the table
    """
    for spelling in OPERATOR_TABLE.get(source[start : start + 1], ()):
        if source.startswith(spelling, start):
            return spelling
    return None


def is_unary_minus(output: OutputBuffer, source: str, start: int) -> bool:
    """Decide whether the ``-`` at `start` is a sign rather than an operator.

    A minus is a sign at the start of the output, in scientific notation
    (``1e-5``), after a keyword that expects an expression (``return -1``)
    or after punctuation that cannot end an operand (``= -1``, ``(-1``).

    Examples:
        is_unary_minus(OutputBuffer("x = "), "-1", 0)  # True
        is_unary_minus(OutputBuffer("x "), "-1", 0)  # False
    """
    last = output.last_non_blank()
    if not last:
        return True
    if output.last == "e" and source[start + 1 : start + 2].isdigit():
        return True
    if is_word_char(last):
        return output.last_word() in NEGATIVE_CHECK_KEYS
    return last in NEGATIVE_CHECK_SIGNS
