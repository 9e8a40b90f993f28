"""Lookahead scanners for compound constructs.

Each scanner inspects the source starting at a cursor and either recognizes
one construct, returning the text to emit and the index just past it, or
reports that the construct is absent. Only string literals and block comments
can fail outright.
"""

from __future__ import annotations

from .constants import DIRECTIVES
from .exceptions import UnterminatedLiteralError
from .models import Span

RANGE_OPERATORS = ("...", "..<")
GENERIC_PUNCTUATION = frozenset(" ,.:?![]()")
INLINE_SPACES = (" ", "\t")


def is_word_char(char: str) -> bool:
    """Return True for identifier and number characters."""
    return bool(char) and (char.isalnum() or char == "_")


def next_non_space_index(source: str, start: int) -> int:
    """Index of the first character at or after `start` that is not a space or tab."""
    index = start
    while index < len(source) and source[index] in INLINE_SPACES:
        index += 1
    return index


def find_line_end(source: str, start: int) -> int:
    """Index of the newline ending the line at `start`, or the source length."""
    end = source.find("\n", start)
    return len(source) if end == -1 else end


def read_word(source: str, start: int) -> str:
    """Return the run of word characters beginning at `start`."""
    end = start
    while end < len(source) and is_word_char(source[end]):
        end += 1
    return source[start:end]


def scan_line_comment(source: str, start: int) -> Span:
    """Consume a line comment (or any rest-of-line construct) verbatim."""
    end = find_line_end(source, start)
    return Span(source[start:end], end)


def scan_block_comment(source: str, start: int) -> Span:
    """Consume a ``/* ... */`` comment, honoring nested comments.

    Args:
        source: Text being formatted.
        start: Index of the opening ``/``.

    Returns:
        Span: The comment text, byte-for-byte, and the index after ``*/``.

    Raises:
        UnterminatedLiteralError: If the input ends before the comment closes.

    Examples:
        scan_block_comment("/* a /* b */ c */ x", 0)  # Span("/* a /* b */ c */", 17)
    """
    depth = 0
    index = start
    while index < len(source):
        if source.startswith("/*", index):
            depth += 1
            index += 2
        elif source.startswith("*/", index):
            depth -= 1
            index += 2
            if depth == 0:
                return Span(source[start:index], index)
        else:
            index += 1
    raise UnterminatedLiteralError("block comment", start)


def scan_quote(source: str, start: int) -> Span:
    r"""Consume a string literal verbatim.

    Handles backslash escapes, ``\(...)`` interpolation (which may itself
    contain parentheses and string literals) and ``\"\"\"`` multi-line
    literals. A single-line literal may not cross a line break.

    Args:
        source: Text being formatted.
        start: Index of the opening quote.

    Returns:
        Span: The literal and the index after its closing quote.

    Raises:
        UnterminatedLiteralError: If the literal is not closed.

    Examples:
        scan_quote('"a\\"b" + c', 0)  # Span('"a\\"b"', 6)
        scan_quote('"\\(f("x"))"', 0)  # whole literal
    """
    delimiter = '"""' if source.startswith('"""', start) else '"'
    index = start + len(delimiter)
    while index < len(source):
        char = source[index]
        if char == "\\":
            if source.startswith("\\(", index):
                index = _skip_interpolation(source, index + 2, start)
            else:
                index += 2
            continue
        if source.startswith(delimiter, index):
            end = index + len(delimiter)
            return Span(source[start:end], end)
        if char == "\n" and len(delimiter) == 1:
            break
        index += 1
    raise UnterminatedLiteralError("string", start)


def _skip_interpolation(source: str, index: int, literal_start: int) -> int:
    depth = 1
    while index < len(source):
        char = source[index]
        if char == '"':
            index = scan_quote(source, index).end
            continue
        if char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
            if depth == 0:
                return index + 1
        index += 1
    raise UnterminatedLiteralError("string", literal_start)


def scan_generic(source: str, start: int, previous: str) -> Span | None:
    """Recognize a generic argument list such as ``<Key, [Value]>``.

    A ``<`` opens a generic list only when it is glued to a preceding word
    and followed by a type-like character; the list may contain words,
    spaces, ``, . : ? ! [ ] ( )``, ``->`` arrows and nested lists.

    Args:
        source: Text being formatted.
        start: Index of the ``<``.
        previous: Last character already emitted.

    Returns:
        Span | None: The list verbatim, or None when the ``<`` is an operator.

    Examples:
        scan_generic("Array<Int>()", 5, "y")  # Span("<Int>", 10)
        scan_generic("a < b", 2, " ")  # None
    """
    if not is_word_char(previous):
        return None
    first = source[start + 1 : start + 2]
    if not (is_word_char(first) or first in ("(", "[")):
        return None

    depth = 0
    index = start
    while index < len(source):
        char = source[index]
        if char == "<":
            depth += 1
        elif char == ">":
            depth -= 1
            if depth == 0:
                return Span(source[start : index + 1], index + 1)
        elif source.startswith("->", index):
            index += 2
            continue
        elif not (is_word_char(char) or char in GENERIC_PUNCTUATION):
            return None
        index += 1
    return None


def scan_ternary(source: str, start: int) -> Span | None:
    """Recognize ``? a : b`` ahead of the cursor.

    The ``?`` must be followed by whitespace and the matching ``:`` must sit
    at bracket depth 0 on the same line. Strings are skipped; a top-level
    ``,`` or ``;``, a comment, another spaced ``?`` or an unmatched closing
    bracket rules the shape out.

    Args:
        source: Text being formatted.
        start: Index of the ``?``.

    Returns:
        Span | None: ``"? <middle> : "`` and the index of the first character
        after the colon's trailing whitespace, or None for an optional marker.

    Examples:
        scan_ternary("a ? b : c", 2)  # Span("? b : ", 8)
        scan_ternary("a?.b", 1)  # None
    """
    if source[start + 1 : start + 2] not in INLINE_SPACES:
        return None

    depth = 0
    index = start + 1
    while index < len(source):
        char = source[index]
        if char == "\n" or source.startswith("//", index) or source.startswith("/*", index):
            return None
        if char == '"':
            try:
                index = scan_quote(source, index).end
            except UnterminatedLiteralError:
                return None
            continue
        if char in "([{":
            depth += 1
        elif char in ")]}":
            depth -= 1
            if depth < 0:
                return None
        elif depth == 0:
            if char in ",;":
                return None
            if char == "?" and source[index + 1 : index + 2] in INLINE_SPACES:
                return None
            if char == ":":
                middle = source[start + 1 : index].strip()
                if not middle:
                    return None
                return Span(f"? {middle} : ", next_non_space_index(source, index + 1))
        index += 1
    return None


def scan_range(source: str, start: int) -> str | None:
    """Return ``...`` or ``..<`` when one starts at `start`."""
    for operator in RANGE_OPERATORS:
        if source.startswith(operator, start):
            return operator
    return None


def scan_directive(source: str, start: int) -> str | None:
    """Return the preprocessor keyword (``#if``, ``#else``, ``#endif``) at `start`."""
    for directive in DIRECTIVES:
        if source.startswith(directive, start):
            return directive
    return None
