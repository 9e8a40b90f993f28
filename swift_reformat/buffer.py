"""Append-only output buffer with trailing-whitespace trimming."""

from __future__ import annotations

from .scanners import is_word_char

SPACES = " \t"
BLANKS = " \t\n"


class OutputBuffer:
    """Formatted text accumulated by the dispatcher.

    Text is only ever appended or trimmed at the end; nothing inside the
    buffer is edited after it is written.
    """

    def __init__(self, text: str = ""):
        self._chars: list[str] = list(text)

    def __len__(self) -> int:
        return len(self._chars)

    def __str__(self) -> str:
        return "".join(self._chars)

    def __repr__(self) -> str:
        return f"OutputBuffer({str(self)!r})"

    @property
    def last(self) -> str:
        """Last character, or ``""`` when the buffer is empty."""
        return self._chars[-1] if self._chars else ""

    def append(self, text: str) -> None:
        self._chars.extend(text)

    def trim_trailing(self) -> None:
        """Drop trailing spaces and tabs; newlines are kept."""
        while self._chars and self._chars[-1] in SPACES:
            self._chars.pop()

    def keep_space(self) -> None:
        """Ensure the buffer ends in whitespace, adding at most one space."""
        if self._chars and self._chars[-1] not in BLANKS:
            self._chars.append(" ")

    def last_non_blank(self) -> str:
        """Last character that is not a space, tab or newline."""
        for char in reversed(self._chars):
            if char not in BLANKS:
                return char
        return ""

    def last_word(self) -> str:
        """Trailing run of word characters, ignoring trailing blanks.

        Examples:
            OutputBuffer("x = return ").last_word()  # "return"
        """
        end = len(self._chars)
        while end > 0 and self._chars[end - 1] in BLANKS:
            end -= 1
        start = end
        while start > 0 and is_word_char(self._chars[start - 1]):
            start -= 1
        return "".join(self._chars[start:end])

    def line_before(self, end: int) -> str:
        """Text of the line that ends at offset `end` (exclusive)."""
        start = end
        while start > 0 and self._chars[start - 1] != "\n":
            start -= 1
        return "".join(self._chars[start:end])
