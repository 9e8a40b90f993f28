"""Package-specific exception types."""

from __future__ import annotations


class FormatError(ValueError):
    """Base class for formatting-related errors.

    Represents input that the formatter refuses to rewrite.
    """


class UnterminatedLiteralError(FormatError):
    """Raised when a string literal or block comment never closes.

    Args:
        kind: Human-readable name of the literal (``"string"`` or
            ``"block comment"``).
        position: Zero-based source offset where the literal starts.
    """

    def __init__(self, kind: str, position: int):
        self.kind = kind
        self.position = position
        super().__init__(self._build_message())

    def _build_message(self) -> str:
        return f"Unterminated {self.kind} starting at offset {self.position}"
