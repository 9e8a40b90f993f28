"""Data models for swift-reformat."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class BlockType(Enum):
    """Kind of bracket that opened the innermost block.

    Attributes:
        PARENTHESIS: Block opened by ``(``.
        SQUARE: Block opened by ``[``.
        CURLY: Block opened by ``{``; also the top-level context.
    """

    PARENTHESIS = "("
    SQUARE = "["
    CURLY = "{"


@dataclass(frozen=True)
class Block:
    """Snapshot of the indentation context saved when a bracket opens.

    Attributes:
        indent: Base indentation of the enclosing level.
        temp_indent: Continuation bonus in effect at the enclosing level.
        indent_count: Output column just past the bracket for inline blocks;
            0 when the bracket is followed by a line break.
        type: Block type of the enclosing level.
    """

    indent: int
    temp_indent: int
    indent_count: int
    type: BlockType

    @property
    def is_inline(self) -> bool:
        return self.indent_count > 0


@dataclass
class IndentState:
    """Indentation context threaded through a formatting run.

    Attributes:
        indent: Required indentation depth in units.
        temp_indent: Continuation bonus (0 or 1) for the current line.
        block_type: Type of the innermost open bracket.
        blocks: Saved contexts of the open brackets, innermost last.
        switch_depth: Number of open curly blocks inside a switch body.
        pending_switch: A ``switch`` keyword was seen and its body has not
            opened yet.
        newline_index: Output length at the last emitted newline; -1 stands
            for a virtual newline before the first character.
    """

    indent: int = 0
    temp_indent: int = 0
    block_type: BlockType = BlockType.CURLY
    blocks: list[Block] = field(default_factory=list)
    switch_depth: int = 0
    pending_switch: bool = False
    newline_index: int = -1

    @property
    def in_switch(self) -> bool:
        return self.switch_depth > 0

    @property
    def innermost(self) -> Block | None:
        return self.blocks[-1] if self.blocks else None


@dataclass(frozen=True)
class Span:
    """Text recognized by a lookahead scanner.

    Attributes:
        text: Characters to append to the output.
        end: Source index just past the consumed construct.
    """

    text: str
    end: int


@dataclass
class FormatResult:
    """Outcome of a successful formatting run.

    Attributes:
        text: Formatted source, stripped of leading and trailing whitespace.
        unbalanced_brackets: Number of closing brackets that had no matching
            opening bracket.
    """

    text: str
    unbalanced_brackets: int = 0
