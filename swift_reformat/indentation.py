"""Nesting block stack transitions and line continuation heuristics."""

from __future__ import annotations

from .constants import CASE_KEYWORDS, CONTROL_FLOW_PAIRS, ELSE_KEYWORD, SWITCH_KEYWORD
from .models import Block, BlockType, IndentState

CONTINUATION_CHARS = frozenset("+-*=.")


def _continuation_for(char: str, block_type: BlockType, in_switch: bool) -> int | None:
    if char in CONTINUATION_CHARS:
        return 1
    if char == ":" and not in_switch:
        return 1
    if char == "," and block_type is BlockType.CURLY:
        return 1
    return None


def decide_continuation(
    last_emitted: str, next_source: str, block_type: BlockType, in_switch: bool
) -> int:
    """Decide the continuation bonus for the line that is about to start.

    This is a heuristic: a line continues the previous statement when the
    previous line ends, or the next line begins, with a character that cannot
    end or start a statement. The trailing character is consulted first.

    - ``+ - * = .`` always continue.
    - ``:`` continues unless inside a switch body, where it ends a case label.
    - ``,`` continues only in a curly context (``case .a,`` or ``if a,``);
      inside brackets a comma just separates elements.
    - A leading ``?`` continues an optional chain.

    Args:
        last_emitted: Last character of the finished output line.
        next_source: First non-space source character of the next line.
        block_type: Innermost block type.
        in_switch: Whether the cursor is inside a switch body.

    Returns:
        int: 1 when the next line is a continuation, otherwise 0.

    Examples:
        decide_continuation("+", "b", BlockType.CURLY, False)  # 1
        decide_continuation(":", "f", BlockType.CURLY, True)  # 0
        decide_continuation("x", ".", BlockType.CURLY, False)  # 1
    """
    result = _continuation_for(last_emitted, block_type, in_switch)
    if result is not None:
        return result
    result = _continuation_for(next_source, block_type, in_switch)
    if result is not None:
        return result
    if next_source == "?":
        return 1
    return 0


def open_block(state: IndentState, bracket: str, indent_count: int) -> Block:
    """Push the current context and enter the block opened by `bracket`.

    Args:
        state: Indentation context to update.
        bracket: One of ``(``, ``[``, ``{``.
        indent_count: Output column after the bracket for inline blocks, 0
            when the bracket ends its line.

    Returns:
        Block: The saved snapshot of the enclosing context.

    Examples:
        state = IndentState()
        open_block(state, "{", 0)
        state.indent  # 1
    """
    block = Block(state.indent, state.temp_indent, indent_count, state.block_type)
    state.blocks.append(block)
    state.block_type = BlockType(bracket)

    if state.block_type is BlockType.PARENTHESIS:
        if indent_count == 0:
            state.temp_indent = 1
        state.indent += state.temp_indent
    else:
        state.indent += state.temp_indent + 1

    if state.block_type is BlockType.CURLY and (state.in_switch or state.pending_switch):
        state.switch_depth += 1
        state.pending_switch = False
    return block


def close_block(state: IndentState, bracket: str) -> bool:
    """Leave the innermost block and restore the enclosing context.

    A closing bracket with nothing open resets the context to the top level
    instead of failing.

    Args:
        state: Indentation context to update.
        bracket: One of ``)``, ``]``, ``}``.

    Returns:
        bool: False when there was no open block to close.
    """
    balanced = bool(state.blocks)
    if balanced:
        block = state.blocks.pop()
        state.indent = block.indent
        state.temp_indent = block.temp_indent
        state.block_type = block.type
    else:
        state.indent = 0
        state.temp_indent = 0
        state.block_type = BlockType.CURLY

    if bracket == "}" and state.in_switch:
        state.switch_depth -= 1
    return balanced


def note_keyword(state: IndentState, word: str) -> None:
    """Track keywords that change the context of the next block."""
    if word == SWITCH_KEYWORD:
        state.pending_switch = True


def indent_units(state: IndentState, ignore_temp: bool = False) -> int:
    """Number of indent units for a line in the current context."""
    units = state.indent if ignore_temp else state.indent + state.temp_indent
    return max(units, 0)


def _continues_control_flow(previous_word: str, next_word: str) -> bool:
    return (previous_word, next_word) in CONTROL_FLOW_PAIRS or next_word == ELSE_KEYWORD


def newline_indent(
    state: IndentState,
    indent_unit: str,
    previous_word: str = "",
    next_word: str = "",
) -> str:
    """Build the leading whitespace for a freshly started line.

    Args:
        state: Indentation context, with `temp_indent` already decided.
        indent_unit: Characters per indentation level.
        previous_word: First word of the line that just ended.
        next_word: First word of the line being started.

    Returns:
        str: Indentation for the new line.

    Examples:
        newline_indent(IndentState(indent=2), "  ")  # "    "
        newline_indent(IndentState(indent=1, switch_depth=1), "  ", next_word="case")  # ""
    """
    units = indent_units(state)
    if state.in_switch and next_word in CASE_KEYWORDS:
        units = max(units - 1, 0)
    if _continues_control_flow(previous_word, next_word):
        units += 1

    text = indent_unit * units
    block = state.innermost
    if (
        block is not None
        and block.is_inline
        and state.block_type is not BlockType.CURLY
        and block.indent_count > len(text)
    ):
        text += " " * (block.indent_count - len(text))
    return text
