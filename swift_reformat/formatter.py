"""Single-pass source reformatter.

The dispatcher walks the source one construct at a time. Each handler gets
the run's `FormatContext` and the cursor, appends to the output buffer and
returns the next cursor position.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable

from .buffer import SPACES, OutputBuffer
from .config import ConfigError, FormatConfig, normalize_config, validate_config
from .constants import (
    CLOSING_BRACKETS,
    DIRECTIVE_ELSE,
    DIRECTIVE_ENDIF,
    DIRECTIVE_IF,
    OPENING_BRACKETS,
    UPPER_BLOCKS,
)
from .exceptions import FormatError, UnterminatedLiteralError
from .filesystem import read_source
from .indentation import (
    close_block,
    decide_continuation,
    indent_units,
    newline_indent,
    note_keyword,
    open_block,
)
from .log import logger
from .models import FormatResult, IndentState, Span
from .operators import is_unary_minus, match_operator
from .scanners import (
    is_word_char,
    next_non_space_index,
    read_word,
    scan_block_comment,
    scan_directive,
    scan_generic,
    scan_line_comment,
    scan_quote,
    scan_range,
    scan_ternary,
)


@dataclass
class FormatContext:
    """Everything a single formatting run owns.

    Attributes:
        source: Input text with normalized line endings.
        indent_unit: Characters emitted per indentation level.
        output: Formatted text accumulated so far.
        state: Indentation context.
        unbalanced_brackets: Closing brackets seen with no open block.
    """

    source: str
    indent_unit: str
    output: OutputBuffer = field(default_factory=OutputBuffer)
    state: IndentState = field(default_factory=IndentState)
    unbalanced_brackets: int = 0

    def char_at(self, index: int) -> str:
        """Return the source character at `index`, or ``""`` past the end."""
        return self.source[index] if 0 <= index < len(self.source) else ""


def normalize_newlines(source: str) -> str:
    """Convert CRLF and lone CR line endings to LF."""
    return source.replace("\r\n", "\n").replace("\r", "\n")


def _emit(ctx: FormatContext, index: int, text: str) -> int:
    ctx.output.append(text)
    return index + len(text)


def _emit_spaced(ctx: FormatContext, index: int, operator: str) -> int:
    ctx.output.keep_space()
    ctx.output.append(f"{operator} ")
    return next_non_space_index(ctx.source, index + len(operator))


def _emit_span(ctx: FormatContext, span: Span) -> int:
    ctx.output.append(span.text)
    return span.end


def _trim_with_indent(ctx: FormatContext, ignore_temp: bool = False) -> None:
    """Drop trailing spaces and re-indent if that leaves a fresh line."""
    ctx.output.trim_trailing()
    if ctx.output.last == "\n":
        ctx.output.append(ctx.indent_unit * indent_units(ctx.state, ignore_temp=ignore_temp))


def _handle_operator(ctx: FormatContext, index: int) -> int:
    return _emit_spaced(ctx, index, match_operator(ctx.source, index))


def _handle_minus(ctx: FormatContext, index: int) -> int:
    operator = match_operator(ctx.source, index)
    if operator is not None:
        return _emit_spaced(ctx, index, operator)
    if is_unary_minus(ctx.output, ctx.source, index):
        return _emit(ctx, index, "-")
    return _emit_spaced(ctx, index, "-")


def _handle_prefix_operator(ctx: FormatContext, index: int) -> int:
    # ~ ^ ! & stay glued to their operand unless they spell a longer operator
    operator = match_operator(ctx.source, index)
    if operator is not None:
        return _emit_spaced(ctx, index, operator)
    return _emit(ctx, index, ctx.source[index])


def _handle_dot(ctx: FormatContext, index: int) -> int:
    return _emit(ctx, index, scan_range(ctx.source, index) or ".")


def _handle_slash(ctx: FormatContext, index: int) -> int:
    if ctx.source.startswith("//", index):
        return _emit_span(ctx, scan_line_comment(ctx.source, index))
    if ctx.source.startswith("/*", index):
        return _emit_span(ctx, scan_block_comment(ctx.source, index))
    return _handle_operator(ctx, index)


def _handle_less_than(ctx: FormatContext, index: int) -> int:
    if ctx.source.startswith("<#", index):
        return _emit(ctx, index, "<#")
    span = scan_generic(ctx.source, index, ctx.output.last)
    if span is not None:
        return _emit_span(ctx, span)
    return _handle_operator(ctx, index)


def _handle_question(ctx: FormatContext, index: int) -> int:
    # "??" is kept as one unit whether it unwraps twice or coalesces
    if ctx.source.startswith("??", index):
        return _emit(ctx, index, "??")
    span = scan_ternary(ctx.source, index)
    if span is not None:
        ctx.output.keep_space()
        return _emit_span(ctx, span)
    return _emit(ctx, index, "?")


def _handle_separator(ctx: FormatContext, index: int) -> int:
    if ctx.output.last in SPACES:
        _trim_with_indent(ctx)
    ctx.output.append(f"{ctx.source[index]} ")
    return next_non_space_index(ctx.source, index + 1)


def _handle_hash(ctx: FormatContext, index: int) -> int:
    state = ctx.state
    directive = scan_directive(ctx.source, index)
    if directive == DIRECTIVE_IF:
        state.indent += 1
    elif directive == DIRECTIVE_ELSE:
        state.indent -= 1
        _trim_with_indent(ctx)
        state.indent += 1
    elif directive == DIRECTIVE_ENDIF:
        state.indent -= 1
        _trim_with_indent(ctx)
    elif ctx.source.startswith("#>", index):
        return _emit(ctx, index, "#>")
    elif not ctx.source.startswith("#!", index):
        return _handle_word(ctx, index)
    # The directive's condition is copied as written
    return _emit_span(ctx, scan_line_comment(ctx.source, index))


def _handle_quote(ctx: FormatContext, index: int) -> int:
    return _emit_span(ctx, scan_quote(ctx.source, index))


def _handle_newline(ctx: FormatContext, index: int) -> int:
    output, state, source = ctx.output, ctx.state, ctx.source

    output.trim_trailing()
    state.newline_index = len(output)
    previous_line = output.line_before(len(output))

    next_index = next_non_space_index(source, index + 1)
    state.temp_indent = decide_continuation(
        output.last, ctx.char_at(next_index), state.block_type, state.in_switch
    )

    output.append("\n")
    index += 1
    # Comments at column 0 (commented-out code) keep their column
    if not source.startswith("//", index):
        output.append(
            newline_indent(
                state,
                ctx.indent_unit,
                previous_word=read_word(previous_line.lstrip(SPACES), 0),
                next_word=read_word(source, next_index),
            )
        )
    return next_index


def _handle_space(ctx: FormatContext, index: int) -> int:
    ctx.output.keep_space()
    return index + 1


def _handle_open(ctx: FormatContext, index: int) -> int:
    output, source = ctx.output, ctx.source
    bracket = source[index]

    after = next_non_space_index(source, index + 1)
    if after >= len(source) or source[after] == "\n" or source.startswith("//", after):
        indent_count = 0
    else:
        indent_count = len(output) - ctx.state.newline_index
    open_block(ctx.state, bracket, indent_count)

    if bracket == "{":
        if output.last not in UPPER_BLOCKS:
            output.keep_space()
        output.append("{ ")
        return index + 1
    output.append(bracket)
    return after


def _handle_close(ctx: FormatContext, index: int) -> int:
    output = ctx.output
    bracket = ctx.source[index]

    if not close_block(ctx.state, bracket):
        ctx.unbalanced_brackets += 1
        logger.warning("Unbalanced %r at offset %d; indentation reset", bracket, index)

    if bracket != "}":
        _trim_with_indent(ctx)
        return _emit(ctx, index, bracket)

    _trim_with_indent(ctx, ignore_temp=True)
    if output.last != "{":
        output.keep_space()
    # Keep "} else" apart, but not "})" or "}."
    if is_word_char(ctx.char_at(index + 1)):
        output.append("} ")
    else:
        output.append("}")
    return index + 1


def _handle_word(ctx: FormatContext, index: int) -> int:
    source = ctx.source
    end = index + 1
    while end < len(source) and is_word_char(source[end]):
        end += 1
    word = source[index:end]
    ctx.output.append(word)
    note_keyword(ctx.state, word)
    return end


_HANDLERS: dict[str, Callable[[FormatContext, int], int]] = {
    **dict.fromkeys("+*%>|=", _handle_operator),
    "-": _handle_minus,
    **dict.fromkeys("~^!&", _handle_prefix_operator),
    ".": _handle_dot,
    "/": _handle_slash,
    "<": _handle_less_than,
    "?": _handle_question,
    ":": _handle_separator,
    ",": _handle_separator,
    "#": _handle_hash,
    '"': _handle_quote,
    "\n": _handle_newline,
    " ": _handle_space,
    "\t": _handle_space,
    **dict.fromkeys(OPENING_BRACKETS, _handle_open),
    **dict.fromkeys(CLOSING_BRACKETS, _handle_close),
}


def format_code(source: str, config: FormatConfig | None = None) -> FormatResult:
    """Reformat source text in a single pass.

    Re-indents every line from the bracket nesting and continuation
    heuristics, normalizes spacing around operators, commas and colons, and
    copies string literals, comments, generic argument lists and directive
    conditions unchanged.

    Args:
        source: The complete source text.
        config: Configuration providing the indent unit. Defaults to a new
            `FormatConfig` when omitted.

    Returns:
        FormatResult: Formatted text (stripped of leading and trailing
            whitespace) and the number of unbalanced closing brackets.

    Raises:
        ConfigError: If the configuration fails validation.
        UnterminatedLiteralError: If a string literal or block comment is
            never closed.

    Examples:
        format_code("let x=-1").text  # "let x = -1"
        format_code("if x{\\nreturn 1\\n}", FormatConfig(indent_spaces=2)).text
    """
    config = normalize_config(config or FormatConfig())
    validate_config(config)

    ctx = FormatContext(source=normalize_newlines(source), indent_unit=config.indent_chars)
    logger.debug("Formatting %d characters with indent unit %r", len(ctx.source), ctx.indent_unit)

    index = 0
    while index < len(ctx.source):
        handler = _HANDLERS.get(ctx.source[index], _handle_word)
        index = handler(ctx, index)

    if ctx.state.blocks:
        logger.debug("%d bracket(s) left open at end of input", len(ctx.state.blocks))

    return FormatResult(
        text=str(ctx.output).strip(),
        unbalanced_brackets=ctx.unbalanced_brackets,
    )


def format_source(source: str, config: FormatConfig | None = None) -> str:
    """Return the formatted text of `source`; see `format_code`."""
    return format_code(source, config).text


class FormatFileError(Exception):
    """Raised when formatting a source file fails."""


def format_file(filepath: Path, config: FormatConfig | None = None) -> tuple[str, FormatResult]:
    """Read and format a source file.

    Args:
        filepath: Path to the file to format.
        config: Configuration providing the indent unit; defaults to a new
            `FormatConfig` when omitted.

    Returns:
        tuple[str, FormatResult]: The original file content and the
            formatting result.

    Raises:
        FormatFileError: If configuration is invalid, the file is too large,
            cannot be read or decoded, or holds an unterminated literal.

    Examples:
        original, result = format_file(Path("Sources/App.swift"), config)
    """
    config = config or FormatConfig()
    try:
        validate_config(config)
    except ConfigError as error:
        raise FormatFileError(str(error)) from error

    try:
        content = read_source(filepath, config.max_file_size)
    except UnicodeDecodeError as error:
        error_message = f"Invalid UTF-8 sequence in {filepath}: {error}"
        raise FormatFileError(error_message) from error
    except IOError as error:
        raise FormatFileError(str(error)) from error

    try:
        result = format_code(content, config)
    except UnterminatedLiteralError as error:
        line_number = normalize_newlines(content).count("\n", 0, error.position) + 1
        error_message = f"{filepath} contains an unterminated {error.kind} at line {line_number}."
        raise FormatFileError(error_message) from error
    except FormatError as error:
        raise FormatFileError(f"{filepath}: {error}") from error

    return content, result
