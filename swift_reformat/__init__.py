"""
swift-reformat: single-pass reformatter for Swift source code.

This package can be used both as a CLI tool and as a library.

CLI Usage:
    swift-reformat Sources/App.swift --in-place

Library Usage:
    from swift_reformat import FormatConfig, format_source

    formatted = format_source("let x=-1", FormatConfig(indent_spaces=2))
"""

from .config import ConfigError, FormatConfig
from .exceptions import FormatError, UnterminatedLiteralError
from .formatter import FormatFileError, format_code, format_file, format_source
from .indentation import decide_continuation
from .models import Block, BlockType, FormatResult, IndentState
from .operators import match_operator

__version__ = "0.1.0"

__all__ = [
    # Core functionality
    "format_code",
    "format_source",
    "format_file",
    "decide_continuation",
    "match_operator",
    # Data models
    "Block",
    "BlockType",
    "FormatConfig",
    "FormatResult",
    "IndentState",
    # Exceptions
    "ConfigError",
    "FormatError",
    "FormatFileError",
    "UnterminatedLiteralError",
    # Version
    "__version__",
]
