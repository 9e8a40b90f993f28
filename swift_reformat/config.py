"""Configuration loading and management."""

from __future__ import annotations

from dataclasses import dataclass, replace
from pathlib import Path
import tomllib

TOOL_NAME = "swift-reformat"


@dataclass
class FormatConfig:
    """Configuration for a formatting run.

    The indent unit is the only style option; the remaining field bounds the
    input accepted by the command line tool.

    Attributes:
        indent_chars: Characters emitted once per indentation level.
        indent_spaces: Number of spaces per level; overrides `indent_chars`
            when set.
        max_file_size: Maximum file size in bytes that will be processed.

    Examples:
        FormatConfig(indent_chars="\\t")
        FormatConfig(indent_spaces=2)
    """

    # Formatting
    indent_chars: str = "    "
    indent_spaces: int | None = None

    # Limits
    max_file_size: int = 10 * 1024 * 1024


class ConfigError(ValueError):
    """Exception raised when configuration values are invalid.

    Examples:
        raise ConfigError("`indent_chars` must not be empty")
    """


def load_config(search_path: Path) -> FormatConfig:
    """Load configuration from the nearest config file.

    Walks parent directories from `search_path` to the filesystem root, reading
    the ``[tool.swift-reformat]`` table from `pyproject.toml` and the
    ``[swift-reformat]`` or ``[tool.swift-reformat]`` table from
    `.swift-reformat.toml` when present. Returns default values when no
    configuration is found. TOML files that cannot be read or decoded are
    skipped.

    Args:
        search_path: Directory used as the starting point for configuration lookup.

    Returns:
        FormatConfig: Loaded configuration with defaults applied when necessary.

    Raises:
        ConfigError: If the table is present but not a mapping or contains
            unsupported keys.

    Examples:
        load_config(Path("Sources"))
    """
    current = search_path.resolve()

    while True:
        pyproject_config = _load_from_file(
            current / "pyproject.toml", table_paths=[("tool", TOOL_NAME)]
        )
        if pyproject_config is not None:
            return normalize_config(pyproject_config)

        dotfile_config = _load_from_file(
            current / f".{TOOL_NAME}.toml",
            table_paths=[(TOOL_NAME,), ("tool", TOOL_NAME)],
        )
        if dotfile_config is not None:
            return normalize_config(dotfile_config)

        parent = current.parent
        if parent == current:
            break
        current = parent

    return FormatConfig()


_MISSING = object()


def _load_from_file(config_file: Path, table_paths: list[tuple[str, ...]]) -> FormatConfig | None:
    if not config_file.exists():
        return None

    try:
        with open(config_file, "rb") as stream:
            data = tomllib.load(stream)
    except (OSError, tomllib.TOMLDecodeError):
        return None

    for table_path in table_paths:
        raw_config = _extract_table(data, table_path)
        if raw_config is _MISSING:
            continue
        return _build_config_from_raw(raw_config, config_file, table_path)

    return None


def _extract_table(data: object, table_path: tuple[str, ...]) -> object:
    current = data
    for key in table_path:
        if not isinstance(current, dict) or key not in current:
            return _MISSING
        current = current[key]
    return current


def _build_config_from_raw(
    raw_config: object, config_file: Path, table_path: tuple[str, ...]
) -> FormatConfig:
    table_display = ".".join(table_path)

    if raw_config is None:
        return FormatConfig()

    if not isinstance(raw_config, dict):
        raise ConfigError(f"Invalid `[{table_display}]` settings in {config_file}")

    if not raw_config:
        return FormatConfig()

    try:
        return FormatConfig(**raw_config)
    except TypeError as error:
        raise ConfigError(f"Invalid `[{table_display}]` settings in {config_file}") from error


def normalize_config(config: FormatConfig) -> FormatConfig:
    """Fold `indent_spaces` into `indent_chars`."""
    if config.indent_spaces is None:
        return config

    _ensure_integers({"indent_spaces": config.indent_spaces})
    if config.indent_spaces <= 0:
        raise ConfigError("`indent_spaces` must be a positive integer")
    return replace(config, indent_chars=" " * config.indent_spaces)


def validate_config(config: FormatConfig) -> None:
    """Validate a `FormatConfig` instance.

    Args:
        config: Configuration to validate.

    Raises:
        ConfigError: If the indent unit is empty or holds anything but spaces
            and tabs, or the size limit is not a positive integer.

    Examples:
        validate_config(FormatConfig(indent_spaces=2))
    """
    config = normalize_config(config)

    _ensure_integers({"max_file_size": config.max_file_size})

    if not isinstance(config.indent_chars, str) or not config.indent_chars:
        raise ConfigError("`indent_chars` must not be empty")
    if config.indent_chars.strip(" \t"):
        raise ConfigError("`indent_chars` must contain only spaces and tabs")

    _ensure_positive({"max_file_size": config.max_file_size})


def apply_overrides(config: FormatConfig, **overrides: object) -> FormatConfig:
    """Apply override values to a `FormatConfig`.

    Args:
        config: Base configuration to update.
        overrides: Override values keyed by configuration field name; values set to
            None are ignored.

    Returns:
        FormatConfig: New configuration with the provided overrides applied. The
        original configuration is returned when no changes are supplied.

    Raises:
        TypeError: If an override name is not defined on `FormatConfig`.

    Examples:
        updated = apply_overrides(config, indent_chars="\\t")
    """
    changes = {key: value for key, value in overrides.items() if value is not None}
    if "indent_chars" in changes and "indent_spaces" not in changes:
        changes["indent_spaces"] = None
    if not changes:
        return config
    return replace(config, **changes)


def build_config(search_path: Path, **overrides: object) -> FormatConfig:
    """Load, override, and validate configuration.

    Args:
        search_path: Directory where configuration files are resolved.
        overrides: Override values keyed by configuration attributes; None values
            are ignored.

    Returns:
        FormatConfig: Validated configuration ready for formatting.

    Raises:
        ConfigError: If configuration loading or validation fails.

    Examples:
        config = build_config(Path.cwd(), indent_spaces=2)
    """
    config = load_config(search_path)
    config = apply_overrides(config, **overrides)
    config = normalize_config(config)
    validate_config(config)
    return config


def _ensure_positive(values: dict[str, int]) -> None:
    for key, value in values.items():
        if value <= 0:
            raise ConfigError(f"`{key}` must be a positive integer")


def _ensure_integers(values: dict[str, object]) -> None:
    for key, value in values.items():
        if isinstance(value, bool) or not isinstance(value, int):
            raise ConfigError(f"`{key}` must be an integer")
