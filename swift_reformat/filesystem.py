"""Reading and rewriting Swift source files."""

from __future__ import annotations

import os
import stat
import tempfile
from pathlib import Path

from .constants import SWIFT_EXTENSIONS


def resolve_source_path(raw_path: str) -> Path:
    """Resolve a command line argument to the Swift file it names.

    Symlinks are followed, so an in-place rewrite replaces the file the link
    points to and leaves the link itself alone.

    Args:
        raw_path: Path as given on the command line.

    Returns:
        Path: Absolute path of the source file.

    Raises:
        ValueError: If the path is missing, is not a regular file, or does
            not have a Swift extension.

    Examples:
        resolve_source_path("Sources/App.swift")
    """
    path = Path(raw_path).expanduser()

    try:
        resolved = path.resolve(strict=True)
    except FileNotFoundError as error:
        raise ValueError(f"{path} does not exist.") from error
    except OSError as error:
        raise ValueError(f"Error resolving {path}: {error}") from error

    if not resolved.is_file():
        raise ValueError(f"{path} is not a regular file.")

    if resolved.suffix.lower() not in SWIFT_EXTENSIONS:
        error_message = f"{path} is not a Swift source file "
        error_message += f"(expected {', '.join(SWIFT_EXTENSIONS)})."
        raise ValueError(error_message)

    return resolved


def stat_source(filepath: Path) -> os.stat_result:
    """Snapshot a source file's metadata.

    Raises:
        IOError: If the file cannot be accessed.
    """
    try:
        return filepath.stat()
    except OSError as error:
        raise IOError(f"Error accessing {filepath}: {error}") from error


def _fingerprint(snapshot: os.stat_result) -> tuple[int, int, int, int]:
    return (snapshot.st_ino, snapshot.st_dev, snapshot.st_size, snapshot.st_mtime_ns)


def read_source(filepath: Path, max_size: int) -> str:
    """Read a UTF-8 source file of at most `max_size` bytes.

    Line endings are returned untranslated, so a caller comparing the
    formatted text with the original sees CRLF files as changed.

    Raises:
        IOError: If the file is too large or cannot be read.
        UnicodeDecodeError: If the file is not valid UTF-8.

    Examples:
        content = read_source(Path("App.swift"), max_size=1024 * 1024)
    """
    size = stat_source(filepath).st_size
    if size > max_size:
        raise IOError(f"{filepath} is {size} bytes, over the {max_size} byte limit.")

    try:
        with open(filepath, "r", encoding="UTF-8", newline="") as handle:
            return handle.read()
    except (PermissionError, IsADirectoryError, FileNotFoundError) as error:
        raise IOError(f"Error accessing {filepath}: {error}") from error


def write_formatted(filepath: Path, content: str, snapshot: os.stat_result):
    """Atomically replace a source file with its formatted content.

    The formatted text goes to a temporary file in the same directory, which
    then replaces the original in one rename. Permission bits are carried
    over. The write is refused when the file no longer matches `snapshot`,
    so edits saved while the file was being formatted are not lost.

    Args:
        filepath: Resolved path of the file to rewrite.
        content: Formatted text, written as is.
        snapshot: Metadata captured before the file was read.

    Raises:
        IOError: If the file changed since `snapshot` or cannot be replaced.

    Examples:
        snapshot = stat_source(path)
        original, result = format_file(path, config)
        write_formatted(path, result.text + "\\n", snapshot)
    """
    if _fingerprint(stat_source(filepath)) != _fingerprint(snapshot):
        raise IOError(f"{filepath} changed while it was being formatted; not overwriting.")

    temp_path: Path | None = None
    try:
        with tempfile.NamedTemporaryFile(
            mode="w",
            encoding="UTF-8",
            newline="",
            delete=False,
            dir=filepath.parent,
            prefix=f".{filepath.name}.",
            suffix=".tmp",
        ) as tmp_file:
            temp_path = Path(tmp_file.name)
            tmp_file.write(content)
            tmp_file.flush()
            os.fsync(tmp_file.fileno())

        os.chmod(temp_path, stat.S_IMODE(snapshot.st_mode))
        os.replace(temp_path, filepath)
        temp_path = None
    except OSError as error:
        raise IOError(f"Could not rewrite {filepath}: {error}") from error
    finally:
        if temp_path is not None:
            temp_path.unlink(missing_ok=True)
