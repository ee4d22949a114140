"""Filesystem helpers for streaming-formatter."""

from __future__ import annotations

import json
import os
import stat
from pathlib import Path
from typing import TextIO

from .constants import DEFAULT_MAX_FILE_SIZE
from .exceptions import MalformedDeltaLogError

MAX_FILE_SIZE_ENV_VAR = "STREAMING_FORMATTER_MAX_FILE_SIZE"


def get_max_file_size(default: int = DEFAULT_MAX_FILE_SIZE) -> int:
    """Resolve the maximum allowed input file size.

    Args:
        default: Fallback value in bytes when the environment variable is unset.

    Returns:
        int: Maximum allowed file size in bytes.

    Raises:
        ValueError: If the environment value is not a positive integer.

    Examples:
        os.environ["STREAMING_FORMATTER_MAX_FILE_SIZE"] = "204800"
        limit = get_max_file_size(default=102400)
    """
    env_value = os.environ.get(MAX_FILE_SIZE_ENV_VAR)
    if env_value is None:
        return default

    try:
        max_size = int(env_value)
    except ValueError as error:
        error_message = (
            f"Invalid value for {MAX_FILE_SIZE_ENV_VAR}: {env_value} (expected positive integer)"
        )
        raise ValueError(error_message) from error

    if max_size <= 0:
        error_message = f"{MAX_FILE_SIZE_ENV_VAR} must be a positive integer, got {max_size}."
        raise ValueError(error_message)

    return max_size


def normalize_filepath(raw_path: str) -> Path:
    """Resolve and validate an input filepath.

    Args:
        raw_path: User-supplied path (absolute or relative).

    Returns:
        Path: Absolute path to the input file.

    Raises:
        ValueError: If the path does not exist or is not a regular file.

    Examples:
        normalize_filepath("transcripts/reply.md")
    """
    path = Path(raw_path).expanduser()

    try:
        resolved = path.resolve(strict=True)
    except FileNotFoundError as error:
        error_message = f"{path} does not exist."
        raise ValueError(error_message) from error
    except OSError as error:
        error_message = f"Error resolving {path}: {error}"
        raise ValueError(error_message) from error

    if not resolved.is_file():
        error_message = f"{resolved} is not a regular file."
        raise ValueError(error_message)

    return resolved


def collect_file_stat(filepath: Path) -> os.stat_result:
    """Return stat information for a regular file.

    Raises:
        IOError: If the path is inaccessible or not a regular file.
    """
    try:
        stat_result = os.stat(filepath)
    except OSError as error:
        error_message = f"Error accessing {filepath}: {error}"
        raise IOError(error_message) from error

    if not stat.S_ISREG(stat_result.st_mode):
        error_message = f"{filepath} is not a regular file."
        raise IOError(error_message)

    return stat_result


def enforce_file_size(stat_result: os.stat_result, max_size: int, filepath: Path):
    """Guard against files that exceed the configured maximum size.

    Raises:
        IOError: If `stat_result.st_size` exceeds `max_size`.

    Examples:
        enforce_file_size(os.stat("reply.md"), 102400, Path("reply.md"))
    """
    if stat_result.st_size > max_size:
        error_message = f"{filepath} exceeds the maximum allowed size of {max_size} bytes."
        raise IOError(error_message)


def safe_read(filepath: Path) -> TextIO:
    """Open a file for reading with consistent error handling.

    Args:
        filepath: Path to the file.

    Returns:
        TextIO: File handle opened for reading in UTF-8.

    Raises:
        IOError: If the path is missing, inaccessible, or not a file.

    Examples:
        with safe_read(Path("reply.md")) as handle:
            content = handle.read()
    """
    try:
        return open(filepath, "r", encoding="UTF-8", newline="")
    except (
        FileNotFoundError,
        PermissionError,
        IsADirectoryError,
        NotADirectoryError,
    ) as error:
        error_message = f"Error accessing {filepath}: {error}"
        raise IOError(error_message) from error


def read_text(filepath: Path) -> str:
    """Read a whole UTF-8 file.

    Raises:
        IOError: If the file cannot be read or is not valid UTF-8.
    """
    try:
        with safe_read(filepath) as file:
            return file.read()
    except UnicodeDecodeError as error:
        error_message = f"Invalid UTF-8 sequence in {filepath}: {error}"
        raise IOError(error_message) from error


def parse_delta_log(content: str, source: str = "<delta log>") -> list[str]:
    """Parse a recorded delta log.

    A delta log is a JSON array of strings, one per delta, in stream order.

    Args:
        content: JSON text of the log.
        source: Name used in error messages.

    Returns:
        list[str]: Deltas in order.

    Raises:
        MalformedDeltaLogError: If the content is not a JSON array of strings.

    Examples:
        parse_delta_log('["Hello", " world"]')  # ["Hello", " world"]
    """
    try:
        data = json.loads(content)
    except json.JSONDecodeError as error:
        raise MalformedDeltaLogError(source, f"invalid JSON ({error})") from error

    if not isinstance(data, list):
        raise MalformedDeltaLogError(source, "expected a JSON array of strings")

    for index, delta in enumerate(data):
        if not isinstance(delta, str):
            raise MalformedDeltaLogError(source, "is not a string", index=index)

    return data


def load_delta_log(filepath: Path) -> list[str]:
    """Read and parse a delta log file.

    Raises:
        IOError: If the file cannot be read.
        MalformedDeltaLogError: If the content is not a JSON array of strings.
    """
    return parse_delta_log(read_text(filepath), source=str(filepath))
