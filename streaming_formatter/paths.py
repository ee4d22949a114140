"""File path helpers for code block headers."""

from __future__ import annotations

from pathlib import Path, PurePath

from .constants import CODE_FENCE, LANGUAGE_BY_EXTENSION
from .models import CodeBlockElement


def resolve_file_path(file_path: str | None, base_path: Path | str | None) -> Path | None:
    """Resolve a code block file path against a base directory.

    Absolute paths are returned unchanged; relative paths are joined to
    `base_path` when one is given. User home shortcuts (``~``) are expanded.

    Args:
        file_path: Path parsed from a code block header.
        base_path: Directory that relative paths are relative to.

    Returns:
        Path | None: Absolute path when it can be determined, the relative path
            when there is no base path, or None when `file_path` is empty.

    Examples:
        resolve_file_path("src/app.py", "/repo")  # Path("/repo/src/app.py")
        resolve_file_path("/etc/hosts", "/repo")  # Path("/etc/hosts")
    """
    if not file_path:
        return None

    path = Path(file_path).expanduser()
    if path.is_absolute() or base_path is None:
        return path

    return Path(base_path).expanduser() / path


def resolve_code_block_path(code_block: CodeBlockElement) -> Path | None:
    """Resolve the file path of a code block against its own base path."""
    return resolve_file_path(code_block.file_path, code_block.base_path)


def language_for_path(file_path: str | PurePath) -> str | None:
    """Return the code block language for a file's extension.

    Examples:
        language_for_path("Sources/App.swift")  # "swift"
        language_for_path("notes.txt")  # None
    """
    extension = PurePath(file_path).suffix.lower().lstrip(".")
    return LANGUAGE_BY_EXTENSION.get(extension)


def wrap_in_code_block(content: str, file_path: str | PurePath) -> str:
    """Wrap file content in a fenced code block.

    Content that already starts with a fence is returned unchanged. The fence
    header carries the language for the file's extension when known.

    Args:
        content: Raw file content.
        file_path: Path of the file the content belongs to.

    Returns:
        str: Markdown text with the content inside a fenced code block.

    Examples:
        wrap_in_code_block("print(1)", "main.py")  # "```python\\nprint(1)\\n```"
    """
    if content.startswith(CODE_FENCE):
        return content

    language = language_for_path(file_path) or ""
    return f"{CODE_FENCE}{language}\n{content}\n{CODE_FENCE}"
