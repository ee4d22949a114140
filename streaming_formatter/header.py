"""Code block header parsing."""

from __future__ import annotations

from .constants import HEADER_PATTERN, PATH_HINT_CHARACTERS
from .models import CodeBlockHeader


def parse_code_block_header(header: str) -> CodeBlockHeader:
    """Parse the header line that follows an opening fence.

    The header is stripped first. ``language:path`` sets both fields; a header
    containing ``/`` or ``.`` is treated as a file path; any other non-empty
    header is a language. An empty path after the colon is treated as absent.

    Args:
        header: Raw header text, with or without its trailing newline.

    Returns:
        CodeBlockHeader: Parsed language and file path, each possibly None.

    Examples:
        parse_code_block_header("swift:Sources/Foo.swift")  # swift, Sources/Foo.swift
        parse_code_block_header("Sources/Foo.swift")  # None, Sources/Foo.swift
        parse_code_block_header("swift")  # swift, None
    """
    header = header.strip()
    if not header:
        return CodeBlockHeader()

    match = HEADER_PATTERN.match(header)
    if match:
        path = match.group("path").strip()
        return CodeBlockHeader(language=match.group("language"), file_path=path or None)

    if any(hint in header for hint in PATH_HINT_CHARACTERS):
        return CodeBlockHeader(file_path=header)

    return CodeBlockHeader(language=header)


def render_code_block_header(header: CodeBlockHeader) -> str:
    """Render a header back to header-line text.

    Examples:
        render_code_block_header(CodeBlockHeader("python", "app.py"))  # "python:app.py"
    """
    if header.language and header.file_path:
        return f"{header.language}:{header.file_path}"
    return header.language or header.file_path or ""
