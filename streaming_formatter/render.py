"""Rendering of formatted elements for display and export."""

from __future__ import annotations

from collections.abc import Iterable

from .constants import CODE_FENCE
from .header import render_code_block_header
from .models import CodeBlockHeader, Element, TextElement
from .paths import resolve_code_block_path


def render_elements(elements: Iterable[Element]) -> list[str]:
    """Render elements back to Markdown lines.

    Elements are separated by a blank line. Code blocks are re-fenced with a
    normalized header; an incomplete code block is left without its closing
    fence so the output shows it is still streaming.

    Args:
        elements: Elements in document order.

    Returns:
        list[str]: Lines of Markdown, each ending with a newline.

    Examples:
        render_elements(format_text("Hi\\n```sh\\nls\\n```"))
        # ["Hi\\n", "\\n", "```sh\\n", "ls\\n", "```\\n"]
    """
    lines: list[str] = []

    for element in elements:
        if lines:
            lines.append("\n")

        if isinstance(element, TextElement):
            lines.extend(_as_lines(element.text))
            continue

        header = CodeBlockHeader(language=element.language, file_path=element.file_path)
        lines.append(f"{CODE_FENCE}{render_code_block_header(header)}\n")
        lines.extend(_as_lines(element.raw_content))
        if element.is_complete:
            lines.append(f"{CODE_FENCE}\n")

    return lines


def _as_lines(text: str) -> list[str]:
    if not text:
        return []
    if not text.endswith("\n"):
        text += "\n"
    return text.splitlines(keepends=True)


def element_to_dict(element: Element, resolve_paths: bool = False) -> dict[str, object]:
    """Convert an element to a JSON-ready mapping.

    Args:
        element: Element to convert.
        resolve_paths: Whether to add the resolved path of a code block's file.

    Returns:
        dict[str, object]: Element fields keyed by name, with a ``type`` entry
            of ``"text"`` or ``"code_block"``.
    """
    if isinstance(element, TextElement):
        return {
            "id": element.id,
            "type": "text",
            "text": element.text,
            "is_complete": element.is_complete,
        }

    data: dict[str, object] = {
        "id": element.id,
        "type": "code_block",
        "raw_content": element.raw_content,
        "language": element.language,
        "file_path": element.file_path,
        "is_complete": element.is_complete,
    }
    if resolve_paths:
        resolved = resolve_code_block_path(element)
        data["resolved_path"] = str(resolved) if resolved is not None else None
    return data
