"""
streaming-formatter: incremental formatting of streamed assistant text.

Rebuilds plain text and fenced code blocks (with their language/file-path
headers) from text that arrives in arbitrarily split fragments.

CLI Usage:
    streaming-formatter reply.md --chunk-size 4

Library Usage:
    from streaming_formatter import StreamingDocumentFormatter

    formatter = StreamingDocumentFormatter(base_path="/path/to/project")
    for delta in stream:
        formatter.ingest(delta)
        render(formatter.elements)
    formatter.finish()
"""

from .exceptions import DeltaLogError, MalformedDeltaLogError
from .formatter import StreamingDocumentFormatter, format_text, replay, split_into_deltas
from .header import parse_code_block_header, render_code_block_header
from .models import CodeBlockElement, CodeBlockHeader, Element, TextElement
from .paths import language_for_path, resolve_file_path, wrap_in_code_block
from .render import element_to_dict, render_elements

__version__ = "0.1.0"

__all__ = [
    # Core functionality
    "StreamingDocumentFormatter",
    "format_text",
    "replay",
    "split_into_deltas",
    "parse_code_block_header",
    "render_code_block_header",
    # Data models
    "Element",
    "TextElement",
    "CodeBlockElement",
    "CodeBlockHeader",
    # Utilities
    "element_to_dict",
    "render_elements",
    "language_for_path",
    "resolve_file_path",
    "wrap_in_code_block",
    # Exceptions
    "DeltaLogError",
    "MalformedDeltaLogError",
    # Version
    "__version__",
]
