"""Data models for streaming-formatter."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from pathlib import Path


class ScanState(Enum):
    """Scanner states used while classifying streamed characters.

    Attributes:
        NORMAL: Default state for ordinary text and code content.
        ESCAPING: The previous character was an unpaired backslash.
        COUNTING_BACKTICKS: Inside a run of one or two unescaped backticks.
        IN_HEADER: Reading the header line that follows an opening fence.
    """

    NORMAL = auto()
    ESCAPING = auto()
    COUNTING_BACKTICKS = auto()
    IN_HEADER = auto()


class ScanEvent(Enum):
    """Outcome of feeding one character to the scanner.

    Attributes:
        NONE: The character may not end a committed prefix.
        COMMIT_POINT: The character is ordinary non-whitespace content.
        FENCE: The character completed a triple-backtick fence.
        HEADER_END: The character ended the code block header line.
    """

    NONE = auto()
    COMMIT_POINT = auto()
    FENCE = auto()
    HEADER_END = auto()


@dataclass
class ScannerContext:
    """Scanner state carried across deltas.

    Attributes:
        state: Current scanner state.
        backtick_count: Length of the current unescaped backtick run.
    """

    state: ScanState = ScanState.NORMAL
    backtick_count: int = 0


@dataclass(frozen=True)
class CodeBlockHeader:
    """Language and file path parsed from a code block header line."""

    language: str | None = None
    file_path: str | None = None


def trim_text(text: str, is_complete: bool) -> str:
    """Trim text according to its completion status.

    Leading whitespace is always dropped; trailing whitespace only once the
    element is complete.

    Examples:
        trim_text("  hi \\n", False)  # "hi \\n"
        trim_text("  hi \\n", True)  # "hi"
    """
    return text.strip() if is_complete else text.lstrip()


@dataclass
class TextElement:
    """A plain text segment of a formatted document.

    Attributes:
        id: Position of the element in the document when it was created.
        text: Text content, trimmed according to `is_complete`.
        is_complete: Whether the segment has finished streaming.
    """

    id: int
    text: str = ""
    is_complete: bool = False

    def __post_init__(self):
        self.text = trim_text(self.text, self.is_complete)

    def update(self, text: str, is_complete: bool) -> None:
        self.is_complete = is_complete
        self.text = trim_text(text, is_complete)


@dataclass
class CodeBlockElement:
    """A fenced code block segment of a formatted document.

    Attributes:
        id: Position of the element in the document when it was created.
        raw_content: Code between the header line and the closing fence.
        language: Language parsed from the header line, if any.
        file_path: File path parsed from the header line, if any. Kept as
            written; see `streaming_formatter.paths.resolve_file_path`.
        is_complete: Whether the closing fence has been received.
        base_path: Base directory for resolving a relative `file_path`.
    """

    id: int
    raw_content: str = ""
    language: str | None = None
    file_path: str | None = None
    is_complete: bool = False
    base_path: Path | None = None

    def update(self, raw_content: str, is_complete: bool) -> None:
        self.raw_content = raw_content
        self.is_complete = is_complete

    def apply_header(self, header: CodeBlockHeader) -> None:
        self.language = header.language
        self.file_path = header.file_path


Element = TextElement | CodeBlockElement
