"""Incremental formatting of streamed assistant text."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from pathlib import Path

from .constants import FENCE_LENGTH
from .header import parse_code_block_header
from .models import CodeBlockElement, Element, ScanEvent, ScannerContext, ScanState, TextElement
from .scanner import advance, enter_header

logger = logging.getLogger(__name__)


class StreamingDocumentFormatter:
    """Rebuild text and fenced code blocks from a stream of deltas.

    Each `ingest` call scans only the characters that have not been scanned
    yet; scanner state survives across calls, so the resulting elements do not
    depend on where the delta boundaries fall. Content is committed to an
    element only up to its last ordinary non-whitespace character. Trailing
    whitespace, partial backtick runs, pending escapes and unfinished header
    lines stay buffered until later deltas resolve them.

    Instances are not thread-safe; callers serialize access.

    Examples:
        formatter = StreamingDocumentFormatter(base_path=Path("/repo"))
        formatter.ingest("Here is code:\\n```python:app.py\\n")
        formatter.ingest("print('hi')\\n```")
        formatter.elements  # (TextElement(...), CodeBlockElement(...))
    """

    def __init__(self, base_path: Path | str | None = None):
        self._base_path = Path(base_path) if base_path is not None else None
        self._elements: list[Element] = []
        self._deltas: list[str] = []
        self._text = ""
        self._unconsumed = ""
        self._scanned = 0
        self._context = ScannerContext()
        self._finished = False

    @property
    def elements(self) -> tuple[Element, ...]:
        """Parsed elements in document order."""
        return tuple(self._elements)

    @property
    def text(self) -> str:
        """Raw concatenation of every delta received so far."""
        return self._text

    @property
    def deltas(self) -> tuple[str, ...]:
        return tuple(self._deltas)

    @property
    def base_path(self) -> Path | None:
        return self._base_path

    @property
    def is_finished(self) -> bool:
        return self._finished

    def ingest(self, delta: str) -> None:
        """Process a new fragment of streamed text.

        Args:
            delta: Text fragment; may split fences, escapes, headers or words
                at any point.
        """
        if self._finished:
            logger.warning("Ignoring delta received after the stream finished")
            return

        self._deltas.append(delta)
        self._text += delta
        self._unconsumed += delta
        self._process_unconsumed()

    def catch_up(self, deltas: Sequence[str]) -> None:
        """Synchronize with the full list of deltas known to the caller.

        Only deltas beyond those already recorded are ingested. Lists that are
        not longer than the recorded history are ignored.

        Args:
            deltas: Every delta of the message so far, in order.
        """
        if len(deltas) <= len(self._deltas):
            return

        missing = deltas[len(self._deltas) :]
        logger.debug("Catching up on %d deltas", len(missing))
        for delta in missing:
            self.ingest(delta)
        self._deltas = list(deltas)

    def finish(self) -> None:
        """Mark the end of the stream.

        Buffered content is flushed into the current element and a trailing
        text element is completed. An unclosed code block stays incomplete and
        an unfinished header line stays pending.
        """
        if self._finished:
            return
        self._finished = True

        if self._context.state is not ScanState.IN_HEADER:
            self._commit(len(self._unconsumed))

        last = self._elements[-1] if self._elements else None
        if isinstance(last, TextElement):
            last.update(last.text, is_complete=True)
        elif isinstance(last, CodeBlockElement) and not last.is_complete:
            logger.debug("Stream finished inside unclosed code block %d", last.id)

    def _process_unconsumed(self) -> None:
        index = self._scanned
        commit_until = 0

        while index < len(self._unconsumed):
            event = advance(self._context, self._unconsumed[index])
            index += 1

            if event is ScanEvent.COMMIT_POINT:
                commit_until = index
            elif event is ScanEvent.FENCE:
                self._handle_fence(index)
                index = 0
                commit_until = 0
            elif event is ScanEvent.HEADER_END:
                self._handle_header(index)
                index = 0
                commit_until = 0

        self._commit(commit_until)
        self._scanned = len(self._unconsumed)

    def _handle_fence(self, end: int) -> None:
        content = self._unconsumed[: end - FENCE_LENGTH]
        self._unconsumed = self._unconsumed[end:]

        code_block = self._open_code_block()
        if code_block is not None:
            code_block.update(code_block.raw_content + content, is_complete=True)
            logger.debug("Closed code block %d", code_block.id)
            return

        last = self._elements[-1] if self._elements else None
        if isinstance(last, TextElement):
            last.update(last.text + content, is_complete=True)
        elif content.strip():
            self._elements.append(
                TextElement(id=len(self._elements), text=content, is_complete=True)
            )

        self._elements.append(CodeBlockElement(id=len(self._elements), base_path=self._base_path))
        enter_header(self._context)
        logger.debug("Opened code block %d", len(self._elements) - 1)

    def _handle_header(self, end: int) -> None:
        header_line = self._unconsumed[:end]
        self._unconsumed = self._unconsumed[end:]

        code_block = self._open_code_block()
        if code_block is None:
            # Header mode is only entered right after a code block opens.
            logger.error("Header line %r has no open code block", header_line)
            return

        header = parse_code_block_header(header_line)
        code_block.apply_header(header)
        logger.debug(
            "Code block %d header: language=%r file_path=%r",
            code_block.id,
            header.language,
            header.file_path,
        )

    def _commit(self, length: int) -> None:
        if length <= 0:
            return

        content = self._unconsumed[:length]
        self._unconsumed = self._unconsumed[length:]

        last = self._elements[-1] if self._elements else None
        if isinstance(last, TextElement):
            last.update(last.text + content, is_complete=last.is_complete)
            return

        code_block = self._open_code_block()
        if code_block is not None:
            code_block.update(code_block.raw_content + content, is_complete=False)
            return

        if content.strip():
            self._elements.append(TextElement(id=len(self._elements), text=content))

    def _open_code_block(self) -> CodeBlockElement | None:
        if not self._elements:
            return None
        last = self._elements[-1]
        if isinstance(last, CodeBlockElement) and not last.is_complete:
            return last
        return None


def format_text(
    text: str, base_path: Path | str | None = None, finish: bool = True
) -> tuple[Element, ...]:
    """Format a complete message in one pass.

    Args:
        text: Whole message text.
        base_path: Base directory stored on code blocks for path resolution.
        finish: Whether to finish the stream, completing trailing text.

    Returns:
        tuple[Element, ...]: Parsed elements in document order.

    Examples:
        format_text("Intro\\n```sh\\nls\\n```\\nDone.")
    """
    formatter = StreamingDocumentFormatter(base_path=base_path)
    formatter.ingest(text)
    if finish:
        formatter.finish()
    return formatter.elements


def split_into_deltas(text: str, chunk_size: int) -> list[str]:
    """Split text into fixed-size deltas for replay.

    Raises:
        ValueError: If `chunk_size` is not positive.

    Examples:
        split_into_deltas("abcdef", 4)  # ["abcd", "ef"]
    """
    if chunk_size <= 0:
        raise ValueError("`chunk_size` must be a positive integer")
    return [text[start : start + chunk_size] for start in range(0, len(text), chunk_size)]


def replay(
    deltas: Iterable[str], base_path: Path | str | None = None, finish: bool = True
) -> StreamingDocumentFormatter:
    """Feed deltas one by one into a new formatter.

    Examples:
        replay(["abc``", "`\\ncode\\n``", "`\\nmore"]).elements
    """
    formatter = StreamingDocumentFormatter(base_path=base_path)
    for delta in deltas:
        formatter.ingest(delta)
    if finish:
        formatter.finish()
    return formatter
