"""Character-level state machine for fence, escape, and header detection."""

from __future__ import annotations

from collections.abc import Callable

from .constants import BACKSLASH, BACKTICK, FENCE_LENGTH, NEWLINE
from .models import ScanEvent, ScannerContext, ScanState


def _content_event(char: str) -> ScanEvent:
    """Classify an ordinary character.

    Whitespace is never a commit point, so trailing whitespace stays buffered
    until more content arrives.
    """
    return ScanEvent.NONE if char.isspace() else ScanEvent.COMMIT_POINT


def _scan_normal(ctx: ScannerContext, char: str) -> ScanEvent:
    """Handle a character outside escapes, backtick runs, and headers.

    Examples:
        _scan_normal(ScannerContext(), "a")  # ScanEvent.COMMIT_POINT
    """
    if char == BACKSLASH:
        ctx.state = ScanState.ESCAPING
        return ScanEvent.NONE

    if char == BACKTICK:
        ctx.state = ScanState.COUNTING_BACKTICKS
        ctx.backtick_count = 1
        return ScanEvent.NONE

    return _content_event(char)


def _scan_escaping(ctx: ScannerContext, char: str) -> ScanEvent:
    """Handle the character following an unpaired backslash.

    A backtick or second backslash is literal and cannot start a fence run.

    Examples:
        ctx = ScannerContext(state=ScanState.ESCAPING)
        _scan_escaping(ctx, "`")  # ScanEvent.NONE, ctx.state is NORMAL
    """
    ctx.state = ScanState.NORMAL
    if char in (BACKSLASH, BACKTICK):
        return ScanEvent.NONE
    return _content_event(char)


def _scan_counting_backticks(ctx: ScannerContext, char: str) -> ScanEvent:
    """Extend or break a run of unescaped backticks.

    Returns:
        ScanEvent: `ScanEvent.FENCE` when the run reaches the fence length; the
            count resets so a longer run starts counting again.

    Examples:
        ctx = ScannerContext(state=ScanState.COUNTING_BACKTICKS, backtick_count=2)
        _scan_counting_backticks(ctx, "`")  # ScanEvent.FENCE
    """
    if char == BACKTICK:
        ctx.backtick_count += 1
        if ctx.backtick_count == FENCE_LENGTH:
            ctx.state = ScanState.NORMAL
            ctx.backtick_count = 0
            return ScanEvent.FENCE
        return ScanEvent.NONE

    ctx.backtick_count = 0
    if char == BACKSLASH:
        ctx.state = ScanState.ESCAPING
        return ScanEvent.NONE

    ctx.state = ScanState.NORMAL
    return _content_event(char)


def _scan_header(ctx: ScannerContext, char: str) -> ScanEvent:
    """Consume header characters up to the first newline.

    Backticks and backslashes inside the header are plain header text.
    """
    if char == NEWLINE:
        ctx.state = ScanState.NORMAL
        return ScanEvent.HEADER_END
    return ScanEvent.NONE


TRANSITIONS: dict[ScanState, Callable[[ScannerContext, str], ScanEvent]] = {
    ScanState.NORMAL: _scan_normal,
    ScanState.ESCAPING: _scan_escaping,
    ScanState.COUNTING_BACKTICKS: _scan_counting_backticks,
    ScanState.IN_HEADER: _scan_header,
}


def advance(ctx: ScannerContext, char: str) -> ScanEvent:
    """Feed one character to the scanner.

    Args:
        ctx: Scanner context, updated in place.
        char: Next character of the stream.

    Returns:
        ScanEvent: What the character means for the document being built.

    Examples:
        ctx = ScannerContext()
        [advance(ctx, c) for c in "```"][-1]  # ScanEvent.FENCE
    """
    return TRANSITIONS[ctx.state](ctx, char)


def enter_header(ctx: ScannerContext) -> None:
    """Switch the scanner to header mode after an opening fence."""
    ctx.state = ScanState.IN_HEADER
    ctx.backtick_count = 0
