from __future__ import annotations

import logging
from pathlib import Path

import pytest

from streaming_formatter.formatter import (
    StreamingDocumentFormatter,
    format_text,
    replay,
    split_into_deltas,
)
from streaming_formatter.models import CodeBlockElement, TextElement


def _ingest_all(formatter: StreamingDocumentFormatter, *deltas: str) -> None:
    for delta in deltas:
        formatter.ingest(delta)


def test_header_and_body_split_across_three_deltas():
    formatter = StreamingDocumentFormatter()

    formatter.ingest("Here is code:\n```swift:Foo.swift\n")
    assert formatter.elements == (
        TextElement(id=0, text="Here is code:", is_complete=True),
        CodeBlockElement(id=1, language="swift", file_path="Foo.swift"),
    )

    formatter.ingest("let x = 1\n")
    assert formatter.elements[1].raw_content == "let x = 1"

    formatter.ingest("```\nDone.")
    assert formatter.elements == (
        TextElement(id=0, text="Here is code:", is_complete=True),
        CodeBlockElement(
            id=1,
            raw_content="let x = 1\n",
            language="swift",
            file_path="Foo.swift",
            is_complete=True,
        ),
        TextElement(id=2, text="Done.", is_complete=False),
    )

    formatter.finish()
    assert formatter.elements[2] == TextElement(id=2, text="Done.", is_complete=True)


def test_fences_split_two_plus_one_across_deltas():
    formatter = StreamingDocumentFormatter()

    formatter.ingest("abc``")
    assert formatter.elements == (TextElement(id=0, text="abc"),)

    _ingest_all(formatter, "`\ncode\n``", "`\nmore")

    assert formatter.elements == (
        TextElement(id=0, text="abc", is_complete=True),
        CodeBlockElement(id=1, raw_content="code\n", is_complete=True),
        TextElement(id=2, text="more"),
    )


def test_text_and_deltas_record_raw_input():
    formatter = StreamingDocumentFormatter()

    _ingest_all(formatter, "Hi ", "", "```py\n")

    assert formatter.text == "Hi ```py\n"
    assert formatter.deltas == ("Hi ", "", "```py\n")


def test_escaped_backticks_do_not_open_a_fence():
    elements = format_text("Use \\``` literally.")

    assert elements == (TextElement(id=0, text="Use \\``` literally.", is_complete=True),)


def test_escape_split_from_backticks_across_deltas():
    formatter = replay(["Use \\", "```", " literally."])

    assert formatter.elements == (
        TextElement(id=0, text="Use \\``` literally.", is_complete=True),
    )


def test_inline_double_backticks_are_text():
    elements = format_text("Call ``foo`` now")

    assert elements == (TextElement(id=0, text="Call ``foo`` now", is_complete=True),)


def test_code_block_without_header():
    elements = format_text("```\ncode\n```")

    assert elements == (CodeBlockElement(id=0, raw_content="code\n", is_complete=True),)


def test_adjacent_code_blocks_have_no_text_between_them():
    elements = format_text("```a\nx\n```\n\n```b\ny\n```")

    assert elements == (
        CodeBlockElement(id=0, raw_content="x\n", language="a", is_complete=True),
        CodeBlockElement(id=1, raw_content="y\n", language="b", is_complete=True),
    )


def test_code_block_keeps_escapes_and_inline_backticks():
    elements = format_text("```sh\necho \\`date\\` ``x``\n```")

    assert elements[0].raw_content == "echo \\`date\\` ``x``\n"
    assert elements[0].is_complete is True


def test_header_line_is_only_parsed_once_complete():
    formatter = StreamingDocumentFormatter()

    _ingest_all(formatter, "```sw", "ift:Foo")
    assert formatter.elements == (CodeBlockElement(id=0),)

    formatter.ingest(".swift\nlet")
    assert formatter.elements == (
        CodeBlockElement(id=0, raw_content="let", language="swift", file_path="Foo.swift"),
    )


def test_backticks_inside_header_do_not_close_the_block():
    elements = format_text("```py```\ncode")

    assert len(elements) == 1
    assert elements[0].language == "py```"
    assert elements[0].raw_content == "code"
    assert elements[0].is_complete is False


def test_crlf_header_and_content():
    elements = format_text("```swift\r\nlet a\r\n```")

    assert elements == (
        CodeBlockElement(id=0, raw_content="let a\r\n", language="swift", is_complete=True),
    )


def test_trailing_whitespace_is_deferred_while_streaming():
    formatter = StreamingDocumentFormatter()

    formatter.ingest("Hello  \n")
    assert formatter.elements == (TextElement(id=0, text="Hello"),)

    formatter.ingest("world")
    assert formatter.elements == (TextElement(id=0, text="Hello  \nworld"),)


def test_leading_whitespace_is_never_materialized():
    formatter = StreamingDocumentFormatter()

    formatter.ingest("   \n")
    assert formatter.elements == ()

    formatter.ingest("\n  Hi")
    assert formatter.elements == (TextElement(id=0, text="Hi"),)


def test_whitespace_only_text_before_fence_is_dropped():
    elements = format_text(" \n```\nx\n```")

    assert elements == (CodeBlockElement(id=0, raw_content="x\n", is_complete=True),)


def test_unclosed_code_block_stays_incomplete_after_finish():
    elements = format_text("Intro\n```py\nprint(1)\n")

    assert elements == (
        TextElement(id=0, text="Intro", is_complete=True),
        CodeBlockElement(id=1, raw_content="print(1)\n", language="py"),
    )


def test_finish_flushes_pending_backticks_into_text():
    elements = format_text("use ``")

    assert elements == (TextElement(id=0, text="use ``", is_complete=True),)


def test_finish_leaves_unfinished_header_pending():
    formatter = StreamingDocumentFormatter()
    formatter.ingest("```swift:Foo")
    formatter.finish()

    assert formatter.elements == (CodeBlockElement(id=0),)


def test_finish_is_idempotent_and_ignores_later_deltas(caplog):
    formatter = StreamingDocumentFormatter()
    formatter.ingest("Done.  ")
    formatter.finish()
    formatter.finish()

    with caplog.at_level(logging.WARNING, logger="streaming_formatter.formatter"):
        formatter.ingest(" more")

    assert formatter.is_finished is True
    assert formatter.elements == (TextElement(id=0, text="Done.", is_complete=True),)
    assert formatter.deltas == ("Done.  ",)
    assert "after the stream finished" in caplog.text


def test_element_ids_match_positions():
    elements = format_text("a\n```\nb\n```\nc\n```x\nd\n```\ne")

    assert [element.id for element in elements] == list(range(len(elements)))
    assert [type(element) for element in elements] == [
        TextElement,
        CodeBlockElement,
        TextElement,
        CodeBlockElement,
        TextElement,
    ]


def test_elements_cannot_be_mutated_through_the_property():
    formatter = StreamingDocumentFormatter()
    formatter.ingest("Hello")

    elements = formatter.elements

    assert isinstance(elements, tuple)
    assert formatter.elements == elements


def test_base_path_is_stored_on_code_blocks():
    formatter = StreamingDocumentFormatter(base_path="/repo")
    formatter.ingest("```python:src/app.py\npass\n```")

    assert formatter.base_path == Path("/repo")
    assert formatter.elements[0].base_path == Path("/repo")
    assert formatter.elements[0].file_path == "src/app.py"


def test_catch_up_ingests_only_unseen_deltas():
    formatter = StreamingDocumentFormatter()
    formatter.ingest("x")

    formatter.catch_up(["a", "b"])

    assert formatter.text == "xb"
    assert formatter.deltas == ("a", "b")


def test_catch_up_ignores_shorter_or_equal_histories():
    formatter = StreamingDocumentFormatter()
    formatter.catch_up(["Hello", " world"])

    formatter.catch_up(["Hello", " world"])
    formatter.catch_up(["Hello"])
    formatter.catch_up([])

    assert formatter.text == "Hello world"
    assert formatter.deltas == ("Hello", " world")
    assert formatter.elements == (TextElement(id=0, text="Hello world"),)


def test_catch_up_matches_live_ingestion():
    deltas = ["Intro ``", "`py:a.py\nx = 1", "\n``", "`\nbye"]

    live = replay(deltas, finish=False)
    reattached = StreamingDocumentFormatter()
    reattached.catch_up(deltas[:2])
    reattached.catch_up(deltas)

    assert reattached.elements == live.elements


def test_format_text_without_finish_keeps_trailing_text_open():
    elements = format_text("Intro\n```sh\nls\n```\nDone.", finish=False)

    assert elements[-1] == TextElement(id=2, text="Done.", is_complete=False)


@pytest.mark.parametrize(
    ("text", "chunk_size", "expected"),
    [
        ("abcdef", 4, ["abcd", "ef"]),
        ("abc", 1, ["a", "b", "c"]),
        ("abc", 10, ["abc"]),
        ("", 3, []),
    ],
)
def test_split_into_deltas(text: str, chunk_size: int, expected: list[str]):
    assert split_into_deltas(text, chunk_size) == expected


def test_split_into_deltas_rejects_non_positive_chunk_size():
    with pytest.raises(ValueError):
        split_into_deltas("abc", 0)
