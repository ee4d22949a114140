from __future__ import annotations

import pytest
from hypothesis import given
from hypothesis import strategies as st

from streaming_formatter.header import parse_code_block_header, render_code_block_header
from streaming_formatter.models import CodeBlockHeader


@pytest.mark.parametrize(
    ("header", "language", "file_path"),
    [
        ("swift:Sources/Foo.swift", "swift", "Sources/Foo.swift"),
        ("Sources/Foo.swift", None, "Sources/Foo.swift"),
        ("swift", "swift", None),
        ("", None, None),
        ("   \n", None, None),
        ("  python  \n", "python", None),
        ("main.py", None, "main.py"),
        ("swift: Foo.swift", "swift", "Foo.swift"),
        ("swift:", "swift", None),
        ("C++", "C++", None),
    ],
)
def test_parse_code_block_header_examples(header: str, language: str | None, file_path: str | None):
    assert parse_code_block_header(header) == CodeBlockHeader(language=language, file_path=file_path)


@given(
    st.from_regex(r"[A-Za-z0-9_]+", fullmatch=True),
    st.text(alphabet="abcXYZ012/._-", min_size=1, max_size=30),
)
def test_language_and_path_are_split_at_the_first_colon(language: str, path: str):
    header = parse_code_block_header(f"{language}:{path}")

    assert header.language == language
    assert header.file_path == path


@pytest.mark.parametrize(
    ("header", "expected"),
    [
        (CodeBlockHeader(language="python", file_path="app.py"), "python:app.py"),
        (CodeBlockHeader(language="python"), "python"),
        (CodeBlockHeader(file_path="src/app.py"), "src/app.py"),
        (CodeBlockHeader(), ""),
    ],
)
def test_render_code_block_header(header: CodeBlockHeader, expected: str):
    assert render_code_block_header(header) == expected
    assert parse_code_block_header(expected) == header
