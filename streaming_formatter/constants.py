"""Constants used across the streaming-formatter package."""

from __future__ import annotations

import re

from .config import FormatterConfig

DEFAULT_CONFIG = FormatterConfig()

# Fence and escape syntax
BACKTICK = "`"
BACKSLASH = "\\"
NEWLINE = "\n"
FENCE_LENGTH = 3
CODE_FENCE = BACKTICK * FENCE_LENGTH

# Header line: "language:path", a bare path, or a bare language
HEADER_PATTERN = re.compile(r"^(?P<language>\w+):(?P<path>.*)$")
PATH_HINT_CHARACTERS = ("/", ".")

# Limits
DEFAULT_MAX_FILE_SIZE = DEFAULT_CONFIG.max_file_size

# Extension (lowercase, without dot) to code block language
LANGUAGE_BY_EXTENSION = {
    "swift": "swift",
    "js": "javascript",
    "javascript": "javascript",
    "ts": "typescript",
    "typescript": "typescript",
    "py": "python",
    "python": "python",
    "rb": "ruby",
    "ruby": "ruby",
    "go": "go",
    "rs": "rust",
    "rust": "rust",
    "java": "java",
    "cpp": "cpp",
    "cc": "cpp",
    "cxx": "cpp",
    "c": "c",
    "h": "cpp",
    "hpp": "cpp",
    "cs": "csharp",
    "php": "php",
    "html": "html",
    "htm": "html",
    "css": "css",
    "scss": "scss",
    "sass": "scss",
    "json": "json",
    "xml": "xml",
    "yaml": "yaml",
    "yml": "yaml",
    "sh": "bash",
    "bash": "bash",
    "zsh": "bash",
    "sql": "sql",
    "md": "markdown",
    "markdown": "markdown",
}
