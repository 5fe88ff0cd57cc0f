from typing import Literal

COMMENT_NAME_PREFIX = "\ncomment"
"""Prefix of the synthetic item names comments are stored under in a section. Keys
can never contain a newline, so these names never collide with real keys."""
QUOTE = '"'
COMMENT_MARKERS = frozenset(";#")
"""Comment delimiters of all dialects. Values containing one get quoted on writing."""
WHITESPACE = frozenset(" \t\r")
DEFAULT_EOL = "\n"
VALID_MARKERS = Literal[
    "!",
    "%",
    "&",
    "/",
    "?",
    ":",
    ";",
    "#",
    "'",
    "*",
    ">",
    "<",
    "=",
]
"""Valid characters for markers (assignment delimiter or comment delimiter)."""
