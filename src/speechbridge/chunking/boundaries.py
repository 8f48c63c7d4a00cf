"""
Boundary detection and splitting helpers for speech chunking.
"""

import re
from enum import Enum
from typing import List, NamedTuple

# Long integers read aloud become unintelligible past this many digits
NUMBER_MAX_DIGITS = 8

_WHITESPACE_RE = re.compile(r"\s+")
_TOKEN_RE = re.compile(r"(?P<digits>\d+)|(?P<space>\s+)|(?P<punct>[^\s\w])|(?P<word>\w+)")
_PUNCT_RE = re.compile(r"[^\s\w]")
_TRAILING_RUN_RE = re.compile(r"(\d+|\w+|[^\s\w])\Z")


class TokenKind(str, Enum):
    """Token categories produced by the tokenizer."""

    DIGITS = "digits"
    SPACE = "space"
    PUNCT = "punct"
    WORD = "word"


class Token(NamedTuple):
    text: str
    kind: TokenKind


_KIND_BY_GROUP = {
    "digits": TokenKind.DIGITS,
    "space": TokenKind.SPACE,
    "punct": TokenKind.PUNCT,
    "word": TokenKind.WORD,
}


def normalize_text(text: str) -> str:
    """Collapse whitespace runs to a single space and trim the ends."""
    return _WHITESPACE_RE.sub(" ", text).strip()


def tokenize(text: str) -> List[Token]:
    """
    Split text into an ordered, lossless sequence of tokens.

    At each position the first matching rule wins: a digit run, a whitespace
    run, a single punctuation character, then a word-character run.
    """
    return [
        Token(match.group(), _KIND_BY_GROUP[match.lastgroup])  # type: ignore[index]
        for match in _TOKEN_RE.finditer(text)
    ]


def _slices(text: str, width: int) -> List[str]:
    return [text[i : i + width] for i in range(0, len(text), width)]


def split_number(digits: str, max_digits: int = NUMBER_MAX_DIGITS) -> List[str]:
    """Break a digit run into contiguous groups of at most max_digits."""
    return _slices(digits, max(1, max_digits))


def split_long_token(token: str, chunk_size: int) -> List[str]:
    """Break an oversize token into fixed-width slices of at most chunk_size."""
    return _slices(token, max(1, chunk_size))


def is_valid_chunk_end(chunk: str) -> bool:
    """
    Check whether a chunk can end here without clipping a short word head.

    Accepts an empty chunk, a chunk ending in punctuation, a chunk ending in
    whitespace, and a chunk whose trailing run is at least 4 characters long.
    """
    if not chunk:
        return True

    if _PUNCT_RE.match(chunk[-1]):
        return True

    match = _TRAILING_RUN_RE.search(chunk)
    if match is None:
        # Ends in whitespace
        return True

    return len(match.group()) >= 4
