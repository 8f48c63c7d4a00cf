"""
Chunk verification utilities.
"""

import re
from typing import Dict, List, Optional, Sequence, Tuple

from .boundaries import is_valid_chunk_end, normalize_text
from .engine import piece_boundaries

_WHITESPACE_RE = re.compile(r"\s+")
_DOUBLE_WHITESPACE_RE = re.compile(r"\s\s")


def _strip_whitespace(text: str) -> str:
    return _WHITESPACE_RE.sub("", text)


def _chunk_spans(normalized: str, chunks: Sequence[str]) -> List[Optional[Tuple[int, int]]]:
    """Locate each chunk in the normalized text as a (start, end) span."""
    spans: List[Optional[Tuple[int, int]]] = []
    cursor = 0
    for chunk in chunks:
        while cursor < len(normalized) and normalized[cursor] == " ":
            cursor += 1
        if not normalized.startswith(chunk, cursor):
            # Chunks do not line up with the text; judge the chunk on its own
            spans.append(None)
            continue
        spans.append((cursor, cursor + len(chunk)))
        cursor += len(chunk)
    return spans


def verify_chunks(text: str, chunks: Sequence[str], chunk_size: int) -> Dict:
    """
    Verify a chunk list against the length, whitespace and content rules.

    Non-final chunks are checked with is_valid_chunk_end() at their cut
    point. A chunk made of a single assembly piece (a token, or a slice of an
    oversize token) cannot be shortened, so an invalid end there is reported
    under "forced_ends" without failing verification.

    Args:
        text: Original input text
        chunks: Chunks produced for that text
        chunk_size: Chunk size the chunks were produced with

    Returns:
        Verification report dictionary; "passed" is False on any violation
    """
    normalized = normalize_text(text)
    fixed_width = " " not in normalized
    spans = _chunk_spans(normalized, chunks)
    boundaries = piece_boundaries(normalized, chunk_size)

    oversize: List[Dict] = []
    whitespace_edges: List[int] = []
    double_whitespace: List[int] = []
    invalid_ends: List[int] = []
    forced_ends: List[int] = []

    for ordinal, chunk in enumerate(chunks, start=1):
        if len(chunk) > chunk_size:
            oversize.append({"ordinal": ordinal, "length": len(chunk)})

        if chunk != chunk.strip():
            whitespace_edges.append(ordinal)

        if _DOUBLE_WHITESPACE_RE.search(chunk):
            double_whitespace.append(ordinal)

        if fixed_width or ordinal == len(chunks):
            continue

        span = spans[ordinal - 1]
        on_space = span is not None and span[1] < len(normalized) and normalized[span[1]] == " "
        cut = chunk + " " if on_space else chunk
        if not is_valid_chunk_end(cut):
            start, end = span if span is not None else (0, 0)
            single_piece = span is not None and not any(start < offset < end for offset in boundaries)
            if single_piece:
                forced_ends.append(ordinal)
            else:
                invalid_ends.append(ordinal)

    content_preserved = _strip_whitespace(normalized) == _strip_whitespace("".join(chunks))

    passed = content_preserved and not (oversize or whitespace_edges or double_whitespace or invalid_ends)

    return {
        "chunk_count": len(chunks),
        "chunk_size": chunk_size,
        "max_length": max((len(c) for c in chunks), default=0),
        "oversize": oversize,
        "whitespace_edges": whitespace_edges,
        "double_whitespace": double_whitespace,
        "invalid_ends": invalid_ends,
        "forced_ends": forced_ends,
        "content_preserved": content_preserved,
        "passed": passed,
    }
