"""
Chunking engine that turns free text into fragments a TTS engine can speak.
"""

from __future__ import annotations

import re
from typing import Callable, List, NamedTuple, Optional, Sequence, Set

from .boundaries import (
    NUMBER_MAX_DIGITS,
    Token,
    TokenKind,
    is_valid_chunk_end,
    normalize_text,
    split_long_token,
    split_number,
    tokenize,
)

# Receives (ordinal, length, content) for every emitted chunk
ChunkCallback = Callable[[int, int, str], None]

_WHITESPACE_RE = re.compile(r"\s+")


class _Piece(NamedTuple):
    """A token, or a slice of an oversize token, ready for assembly."""

    text: str
    kind: TokenKind


def split_fixed_width(
    text: str, chunk_size: int, on_chunk: Optional[ChunkCallback] = None
) -> List[str]:
    """Slice text with no spaces into chunks of exactly chunk_size (last may be shorter)."""
    chunks = split_long_token(text, chunk_size)
    if on_chunk is not None:
        for ordinal, chunk in enumerate(chunks, start=1):
            on_chunk(ordinal, len(chunk), chunk)
    return chunks


def expand_tokens(tokens: Sequence[Token], chunk_size: int) -> List[_Piece]:
    """Pre-split long digit runs and oversize tokens so every piece fits a chunk."""
    pieces: List[_Piece] = []
    for token in tokens:
        if token.kind is TokenKind.SPACE:
            pieces.append(_Piece(token.text, token.kind))
            continue

        parts = [token.text]
        if token.kind is TokenKind.DIGITS and len(token.text) > NUMBER_MAX_DIGITS:
            parts = split_number(token.text, NUMBER_MAX_DIGITS)

        for part in parts:
            if len(part) > chunk_size:
                pieces.extend(_Piece(p, token.kind) for p in split_long_token(part, chunk_size))
            else:
                pieces.append(_Piece(part, token.kind))
    return pieces


def piece_boundaries(normalized: str, chunk_size: int) -> Set[int]:
    """Offsets in normalized text where one assembly piece ends and the next begins."""
    offsets = {0}
    position = 0
    for piece in expand_tokens(tokenize(normalized), max(1, chunk_size)):
        position += len(piece.text)
        offsets.add(position)
    return offsets


def _cut_is_valid(chunk: str, pieces: Sequence[_Piece], index: int) -> bool:
    """Judge the cut in front of pieces[index]; a cut on whitespace keeps that whitespace."""
    if index < len(pieces) and pieces[index].kind is TokenKind.SPACE:
        chunk += pieces[index].text
    return is_valid_chunk_end(chunk)


def assemble_chunks(
    tokens: Sequence[Token],
    chunk_size: int,
    on_chunk: Optional[ChunkCallback] = None,
) -> List[str]:
    """
    Greedily pack tokens into chunks of at most chunk_size characters.

    A chunk that is not the last one is backed up token by token until its
    cut point passes is_valid_chunk_end(). Backing up never removes the last
    non-space piece of a chunk, so every round consumes at least one piece
    and no content is lost.

    Args:
        tokens: Output of tokenize() on normalized text
        chunk_size: Maximum chunk length in characters (>= 1)
        on_chunk: Optional callback receiving (ordinal, length, content)

    Returns:
        Ordered list of chunks with no leading/trailing whitespace
    """
    pieces = expand_tokens(tokens, chunk_size)
    chunks: List[str] = []
    index = 0

    while index < len(pieces):
        taken: List[_Piece] = []
        current_length = 0

        while index < len(pieces) and current_length < chunk_size:
            piece = pieces[index]

            # No leading whitespace
            if not taken and piece.kind is TokenKind.SPACE:
                index += 1
                continue

            if current_length + len(piece.text) > chunk_size:
                break

            taken.append(piece)
            current_length += len(piece.text)
            index += 1

        chunk = "".join(p.text for p in taken)

        if index < len(pieces):
            while not _cut_is_valid(chunk, pieces, index):
                remaining = taken[:-1]
                if not any(p.kind is not TokenKind.SPACE for p in remaining):
                    break
                taken = remaining
                index -= 1
                chunk = "".join(p.text for p in taken)

        final_chunk = _WHITESPACE_RE.sub(" ", chunk.rstrip())
        if final_chunk:
            chunks.append(final_chunk)
            if on_chunk is not None:
                on_chunk(len(chunks), len(final_chunk), final_chunk)

    return chunks


def chunk_text(
    text: str,
    chunk_size: int,
    on_chunk: Optional[ChunkCallback] = None,
) -> List[str]:
    """
    Split text into speakable fragments of at most chunk_size characters.

    Text without any space after normalization (hashes, URLs, long unbroken
    runs) is sliced at fixed width instead of being tokenized.
    """
    chunk_size = max(1, chunk_size)
    normalized = normalize_text(text)
    if not normalized:
        return []

    if " " not in normalized:
        return split_fixed_width(normalized, chunk_size, on_chunk)

    return assemble_chunks(tokenize(normalized), chunk_size, on_chunk)
