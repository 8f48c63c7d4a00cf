"""
Speech chunking package.

Splits free text into fragments a TTS engine can synthesize reliably:
- Whitespace normalization and a lossless four-category tokenizer
- Hard length caps, with long numbers split into 8-digit groups
- Valid-end back-up so a chunk never stops on a short word head
- Fixed-width slicing for text without spaces
"""

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
from .engine import ChunkCallback, assemble_chunks, chunk_text, split_fixed_width
from .verify import verify_chunks

__all__ = [
    "NUMBER_MAX_DIGITS",
    "ChunkCallback",
    "Token",
    "TokenKind",
    "assemble_chunks",
    "chunk_text",
    "is_valid_chunk_end",
    "normalize_text",
    "split_fixed_width",
    "split_long_token",
    "split_number",
    "tokenize",
    "verify_chunks",
]
