"""
Synthesizer driver: speaks chunk fragments in order and merges the PCM output.
"""

from __future__ import annotations

import tempfile
from pathlib import Path
from typing import List, Sequence, Tuple, cast

from ..audio.wav import WaveFormat, read_wav
from ..core.logging import log
from .engine import SpeechEngine, SynthesisError


def synthesize_fragments(
    engine: SpeechEngine, fragments: Sequence[str]
) -> Tuple[WaveFormat, bytes]:
    """
    Synthesize each fragment in order and concatenate their frames.

    The output format is the one the engine reports for the first fragment;
    later fragments are assumed compatible and appended as-is.

    Args:
        engine: Configured speech engine
        fragments: Non-empty ordered list of chunks

    Returns:
        (format, frames) tuple for the whole utterance
    """
    if not fragments:
        raise SynthesisError("Nothing to synthesize")

    fmt: WaveFormat | None = None
    parts: List[bytes] = []

    with tempfile.TemporaryDirectory(prefix="speechbridge-") as tmp:
        for ordinal, fragment in enumerate(fragments, start=1):
            path = engine.synthesize_to_file(fragment, Path(tmp) / f"fragment_{ordinal:04d}.wav")
            try:
                fragment_fmt, frames = read_wav(path)
            except Exception as e:
                raise SynthesisError(f"Unreadable audio for fragment #{ordinal}: {e}") from e

            if fmt is None:
                fmt = fragment_fmt
            elif fragment_fmt != fmt:
                log.warning(
                    "synth.format_mismatch",
                    ordinal=ordinal,
                    expected=fmt._asdict(),
                    actual=fragment_fmt._asdict(),
                )

            parts.append(frames)
            log.debug("synth.fragment", ordinal=ordinal, chars=len(fragment), bytes=len(frames))

    # fragments is non-empty, so the first one set fmt
    return cast(WaveFormat, fmt), b"".join(parts)
