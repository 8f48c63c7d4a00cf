"""PCM WAV framing helpers."""

import io
import wave
from pathlib import Path
from typing import BinaryIO, NamedTuple, Tuple, Union


class WaveFormat(NamedTuple):
    channels: int
    sample_width: int  # bytes per sample
    frame_rate: int


def read_wav(source: Union[str, Path, BinaryIO]) -> Tuple[WaveFormat, bytes]:
    """Read a PCM WAV file, returning its format and raw frames."""
    if isinstance(source, Path):
        source = str(source)
    with wave.open(source, "rb") as wf:
        fmt = WaveFormat(wf.getnchannels(), wf.getsampwidth(), wf.getframerate())
        frames = wf.readframes(wf.getnframes())
    return fmt, frames


def write_wav(target: Union[str, Path, BinaryIO], fmt: WaveFormat, frames: bytes) -> None:
    if isinstance(target, Path):
        target = str(target)
    with wave.open(target, "wb") as wf:
        wf.setnchannels(fmt.channels)
        wf.setsampwidth(fmt.sample_width)
        wf.setframerate(fmt.frame_rate)
        wf.writeframes(frames)


def to_wav_bytes(fmt: WaveFormat, frames: bytes) -> bytes:
    buffer = io.BytesIO()
    write_wav(buffer, fmt, frames)
    return buffer.getvalue()


def duration_seconds(fmt: WaveFormat, frames: bytes) -> float:
    frame_size = fmt.channels * fmt.sample_width
    if not frame_size or not fmt.frame_rate:
        return 0.0
    return round(len(frames) / frame_size / fmt.frame_rate, 3)
