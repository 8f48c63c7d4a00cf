"""Tests for WAV framing helpers."""

import io

import pytest

from speechbridge.audio.wav import WaveFormat, duration_seconds, read_wav, to_wav_bytes, write_wav

pytestmark = pytest.mark.unit

MONO_16K = WaveFormat(channels=1, sample_width=2, frame_rate=16000)


def test_write_then_read_file(tmp_path):
    frames = b"\x01\x00\x02\x00" * 400
    path = tmp_path / "out.wav"

    write_wav(path, MONO_16K, frames)
    fmt, read_frames = read_wav(path)

    assert fmt == MONO_16K
    assert read_frames == frames


def test_wav_bytes_have_riff_header():
    data = to_wav_bytes(WaveFormat(2, 2, 22050), b"\x00" * 16)

    assert data[:4] == b"RIFF"
    assert data[8:12] == b"WAVE"
    fmt, frames = read_wav(io.BytesIO(data))
    assert fmt.channels == 2
    assert frames == b"\x00" * 16


def test_duration_seconds():
    assert duration_seconds(MONO_16K, b"\x00\x00" * 8000) == 0.5
    assert duration_seconds(WaveFormat(0, 2, 16000), b"") == 0.0
