"""Audio output devices and playback through sounddevice."""

from __future__ import annotations

import io
from typing import Any, List, Optional

import numpy as np

from ..core.logging import log
from ..core.models import OutputDevice
from .wav import WaveFormat, read_wav

_DTYPES = {1: np.uint8, 2: np.int16, 4: np.int32}


class AudioError(Exception):
    """Raised when audio cannot be decoded or played."""

    pass


def _sd() -> Any:
    # PortAudio is loaded on import; keep it out of module import time
    import sounddevice

    return sounddevice


def _default_output_index(sd: Any) -> Optional[int]:
    default = sd.default.device
    try:
        index = default[1]
    except (TypeError, IndexError):
        index = default
    if index is None or int(index) < 0:
        return None
    return int(index)


def list_output_devices() -> List[OutputDevice]:
    """Enumerate devices that can play audio, keyed by their PortAudio index."""
    sd = _sd()
    default_index = _default_output_index(sd)
    devices = []
    for index, info in enumerate(sd.query_devices()):
        channels = int(info.get("max_output_channels", 0))
        if channels <= 0:
            continue
        devices.append(
            OutputDevice(
                index=index,
                name=str(info.get("name", f"device {index}")),
                channels=channels,
                default_samplerate=info.get("default_samplerate"),
                is_default=index == default_index,
            )
        )
    return devices


def resolve_output_device(device_id: Optional[str]) -> Optional[int]:
    """
    Resolve a device id to a PortAudio output index.

    Returns None (platform default) when the id is absent, not a
    non-negative integer, or not an output device.
    """
    if device_id is None or str(device_id).strip() == "":
        return None

    try:
        index = int(str(device_id).strip())
    except ValueError:
        log.warning("playback.device_fallback", device=device_id, reason="invalid_id")
        return None

    if index < 0 or index not in {d.index for d in list_output_devices()}:
        log.warning("playback.device_fallback", device=device_id, reason="not_found")
        return None

    return index


def frames_to_array(fmt: WaveFormat, frames: bytes) -> np.ndarray:
    """Decode PCM frames into a (frames, channels) array."""
    dtype = _DTYPES.get(fmt.sample_width)
    if dtype is None:
        raise AudioError(f"Unsupported sample width: {fmt.sample_width * 8} bits")
    data = np.frombuffer(frames, dtype=dtype)
    return data.reshape(-1, max(1, fmt.channels))


def play_wav(wav_bytes: bytes, device_id: Optional[str] = None) -> None:
    """Play an in-memory WAV file and block until playback finishes."""
    try:
        fmt, frames = read_wav(io.BytesIO(wav_bytes))
    except Exception as e:
        raise AudioError(f"Cannot decode audio: {e}") from e

    data = frames_to_array(fmt, frames)
    try:
        sd = _sd()
    except (ImportError, OSError) as e:
        # sounddevice raises OSError when the PortAudio library is missing
        raise AudioError(f"Audio backend unavailable: {e}") from e

    try:
        device = resolve_output_device(device_id)
        log.debug("playback.start", device=device, frames=len(data), frame_rate=fmt.frame_rate)
        sd.play(data, samplerate=fmt.frame_rate, device=device)
        sd.wait()
    except sd.PortAudioError as e:
        raise AudioError(f"Playback failed: {e}") from e
    log.debug("playback.done", device=device)
