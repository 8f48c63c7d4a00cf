from typing import Optional

from pydantic import BaseModel, field_validator

RATE_MIN, RATE_MAX = -10, 10
VOLUME_MIN, VOLUME_MAX = 0, 100


def clamp(value: int, low: int, high: int) -> int:
    return max(low, min(high, value))


class VoiceInfo(BaseModel):
    id: str
    name: str
    gender: str = "Unknown"  # Male | Female | Unknown
    languages: list[str] = []


class OutputDevice(BaseModel):
    index: int
    name: str
    channels: int = 0  # max output channels
    default_samplerate: Optional[float] = None
    is_default: bool = False


class SpeakOptions(BaseModel):
    """Synthesis parameters, clamped to the ranges the engine accepts."""

    voice: Optional[str] = None
    rate: int = 0
    volume: int = 100
    device: Optional[str] = None
    output: Optional[str] = None
    chunk_size: int = 50
    random_voice: bool = False
    random_rate: bool = False
    debug: bool = False

    @field_validator("rate")
    @classmethod
    def _clamp_rate(cls, value: int) -> int:
        return clamp(value, RATE_MIN, RATE_MAX)

    @field_validator("volume")
    @classmethod
    def _clamp_volume(cls, value: int) -> int:
        return clamp(value, VOLUME_MIN, VOLUME_MAX)

    @field_validator("chunk_size")
    @classmethod
    def _clamp_chunk_size(cls, value: int) -> int:
        return max(1, value)
