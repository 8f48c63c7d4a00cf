"""Local text-to-speech engine wrapper built on pyttsx3."""

from __future__ import annotations

from pathlib import Path
from typing import Any, List, Optional

import pyttsx3

from ..core.logging import log
from ..core.models import RATE_MAX, RATE_MIN, VOLUME_MAX, VOLUME_MIN, VoiceInfo, clamp

# pyttsx3 reports its default speaking rate in words per minute
DEFAULT_WPM = 200


class VoiceNotFoundError(Exception):
    """Raised when no installed voice matches the requested name."""

    pass


class SynthesisError(Exception):
    """Raised when the engine fails to render a fragment."""

    pass


def _voice_gender(raw: Any) -> str:
    value = str(raw or "").lower()
    if "female" in value:
        return "Female"
    if "male" in value:
        return "Male"
    return "Unknown"


def _voice_languages(raw: Any) -> List[str]:
    languages = []
    for lang in raw or []:
        if isinstance(lang, bytes):
            # espeak prefixes each language with a priority byte
            lang = lang.decode("utf-8", errors="ignore")
        lang = "".join(ch for ch in str(lang) if ch.isprintable()).strip()
        if lang:
            languages.append(lang)
    return languages


class SpeechEngine:
    """
    Thin wrapper over a pyttsx3 engine.

    Rate follows the -10..10 scale of desktop speech APIs and maps onto the
    driver's words-per-minute rate geometrically (10 is three times the base
    rate, -10 a third of it). Volume is 0..100. A pre-initialised driver can
    be passed in for testing.
    """

    def __init__(self, driver: Optional[Any] = None) -> None:
        self._driver = driver if driver is not None else pyttsx3.init()
        self._base_wpm = int(self._driver.getProperty("rate") or DEFAULT_WPM)
        self.voice: Optional[VoiceInfo] = None
        self.rate = 0
        self.volume = VOLUME_MAX

    def list_voices(self) -> List[VoiceInfo]:
        voices = []
        for voice in self._driver.getProperty("voices") or []:
            voices.append(
                VoiceInfo(
                    id=str(voice.id),
                    name=str(voice.name or voice.id),
                    gender=_voice_gender(getattr(voice, "gender", None)),
                    languages=_voice_languages(getattr(voice, "languages", None)),
                )
            )
        return voices

    def select_voice(self, query: str) -> VoiceInfo:
        """Select the first installed voice whose name contains query, case-insensitively."""
        needle = query.casefold()
        for voice in self.list_voices():
            if needle in voice.name.casefold():
                self._driver.setProperty("voice", voice.id)
                self.voice = voice
                log.debug("tts.voice.selected", voice=voice.name, query=query)
                return voice
        raise VoiceNotFoundError(f"Voice '{query}' not found")

    def set_rate(self, rate: int) -> None:
        self.rate = clamp(rate, RATE_MIN, RATE_MAX)
        wpm = round(self._base_wpm * 3 ** (self.rate / 10))
        self._driver.setProperty("rate", wpm)

    def set_volume(self, volume: int) -> None:
        self.volume = clamp(volume, VOLUME_MIN, VOLUME_MAX)
        self._driver.setProperty("volume", self.volume / 100)

    def synthesize_to_file(self, text: str, path: Path) -> Path:
        """Render one fragment to a WAV file and return its path."""
        path = Path(path)
        try:
            self._driver.save_to_file(text, str(path))
            self._driver.runAndWait()
        except Exception as e:
            raise SynthesisError(f"Speech synthesis failed: {e}") from e

        if not path.exists() or path.stat().st_size == 0:
            raise SynthesisError(f"Speech engine produced no audio for fragment: {text!r}")
        return path
