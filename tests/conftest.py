"""Global test configuration for speechbridge tests."""

import wave
from types import SimpleNamespace

import pytest
import structlog

from speechbridge.audio import playback
from speechbridge.core import config as config_module


class FakeDriver:
    """Stand-in for a pyttsx3 engine that writes silent WAV files."""

    def __init__(self, voices=None, frame_rate=16000, channels=1, sample_width=2, frames_per_char=10):
        if voices is None:
            voices = [
                SimpleNamespace(
                    id="v-irina",
                    name="Microsoft Irina Desktop",
                    languages=["ru_RU"],
                    gender="VoiceGenderFemale",
                ),
                SimpleNamespace(
                    id="v-david",
                    name="Microsoft David Desktop",
                    languages=[b"\x05en-us"],
                    gender="male",
                ),
                SimpleNamespace(id="v-espeak", name="eSpeak", languages=[], gender=None),
            ]
        self.properties = {"rate": 200, "volume": 1.0, "voice": None, "voices": voices}
        self.frame_rate = frame_rate
        self.channels = channels
        self.sample_width = sample_width
        self.frames_per_char = frames_per_char
        self.queue = []
        self.spoken = []

    def getProperty(self, name):
        return self.properties[name]

    def setProperty(self, name, value):
        self.properties[name] = value

    def save_to_file(self, text, path):
        self.queue.append((text, path))

    def runAndWait(self):
        for text, path in self.queue:
            with wave.open(path, "wb") as wf:
                wf.setnchannels(self.channels)
                wf.setsampwidth(self.sample_width)
                wf.setframerate(self.frame_rate)
                frame = b"\x00" * (self.channels * self.sample_width)
                wf.writeframes(frame * len(text) * self.frames_per_char)
            self.spoken.append(text)
        self.queue.clear()


class FakeSoundDevice:
    """Stand-in for the sounddevice module."""

    class PortAudioError(Exception):
        pass

    def __init__(self):
        self.default = SimpleNamespace(device=[0, 1])
        self.devices = [
            {"name": "Microphone", "max_input_channels": 2, "max_output_channels": 0, "default_samplerate": 44100.0},
            {"name": "Speakers", "max_input_channels": 0, "max_output_channels": 2, "default_samplerate": 48000.0},
            {"name": "Headphones", "max_input_channels": 0, "max_output_channels": 2, "default_samplerate": 44100.0},
        ]
        self.played = []
        self.waited = 0

    def query_devices(self):
        return self.devices

    def play(self, data, samplerate, device=None):
        self.played.append({"data": data, "samplerate": samplerate, "device": device})

    def wait(self):
        self.waited += 1


@pytest.fixture
def make_driver():
    return FakeDriver


@pytest.fixture
def fake_driver():
    return FakeDriver()


@pytest.fixture
def fake_sd(monkeypatch):
    sd = FakeSoundDevice()
    monkeypatch.setattr(playback, "_sd", lambda: sd)
    return sd


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path, monkeypatch):
    """Keep config discovery and env overrides from leaking into tests."""
    for name in [
        "SPEECHBRIDGE_VOICE",
        "SPEECHBRIDGE_RATE",
        "SPEECHBRIDGE_VOLUME",
        "SPEECHBRIDGE_DEVICE",
        "SPEECHBRIDGE_CHUNK_SIZE",
        "LOG_FORMAT",
        "NO_COLOR",
    ]:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(config_module, "SETTINGS", config_module.Settings())
    yield
    structlog.reset_defaults()
