"""SpeechBridge: speak text through a local TTS engine, one safe-sized fragment at a time."""

__version__ = "0.1.0"
