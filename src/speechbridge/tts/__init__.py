"""Text-to-speech engine wrapper and synthesizer driver."""

from .driver import synthesize_fragments
from .engine import SpeechEngine, SynthesisError, VoiceNotFoundError

__all__ = ["SpeechEngine", "SynthesisError", "VoiceNotFoundError", "synthesize_fragments"]
