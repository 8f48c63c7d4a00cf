"""WAV framing, output devices and playback."""
