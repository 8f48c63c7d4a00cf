"""Tests for settings loading and option clamping."""

from pathlib import Path

import pytest

from speechbridge.core.config import Settings
from speechbridge.core.models import SpeakOptions

pytestmark = pytest.mark.unit


class TestSettings:
    def test_defaults(self):
        settings = Settings.load_config()

        assert settings.SPEECHBRIDGE_CHUNK_SIZE == 50
        assert settings.SPEECHBRIDGE_RATE == 0
        assert settings.SPEECHBRIDGE_VOLUME == 100
        assert settings.SPEECHBRIDGE_VOICE is None

    def test_auto_discovers_yaml(self):
        Path(".speechbridge.yaml").write_text("SPEECHBRIDGE_CHUNK_SIZE: 5\nSPEECHBRIDGE_VOICE: irina\n")

        settings = Settings.load_config()

        assert settings.SPEECHBRIDGE_CHUNK_SIZE == 5
        assert settings.SPEECHBRIDGE_VOICE == "irina"

    def test_explicit_toml(self, tmp_path):
        config_path = tmp_path / "speech.toml"
        config_path.write_text('SPEECHBRIDGE_RATE = 3\nSPEECHBRIDGE_DEVICE = "2"\n')

        settings = Settings.load_config(str(config_path))

        assert settings.SPEECHBRIDGE_RATE == 3
        assert settings.SPEECHBRIDGE_DEVICE == "2"

    def test_env_overrides_config_file(self, monkeypatch):
        Path(".speechbridge.yaml").write_text("SPEECHBRIDGE_CHUNK_SIZE: 5\n")
        monkeypatch.setenv("SPEECHBRIDGE_CHUNK_SIZE", "20")

        assert Settings.load_config().SPEECHBRIDGE_CHUNK_SIZE == 20

    def test_missing_config_file(self):
        with pytest.raises(FileNotFoundError):
            Settings.load_config("does-not-exist.yaml")


class TestSpeakOptions:
    def test_clamps_ranges(self):
        options = SpeakOptions(rate=-50, volume=250, chunk_size=0)

        assert options.rate == -10
        assert options.volume == 100
        assert options.chunk_size == 1

    def test_in_range_values_kept(self):
        options = SpeakOptions(rate=4, volume=30, chunk_size=80)

        assert (options.rate, options.volume, options.chunk_size) == (4, 30, 80)
