from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional, Dict, Any
from pathlib import Path


class Settings(BaseSettings):
    # Speech synthesis defaults
    SPEECHBRIDGE_VOICE: Optional[str] = None  # Substring of an installed voice name
    SPEECHBRIDGE_RATE: int = 0  # -10..10
    SPEECHBRIDGE_VOLUME: int = 100  # 0..100
    SPEECHBRIDGE_DEVICE: Optional[str] = None  # Output device index, default device if unset
    SPEECHBRIDGE_CHUNK_SIZE: int = 50  # Max characters per synthesized fragment

    # Observability & UI
    LOG_FORMAT: str = "auto"  # json|plain|auto
    NO_COLOR: bool = False  # Disable colored output

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    @classmethod
    def load_config(cls, config_file: Optional[str] = None) -> "Settings":
        """Load settings with config file -> env -> CLI precedence."""
        config_data: Dict[str, Any] = {}

        # Find config file
        if config_file:
            config_path: Optional[Path] = Path(config_file)
            if not config_path.exists():
                raise FileNotFoundError(f"Config file not found: {config_file}")
        else:
            # Auto-discover .speechbridge.{yaml,yml,toml}
            for ext in ["yaml", "yml", "toml"]:
                config_path = Path(f".speechbridge.{ext}")
                if config_path.exists():
                    break
            else:
                config_path = None

        if config_path is not None:
            if config_path.suffix in [".yaml", ".yml"]:
                import yaml  # type: ignore[import-untyped]

                with open(config_path) as f:
                    config_data = yaml.safe_load(f) or {}
            elif config_path.suffix == ".toml":
                import tomllib

                with open(config_path, "rb") as f:
                    config_data = tomllib.load(f)

        # Environment variables override config file values
        env_values = cls().model_dump(exclude_unset=True)
        config_data.update(env_values)
        return cls(**config_data)


# Default settings - replaced by load_config() during CLI startup
SETTINGS = Settings()
