from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, field_validator
from typing import Optional
import os

from speechkit.core.errors import ConfigurationError

load_dotenv()

DEFAULT_BASE_URL = "https://api.elevenlabs.io/v1"
DEFAULT_TIMEOUT = 30.0


class Settings:

    ELEVENLABS_API_KEY: str = os.getenv("ELEVENLABS_API_KEY", "")
    ELEVENLABS_BASE_URL: str = os.getenv("ELEVENLABS_BASE_URL", DEFAULT_BASE_URL)
    # Parsed by ClientConfig so a malformed value surfaces as ConfigurationError
    ELEVENLABS_TIMEOUT: str = os.getenv("ELEVENLABS_TIMEOUT", str(DEFAULT_TIMEOUT))

    # "Adam", the voice used throughout the examples
    ELEVENLABS_VOICE_ID: str = os.getenv("ELEVENLABS_VOICE_ID", "pNInz6obpgDQGcFmaJgB")
    ELEVENLABS_MODEL_ID: str = os.getenv("ELEVENLABS_MODEL_ID", "eleven_monolingual_v1")

    AUDIO_PLAYER: str = os.getenv("AUDIO_PLAYER", "mpv")

    LOG_DIR: str = os.getenv("LOG_DIR", "logs")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

settings = Settings()


class ClientConfig(BaseModel):
    """
    Connection settings for one ElevenLabsClient.
    Built once and never mutated; a new key or timeout means a new client.

    timeout bounds each network step (connect, each read, each write),
    not the whole call: a stream that keeps delivering chunks runs to the
    end however long it takes.
    """

    model_config = ConfigDict(frozen=True)

    api_key: str
    base_url: str = DEFAULT_BASE_URL
    timeout: float = DEFAULT_TIMEOUT

    @field_validator("api_key")
    @classmethod
    def _require_key(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("api_key must not be empty")
        return value.strip()

    @field_validator("timeout")
    @classmethod
    def _positive_timeout(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("timeout must be positive")
        return value

    @field_validator("base_url")
    @classmethod
    def _strip_slash(cls, value: str) -> str:
        return value.rstrip("/")

    @property
    def masked_key(self) -> str:
        return self.api_key[:8] + "..." if len(self.api_key) > 8 else "***"

    @classmethod
    def from_settings(cls, source: Optional[Settings] = None, **overrides) -> "ClientConfig":
        """Build a config from environment settings (.env is honoured)"""
        source = source or settings
        values = {
            "api_key": source.ELEVENLABS_API_KEY,
            "base_url": source.ELEVENLABS_BASE_URL,
            "timeout": source.ELEVENLABS_TIMEOUT,
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        if not values["api_key"]:
            raise ConfigurationError("❌ Missing ELEVENLABS_API_KEY in environment or .env")
        try:
            return cls(**values)
        except ValueError as e:
            raise ConfigurationError(f"❌ Invalid ElevenLabs configuration: {e}") from e
