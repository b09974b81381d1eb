"""
Configuration Management for xi-tts.

Configuration Hierarchy (highest priority first):
    1. Environment variables (ELEVENLABS_API_KEY, XI_TTS_BASE_URL, ...)
    2. YAML settings file (config/settings.yaml)
    3. Defaults class values

Example settings.yaml:
    client:
      api_key: ""            # prefer ELEVENLABS_API_KEY
      base_url: https://api.elevenlabs.io
      timeout_ms: 60000

    speech:
      voice: rachel
      model: eleven_multilingual_v2
      output_format: mp3_44100_128

    logging:
      level: 2
"""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Dict

import yaml


class ConfigValidationError(Exception):
    """Raised when a configuration value is out of bounds or of the wrong type."""
    pass


class Defaults:
    """Default configuration values."""

    # ─────────────────────────────────────────────────────────────────────────
    # Client
    # ─────────────────────────────────────────────────────────────────────────
    BASE_URL = "https://api.elevenlabs.io"   # Provider production endpoint
    TIMEOUT_MS = 60000                       # Passed to the transport as-is

    # ─────────────────────────────────────────────────────────────────────────
    # Request limits and defaults
    # ─────────────────────────────────────────────────────────────────────────
    MAX_INPUT_LENGTH = 5000                  # Characters per request
    MIN_VOICE_SETTING = 0.0
    MAX_VOICE_SETTING = 1.0
    MAX_SEED = 4294967295                    # u32
    DEFAULT_MODEL = "eleven_multilingual_v2"
    DEFAULT_VOICE = "rachel"
    DEFAULT_OUTPUT_FORMAT = "mp3_44100_128"

    # ─────────────────────────────────────────────────────────────────────────
    # Logging
    # ─────────────────────────────────────────────────────────────────────────
    LOGGING_TEXT_PREVIEW_CHARS = 80
    LOGGING_LEVEL = 2                        # 1=MINIMAL, 2=NORMAL, 3=VERBOSE, 4=DEBUG


API_KEY_ENV_VARS = ("ELEVENLABS_API_KEY", "XI_API_KEY")


@dataclass(frozen=True)
class ClientConfig:
    """
    Immutable client configuration.

    Attributes:
        api_key: Sent as the `xi-api-key` header. May be empty until a
            request is executed; execution fails with MissingApiKeyError then.
        base_url: Scheme and host of the API, without the /v1 path.
        timeout_ms: Request timeout in milliseconds.
    """
    api_key: str = ""
    base_url: str = Defaults.BASE_URL
    timeout_ms: int = Defaults.TIMEOUT_MS

    @property
    def timeout_s(self) -> float:
        return self.timeout_ms / 1000.0

    def with_base_url(self, base_url: str) -> "ClientConfig":
        return replace(self, base_url=base_url)

    def with_timeout(self, timeout_ms: int) -> "ClientConfig":
        return replace(self, timeout_ms=timeout_ms)

    def __repr__(self) -> str:
        key = "***" if self.api_key else "''"
        return f"ClientConfig(api_key={key}, base_url={self.base_url!r}, timeout_ms={self.timeout_ms})"

    @classmethod
    def from_settings(cls, settings: "Settings") -> "ClientConfig":
        """
        Build a validated ClientConfig from raw settings plus environment.

        Raises:
            ConfigValidationError: If timeout_ms is not a positive integer
                or base_url is empty.
        """
        client_raw = settings.raw.get("client", {}) or {}

        api_key = str(client_raw.get("api_key") or "")
        for var in API_KEY_ENV_VARS:
            if os.getenv(var):
                api_key = os.environ[var]
                break

        base_url = os.getenv("XI_TTS_BASE_URL") or client_raw.get("base_url", Defaults.BASE_URL)
        timeout_raw = os.getenv("XI_TTS_TIMEOUT_MS") or client_raw.get("timeout_ms", Defaults.TIMEOUT_MS)

        try:
            timeout_ms = int(timeout_raw)
        except (TypeError, ValueError):
            raise ConfigValidationError(f"client.timeout_ms must be an integer, got {timeout_raw!r}")

        cls._validate_positive("client.timeout_ms", timeout_ms)
        if not base_url or not str(base_url).strip():
            raise ConfigValidationError("client.base_url must not be empty")

        return cls(api_key=api_key, base_url=str(base_url).rstrip("/"), timeout_ms=timeout_ms)

    @staticmethod
    def _validate_positive(name: str, value: int | float) -> None:
        if value <= 0:
            raise ConfigValidationError(f"{name} must be positive, got {value}")


@dataclass(frozen=True)
class Settings:
    """
    Raw settings loaded from YAML.

    Properties give typed access to the `speech:` defaults used by the CLI;
    get_client_config() returns the validated client section.
    """
    raw: Dict[str, Any]

    @property
    def _speech(self) -> Dict[str, Any]:
        return self.raw.get("speech") or {}

    @property
    def default_voice(self) -> str:
        return str(self._speech.get("voice", Defaults.DEFAULT_VOICE))

    @property
    def default_model(self) -> str:
        return str(self._speech.get("model", Defaults.DEFAULT_MODEL))

    @property
    def default_output_format(self) -> str:
        return str(self._speech.get("output_format", Defaults.DEFAULT_OUTPUT_FORMAT))

    @property
    def default_language(self) -> str | None:
        return self._speech.get("language_code")

    def get_client_config(self) -> ClientConfig:
        return ClientConfig.from_settings(self)


def load_settings(path: str = "config/settings.yaml") -> Settings:
    """
    Load settings from a YAML file.

    Raises:
        FileNotFoundError: If the file does not exist.
    """
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"settings file not found: {p.resolve()}")

    with p.open("r", encoding="utf-8") as f:
        raw: Dict[str, Any] = yaml.safe_load(f) or {}

    return Settings(raw=raw)
