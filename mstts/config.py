"""Configuration model and loaders for the tool server.

Responsibilities:
- Define runtime configuration as an immutable typed dataclass.
- Provide an environment-based loader with documented fallbacks.

Key types:
- `ServerConfig`: normalized settings shared by all components.
- `ConfigLoader`: static construction helpers for `ServerConfig`.
"""

from __future__ import annotations

from dataclasses import dataclass
import os
from pathlib import Path
from typing import Mapping

from .models.datatypes import LanguageVoiceProfile
from .parsing import normalize_optional_string, parse_positive_float
from .tts.voices import DEFAULT_LANGUAGE, DEFAULT_VOICE_PROFILES

_DEFAULT_REGION = "westeurope"
_DEFAULT_OUTPUT_DIR = Path("audio") / "mcp-generated"
_DEFAULT_FILE_PREFIX = "mcp-tts"
_DEFAULT_OUTPUT_FORMAT = "riff-24khz-16bit-mono-pcm"
_DEFAULT_TIMEOUT_SECONDS = 60.0


@dataclass(frozen=True, slots=True)
class ServerConfig:
    """Runtime configuration loaded once at startup.

    Attributes:
        speech_key: Speech service subscription key, passed through unchanged.
        speech_region: Speech service region, for example `westeurope`.
        output_dir: Directory receiving generated audio files.
        file_prefix: Leading token of generated audio file names.
        output_format: Speech service audio output format identifier.
        request_timeout_seconds: Timeout applied to each synthesis request.
        voice_profiles: Supported languages and their voices.
        default_language: Language used when a profile lookup misses.
    """

    speech_key: str | None = None
    speech_region: str | None = _DEFAULT_REGION
    output_dir: Path = _DEFAULT_OUTPUT_DIR
    file_prefix: str = _DEFAULT_FILE_PREFIX
    output_format: str = _DEFAULT_OUTPUT_FORMAT
    request_timeout_seconds: float = _DEFAULT_TIMEOUT_SECONDS
    voice_profiles: tuple[LanguageVoiceProfile, ...] = DEFAULT_VOICE_PROFILES
    default_language: str = DEFAULT_LANGUAGE

    @property
    def has_credentials(self) -> bool:
        """Return whether both speech key and region are set."""

        return bool(self.speech_key) and bool(self.speech_region)

    def validate(self) -> None:
        """Validate configuration values before the server starts."""

        if not self.file_prefix.strip():
            raise ValueError("`file_prefix` must be a non-empty string.")
        if not self.output_format.strip():
            raise ValueError("`output_format` must be a non-empty string.")
        if self.request_timeout_seconds <= 0:
            raise ValueError("`request_timeout_seconds` must be a positive number.")
        if not self.voice_profiles:
            raise ValueError("`voice_profiles` must declare at least one language.")

    def ensure_output_dir(self) -> Path:
        """Create the audio output directory when absent and return it."""

        self.output_dir.mkdir(parents=True, exist_ok=True)
        return self.output_dir


class ConfigLoader:
    """Factory methods for creating `ServerConfig` from external sources."""

    @staticmethod
    def from_env(env: Mapping[str, str] | None = None) -> ServerConfig:
        """Create a validated config from environment variables.

        Primary variables win over their `_FREE` counterparts.
        """

        env_map: Mapping[str, str] = os.environ if env is None else env

        speech_key = ConfigLoader._first_env_string(
            env_map, "AZURE_SPEECH_KEY", "AZURE_SPEECH_KEY_FREE"
        )
        speech_region = (
            ConfigLoader._first_env_string(
                env_map, "AZURE_SPEECH_REGION", "AZURE_SPEECH_REGION_FREE"
            )
            or _DEFAULT_REGION
        )
        output_dir = ConfigLoader._optional_env_path(env_map, "AUDIO_OUTPUT_DIR")
        file_prefix = (
            ConfigLoader._first_env_string(env_map, "MSTTS_FILE_PREFIX") or _DEFAULT_FILE_PREFIX
        )
        output_format = (
            ConfigLoader._first_env_string(env_map, "MSTTS_OUTPUT_FORMAT")
            or _DEFAULT_OUTPUT_FORMAT
        )
        timeout_seconds = ConfigLoader._optional_env_positive_float(
            env_map, "MSTTS_REQUEST_TIMEOUT_SECONDS"
        )

        config = ServerConfig(
            speech_key=speech_key,
            speech_region=speech_region,
            output_dir=output_dir or _DEFAULT_OUTPUT_DIR,
            file_prefix=file_prefix,
            output_format=output_format,
            request_timeout_seconds=timeout_seconds or _DEFAULT_TIMEOUT_SECONDS,
        )
        config.validate()
        return config

    @staticmethod
    def _first_env_string(env: Mapping[str, str], *keys: str) -> str | None:
        """Return the first non-blank value among environment keys."""

        for key in keys:
            value = normalize_optional_string(env.get(key))
            if value is not None:
                return value
        return None

    @staticmethod
    def _optional_env_path(env: Mapping[str, str], key: str) -> Path | None:
        """Read an optional path value from environment mapping."""

        value = normalize_optional_string(env.get(key))
        if value is None:
            return None
        return Path(value)

    @staticmethod
    def _optional_env_positive_float(env: Mapping[str, str], key: str) -> float | None:
        """Read an optional positive number from environment mapping."""

        raw_value = normalize_optional_string(env.get(key))
        if raw_value is None:
            return None
        try:
            return parse_positive_float(raw_value, key)
        except ValueError as exc:
            raise ValueError(f"Environment variable `{key}` must be a positive number.") from exc
