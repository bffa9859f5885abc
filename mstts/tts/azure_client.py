"""Azure Speech REST client used as the external synthesis capability.

Responsibilities:
- Send one SSML synthesis request to the Azure Cognitive Services TTS endpoint.
- Read the audio duration from the returned WAV payload.
- Raise actionable `SpeechServiceError` exceptions for gateway-level mapping.

Key types:
- `SpeechBackend`: narrow protocol the gateway depends on.
- `AzureSpeechClient`: requests-based implementation.
"""

from __future__ import annotations

import io
import re
import socket
import wave
from typing import Protocol
from xml.sax.saxutils import escape, quoteattr

import requests

from .. import __version__
from ..errors import SpeechServiceError
from ..models.datatypes import SynthesizedAudio


class SpeechBackend(Protocol):
    """Protocol for external speech synthesis implementations."""

    def synthesize_once(self, text: str, language: str, voice: str) -> SynthesizedAudio:
        """Synthesize text once and return the audio payload."""


def build_ssml(
    text: str,
    voice: str,
    language: str,
    rate: str = "1.0",
    pitch: str = "0%",
) -> str:
    """Build an SSML document binding text to a voice and language."""

    return (
        f'<speak version="1.0" xmlns="http://www.w3.org/2001/10/synthesis" '
        f"xml:lang={quoteattr(language)}>"
        f"<voice name={quoteattr(voice)}>"
        f"<prosody rate={quoteattr(rate)} pitch={quoteattr(pitch)}>{escape(text)}</prosody>"
        "</voice></speak>"
    )


def wav_duration_ms(audio_bytes: bytes) -> float:
    """Return WAV duration in milliseconds, or `0.0` when the header is unreadable."""

    try:
        with wave.open(io.BytesIO(audio_bytes), "rb") as wav_file:
            frame_count = wav_file.getnframes()
            sample_rate = wav_file.getframerate()
    except (wave.Error, EOFError):
        return 0.0
    if sample_rate <= 0:
        return 0.0
    return frame_count * 1000.0 / sample_rate


class AzureSpeechClient:
    """Minimal requests-based Azure speech HTTP client for TTS synthesis."""

    _MAX_PROVIDER_MESSAGE_CHARS = 180

    def __init__(
        self,
        *,
        subscription_key: str | None,
        region: str | None,
        output_format: str = "riff-24khz-16bit-mono-pcm",
        timeout_seconds: float = 60.0,
        endpoint: str | None = None,
    ) -> None:
        """Initialize Azure HTTP client settings."""

        self.subscription_key = (
            subscription_key.strip() if isinstance(subscription_key, str) else ""
        )
        self.region = region.strip() if isinstance(region, str) else ""
        self.output_format = output_format
        self.timeout_seconds = timeout_seconds
        self.endpoint = endpoint or (
            f"https://{self.region}.tts.speech.microsoft.com/cognitiveservices/v1"
        )

    def _require_credentials(self) -> None:
        """Require key and region before issuing requests."""

        if not self.subscription_key or not self.region:
            raise SpeechServiceError(
                "Azure Speech Service credentials not configured.",
                failure_kind="invalid_api_key",
            )

    def synthesize_once(self, text: str, language: str, voice: str) -> SynthesizedAudio:
        """Return synthesized WAV audio for one sentence."""

        self._require_credentials()

        headers = {
            "Ocp-Apim-Subscription-Key": self.subscription_key,
            "Content-Type": "application/ssml+xml",
            "X-Microsoft-OutputFormat": self.output_format,
            "User-Agent": f"mstts/{__version__}",
        }
        body = build_ssml(text, voice, language).encode("utf-8")
        try:
            response = requests.post(
                self.endpoint,
                headers=headers,
                data=body,
                timeout=self.timeout_seconds,
            )
            response.raise_for_status()
            audio_bytes = bytes(response.content)
        except requests.HTTPError as exc:
            raise self._http_error_to_service_error(exc) from exc
        except requests.RequestException as exc:
            failure_kind = self._classify_transport_failure(exc)
            if failure_kind == "timeout":
                detail = "Speech synthesis request timed out."
            else:
                detail = f"Speech synthesis error: {self._short_message(str(exc))}"
            raise SpeechServiceError(detail, failure_kind=failure_kind) from exc

        return SynthesizedAudio(
            audio_bytes=audio_bytes,
            audio_duration_ms=wav_duration_ms(audio_bytes) if audio_bytes else 0.0,
        )

    @classmethod
    def _redact_sensitive_tokens(cls, text: str) -> str:
        """Redact subscription-key-like tokens from provider error content."""

        return re.sub(r"\b[0-9a-fA-F]{32}\b", "[redacted-key]", text)

    @classmethod
    def _short_message(cls, text: str) -> str:
        """Normalize and cap user-facing provider message length."""

        compact = " ".join(cls._redact_sensitive_tokens(text).split())
        if len(compact) <= cls._MAX_PROVIDER_MESSAGE_CHARS:
            return compact
        return f"{compact[: cls._MAX_PROVIDER_MESSAGE_CHARS - 1]}..."

    @staticmethod
    def _classify_transport_failure(reason: object) -> str:
        """Classify network-layer failures into deterministic diagnostic kinds."""

        if isinstance(reason, TimeoutError | socket.timeout | requests.Timeout):
            return "timeout"
        return "transport"

    @classmethod
    def _http_error_to_service_error(cls, exc: requests.HTTPError) -> SpeechServiceError:
        """Convert HTTP errors into normalized service exceptions with metadata."""

        response = exc.response
        status_code = response.status_code if response is not None else 0
        body = ""
        if response is not None:
            body = bytes(response.content).decode("utf-8", errors="replace").strip()

        if status_code in {401, 403}:
            failure_kind = "invalid_api_key"
            headline = "Speech service authentication failed"
        elif status_code == 429:
            failure_kind = "throttled"
            headline = "Speech service throttled the request"
        elif status_code in {408, 504}:
            failure_kind = "timeout"
            headline = "Speech service request timed out"
        else:
            failure_kind = "http_error"
            headline = "Speech synthesis failed"

        if body:
            detail = f"{headline} (HTTP {status_code}): {cls._short_message(body)}"
        else:
            detail = f"{headline} (HTTP {status_code})."
        return SpeechServiceError(detail, failure_kind=failure_kind, status_code=status_code)
