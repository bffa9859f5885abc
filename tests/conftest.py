"""Shared pytest fixtures for the mstts test suite."""

from __future__ import annotations

import io
from pathlib import Path
import wave

import pytest

from mstts.config import ServerConfig
from mstts.models.datatypes import SynthesizedAudio
from mstts.server.dispatcher import RequestDispatcher
from mstts.server_factory import ServerFactory
from mstts.tts.azure_client import wav_duration_ms


def mock_wav_bytes(duration_seconds: float = 0.25, sample_rate: int = 24000) -> bytes:
    """Build deterministic mono WAV bytes for synthesis tests."""

    frame_count = int(duration_seconds * sample_rate)
    buffer = io.BytesIO()
    with wave.open(buffer, "wb") as wav_file:
        wav_file.setnchannels(1)
        wav_file.setsampwidth(2)
        wav_file.setframerate(sample_rate)
        wav_file.writeframes(b"\x00\x00" * frame_count)
    return buffer.getvalue()


class FakeSpeechBackend:
    """In-memory speech backend recording each synthesis call."""

    def __init__(
        self,
        audio: bytes | None = None,
        error: Exception | None = None,
        audio_duration_ms: float | None = None,
    ) -> None:
        """Initialize the canned payload or error returned by every call."""

        self.audio = mock_wav_bytes() if audio is None else audio
        self.error = error
        self.audio_duration_ms = audio_duration_ms
        self.calls: list[tuple[str, str, str]] = []

    def synthesize_once(self, text: str, language: str, voice: str) -> SynthesizedAudio:
        """Record the call, then raise the canned error or return canned audio."""

        self.calls.append((text, language, voice))
        if self.error is not None:
            raise self.error
        duration = self.audio_duration_ms
        if duration is None:
            duration = wav_duration_ms(self.audio) if self.audio else 0.0
        return SynthesizedAudio(audio_bytes=self.audio, audio_duration_ms=duration)


@pytest.fixture
def wav_bytes() -> bytes:
    """Provide a quarter-second silent WAV payload."""

    return mock_wav_bytes()


@pytest.fixture
def fake_backend() -> FakeSpeechBackend:
    """Provide a backend returning a quarter-second WAV payload."""

    return FakeSpeechBackend()


@pytest.fixture
def server_config(tmp_path: Path) -> ServerConfig:
    """Provide a config with credentials and a temporary output directory."""

    return ServerConfig(
        speech_key="test-key",
        speech_region="westeurope",
        output_dir=tmp_path / "audio",
    )


@pytest.fixture
def dispatcher(server_config: ServerConfig, fake_backend: FakeSpeechBackend) -> RequestDispatcher:
    """Provide a dispatcher wired to the fake backend."""

    return ServerFactory.create_dispatcher(server_config, backend=fake_backend)


@pytest.fixture
def make_backend() -> type[FakeSpeechBackend]:
    """Provide the fake backend class for tests needing custom payloads or errors."""

    return FakeSpeechBackend
