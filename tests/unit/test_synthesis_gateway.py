"""Unit tests for the synthesis gateway, file naming, and metrics."""

from __future__ import annotations

import asyncio
from dataclasses import replace
from datetime import datetime, timedelta, timezone
import math
from pathlib import Path
import re

import pytest

from mstts.config import ServerConfig
from mstts.errors import SpeechServiceError
from mstts.models.datatypes import SynthesisFailure, SynthesisSuccess
from mstts.tts.synthesizer import (
    SynthesisGateway,
    build_audio_filename,
    compute_metrics,
    count_words,
    format_timestamp,
)

_FILENAME_PATTERN = re.compile(
    r"^mcp-tts-en_US-en-US-RyanMultilingualNeural-"
    r"\d{4}-\d{2}-\d{2}T\d{2}-\d{2}-\d{2}-\d{3}Z\.wav$"
)
_FIXED_MOMENT = datetime(2024, 5, 1, 10, 20, 30, 123456, tzinfo=timezone.utc)


def test_format_timestamp_matches_iso_with_milliseconds() -> None:
    """Timestamps should be UTC ISO-8601 with millisecond precision and `Z`."""

    assert format_timestamp(_FIXED_MOMENT) == "2024-05-01T10:20:30.123Z"
    shifted = _FIXED_MOMENT.astimezone(timezone(timedelta(hours=2)))
    assert format_timestamp(shifted) == "2024-05-01T10:20:30.123Z"


def test_build_audio_filename_normalizes_every_token() -> None:
    """File names should replace separators in language, voice, and timestamp."""

    filename = build_audio_filename(
        "mcp-tts", "en-US", "en-US-RyanMultilingualNeural", _FIXED_MOMENT
    )

    assert filename == "mcp-tts-en_US-en-US-RyanMultilingualNeural-2024-05-01T10-20-30-123Z.wav"
    assert build_audio_filename("p", "fr-FR", "fr-FR:Henri.Neural", _FIXED_MOMENT).startswith(
        "p-fr_FR-fr-FR-Henri-Neural-"
    )


def test_count_words_splits_on_any_whitespace() -> None:
    """Word counts should ignore repeated and surrounding whitespace."""

    assert count_words("Hello, this is a test.") == 5
    assert count_words("  one\ttwo\n three  ") == 3


def test_compute_metrics_uses_elapsed_and_audio_duration() -> None:
    """Metrics should follow the chars/second and words/minute formulas."""

    metrics = compute_metrics("Hello world", synthesis_time_ms=500, audio_duration_ms=1000.0)

    assert metrics.word_count == 2
    assert metrics.chars_per_second == 22.0
    assert metrics.words_per_minute == 120.0


def test_compute_metrics_guards_zero_divisors() -> None:
    """Zero elapsed time or audio duration should yield zero rather than inf/NaN."""

    metrics = compute_metrics("Hello world", synthesis_time_ms=0, audio_duration_ms=0.0)

    assert metrics.chars_per_second == 0.0
    assert metrics.words_per_minute == 0.0
    assert all(math.isfinite(value) for value in metrics.as_dict().values())


def test_synthesize_writes_audio_and_reports_metrics(
    server_config: ServerConfig, fake_backend, wav_bytes: bytes
) -> None:
    """Successful synthesis should write a new non-empty file with a conventional name."""

    gateway = SynthesisGateway(server_config, fake_backend)

    outcome = asyncio.run(
        gateway.synthesize("Hello, this is a test.", "en-US", "en-US-RyanMultilingualNeural")
    )

    assert isinstance(outcome, SynthesisSuccess)
    assert outcome.success is True
    assert _FILENAME_PATTERN.match(outcome.filename)
    assert outcome.audio_path.parent == server_config.output_dir.resolve()
    assert outcome.audio_path.read_bytes() == wav_bytes
    assert outcome.voice == "en-US-RyanMultilingualNeural"
    assert outcome.metrics.audio_duration_ms == 250.0
    assert outcome.metrics.word_count == 5
    assert outcome.metrics.words_per_minute == 1200.0
    assert outcome.metrics.chars_per_second >= 0
    assert fake_backend.calls == [
        ("Hello, this is a test.", "en-US", "en-US-RyanMultilingualNeural")
    ]


def test_synthesize_uses_injected_clock_for_file_name(
    server_config: ServerConfig, fake_backend
) -> None:
    """The file name timestamp should come from the gateway clock."""

    gateway = SynthesisGateway(server_config, fake_backend, clock=lambda: _FIXED_MOMENT)

    outcome = asyncio.run(gateway.synthesize("Hej", "sv-SE", "sv-SE-SofieNeural"))

    assert isinstance(outcome, SynthesisSuccess)
    assert outcome.filename == "mcp-tts-sv_SE-sv-SE-SofieNeural-2024-05-01T10-20-30-123Z.wav"


def test_synthesize_without_credentials_skips_backend(
    server_config: ServerConfig, fake_backend
) -> None:
    """Missing credentials should fail before any backend call is attempted."""

    gateway = SynthesisGateway(replace(server_config, speech_key=None), fake_backend)

    outcome = asyncio.run(gateway.synthesize("Hello", "en-US", "en-US-RyanMultilingualNeural"))

    assert isinstance(outcome, SynthesisFailure)
    assert outcome.success is False
    assert "credentials not configured" in outcome.message
    assert fake_backend.calls == []


def test_synthesize_reports_empty_audio_without_writing(
    server_config: ServerConfig, make_backend
) -> None:
    """Zero-byte audio should be a failure and leave no file behind."""

    gateway = SynthesisGateway(server_config, make_backend(audio=b""))

    outcome = asyncio.run(gateway.synthesize("Hello", "en-US", "en-US-RyanMultilingualNeural"))

    assert outcome == SynthesisFailure(message="Speech synthesis produced no audio data")
    assert not server_config.output_dir.exists() or not any(server_config.output_dir.iterdir())


@pytest.mark.parametrize(
    ("error", "expected"),
    [
        (
            SpeechServiceError("Speech service authentication failed (HTTP 401)."),
            "Speech service authentication failed (HTTP 401).",
        ),
        (RuntimeError("socket closed"), "Speech synthesis error: socket closed"),
    ],
)
def test_synthesize_maps_backend_errors_to_failures(
    server_config: ServerConfig, make_backend, error: Exception, expected: str
) -> None:
    """Backend failures of any kind should come back as tagged failures."""

    backend = make_backend(error=error)
    gateway = SynthesisGateway(server_config, backend)

    outcome = asyncio.run(gateway.synthesize("Hello", "en-US", "en-US-RyanMultilingualNeural"))

    assert outcome == SynthesisFailure(message=expected)
    assert len(backend.calls) == 1


def test_synthesize_reports_persistence_failure(
    server_config: ServerConfig, fake_backend, tmp_path: Path
) -> None:
    """An unwritable output location should produce a save failure and no partial file."""

    blocked = tmp_path / "blocked"
    blocked.write_text("not a directory", encoding="utf-8")
    gateway = SynthesisGateway(replace(server_config, output_dir=blocked), fake_backend)

    outcome = asyncio.run(gateway.synthesize("Hello", "en-US", "en-US-RyanMultilingualNeural"))

    assert isinstance(outcome, SynthesisFailure)
    assert outcome.message.startswith("Failed to save audio file:")
    assert sorted(path.name for path in tmp_path.iterdir()) == ["blocked"]


def test_synthesize_zero_duration_audio_keeps_metrics_finite(
    server_config: ServerConfig, make_backend
) -> None:
    """Audio without a readable duration should report zero words per minute."""

    gateway = SynthesisGateway(
        server_config, make_backend(audio=b"not-a-wav", audio_duration_ms=0.0)
    )

    outcome = asyncio.run(
        gateway.synthesize("Hello there", "en-US", "en-US-RyanMultilingualNeural")
    )

    assert isinstance(outcome, SynthesisSuccess)
    assert outcome.metrics.words_per_minute == 0.0
    assert outcome.audio_path.read_bytes() == b"not-a-wav"


def test_synthesize_never_overwrites_an_existing_artifact(
    server_config: ServerConfig, make_backend
) -> None:
    """A second write landing on the same file name should fail and keep the first file."""

    gateway = SynthesisGateway(
        server_config, make_backend(audio=b"first-take"), clock=lambda: _FIXED_MOMENT
    )
    first = asyncio.run(gateway.synthesize("Hej", "sv-SE", "sv-SE-SofieNeural"))
    gateway.backend = make_backend(audio=b"second-take")

    second = asyncio.run(gateway.synthesize("Hej", "sv-SE", "sv-SE-SofieNeural"))

    assert isinstance(first, SynthesisSuccess)
    assert isinstance(second, SynthesisFailure)
    assert second.message.startswith("Failed to save audio file:")
    assert first.audio_path.read_bytes() == b"first-take"
    assert [path.name for path in server_config.output_dir.iterdir()] == [first.filename]


def test_synthesis_success_exposes_structured_payload(
    server_config: ServerConfig, fake_backend
) -> None:
    """The structured form should carry the artifact location, voice, and metrics."""

    gateway = SynthesisGateway(server_config, fake_backend, clock=lambda: _FIXED_MOMENT)

    outcome = asyncio.run(gateway.synthesize("Hej", "sv-SE", "sv-SE-SofieNeural"))

    assert isinstance(outcome, SynthesisSuccess)
    payload = outcome.as_dict()
    assert payload["filename"] == "mcp-tts-sv_SE-sv-SE-SofieNeural-2024-05-01T10-20-30-123Z.wav"
    assert payload["audioPath"] == str(outcome.audio_path)
    assert payload["voice"] == "sv-SE-SofieNeural"
    assert payload["language"] == "sv-SE"
    assert payload["metrics"]["audioDuration"] == 250.0
    assert payload["metrics"]["wordCount"] == 1
