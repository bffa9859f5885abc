"""Synthesis gateway around the external speech capability.

Responsibilities:
- Perform exactly one backend call per invocation, off the event loop.
- Persist audio under deterministic, time-ordered file names.
- Compute throughput metrics and return a tagged outcome instead of raising.
"""

from __future__ import annotations

import asyncio
from datetime import datetime, timezone
import os
from pathlib import Path
import re
import tempfile
import time
from typing import TYPE_CHECKING, Callable

from ..errors import (
    ConfigurationError,
    DomainFailure,
    EmptyAudioError,
    PersistenceError,
    SpeechServiceError,
)
from ..models.datatypes import (
    SynthesisFailure,
    SynthesisMetrics,
    SynthesisOutcome,
    SynthesisSuccess,
)
from ..telemetry.logger import ServerLogger
from .azure_client import SpeechBackend

if TYPE_CHECKING:
    from ..config import ServerConfig

_NON_ALNUM = re.compile(r"[^a-zA-Z0-9]")


def format_timestamp(moment: datetime) -> str:
    """Render a UTC ISO-8601 timestamp with millisecond precision and `Z` suffix."""

    utc = moment.astimezone(timezone.utc)
    return f"{utc.strftime('%Y-%m-%dT%H:%M:%S')}.{utc.microsecond // 1000:03d}Z"


def build_audio_filename(prefix: str, language: str, voice: str, moment: datetime) -> str:
    """Build `<prefix>-<lang>-<voice>-<timestamp>.wav` with filesystem-safe tokens."""

    language_token = language.replace("-", "_")
    voice_token = _NON_ALNUM.sub("-", voice)
    timestamp = re.sub(r"[:.]", "-", format_timestamp(moment))
    return f"{prefix}-{language_token}-{voice_token}-{timestamp}.wav"


def count_words(sentence: str) -> int:
    """Count whitespace-delimited tokens."""

    return len(sentence.split())


def compute_metrics(
    sentence: str, synthesis_time_ms: int, audio_duration_ms: float
) -> SynthesisMetrics:
    """Compute throughput figures, yielding `0.0` for zero-length intervals."""

    word_count = count_words(sentence)
    chars_per_second = 0.0
    if synthesis_time_ms > 0:
        chars_per_second = round(len(sentence) / (synthesis_time_ms / 1000), 2)
    audio_seconds = audio_duration_ms / 1000
    words_per_minute = 0.0
    if audio_seconds > 0:
        words_per_minute = round(word_count / audio_seconds * 60, 2)
    return SynthesisMetrics(
        synthesis_time_ms=synthesis_time_ms,
        audio_duration_ms=audio_duration_ms,
        word_count=word_count,
        chars_per_second=chars_per_second,
        words_per_minute=words_per_minute,
    )


def write_audio_atomically(path: Path, data: bytes) -> Path:
    """Write bytes to `path` through a sibling temp file and a hard link.

    The link fails when `path` already exists, so an artifact is never
    replaced by a later write.
    """

    temp_name: str | None = None
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with tempfile.NamedTemporaryFile(
            dir=path.parent, prefix=f".{path.stem}-", suffix=".part", delete=False
        ) as handle:
            temp_name = handle.name
            handle.write(data)
            handle.flush()
            os.fsync(handle.fileno())
        os.link(temp_name, path)
    except OSError as exc:
        raise PersistenceError(f"Failed to save audio file: {exc}") from exc
    finally:
        if temp_name is not None:
            Path(temp_name).unlink(missing_ok=True)
    return path


class SynthesisGateway:
    """Run one synthesis against a backend and persist the resulting audio."""

    def __init__(
        self,
        config: ServerConfig,
        backend: SpeechBackend,
        logger: ServerLogger | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        """Bind configuration, backend, and optional logger and clock."""

        self.config = config
        self.backend = backend
        self.logger = logger
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    async def synthesize(self, sentence: str, language: str, voice: str) -> SynthesisOutcome:
        """Synthesize one sentence and return a success or failure outcome."""

        try:
            return await self._synthesize(sentence, language, voice)
        except DomainFailure as exc:
            if self.logger is not None:
                context: dict[str, object] = {"language": language, "voice": voice}
                if isinstance(exc, SpeechServiceError):
                    context["failure_kind"] = exc.failure_kind
                    context["status_code"] = exc.status_code
                self.logger.failure("synthesis", type(exc).__name__, **context)
            return SynthesisFailure(message=exc.detail)

    async def _synthesize(self, sentence: str, language: str, voice: str) -> SynthesisSuccess:
        if not self.config.has_credentials:
            raise ConfigurationError(
                "Azure Speech Service credentials not configured. Please set "
                "AZURE_SPEECH_KEY and AZURE_SPEECH_REGION environment variables."
            )

        filename = build_audio_filename(self.config.file_prefix, language, voice, self._clock())
        output_path = (self.config.output_dir / filename).resolve()

        if self.logger is not None:
            self.logger.info(
                "synthesis", "start", language=language, voice=voice, chars=len(sentence)
            )
        started = time.perf_counter()
        try:
            audio = await asyncio.to_thread(
                self.backend.synthesize_once, sentence, language, voice
            )
        except DomainFailure:
            raise
        except Exception as exc:
            raise SpeechServiceError(f"Speech synthesis error: {exc}") from exc
        synthesis_time_ms = int(round((time.perf_counter() - started) * 1000))

        if not audio.audio_bytes:
            raise EmptyAudioError()

        write_audio_atomically(output_path, audio.audio_bytes)
        if self.logger is not None:
            self.logger.info(
                "storage", "written", bytes=len(audio.audio_bytes), filename=filename
            )

        metrics = compute_metrics(sentence, synthesis_time_ms, audio.audio_duration_ms)
        if self.logger is not None:
            self.logger.info(
                "synthesis",
                "complete",
                duration_ms=metrics.audio_duration_ms,
                elapsed_ms=metrics.synthesis_time_ms,
            )
        return SynthesisSuccess(
            audio_path=output_path,
            voice=voice,
            language=language,
            sentence=sentence,
            metrics=metrics,
        )
