"""Unit tests for structured server event logging."""

import asyncio
import io

from mstts.config import ServerConfig
from mstts.errors import SpeechServiceError
from mstts.telemetry.logger import ServerLogger
from mstts.tts.synthesizer import SynthesisGateway


def test_logger_emits_sorted_sanitized_context() -> None:
    """Event lines should be deterministic and shell-safe."""

    sink = io.StringIO()
    logger = ServerLogger(sink=sink)

    logger.info("dispatch", "call", tool="synthesize_speech", request_id="a b")
    logger.debug("server", "notification", method="ping")
    logger.failure("synthesis", "EmptyAudioError")

    assert sink.getvalue().splitlines() == [
        "[tool] level=INFO stage=dispatch event=call request_id=a_b tool=synthesize_speech",
        "[tool] level=ERROR stage=synthesis event=failure error_type=EmptyAudioError",
    ]


def test_gateway_logs_lengths_but_not_sentence_text(
    server_config: ServerConfig, fake_backend
) -> None:
    """Synthesis events should carry sizes and identifiers, never the sentence."""

    sink = io.StringIO()
    gateway = SynthesisGateway(server_config, fake_backend, logger=ServerLogger(sink=sink))

    asyncio.run(gateway.synthesize("confidential words", "en-US", "en-US-RyanMultilingualNeural"))

    output = sink.getvalue()
    assert "stage=synthesis event=start" in output
    assert "chars=18" in output
    assert "stage=storage event=written" in output
    assert "stage=synthesis event=complete" in output
    assert "confidential" not in output


def test_gateway_logs_speech_service_failure_kind_and_status(
    server_config: ServerConfig, make_backend
) -> None:
    """Service failures should log their classification and HTTP status."""

    sink = io.StringIO()
    backend = make_backend(
        error=SpeechServiceError(
            "Speech service rate limit reached (HTTP 429).",
            failure_kind="throttled",
            status_code=429,
        )
    )
    gateway = SynthesisGateway(server_config, backend, logger=ServerLogger(sink=sink))

    asyncio.run(gateway.synthesize("Hello", "en-US", "en-US-RyanMultilingualNeural"))

    failure_lines = [line for line in sink.getvalue().splitlines() if "event=failure" in line]
    assert failure_lines == [
        "[tool] level=ERROR stage=synthesis event=failure error_type=SpeechServiceError "
        "failure_kind=throttled language=en-US status_code=429 "
        "voice=en-US-RyanMultilingualNeural"
    ]
