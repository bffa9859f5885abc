"""Tool content rendering for synthesis results.

These texts are relayed verbatim by assistant clients, so they are written
as conversational markdown rather than structured data.
"""

from __future__ import annotations

from typing import Iterable

from ..models.datatypes import SynthesisSuccess

SUCCESS_MARKER = "Speech synthesis completed successfully!"
FAILURE_MARKER = "Speech synthesis failed:"


def _plain_number(value: float) -> str:
    """Render a number with at most two decimals and no trailing zeros."""

    return f"{value:.2f}".rstrip("0").rstrip(".")


def render_success(outcome: SynthesisSuccess) -> str:
    """Render the success report for a written audio artifact."""

    metrics = outcome.metrics
    return (
        f"🎵 {SUCCESS_MARKER}\n"
        "\n"
        "**Audio Details:**\n"
        f"- File: {outcome.filename}\n"
        f"- Path: {outcome.audio_path}\n"
        f"- Voice: {outcome.voice}\n"
        f"- Language: {outcome.language}\n"
        "\n"
        "**Performance Metrics:**\n"
        f"- Synthesis Time: {metrics.synthesis_time_ms}ms\n"
        f"- Audio Duration: {_plain_number(metrics.audio_duration_ms)}ms\n"
        f"- Word Count: {metrics.word_count}\n"
        f"- Characters/Second: {metrics.chars_per_second:.2f}\n"
        f"- Words/Minute: {metrics.words_per_minute:.2f}\n"
        "\n"
        "**Original Text:**\n"
        f'"{outcome.sentence}"\n'
        "\n"
        "The audio file has been saved and is ready for playback."
    )


def render_failure(message: str, supported_languages: Iterable[str], max_length: int) -> str:
    """Render a failure report with generic troubleshooting tips."""

    return (
        f"❌ {FAILURE_MARKER} {message}\n"
        "\n"
        "**Troubleshooting Tips:**\n"
        "- Check that Azure Speech Service credentials are properly configured\n"
        f"- Verify the language code is supported: {', '.join(supported_languages)}\n"
        f"- Ensure the sentence is not empty and under {max_length} characters\n"
        "- Check that the voice name (if specified) is valid for the selected language"
    )
