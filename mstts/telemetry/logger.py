"""Structured server event logging.

Responsibilities:
- Emit concise, deterministic event lines for dispatch and synthesis activity.
- Keep stdout free for protocol traffic by writing to stderr through `loguru`.
"""

from __future__ import annotations

import sys
from typing import TextIO

from loguru import logger as _loguru_logger


def _sanitize_context_value(value: object) -> str:
    """Convert context values into stable, shell-safe tokens."""

    raw = str(value).strip()
    if not raw:
        return "none"
    return "".join(
        character if character.isalnum() or character in {"-", "_", ".", ":", "/"} else "_"
        for character in raw
    )


def _format_context(context: dict[str, object]) -> str:
    """Serialize context key/value pairs in deterministic key order."""

    if not context:
        return ""
    tokens = [
        f"{key}={_sanitize_context_value(context[key])}"
        for key in sorted(context.keys())
    ]
    return " " + " ".join(tokens)


class ServerLogger:
    """Emit deterministic event logs for server, dispatch, and synthesis stages.

    Sentence text and credentials are never passed as context; callers log
    lengths and identifiers only.
    """

    def __init__(self, sink: TextIO | None = None, level: str = "INFO") -> None:
        """Initialize logger sink and configure deterministic formatting."""

        self._sink = sink or sys.stderr
        _loguru_logger.remove()
        _loguru_logger.add(self._sink, format="{message}", level=level, colorize=False)

    def _emit(self, level: str, event: str, stage: str, **context: object) -> None:
        """Emit one structured runtime log line."""

        line = f"[tool] level={level} stage={stage} event={event}{_format_context(context)}"
        _loguru_logger.log(level, line)

    def info(self, stage: str, event: str, **context: object) -> None:
        """Emit an informational event."""

        self._emit("INFO", event, stage, **context)

    def debug(self, stage: str, event: str, **context: object) -> None:
        self._emit("DEBUG", event, stage, **context)

    def warning(self, stage: str, event: str, **context: object) -> None:
        self._emit("WARNING", event, stage, **context)

    def failure(self, stage: str, error_type: str, **context: object) -> None:
        """Emit a failure event without sensitive payload details."""

        self._emit("ERROR", "failure", stage, error_type=error_type, **context)
