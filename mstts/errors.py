"""Domain exceptions for tool dispatch and synthesis diagnostics.

Two tiers exist and the tier decides how a failure reaches the client:

- `ProtocolError` subclasses reject the JSON-RPC request outright.
- `DomainFailure` subclasses are reported as ordinary tool content.
"""

from __future__ import annotations

INVALID_PARAMS = -32602


class MsttsError(RuntimeError):
    """Base class for all tool server errors."""

    def __init__(self, detail: str, *, hint: str | None = None) -> None:
        """Initialize an error with a user-facing detail and optional hint."""

        super().__init__(detail)
        self.detail = detail
        self.hint = hint


class ProtocolError(MsttsError):
    """Raised when a caller misuses the tool interface."""

    code = INVALID_PARAMS


class UnknownToolError(ProtocolError):
    """Raised when `tools/call` names a tool that is not registered."""

    def __init__(self, tool_name: str) -> None:
        super().__init__(f"Unknown tool: {tool_name}")
        self.tool_name = tool_name


class MissingParameterError(ProtocolError):
    """Raised when a required tool argument is absent or blank."""

    def __init__(self, parameter: str) -> None:
        super().__init__(f'Invalid or missing "{parameter}" parameter')
        self.parameter = parameter


class ParameterTypeError(ProtocolError):
    """Raised when a tool argument has the wrong JSON type."""

    def __init__(self, parameter: str, expected: str) -> None:
        super().__init__(f'Invalid "{parameter}" parameter: expected {expected}')
        self.parameter = parameter
        self.expected = expected


class UnsupportedLanguageError(ProtocolError):
    """Raised when the requested language is outside the supported set."""

    def __init__(self, language: str, supported: tuple[str, ...]) -> None:
        super().__init__(
            f"Unsupported language: {language}. Supported languages: {', '.join(supported)}"
        )
        self.language = language
        self.supported = supported


class DomainFailure(MsttsError):
    """Raised when a tool operation fails for operational reasons."""


class ConfigurationError(DomainFailure):
    """Raised when speech service credentials or settings are unusable."""


class LengthError(DomainFailure):
    """Raised when a string argument violates its declared length bounds."""

    def __init__(
        self,
        parameter: str,
        length: int,
        *,
        min_length: int | None = None,
        max_length: int | None = None,
    ) -> None:
        bounds = []
        if min_length is not None:
            bounds.append(f"at least {min_length}")
        if max_length is not None:
            bounds.append(f"at most {max_length}")
        super().__init__(
            f'Parameter "{parameter}" must be {" and ".join(bounds)} characters long '
            f"(got {length})."
        )
        self.parameter = parameter
        self.length = length


class SpeechServiceError(DomainFailure):
    """Raised when the external speech service fails or returns bad output."""

    def __init__(
        self,
        detail: str,
        *,
        failure_kind: str = "unknown",
        status_code: int | None = None,
    ) -> None:
        """Initialize provider error metadata for diagnostics."""

        super().__init__(detail)
        self.failure_kind = failure_kind
        self.status_code = status_code


class EmptyAudioError(DomainFailure):
    """Raised when the speech service reports success without audio bytes."""

    def __init__(self) -> None:
        super().__init__("Speech synthesis produced no audio data")


class PersistenceError(DomainFailure):
    """Raised when synthesized audio cannot be written to disk."""
