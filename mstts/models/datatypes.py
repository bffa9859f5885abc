"""Core datatypes shared across tool server modules.

Responsibilities:
- Represent immutable records exchanged between dispatch and synthesis.
- Provide explicit typing for JSON serialization of protocol payloads.

Key types:
- `LanguageVoiceProfile`, `ParameterSpec`, `ToolDescriptor`,
  `SynthesisRequest`, `SynthesizedAudio`, `SynthesisMetrics`,
  `SynthesisSuccess`, `SynthesisFailure`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Union


@dataclass(frozen=True, slots=True)
class LanguageVoiceProfile:
    """Default and alternative synthesizer voices for one language.

    Attributes:
        language: BCP-47 language code, for example `en-US`.
        default_voice: Voice used when no valid voice is requested.
        alternative_voices: Other voices accepted for this language.
    """

    language: str
    default_voice: str
    alternative_voices: frozenset[str] = field(default_factory=frozenset)

    def allows(self, voice: str) -> bool:
        """Return whether a voice is acceptable for this language."""

        return voice == self.default_voice or voice in self.alternative_voices


@dataclass(frozen=True, slots=True)
class ParameterSpec:
    """Declared schema for one tool parameter.

    Attributes:
        name: Argument name on the wire.
        type: JSON Schema type name.
        description: Human-readable parameter description.
        required: Whether the argument must be present.
        min_length: Optional inclusive lower bound for string length.
        max_length: Optional inclusive upper bound for string length.
        allowed_values: Optional ordered enumeration of accepted values.
        default: Optional advertised default value.
        examples: Optional advertised example values.
    """

    name: str
    type: str
    description: str
    required: bool = False
    min_length: int | None = None
    max_length: int | None = None
    allowed_values: tuple[str, ...] | None = None
    default: str | None = None
    examples: tuple[str, ...] = ()

    def as_json_schema(self) -> dict[str, Any]:
        """Serialize the parameter as a JSON Schema property."""

        schema: dict[str, Any] = {"type": self.type, "description": self.description}
        if self.min_length is not None:
            schema["minLength"] = self.min_length
        if self.max_length is not None:
            schema["maxLength"] = self.max_length
        if self.allowed_values is not None:
            schema["enum"] = list(self.allowed_values)
        if self.default is not None:
            schema["default"] = self.default
        if self.examples:
            schema["examples"] = list(self.examples)
        return schema


@dataclass(frozen=True, slots=True)
class ToolDescriptor:
    """Invocable tool advertised by `tools/list`."""

    name: str
    description: str
    parameters: tuple[ParameterSpec, ...]

    def as_dict(self) -> dict[str, Any]:
        """Serialize the descriptor into its protocol representation."""

        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": {
                "type": "object",
                "properties": {
                    parameter.name: parameter.as_json_schema() for parameter in self.parameters
                },
                "required": [parameter.name for parameter in self.parameters if parameter.required],
            },
        }


@dataclass(frozen=True, slots=True)
class SynthesisRequest:
    """Validated arguments of one synthesis tool invocation."""

    sentence: str
    language: str
    requested_voice: str | None = None


@dataclass(frozen=True, slots=True)
class SynthesizedAudio:
    """Raw result of one external synthesis call.

    Attributes:
        audio_bytes: Encoded audio payload (WAV).
        audio_duration_ms: Duration reported for the payload in milliseconds.
    """

    audio_bytes: bytes
    audio_duration_ms: float = 0.0


@dataclass(frozen=True, slots=True)
class SynthesisMetrics:
    """Timing and throughput figures for one successful synthesis."""

    synthesis_time_ms: int
    audio_duration_ms: float
    word_count: int
    chars_per_second: float
    words_per_minute: float

    def as_dict(self) -> dict[str, float | int]:
        """Return metrics keyed by their protocol names."""

        return {
            "synthesisTime": self.synthesis_time_ms,
            "audioDuration": self.audio_duration_ms,
            "wordCount": self.word_count,
            "charactersPerSecond": self.chars_per_second,
            "wordsPerMinute": self.words_per_minute,
        }


@dataclass(frozen=True, slots=True)
class SynthesisSuccess:
    """Successful synthesis outcome pointing at a written audio artifact."""

    audio_path: Path
    voice: str
    language: str
    sentence: str
    metrics: SynthesisMetrics

    @property
    def success(self) -> bool:
        return True

    @property
    def filename(self) -> str:
        return self.audio_path.name

    def as_dict(self) -> dict[str, Any]:
        """Return the artifact location, voice, and metrics as structured content."""

        return {
            "filename": self.filename,
            "audioPath": str(self.audio_path),
            "voice": self.voice,
            "language": self.language,
            "metrics": self.metrics.as_dict(),
        }


@dataclass(frozen=True, slots=True)
class SynthesisFailure:
    """Failed synthesis outcome with a human-readable reason."""

    message: str

    @property
    def success(self) -> bool:
        return False


SynthesisOutcome = Union[SynthesisSuccess, SynthesisFailure]
