"""Typed records shared by the dispatcher, registry, and synthesis gateway."""

from .datatypes import (
    LanguageVoiceProfile,
    ParameterSpec,
    SynthesisFailure,
    SynthesisMetrics,
    SynthesisOutcome,
    SynthesisRequest,
    SynthesisSuccess,
    SynthesizedAudio,
    ToolDescriptor,
)

__all__ = [
    "LanguageVoiceProfile",
    "ParameterSpec",
    "SynthesisFailure",
    "SynthesisMetrics",
    "SynthesisOutcome",
    "SynthesisRequest",
    "SynthesisSuccess",
    "SynthesizedAudio",
    "ToolDescriptor",
]
