"""Text-to-speech voice catalog, backend client, and synthesis gateway."""

from .azure_client import AzureSpeechClient, SpeechBackend
from .synthesizer import SynthesisGateway
from .voices import DEFAULT_VOICE_PROFILES, VoiceCatalog

__all__ = [
    "AzureSpeechClient",
    "DEFAULT_VOICE_PROFILES",
    "SpeechBackend",
    "SynthesisGateway",
    "VoiceCatalog",
]
