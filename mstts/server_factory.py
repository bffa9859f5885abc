"""Construction helpers wiring configuration into server components.

Responsibilities:
- Build the voice catalog, registry, gateway, and dispatcher from one config.
- Keep CLI and tests independent from concrete backend construction.
"""

from __future__ import annotations

from .config import ServerConfig
from .server.dispatcher import RequestDispatcher
from .server.protocol import StdioServer
from .server.registry import ToolRegistry
from .telemetry.logger import ServerLogger
from .tts.azure_client import AzureSpeechClient, SpeechBackend
from .tts.synthesizer import SynthesisGateway
from .tts.voices import VoiceCatalog


class ServerFactory:
    """Factory for the components of one tool server process."""

    @staticmethod
    def create_backend(config: ServerConfig) -> SpeechBackend:
        """Create the Azure speech backend for a configuration."""

        return AzureSpeechClient(
            subscription_key=config.speech_key,
            region=config.speech_region,
            output_format=config.output_format,
            timeout_seconds=config.request_timeout_seconds,
        )

    @staticmethod
    def create_dispatcher(
        config: ServerConfig,
        backend: SpeechBackend | None = None,
        logger: ServerLogger | None = None,
    ) -> RequestDispatcher:
        """Create a dispatcher with its catalog, registry, and gateway."""

        catalog = VoiceCatalog(config.voice_profiles, config.default_language)
        gateway = SynthesisGateway(
            config,
            backend if backend is not None else ServerFactory.create_backend(config),
            logger=logger,
        )
        return RequestDispatcher(
            ToolRegistry.for_catalog(catalog), catalog, gateway, logger=logger
        )

    @staticmethod
    def create_server(
        config: ServerConfig,
        backend: SpeechBackend | None = None,
        logger: ServerLogger | None = None,
    ) -> StdioServer:
        """Create a protocol server around a freshly built dispatcher."""

        return StdioServer(
            ServerFactory.create_dispatcher(config, backend, logger),
            logger=logger,
        )
