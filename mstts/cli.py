"""Command-line interface for mstts.

Responsibilities:
- Start the stdio tool server.
- Expose one-shot synthesis and catalog inspection for manual checks.

Key public functions:
- `app`: Typer application instance.
- `main`: invoke the Typer application.
"""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Annotated

import anyio
from dotenv import find_dotenv, load_dotenv
import typer

from .cli_rendering import echo_server_banner, echo_voice_profiles, exit_with_command_error
from .config import ConfigLoader, ServerConfig
from .errors import ConfigurationError
from .server.dispatcher import ProtocolFailure
from .server.registry import SYNTHESIZE_SPEECH
from .server_factory import ServerFactory
from .telemetry.logger import ServerLogger
from .tts.voices import VoiceCatalog

app = typer.Typer(
    name="mstts",
    no_args_is_help=True,
    help="Text-to-speech tool server for AI-assistant clients.",
)

EnvFileOption = Annotated[
    Path | None,
    typer.Option("--env-file", help="Dotenv file loaded before reading the environment."),
]


def _load_config(env_file: Path | None) -> ServerConfig:
    """Load dotenv values, then build config from the environment."""

    if env_file is not None:
        if not env_file.is_file():
            raise ConfigurationError(
                f"Env file not found: `{env_file}`.",
                hint="Pass an existing path via `--env-file <path>`.",
            )
        load_dotenv(env_file, override=False)
    else:
        dotenv_path = find_dotenv(usecwd=True)
        if dotenv_path:
            load_dotenv(dotenv_path, override=False)

    try:
        return ConfigLoader.from_env()
    except ValueError as exc:
        raise ConfigurationError(
            f"Invalid configuration: {exc}",
            hint="Fix the environment variables and rerun.",
        ) from exc


@app.command("serve")
def serve_command(env_file: EnvFileOption = None) -> None:
    """Serve the synthesis tool over stdin/stdout until input closes."""

    try:
        config = _load_config(env_file)
        config.ensure_output_dir()
        logger = ServerLogger()
        server = ServerFactory.create_server(config, logger=logger)
    except Exception as exc:
        exit_with_command_error("serve", exc)

    echo_server_banner(config, server.dispatcher.catalog)
    try:
        anyio.run(server.serve_stdio)
    except KeyboardInterrupt:
        raise typer.Exit(code=130)


@app.command("synthesize")
def synthesize_command(
    sentence: Annotated[str, typer.Argument(help="Text to convert to speech.")],
    language: Annotated[str, typer.Option("--language", "-l", help="Language code.")] = "en-US",
    voice: Annotated[
        str | None, typer.Option("--voice", "-v", help="Optional voice name.")
    ] = None,
    env_file: EnvFileOption = None,
) -> None:
    """Run one synthesis through the tool dispatcher and print its report."""

    try:
        config = _load_config(env_file)
        config.ensure_output_dir()
        dispatcher = ServerFactory.create_dispatcher(config, logger=ServerLogger())
    except Exception as exc:
        exit_with_command_error("synthesize", exc)

    arguments: dict[str, str] = {"sentence": sentence, "language": language}
    if voice is not None:
        arguments["voice"] = voice
    outcome = asyncio.run(dispatcher.call_tool(SYNTHESIZE_SPEECH, arguments))
    if isinstance(outcome, ProtocolFailure):
        exit_with_command_error("synthesize", outcome.error)

    typer.echo(outcome.text)
    if outcome.is_error:
        raise typer.Exit(code=1)


@app.command("voices")
def voices_command(
    language: Annotated[
        str | None, typer.Option("--language", "-l", help="Show one language only.")
    ] = None,
) -> None:
    """List supported languages with their default and alternative voices."""

    config = ServerConfig()
    echo_voice_profiles(VoiceCatalog(config.voice_profiles, config.default_language), language)


@app.command("tools")
def tools_command() -> None:
    """Print the `tools/list` payload as JSON."""

    dispatcher = ServerFactory.create_dispatcher(ServerConfig())
    typer.echo(json.dumps(dispatcher.list_tools(), ensure_ascii=False, indent=2))


def main() -> None:
    """CLI entrypoint for console scripts."""
    app()


if __name__ == "__main__":
    main()
