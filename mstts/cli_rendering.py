"""CLI output and error rendering helpers.

This module centralizes user-facing CLI presentation for command diagnostics,
the server readiness banner, and voice profile listings.
"""

from __future__ import annotations

from typing import NoReturn

import typer

from .config import ServerConfig
from .errors import MsttsError
from .tts.voices import VoiceCatalog


def exit_with_command_error(command_name: str, exc: Exception) -> NoReturn:
    """Print concise diagnostics for command failures and exit with code 1."""

    if isinstance(exc, MsttsError):
        typer.secho(f"{command_name} failed: {exc.detail}", fg=typer.colors.RED, err=True)
        if exc.hint:
            typer.secho(f"Hint: {exc.hint}", fg=typer.colors.YELLOW, err=True)
    else:
        typer.secho(f"{command_name} failed: {exc}", fg=typer.colors.RED, err=True)
    raise typer.Exit(code=1) from exc


def echo_server_banner(config: ServerConfig, catalog: VoiceCatalog) -> None:
    """Print the readiness banner on stderr; stdout belongs to the protocol."""

    typer.echo("🎵 MCP Text-to-Speech Server running", err=True)
    typer.echo(f"📍 Supported languages: {', '.join(catalog.languages)}", err=True)
    typer.echo(f"🔊 Audio output directory: {config.output_dir}", err=True)
    if not config.has_credentials:
        typer.secho(
            "Azure Speech credentials not found; synthesis calls will report a "
            "configuration problem.",
            fg=typer.colors.YELLOW,
            err=True,
        )


def echo_voice_profiles(catalog: VoiceCatalog, language: str | None = None) -> None:
    """Print default and alternative voices per language."""

    languages = catalog.languages if language is None else (language,)
    for code in languages:
        profile = catalog.profile(code)
        marker = " (fallback)" if code != profile.language else ""
        typer.echo(f"{code}{marker}: {profile.default_voice} [default]")
        for voice in sorted(profile.alternative_voices):
            typer.echo(f"  - {voice}")
