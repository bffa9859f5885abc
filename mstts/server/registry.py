"""Tool declarations advertised by the protocol server.

Responsibilities:
- Declare the invocable tools and their parameter schemas.
- Derive the language enumeration from the voice catalog so both stay aligned.
"""

from __future__ import annotations

from ..models.datatypes import ParameterSpec, ToolDescriptor
from ..tts.voices import VoiceCatalog

SYNTHESIZE_SPEECH = "synthesize_speech"
MAX_SENTENCE_LENGTH = 1000


def build_synthesis_tool(catalog: VoiceCatalog) -> ToolDescriptor:
    """Build the speech synthesis tool descriptor for a voice catalog."""

    languages = catalog.languages
    return ToolDescriptor(
        name=SYNTHESIZE_SPEECH,
        description=(
            "Convert text to speech using Microsoft Azure Speech Services. "
            "Supports multiple languages and voices."
        ),
        parameters=(
            ParameterSpec(
                name="sentence",
                type="string",
                description="The text to convert to speech",
                required=True,
                min_length=1,
                max_length=MAX_SENTENCE_LENGTH,
            ),
            ParameterSpec(
                name="language",
                type="string",
                description=f"Language code (e.g., {', '.join(languages)})",
                required=True,
                allowed_values=languages,
                default=catalog.default_language,
            ),
            ParameterSpec(
                name="voice",
                type="string",
                description=(
                    "Optional specific voice name. If not provided, uses the best "
                    "voice for the language."
                ),
                examples=catalog.example_voices(),
            ),
        ),
    )


class ToolRegistry:
    """Read-only registry of tool descriptors keyed by name."""

    def __init__(self, tools: tuple[ToolDescriptor, ...]) -> None:
        self._tools = {tool.name: tool for tool in tools}

    @classmethod
    def for_catalog(cls, catalog: VoiceCatalog) -> ToolRegistry:
        """Create the default registry declaring the speech synthesis tool."""

        return cls((build_synthesis_tool(catalog),))

    def list_tools(self) -> tuple[ToolDescriptor, ...]:
        """Return descriptors in declaration order."""

        return tuple(self._tools.values())

    def get(self, name: str) -> ToolDescriptor | None:
        return self._tools.get(name)

    def get_schema(self, name: str) -> tuple[ParameterSpec, ...] | None:
        """Return the ordered parameter schema of a tool, or `None` if unknown."""

        tool = self._tools.get(name)
        if tool is None:
            return None
        return tool.parameters
