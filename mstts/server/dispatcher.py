"""Tool request validation and dispatch.

Responsibilities:
- Answer `tools/list` from the registry.
- Validate `tools/call` arguments against the declared parameter schema.
- Route valid calls through voice resolution and the synthesis gateway.
- Split failures into protocol rejections and reportable content.
- Run tool calls one at a time, in arrival order.

Key types:
- `ToolResponse`: protocol-successful content, possibly describing a failure.
- `ProtocolFailure`: a rejection carrying the `ProtocolError` to propagate.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Any, Mapping, Union

from ..errors import (
    DomainFailure,
    LengthError,
    MissingParameterError,
    ParameterTypeError,
    ProtocolError,
    UnknownToolError,
    UnsupportedLanguageError,
)
from ..models.datatypes import ParameterSpec, SynthesisRequest, SynthesisSuccess
from ..telemetry.logger import ServerLogger
from ..tts.synthesizer import SynthesisGateway
from ..tts.voices import VoiceCatalog
from .messages import render_failure, render_success
from .registry import MAX_SENTENCE_LENGTH, ToolRegistry

_JSON_TYPES: dict[str, type] = {"string": str}


@dataclass(frozen=True, slots=True)
class ToolResponse:
    """Content returned to the client as a normal protocol result."""

    text: str
    is_error: bool = False
    structured: dict[str, Any] | None = None

    def as_result(self) -> dict[str, Any]:
        result: dict[str, Any] = {"content": [{"type": "text", "text": self.text}]}
        if self.structured is not None:
            result["structuredContent"] = self.structured
        if self.is_error:
            result["isError"] = True
        return result


@dataclass(frozen=True, slots=True)
class ProtocolFailure:
    """Rejection that must surface as a protocol-level error."""

    error: ProtocolError

    def as_error(self) -> dict[str, Any]:
        return {"code": self.error.code, "message": self.error.detail}


CallResult = Union[ToolResponse, ProtocolFailure]


class RequestDispatcher:
    """Validate and route tool requests."""

    def __init__(
        self,
        registry: ToolRegistry,
        catalog: VoiceCatalog,
        gateway: SynthesisGateway,
        logger: ServerLogger | None = None,
    ) -> None:
        self.registry = registry
        self.catalog = catalog
        self.gateway = gateway
        self.logger = logger
        self._call_lock = asyncio.Lock()

    def list_tools(self) -> dict[str, Any]:
        """Return every registered descriptor in protocol form."""

        return {"tools": [tool.as_dict() for tool in self.registry.list_tools()]}

    async def call_tool(self, name: str, arguments: object) -> CallResult:
        """Invoke a tool and classify the result.

        `ProtocolError` becomes a `ProtocolFailure`; any `DomainFailure`, as
        well as a failed synthesis outcome, becomes error content. Calls wait
        for the previous call to finish before any of their own work starts.
        """

        async with self._call_lock:
            return await self._call_tool(name, arguments)

    async def _call_tool(self, name: str, arguments: object) -> CallResult:
        try:
            request = self._validate(name, arguments)
            voice = self.catalog.resolve_voice(request.language, request.requested_voice)
            outcome = await self.gateway.synthesize(request.sentence, request.language, voice)
        except ProtocolError as exc:
            if self.logger is not None:
                self.logger.warning(
                    "dispatch", "rejected", error_type=type(exc).__name__, tool=name
                )
            return ProtocolFailure(exc)
        except DomainFailure as exc:
            if self.logger is not None:
                self.logger.failure("dispatch", type(exc).__name__, tool=name)
            return self._failure_response(exc.detail)

        if isinstance(outcome, SynthesisSuccess):
            if self.logger is not None:
                self.logger.info("dispatch", "complete", tool=name, filename=outcome.filename)
            return ToolResponse(render_success(outcome), structured=outcome.as_dict())
        return self._failure_response(outcome.message)

    def _failure_response(self, message: str) -> ToolResponse:
        return ToolResponse(
            render_failure(message, self.catalog.languages, MAX_SENTENCE_LENGTH),
            is_error=True,
        )

    def _validate(self, name: str, arguments: object) -> SynthesisRequest:
        """Check arguments against the tool schema and build a request."""

        schema = self.registry.get_schema(name)
        if schema is None:
            raise UnknownToolError(name)
        if arguments is None:
            arguments = {}
        if not isinstance(arguments, Mapping):
            raise ParameterTypeError("arguments", "object")

        values: dict[str, str | None] = {}
        for spec in schema:
            values[spec.name] = self._checked_value(spec, arguments.get(spec.name))

        # Length bounds are reported as content, so they run after every
        # rejection check has passed.
        for spec in schema:
            value = values[spec.name]
            if value is not None:
                self._check_length(spec, value)

        return SynthesisRequest(
            sentence=values["sentence"] or "",
            language=values["language"] or "",
            requested_voice=values.get("voice"),
        )

    @staticmethod
    def _checked_value(spec: ParameterSpec, value: Any) -> str | None:
        if value is None or value == "":
            if spec.required:
                raise MissingParameterError(spec.name)
            return None
        expected = _JSON_TYPES.get(spec.type)
        if expected is not None and not isinstance(value, expected):
            # Optional values of the wrong type fall back to their defaults.
            if not spec.required:
                return None
            raise ParameterTypeError(spec.name, spec.type)
        # The only enumerated parameter is the language code.
        if spec.allowed_values is not None and value not in spec.allowed_values:
            raise UnsupportedLanguageError(value, spec.allowed_values)
        return value

    @staticmethod
    def _check_length(spec: ParameterSpec, value: str) -> None:
        too_short = spec.min_length is not None and len(value) < spec.min_length
        too_long = spec.max_length is not None and len(value) > spec.max_length
        if too_short or too_long:
            raise LengthError(
                spec.name,
                len(value),
                min_length=spec.min_length,
                max_length=spec.max_length,
            )
