"""Tool registry, request dispatcher, and MCP protocol server."""

from .dispatcher import CallResult, ProtocolFailure, RequestDispatcher, ToolResponse
from .protocol import StdioServer
from .registry import SYNTHESIZE_SPEECH, ToolRegistry

__all__ = [
    "CallResult",
    "ProtocolFailure",
    "RequestDispatcher",
    "StdioServer",
    "SYNTHESIZE_SPEECH",
    "ToolRegistry",
    "ToolResponse",
]
