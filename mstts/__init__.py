"""Top-level package for mstts.

This package serves a text-to-speech tool to AI-assistant clients over a
line-delimited JSON-RPC protocol on standard input and output. The main entry
points are `ServerFactory` and the `mstts` command line.
"""

__version__ = "1.0.0"

from .config import ConfigLoader, ServerConfig
from .server_factory import ServerFactory

__all__ = ["ConfigLoader", "ServerConfig", "ServerFactory", "__version__"]
