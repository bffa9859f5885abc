"""Telemetry helpers for structured server event logging."""

from .logger import ServerLogger

__all__ = ["ServerLogger"]
