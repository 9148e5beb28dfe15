"""Observability helpers."""

from screenflow.observability.logging import ContextLogger, setup_logging

__all__ = ["ContextLogger", "setup_logging"]
