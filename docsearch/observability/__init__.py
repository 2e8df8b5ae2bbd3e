"""Observability helpers (logging)."""

from docsearch.observability.logger import get_logger

__all__ = ["get_logger"]
