"""Core runtime helpers."""

from yart.core.logging import setup_logging

__all__ = ["setup_logging"]
