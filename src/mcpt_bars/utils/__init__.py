"""Utility functions and helpers."""

from mcpt_bars.utils.logging import get_contextual_logger, get_logger, setup_logging

__all__ = [
    "get_logger",
    "get_contextual_logger",
    "setup_logging",
]
