"""Core types, configuration and errors for the permutation test engine."""

from mcpt_bars.core.types import Bar, PriceSeries
from mcpt_bars.core.config import Config, GridConfig, LoggingConfig, load_config
from mcpt_bars.core.exceptions import (
    MCPTError,
    UsageError,
    ConfigurationError,
    InputFileError,
    ParseError,
    InsufficientDataError,
    AllocationError,
)

__all__ = [
    "Bar",
    "PriceSeries",
    "Config",
    "GridConfig",
    "LoggingConfig",
    "load_config",
    "MCPTError",
    "UsageError",
    "ConfigurationError",
    "InputFileError",
    "ParseError",
    "InsufficientDataError",
    "AllocationError",
]
