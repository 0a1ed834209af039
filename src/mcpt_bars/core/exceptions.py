"""
Error kinds raised by the permutation test engine.

Every error is fatal for a run. The engine raises them; only the command
line entry point turns them into a diagnostic and an exit status.
"""

from pathlib import Path
from typing import Optional, Union


class MCPTError(Exception):
    """Base class for all errors raised by mcpt_bars."""


class UsageError(MCPTError):
    """Wrong number or type of command line arguments."""


class ConfigurationError(MCPTError):
    """Configuration values that make the test undefined (e.g. fewer than 2 replications)."""


class InputFileError(MCPTError):
    """Market history file cannot be opened or read."""


class ParseError(MCPTError):
    """
    Malformed market history line.

    Attributes:
        line_number: 1-based line number of the offending line (None if unknown)
        path: File being read (None for in-memory data)
    """

    def __init__(
        self,
        message: str,
        line_number: Optional[int] = None,
        path: Optional[Union[str, Path]] = None,
    ) -> None:
        self.line_number = line_number
        self.path = path
        if line_number is not None:
            message = f"{message} reading line {line_number}"
        if path is not None:
            message = f"{message} of file {path}"
        super().__init__(message)


class InsufficientDataError(MCPTError):
    """Not enough prices beyond the lookback to run the test."""


class AllocationError(MCPTError):
    """Price buffers could not be allocated."""
