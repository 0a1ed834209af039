"""
Market history file reader.

One line per bar: ``YYYYMMDD Open High Low Close`` separated by spaces, tabs
or commas. Extra trailing fields (volume, open interest) are ignored. Reading
stops at end of file or at the first empty line. A line holding only
whitespace is not empty and fails as a bad date. Prices are stored as natural
logs. Any malformed line aborts the whole load.
"""

import math
import re
from pathlib import Path
from typing import List, Optional, Union

from pydantic import ValidationError

from mcpt_bars.core.exceptions import AllocationError, InputFileError, ParseError
from mcpt_bars.core.types import Bar, PriceSeries
from mcpt_bars.utils.logging import get_logger

logger = get_logger(__name__)

DELIMITERS = re.compile(r"[ \t,]+")
DATE_PATTERN = re.compile(r"[0-9]{8}")


def _parse_log_price(token: str, name: str, line_number: int, path: Optional[Path]) -> float:
    try:
        price = float(token)
    except ValueError:
        raise ParseError(f"Invalid {name} price '{token}'", line_number, path) from None

    if not math.isfinite(price) or price <= 0.0:
        raise ParseError(f"Invalid {name} price '{token}'", line_number, path)

    return math.log(price)


def parse_market_line(
    line: str,
    line_number: int = 1,
    path: Optional[Path] = None,
) -> Bar:
    """
    Parse one market history line into a log-price Bar.

    Args:
        line: Raw text line
        line_number: 1-based line number for diagnostics
        path: File being read, for diagnostics

    Returns:
        Validated Bar in log space

    Raises:
        ParseError: Malformed date or price, or OHLC invariant violation
    """
    # The date must start in column 0
    fields = DELIMITERS.split(line.rstrip())

    if not fields or not DATE_PATTERN.fullmatch(fields[0]):
        raise ParseError("Invalid date", line_number, path)

    if len(fields) < 5:
        raise ParseError("Missing price field", line_number, path)

    names = ("open", "high", "low", "close")
    prices = {
        name: _parse_log_price(token, name, line_number, path)
        for name, token in zip(names, fields[1:5])
    }

    try:
        return Bar(date=fields[0], **prices)
    except ValidationError:
        raise ParseError("Invalid open/high/low/close", line_number, path) from None


def read_market_file(path: Union[str, Path]) -> PriceSeries:
    """
    Read a market history file into a PriceSeries.

    Args:
        path: Market history file (YYYYMMDD Open High Low Close)

    Returns:
        PriceSeries of log prices in file order

    Raises:
        InputFileError: If the file cannot be opened or read
        ParseError: If any line is malformed
        AllocationError: If the price buffers cannot be allocated
    """
    path = Path(path)
    bars: List[Bar] = []

    logger.info(f"Reading market file {path}")

    try:
        with open(path, "r", encoding="utf-8", errors="replace") as f:
            for line_number, line in enumerate(f, start=1):
                if not line.rstrip("\r\n"):
                    break
                bars.append(parse_market_line(line, line_number, path))
    except OSError as e:
        raise InputFileError(f"Cannot open market history file {path}: {e}") from e
    except MemoryError as e:
        raise AllocationError(f"Insufficient memory reading market history file {path}") from e

    series = PriceSeries.from_bars(bars)
    logger.info(f"Market price history read: {len(series)} bars")

    return series
