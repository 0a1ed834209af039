"""
Core data types for the permutation test engine.

A Bar is one validated trading session in log-price space. A PriceSeries holds
the whole history as four parallel numpy arrays so the permutation engine can
rebuild prices in place.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Iterable, List, Optional

import numpy as np
import pandas as pd
from pydantic import BaseModel, ConfigDict, Field, model_validator

from mcpt_bars.core.exceptions import AllocationError, ParseError


class Bar(BaseModel):
    """
    One trading session with natural-log open, high, low and close.

    Invariant: low <= open <= high and low <= close <= high.
    """

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    date: Optional[str] = Field(None, description="Session date (YYYYMMDD)", pattern=r"^[0-9]{8}$")
    open: float = Field(..., description="Log open price")
    high: float = Field(..., description="Log high price")
    low: float = Field(..., description="Log low price")
    close: float = Field(..., description="Log close price")

    @model_validator(mode="after")
    def validate_ohlc(self) -> "Bar":
        """Ensure open and close lie inside the high/low range."""
        if (
            self.low > self.open
            or self.low > self.close
            or self.high < self.open
            or self.high < self.close
        ):
            raise ValueError("Invalid open/high/low/close")
        return self

    @property
    def range(self) -> float:
        """Intraday range in log units."""
        return self.high - self.low


@dataclass
class PriceSeries:
    """
    Chronological log-price history, stored as struct-of-arrays.

    The arrays are owned by whoever runs the test and are rebuilt in place by
    the permutation engine, so callers that need the original prices afterwards
    should take a copy() first.
    """

    open: np.ndarray
    high: np.ndarray
    low: np.ndarray
    close: np.ndarray
    dates: List[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.open = np.asarray(self.open, dtype=np.float64)
        self.high = np.asarray(self.high, dtype=np.float64)
        self.low = np.asarray(self.low, dtype=np.float64)
        self.close = np.asarray(self.close, dtype=np.float64)

        n = len(self.open)
        if not (len(self.high) == len(self.low) == len(self.close) == n):
            raise ValueError("open, high, low and close must have the same length")
        if self.dates and len(self.dates) != n:
            raise ValueError("dates must match the number of bars")

    def __len__(self) -> int:
        return len(self.open)

    def bar(self, index: int) -> Bar:
        """Return bar `index` as a validated Bar."""
        return Bar(
            date=self.dates[index] if self.dates else None,
            open=float(self.open[index]),
            high=float(self.high[index]),
            low=float(self.low[index]),
            close=float(self.close[index]),
        )

    def copy(self) -> "PriceSeries":
        """Deep copy of the price buffers."""
        return PriceSeries(
            open=self.open.copy(),
            high=self.high.copy(),
            low=self.low.copy(),
            close=self.close.copy(),
            dates=list(self.dates),
        )

    @classmethod
    def from_bars(cls, bars: Iterable[Bar]) -> "PriceSeries":
        """Build a series from already validated bars."""
        bars = list(bars)
        dates = [b.date for b in bars] if all(b.date for b in bars) else []
        try:
            return cls(
                open=np.fromiter((b.open for b in bars), dtype=np.float64, count=len(bars)),
                high=np.fromiter((b.high for b in bars), dtype=np.float64, count=len(bars)),
                low=np.fromiter((b.low for b in bars), dtype=np.float64, count=len(bars)),
                close=np.fromiter((b.close for b in bars), dtype=np.float64, count=len(bars)),
                dates=dates,
            )
        except MemoryError as e:
            raise AllocationError(f"Insufficient memory for {len(bars)} bars") from e

    @classmethod
    def from_frame(cls, df: pd.DataFrame, log_prices: bool = False) -> "PriceSeries":
        """
        Build a series from an OHLC DataFrame.

        Args:
            df: DataFrame with 'open', 'high', 'low', 'close' columns and an
                optional 'date' column (strings, dates or timestamps)
            log_prices: True if the prices are already natural logs

        Returns:
            PriceSeries in log space

        Raises:
            ParseError: If a price is non-positive or a bar violates the OHLC invariant
        """
        missing = [c for c in ("open", "high", "low", "close") if c not in df.columns]
        if missing:
            raise ValueError(f"DataFrame is missing columns: {missing}")

        prices = df[["open", "high", "low", "close"]].to_numpy(dtype=np.float64)

        if not np.all(np.isfinite(prices)):
            bad = int(np.argmax(~np.all(np.isfinite(prices), axis=1)))
            raise ParseError("Invalid price", line_number=bad + 1)

        if not log_prices:
            if np.any(prices <= 0.0):
                bad = int(np.argmax(np.any(prices <= 0.0, axis=1)))
                raise ParseError("Non-positive price", line_number=bad + 1)
            prices = np.log(prices)

        o, h, l, c = prices.T
        invalid = (l > o) | (l > c) | (h < o) | (h < c)
        if invalid.any():
            bad = int(np.argmax(invalid))
            raise ParseError("Invalid open/high/low/close", line_number=bad + 1)

        dates: List[str] = []
        if "date" in df.columns:
            dates = [_format_date(d) for d in df["date"]]

        return cls(open=o.copy(), high=h.copy(), low=l.copy(), close=c.copy(), dates=dates)

    def to_frame(self) -> pd.DataFrame:
        """Log-price DataFrame view of the series."""
        data = {
            "open": self.open,
            "high": self.high,
            "low": self.low,
            "close": self.close,
        }
        frame = pd.DataFrame(data)
        if self.dates:
            frame.insert(0, "date", self.dates)
        return frame


def _format_date(value: object) -> str:
    if isinstance(value, (datetime, date, pd.Timestamp)):
        return value.strftime("%Y%m%d")
    return str(value)
