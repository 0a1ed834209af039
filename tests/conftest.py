"""
Shared pytest fixtures for the test suite.

Provides reusable price series, market files and configurations.
"""

import logging
from pathlib import Path

import numpy as np
import pandas as pd
import pytest

from mcpt_bars.core.config import GridConfig, LoggingConfig
from mcpt_bars.core.types import PriceSeries
from mcpt_bars.testing.mcpt.config import MCPTConfig


def create_random_ohlc_data(n_days: int = 200, seed: int = 42, drift: float = 0.0) -> pd.DataFrame:
    """
    Generate random walk OHLC data with no real signal.

    Opens and closes always lie inside the high/low range.
    """
    rng = np.random.default_rng(seed)
    dates = pd.date_range('2020-01-01', periods=n_days, freq='B')

    close = 100 * np.exp((drift + rng.standard_normal(n_days) * 0.01).cumsum())
    open_price = close * np.exp(rng.standard_normal(n_days) * 0.005)
    high = np.maximum(open_price, close) * np.exp(np.abs(rng.standard_normal(n_days)) * 0.005)
    low = np.minimum(open_price, close) * np.exp(-np.abs(rng.standard_normal(n_days)) * 0.005)

    return pd.DataFrame({
        'date': dates,
        'open': open_price,
        'high': high,
        'low': low,
        'close': close,
    })


def write_market_file(path: Path, df: pd.DataFrame, sep: str = ' ') -> Path:
    """Write an OHLC DataFrame in YYYYMMDD Open High Low Close format."""
    lines = [
        sep.join([
            row.date.strftime('%Y%m%d'),
            f"{row.open:.6f}",
            f"{row.high:.6f}",
            f"{row.low:.6f}",
            f"{row.close:.6f}",
        ])
        for row in df.itertuples()
    ]
    path.write_text("\n".join(lines) + "\n")
    return path


@pytest.fixture
def sample_ohlc_df() -> pd.DataFrame:
    """200 business days of random walk OHLC prices."""
    return create_random_ohlc_data(n_days=200, seed=42)


@pytest.fixture
def sample_series(sample_ohlc_df) -> PriceSeries:
    """Log-price series built from sample_ohlc_df."""
    return PriceSeries.from_frame(sample_ohlc_df)


@pytest.fixture
def small_grid() -> GridConfig:
    """Coarse 10 x 10 grid to keep tests fast."""
    return GridConfig(rise_steps=10, rise_increment=0.01, drop_steps=10, drop_increment=0.001)


@pytest.fixture
def mcpt_config() -> MCPTConfig:
    """Test MCPT configuration with few replications."""
    return MCPTConfig(n_replications=20, lookback=10, random_seed=42)


@pytest.fixture
def quiet_logging() -> LoggingConfig:
    """Logging config that keeps tests quiet."""
    return LoggingConfig(level="WARNING", format="json", console_output=False)


@pytest.fixture
def market_file(tmp_path: Path, sample_ohlc_df) -> Path:
    """Market history file for sample_ohlc_df."""
    return write_market_file(tmp_path / "market.txt", sample_ohlc_df)


# Markers for test categorization
def pytest_configure(config):
    """Configure custom pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Integration tests")
    config.addinivalue_line("markers", "slow: Slow running tests")


@pytest.fixture
def ohlc_factory():
    """Factory for random walk OHLC DataFrames."""
    return create_random_ohlc_data


@pytest.fixture
def market_file_factory(tmp_path: Path):
    """Factory writing DataFrames or raw lines to market files under tmp_path."""
    def _make(content, name: str = "market.txt", sep: str = ' ') -> Path:
        path = tmp_path / name
        if isinstance(content, pd.DataFrame):
            return write_market_file(path, content, sep=sep)
        path.write_text(content)
        return path
    return _make


@pytest.fixture
def restore_root_logger():
    """Put back the root logger handlers replaced by setup_logging()."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield root
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)
