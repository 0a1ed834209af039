"""Market history loading."""

from mcpt_bars.data.market_file import parse_market_line, read_market_file

__all__ = ["parse_market_line", "read_market_file"]
