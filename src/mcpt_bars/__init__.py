"""
MCPT Bars

Monte Carlo permutation testing of a bar-data mean-reversion system:
tests whether the optimized rule has real predictive skill and estimates
its training bias, unbiased return and skill.
"""

__version__ = "0.1.0"

from mcpt_bars.core.types import Bar, PriceSeries
from mcpt_bars.testing.mcpt import MCPTConfig, MCPTResult, run_insample_mcpt

__all__ = [
    "Bar",
    "PriceSeries",
    "MCPTConfig",
    "MCPTResult",
    "run_insample_mcpt",
]
