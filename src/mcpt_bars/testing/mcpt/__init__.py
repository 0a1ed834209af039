"""
Monte Carlo Permutation Testing (MCPT) for a bar-data mean-reversion system.

Tests whether the optimized rule's real-data performance could be luck or
overfitting, and estimates its training bias, unbiased future return and
skill beyond passive trend exposure.

Based on methodology from Timothy Masters' "Permutation and Randomization Tests
for Trading System Development".

Key components:
- RandomSource: seedable MWC256 uniform generator
- optimize_thresholds(): exhaustive rise/drop threshold search
- BarPermuter: endpoint-preserving OHLC path permutation
- run_insample_mcpt(): replications, p-value and bias-corrected statistics
"""

from mcpt_bars.testing.mcpt.config import MCPTConfig
from mcpt_bars.testing.mcpt.random_source import DEFAULT_SEED, RandomSource
from mcpt_bars.testing.mcpt.optimizer import OptimizationResult, optimize_thresholds
from mcpt_bars.testing.mcpt.permutation import (
    BarPermuter,
    RelativeChanges,
    prepare_permute,
    rebuild_prices,
    shuffle_changes,
)
from mcpt_bars.testing.mcpt.insample_test import (
    MCPTDriver,
    MCPTResult,
    MCPTState,
    ReplicationRecord,
    run_insample_mcpt,
)

__all__ = [
    "MCPTConfig",
    "DEFAULT_SEED",
    "RandomSource",
    "OptimizationResult",
    "optimize_thresholds",
    "BarPermuter",
    "RelativeChanges",
    "prepare_permute",
    "rebuild_prices",
    "shuffle_changes",
    "MCPTDriver",
    "MCPTResult",
    "MCPTState",
    "ReplicationRecord",
    "run_insample_mcpt",
]
