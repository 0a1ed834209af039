"""
Command line entry point for the bar-data MCPT.

Usage:
    mcpt-bars LOOKBACK NREPS FILENAME
    mcpt-bars 300 1000 data/OEX.TXT --seed 7 --plot reports/oex_mcpt.png
    mcpt-bars --help

Output:
    One line per replication followed by the summary block on stdout.
    Diagnostics go to stderr. Exit status is 0 on success, 2 on usage errors
    and 1 on any other failure.
"""

import argparse
import sys
from dataclasses import replace
from pathlib import Path
from typing import List, Optional, Tuple

from mcpt_bars.core.config import DEFAULT_CONFIG_PATH, Config, LoggingConfig, load_config
from mcpt_bars.core.exceptions import MCPTError, UsageError
from mcpt_bars.data.market_file import read_market_file
from mcpt_bars.testing.mcpt.config import MCPTConfig
from mcpt_bars.testing.mcpt.insample_test import ReplicationRecord, run_insample_mcpt
from mcpt_bars.testing.mcpt.utils import (
    format_replication,
    generate_mcpt_report,
    plot_mcpt_distribution,
)
from mcpt_bars.utils.logging import get_logger, setup_logging

logger = get_logger(__name__)


class _ArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that raises UsageError instead of exiting."""

    def error(self, message: str) -> None:
        raise UsageError(f"{message}\n{self.format_usage().strip()}")


def build_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(
        prog='mcpt-bars',
        description='Monte Carlo permutation test of a bar-data mean-reversion system',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    # 1000 replications, 300-bar lookback
    mcpt-bars 300 1000 data/OEX.TXT

    # Different random stream, summary only
    mcpt-bars 300 1000 data/OEX.TXT --seed 7 --quiet

Market file format (one bar per line, space/tab/comma separated):
    YYYYMMDD Open High Low Close
        """
    )

    parser.add_argument('lookback', type=int, help='Long-term rise lookback (bars)')
    parser.add_argument('nreps', type=int, help='Number of MCPT replications (hundreds or thousands)')
    parser.add_argument('filename', type=str, help='Market history file (YYYYMMDD Open High Low Close)')
    parser.add_argument(
        '--config',
        type=str,
        default=None,
        help=f'YAML config with grid, logging and mcpt sections (default: {DEFAULT_CONFIG_PATH} if present)'
    )
    parser.add_argument(
        '--seed',
        type=int,
        default=None,
        help='Random seed for permutations (default from config)'
    )
    parser.add_argument(
        '--permute-first-gap',
        action='store_true',
        help='Also shuffle the first close-to-open gap and last open-to-close change'
    )
    parser.add_argument(
        '--quiet',
        action='store_true',
        help='Do not print one line per replication'
    )
    parser.add_argument(
        '--plot',
        type=str,
        default=None,
        help='Save a histogram of permuted returns to this path (needs matplotlib)'
    )
    parser.add_argument(
        '--log-level',
        type=str,
        default=None,
        help='Logging level (DEBUG, INFO, WARNING, ERROR)'
    )
    parser.add_argument(
        '--log-format',
        type=str,
        default=None,
        choices=['json', 'text'],
        help='Log format'
    )

    return parser


def _build_configs(args: argparse.Namespace) -> Tuple[Config, MCPTConfig]:
    if args.config:
        config_path = Path(args.config)
        if not config_path.exists():
            raise UsageError(f"Configuration file not found: {config_path}")
    elif DEFAULT_CONFIG_PATH.exists():
        config_path = DEFAULT_CONFIG_PATH
    else:
        config_path = None

    # Both config layers read the same file
    if config_path is not None:
        config = load_config(config_path)
        mcpt_config = MCPTConfig.from_yaml(config_path)
    else:
        config = Config()
        mcpt_config = MCPTConfig()

    overrides = {
        'lookback': args.lookback,
        'n_replications': args.nreps,
    }
    if args.seed is not None:
        overrides['random_seed'] = args.seed
    if args.permute_first_gap:
        overrides['preserve_open_to_open'] = False
    mcpt_config = replace(mcpt_config, **overrides)

    logging_overrides = {}
    if args.log_level is not None:
        logging_overrides['level'] = args.log_level
    if args.log_format is not None:
        logging_overrides['format'] = args.log_format
    if logging_overrides:
        logging_data = config.logging.model_dump()
        logging_data.update(logging_overrides)
        try:
            config = config.model_copy(update={'logging': LoggingConfig(**logging_data)})
        except ValueError as e:
            raise UsageError(str(e)) from e

    mcpt_config.validate()
    return config, mcpt_config


def run(args: argparse.Namespace) -> None:
    """Run the test described by parsed arguments; raises MCPTError on failure."""
    config, mcpt_config = _build_configs(args)
    setup_logging(config.logging)

    series = read_market_file(args.filename)

    def print_replication(record: ReplicationRecord) -> None:
        print(format_replication(record), flush=True)

    result = run_insample_mcpt(
        series,
        mcpt_config,
        grid=config.grid,
        on_replication=None if args.quiet else print_replication,
    )

    print()
    print(generate_mcpt_report(result, mcpt_config))

    if args.plot:
        plot_mcpt_distribution(result, save_path=Path(args.plot))


def main(argv: Optional[List[str]] = None) -> int:
    """Console script entry point. Returns the process exit status."""
    parser = build_parser()

    try:
        args = parser.parse_args(argv)
        run(args)
    except UsageError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 2
    except MCPTError as e:
        logger.debug("Run aborted", exc_info=True)
        print(f"ERROR: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == '__main__':
    sys.exit(main())
