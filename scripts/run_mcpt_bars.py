#!/usr/bin/env python3
"""
MCPT for the bar-data mean-reversion system.

Usage:
    python scripts/run_mcpt_bars.py LOOKBACK NREPS FILENAME
    python scripts/run_mcpt_bars.py 300 1000 data/OEX.TXT --quiet
    python scripts/run_mcpt_bars.py --help
"""

import sys
from pathlib import Path

# Add src to path for imports when run from a checkout
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root / "src"))

from mcpt_bars.cli import main

if __name__ == '__main__':
    sys.exit(main())
