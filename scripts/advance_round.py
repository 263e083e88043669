#!/usr/bin/env python3
"""
Advance rosters to the next playoff round once every game is final.

Usage:
    python scripts/advance_round.py              # advance from the stored current round
    python scripts/advance_round.py --round DIV
    python scripts/advance_round.py --league main
"""

import argparse
import json
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from playoff_challenge.advancement import advance_round
from playoff_challenge.config import get_database_path, get_default_round
from playoff_challenge.constants import ROUNDS
from playoff_challenge.logging_config import setup_logging
from playoff_challenge.rounds import read_current_round
from playoff_challenge.store import open_store


def main():
    parser = argparse.ArgumentParser(description="Advance playoff rosters to the next round")
    parser.add_argument(
        "--round", "-r",
        default=None,
        choices=ROUNDS,
        help="Round that just finished (defaults to the stored current round)",
    )
    parser.add_argument(
        "--league", "-l",
        default=None,
        help="Only advance rosters in this league",
    )
    parser.add_argument(
        "--db",
        default=None,
        help="SQLite database path (defaults to the configured database)",
    )

    args = parser.parse_args()
    setup_logging(log_to_file=False)

    db_path = Path(args.db) if args.db else get_database_path()

    with open_store(db_path) as store:
        current_round = args.round or read_current_round(store, get_default_round())
        result = advance_round(store, current_round, league_id=args.league)

    print(json.dumps(result.to_dict(), indent=2))

    if not result.success:
        print(f"❌ {result.message}: {result.error}")
        sys.exit(1)

    if result.advanced:
        print(f"✅ {result.message} ({result.rosters_advanced} rosters)")
    else:
        print(f"ℹ️  {result.message}")


if __name__ == "__main__":
    main()
