#!/usr/bin/env python3
"""
Playoff Challenge Autoscorer

Pulls live and recently finished playoff games from ESPN and upserts each
rostered player's stats and fantasy points for the round.

Usage:
    python autoscorer.py --round WC
    python autoscorer.py --round DIV --game 401671789
    python autoscorer.py --round CONF --quiet
"""

import argparse
import logging
import sys
from pathlib import Path

from playoff_challenge.config import get_config, get_database_path
from playoff_challenge.constants import ROUND_NAMES, ROUNDS
from playoff_challenge.data_fetcher import ESPNDataFetcher
from playoff_challenge.logging_config import setup_logging
from playoff_challenge.store import open_store
from playoff_challenge.sync import ScoreSyncer
from playoff_challenge.utils import save_json
from playoff_challenge.validators import validate_all_scores


def main():
    parser = argparse.ArgumentParser(description="Playoff Challenge score sync (ESPN box scores)")
    parser.add_argument(
        "--round", "-r",
        required=True,
        choices=ROUNDS,
        help="Playoff round to sync",
    )
    parser.add_argument(
        "--game", "-g",
        default=None,
        help="Sync a single ESPN game id instead of the whole round",
    )
    parser.add_argument(
        "--db",
        default=None,
        help="SQLite database path (defaults to the configured database)",
    )
    parser.add_argument(
        "--output", "-o",
        default=None,
        help="Write the sync summary as JSON to this path",
    )
    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Suppress detailed output",
    )

    args = parser.parse_args()

    setup_logging(level=logging.WARNING if args.quiet else logging.INFO, log_to_file=False)

    config = get_config()
    db_path = Path(args.db) if args.db else get_database_path()
    fetcher = ESPNDataFetcher(config.espn_base_url, timeout=config.request_timeout_seconds)

    print(f"Syncing {ROUND_NAMES[args.round]} scores into {db_path}...")

    with open_store(db_path) as store:
        syncer = ScoreSyncer(store, fetcher, scoring_format=config.default_scoring_format)
        if args.game:
            result = syncer.sync_game(args.game, args.round)
        else:
            result = syncer.sync_scores(args.round)

        errors, warnings = validate_all_scores(store.get_player_scores(args.round))

    print(f"  Games processed: {result.games_processed}")
    print(f"  Players updated: {result.players_updated}")

    if result.errors:
        print(f"\n⚠️  {len(result.errors)} error(s):")
        for error in result.errors:
            print(f"   - {error}")

    if not args.quiet:
        for message in errors:
            print(f"❌ {message}")
        for message in warnings:
            print(f"⚠️  {message}")

    if args.output:
        save_json(args.output, result.to_dict())
        print(f"\nSummary written to {args.output}")

    if not result.success:
        print("\n❌ Sync failed")
        sys.exit(1)

    print("\n✅ Sync complete")


if __name__ == "__main__":
    main()
