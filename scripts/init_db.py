#!/usr/bin/env python3
"""
Create the playoff database and load the player pool and schedule.

Re-running is safe: players and games are upserted by key.

Usage:
    python scripts/init_db.py
    python scripts/init_db.py --players data/players.json --schedule data/schedule.json
    python scripts/init_db.py --league main --league-name "Main League" --format HALF_PPR
"""

import argparse
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from playoff_challenge.config import get_database_path, get_default_round
from playoff_challenge.constants import CURRENT_ROUND_KEY, SCORING_FORMATS
from playoff_challenge.logging_config import setup_logging
from playoff_challenge.models import Game
from playoff_challenge.rounds import read_current_round, write_current_round
from playoff_challenge.schemas import PlayersFile, ScheduleFile
from playoff_challenge.store import open_store
from playoff_challenge.utils import load_json


def main():
    parser = argparse.ArgumentParser(description="Initialize the playoff challenge database")
    parser.add_argument(
        "--db",
        default=None,
        help="SQLite database path (defaults to the configured database)",
    )
    parser.add_argument(
        "--players", "-p",
        default="data/players.json",
        help="Player pool JSON file",
    )
    parser.add_argument(
        "--schedule", "-s",
        default="data/schedule.json",
        help="Playoff schedule JSON file",
    )
    parser.add_argument(
        "--league",
        default=None,
        help="Create or update a league with this id",
    )
    parser.add_argument(
        "--league-name",
        default=None,
        help="Display name for --league (defaults to the id)",
    )
    parser.add_argument(
        "--format",
        default="PPR",
        choices=SCORING_FORMATS,
        help="Scoring format for --league",
    )

    args = parser.parse_args()
    setup_logging(log_to_file=False)

    db_path = Path(args.db) if args.db else get_database_path()

    try:
        players = load_json(args.players, schema=PlayersFile)
        schedule = load_json(args.schedule, schema=ScheduleFile)
    except (FileNotFoundError, ValueError) as e:
        print(f"❌ {e}")
        sys.exit(1)

    with open_store(db_path) as store:
        player_count = store.upsert_players(p.model_dump() for p in players.players)
        game_count = store.upsert_games(Game(**g.model_dump()) for g in schedule.games)

        if store.get_app_setting(CURRENT_ROUND_KEY) is None:
            write_current_round(store, get_default_round())

        if args.league:
            store.upsert_league(args.league, args.league_name or args.league, args.format)
            print(f"  League: {args.league} ({args.format})")

        current_round = read_current_round(store)

    print(f"✅ Initialized {db_path}")
    print(f"  Players loaded: {player_count}")
    print(f"  Games loaded: {game_count}")
    print(f"  Current round: {current_round}")


if __name__ == "__main__":
    main()
