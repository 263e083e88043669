"""SQLite persistence for the player pool, schedule, scores, rosters, and app settings.

Every write is a single upsert keyed on the table's unique key, committed on
its own (autocommit). Multi-row operations are therefore not all-or-nothing,
and two concurrent writers to the same key are last-write-wins.
"""

import json
import logging
import sqlite3
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional

from .constants import ROSTER_SLOTS
from .models import Game, PlayerScore, PlayerStats, Roster

logger = logging.getLogger('playoff_challenge.store')

_SLOT_COLUMNS = ',\n'.join(
    f'    {slot}_player_key TEXT,\n    {slot}_weeks_held INTEGER NOT NULL DEFAULT 1'
    for slot in ROSTER_SLOTS
)

SCHEMA = f"""
CREATE TABLE IF NOT EXISTS app_settings (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL,
    updated_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS leagues (
    id TEXT PRIMARY KEY,
    name TEXT NOT NULL,
    scoring_format TEXT NOT NULL DEFAULT 'PPR',
    scoring_settings TEXT,
    created_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS player_pool (
    player_key TEXT PRIMARY KEY,
    espn_id TEXT,
    full_name TEXT NOT NULL,
    team TEXT NOT NULL,
    position TEXT NOT NULL,
    is_active INTEGER NOT NULL DEFAULT 1
);

CREATE INDEX IF NOT EXISTS idx_player_pool_espn_id ON player_pool(espn_id);

CREATE TABLE IF NOT EXISTS playoff_schedule (
    espn_game_id TEXT PRIMARY KEY,
    round TEXT NOT NULL,
    home_team TEXT NOT NULL,
    away_team TEXT NOT NULL,
    kickoff_time TEXT,
    status TEXT NOT NULL DEFAULT 'scheduled'
);

CREATE INDEX IF NOT EXISTS idx_playoff_schedule_round ON playoff_schedule(round);

CREATE TABLE IF NOT EXISTS player_scores (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    player_key TEXT NOT NULL,
    espn_game_id TEXT,
    round TEXT NOT NULL,
    points REAL NOT NULL DEFAULT 0,
    stats TEXT,
    last_synced_at TEXT NOT NULL,
    UNIQUE(player_key, round)
);

CREATE TABLE IF NOT EXISTS rosters (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id TEXT NOT NULL,
    league_id TEXT NOT NULL,
    round TEXT NOT NULL,
{_SLOT_COLUMNS},
    submitted_at TEXT,
    is_final INTEGER NOT NULL DEFAULT 0,
    UNIQUE(user_id, league_id, round)
);
"""


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


class LeagueStore:
    """Relational store for the scoring pipeline."""

    def __init__(self, conn: sqlite3.Connection):
        self.conn = conn
        self.conn.row_factory = sqlite3.Row

    def __enter__(self) -> 'LeagueStore':
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def close(self) -> None:
        self.conn.close()

    def init_schema(self) -> None:
        """Create tables if they don't exist."""
        self.conn.executescript(SCHEMA)

    # ------------------------------------------------------------------ #
    # App settings
    # ------------------------------------------------------------------ #
    def get_app_setting(self, key: str, default: Any = None) -> Any:
        """Read a JSON-encoded setting. Values that aren't valid JSON are returned raw."""
        row = self.conn.execute('SELECT value FROM app_settings WHERE key = ?', (key,)).fetchone()
        if row is None:
            return default
        try:
            return json.loads(row['value'])
        except json.JSONDecodeError:
            return row['value']

    def set_app_setting(self, key: str, value: Any) -> None:
        self.conn.execute(
            """
            INSERT INTO app_settings(key, value, updated_at) VALUES (?, ?, ?)
            ON CONFLICT(key) DO UPDATE SET
                value=excluded.value,
                updated_at=excluded.updated_at;
            """,
            (key, json.dumps(value), _utc_now()),
        )

    # ------------------------------------------------------------------ #
    # Leagues
    # ------------------------------------------------------------------ #
    def upsert_league(
        self,
        league_id: str,
        name: str,
        scoring_format: str = 'PPR',
        scoring_settings: Optional[Mapping[str, Any]] = None,
    ) -> None:
        self.conn.execute(
            """
            INSERT INTO leagues(id, name, scoring_format, scoring_settings, created_at)
            VALUES (?, ?, ?, ?, ?)
            ON CONFLICT(id) DO UPDATE SET
                name=excluded.name,
                scoring_format=excluded.scoring_format,
                scoring_settings=excluded.scoring_settings;
            """,
            (
                league_id,
                name,
                scoring_format,
                json.dumps(dict(scoring_settings)) if scoring_settings is not None else None,
                _utc_now(),
            ),
        )

    def get_league(self, league_id: str) -> Optional[Dict[str, Any]]:
        """Return the league with scoring_settings decoded, or None."""
        row = self.conn.execute('SELECT * FROM leagues WHERE id = ?', (league_id,)).fetchone()
        if row is None:
            return None
        league = dict(row)
        league['scoring_settings'] = json.loads(row['scoring_settings']) if row['scoring_settings'] else None
        return league

    # ------------------------------------------------------------------ #
    # Player pool
    # ------------------------------------------------------------------ #
    def upsert_players(self, players: Iterable[Mapping[str, Any]]) -> int:
        count = 0
        for player in players:
            self.conn.execute(
                """
                INSERT INTO player_pool(player_key, espn_id, full_name, team, position, is_active)
                VALUES (?, ?, ?, ?, ?, ?)
                ON CONFLICT(player_key) DO UPDATE SET
                    espn_id=excluded.espn_id,
                    full_name=excluded.full_name,
                    team=excluded.team,
                    position=excluded.position,
                    is_active=excluded.is_active;
                """,
                (
                    player['player_key'],
                    player.get('espn_id'),
                    player['full_name'],
                    player['team'],
                    player['position'],
                    int(player.get('is_active', True)),
                ),
            )
            count += 1
        return count

    def get_player_by_espn_id(self, espn_id: str) -> Optional[Dict[str, Any]]:
        row = self.conn.execute(
            'SELECT * FROM player_pool WHERE espn_id = ?', (str(espn_id),)
        ).fetchone()
        return dict(row) if row else None

    def get_team_defense(self, team: str) -> Optional[Dict[str, Any]]:
        row = self.conn.execute(
            "SELECT * FROM player_pool WHERE team = ? AND position = 'DST'", (team,)
        ).fetchone()
        return dict(row) if row else None

    def get_players(self, player_keys: Iterable[str]) -> Dict[str, Dict[str, Any]]:
        keys = list(player_keys)
        if not keys:
            return {}
        placeholders = ','.join('?' for _ in keys)
        rows = self.conn.execute(
            f'SELECT * FROM player_pool WHERE player_key IN ({placeholders})', keys
        ).fetchall()
        return {row['player_key']: dict(row) for row in rows}

    # ------------------------------------------------------------------ #
    # Playoff schedule
    # ------------------------------------------------------------------ #
    def upsert_games(self, games: Iterable[Game]) -> int:
        count = 0
        for game in games:
            self.conn.execute(
                """
                INSERT INTO playoff_schedule(espn_game_id, round, home_team, away_team, kickoff_time, status)
                VALUES (?, ?, ?, ?, ?, ?)
                ON CONFLICT(espn_game_id) DO UPDATE SET
                    round=excluded.round,
                    home_team=excluded.home_team,
                    away_team=excluded.away_team,
                    kickoff_time=excluded.kickoff_time,
                    status=excluded.status;
                """,
                (
                    game.espn_game_id,
                    game.round,
                    game.home_team,
                    game.away_team,
                    game.kickoff_time,
                    game.status,
                ),
            )
            count += 1
        return count

    def get_games(self, round: Optional[str] = None) -> List[Game]:
        if round is None:
            rows = self.conn.execute('SELECT * FROM playoff_schedule ORDER BY kickoff_time').fetchall()
        else:
            rows = self.conn.execute(
                'SELECT * FROM playoff_schedule WHERE round = ? ORDER BY kickoff_time', (round,)
            ).fetchall()
        return [Game(**dict(row)) for row in rows]

    def get_game(self, espn_game_id: str) -> Optional[Game]:
        row = self.conn.execute(
            'SELECT * FROM playoff_schedule WHERE espn_game_id = ?', (str(espn_game_id),)
        ).fetchone()
        return Game(**dict(row)) if row else None

    def get_game_for_team(self, round: str, team: str) -> Optional[Game]:
        row = self.conn.execute(
            """
            SELECT * FROM playoff_schedule
            WHERE round = ? AND (home_team = ? OR away_team = ?)
            ORDER BY kickoff_time LIMIT 1
            """,
            (round, team, team),
        ).fetchone()
        return Game(**dict(row)) if row else None

    def update_game_status(self, espn_game_id: str, status: str) -> None:
        self.conn.execute(
            'UPDATE playoff_schedule SET status = ? WHERE espn_game_id = ?',
            (status, str(espn_game_id)),
        )

    # ------------------------------------------------------------------ #
    # Player scores
    # ------------------------------------------------------------------ #
    def upsert_player_score(self, score: PlayerScore) -> None:
        """Insert or replace the score for (player_key, round)."""
        self.conn.execute(
            """
            INSERT INTO player_scores(player_key, espn_game_id, round, points, stats, last_synced_at)
            VALUES (?, ?, ?, ?, ?, ?)
            ON CONFLICT(player_key, round) DO UPDATE SET
                espn_game_id=excluded.espn_game_id,
                points=excluded.points,
                stats=excluded.stats,
                last_synced_at=excluded.last_synced_at;
            """,
            (
                score.player_key,
                score.espn_game_id,
                score.round,
                score.points,
                json.dumps(score.stats.to_dict()),
                score.last_synced_at or _utc_now(),
            ),
        )

    def _score_from_row(self, row: sqlite3.Row) -> PlayerScore:
        return PlayerScore(
            player_key=row['player_key'],
            round=row['round'],
            points=row['points'],
            stats=PlayerStats.from_dict(json.loads(row['stats']) if row['stats'] else None),
            espn_game_id=row['espn_game_id'],
            last_synced_at=row['last_synced_at'],
        )

    def get_player_score(self, player_key: str, round: str) -> Optional[PlayerScore]:
        row = self.conn.execute(
            'SELECT * FROM player_scores WHERE player_key = ? AND round = ?', (player_key, round)
        ).fetchone()
        return self._score_from_row(row) if row else None

    def get_player_scores(self, round: str) -> Dict[str, PlayerScore]:
        rows = self.conn.execute('SELECT * FROM player_scores WHERE round = ?', (round,)).fetchall()
        return {row['player_key']: self._score_from_row(row) for row in rows}

    def count_player_scores(self, round: Optional[str] = None) -> int:
        if round is None:
            return self.conn.execute('SELECT COUNT(*) FROM player_scores').fetchone()[0]
        return self.conn.execute(
            'SELECT COUNT(*) FROM player_scores WHERE round = ?', (round,)
        ).fetchone()[0]

    # ------------------------------------------------------------------ #
    # Rosters
    # ------------------------------------------------------------------ #
    def upsert_roster(self, roster: Roster) -> None:
        """Insert or replace the roster for (user_id, league_id, round)."""
        row = roster.to_row()
        row['is_final'] = int(row['is_final'])
        columns = list(row)
        updates = ',\n'.join(
            f'{col}=excluded.{col}'
            for col in columns
            if col not in ('user_id', 'league_id', 'round')
        )
        self.conn.execute(
            f"""
            INSERT INTO rosters({', '.join(columns)})
            VALUES ({', '.join('?' for _ in columns)})
            ON CONFLICT(user_id, league_id, round) DO UPDATE SET
            {updates};
            """,
            [row[col] for col in columns],
        )

    def get_rosters(self, round: str, league_id: Optional[str] = None) -> List[Roster]:
        if league_id is None:
            rows = self.conn.execute(
                'SELECT * FROM rosters WHERE round = ? ORDER BY id', (round,)
            ).fetchall()
        else:
            rows = self.conn.execute(
                'SELECT * FROM rosters WHERE round = ? AND league_id = ? ORDER BY id',
                (round, league_id),
            ).fetchall()
        return [Roster.from_row(dict(row)) for row in rows]

    def get_roster(self, user_id: str, league_id: str, round: str) -> Optional[Roster]:
        row = self.conn.execute(
            'SELECT * FROM rosters WHERE user_id = ? AND league_id = ? AND round = ?',
            (user_id, league_id, round),
        ).fetchone()
        return Roster.from_row(dict(row)) if row else None

    def count_rosters(self, round: Optional[str] = None) -> int:
        if round is None:
            return self.conn.execute('SELECT COUNT(*) FROM rosters').fetchone()[0]
        return self.conn.execute(
            'SELECT COUNT(*) FROM rosters WHERE round = ?', (round,)
        ).fetchone()[0]


def open_store(path: str | Path = ':memory:', init_schema: bool = True) -> LeagueStore:
    """
    Open a store backed by a SQLite file (or memory).

    Args:
        path: Database file path, or ':memory:'
        init_schema: Create tables if missing (default: True)

    Example:
        with open_store('data/playoff.db') as store:
            games = store.get_games('WC')
    """
    path = str(path)
    if path != ':memory:':
        Path(path).parent.mkdir(parents=True, exist_ok=True)
    logger.debug(f'Opening store: {path}')
    conn = sqlite3.connect(path, isolation_level=None)
    store = LeagueStore(conn)
    if init_schema:
        store.init_schema()
    return store
