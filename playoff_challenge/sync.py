"""Score sync: reconcile ESPN box scores into stored per-player round scores."""

import logging
import sqlite3
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional

import polars as pl

from .constants import ESPN_STATE_PRE, STATUS_FINAL
from .data_fetcher import ESPNDataFetcher, game_scores, game_state, game_status, is_active
from .models import PlayerScore, PlayerStats, SyncResult
from .rounds import validate_round
from .scoring import calculate_fantasy_points, normalize_scoring_settings
from .stat_extractor import merge_stats, parse_espn_stats
from .store import LeagueStore

logger = logging.getLogger('playoff_challenge.sync')

DEFENSE_CATEGORIES = ('defensive', 'interceptions')


def athlete_stats(frame: pl.DataFrame) -> Dict[str, PlayerStats]:
    """
    Build one stat line per athlete from a box score frame.

    Each category row is extracted with that category's alias table, then
    the rows for the same athlete are merged (a QB appears under both
    passing and rushing).

    Returns:
        Dict of ESPN athlete id -> merged PlayerStats, in box score order
    """
    merged: Dict[str, PlayerStats] = {}
    for row in frame.iter_rows(named=True):
        stats = parse_espn_stats(row['labels'] or [], row['stats'] or [], row['category'])
        athlete_id = row['athlete_id']
        if athlete_id in merged:
            merged[athlete_id] = merge_stats(merged[athlete_id], stats)
        else:
            merged[athlete_id] = stats
    return merged


def _sum_stat(frame: pl.DataFrame, field_name: str) -> float:
    total = 0.0
    for row in frame.iter_rows(named=True):
        stats = parse_espn_stats(row['labels'] or [], row['stats'] or [], row['category'])
        total += getattr(stats, field_name) or 0.0
    return total


def team_defense_stats(
    frame: pl.DataFrame,
    team: str,
    points_allowed: Optional[float] = None,
) -> PlayerStats:
    """
    Aggregate a team defense stat line from individual box score rows.

    Sacks, interceptions and defensive TDs are summed over the team's
    defensive and interceptions categories. Fumble recoveries are counted as
    the opponent's fumbles lost. Safeties are not reported in the box score.

    Args:
        frame: Box score frame for the game
        team: Defending team abbreviation
        points_allowed: Opponent's score, or None if the game hasn't started
    """
    defense = frame.filter(
        (pl.col('team') == team) & pl.col('category').is_in(list(DEFENSE_CATEGORIES))
    )
    opponent_fumbles = frame.filter((pl.col('team') != team) & (pl.col('category') == 'fumbles'))

    return PlayerStats(
        sacks=_sum_stat(defense, 'sacks'),
        interceptions_made=_sum_stat(defense, 'interceptions_made'),
        defensive_touchdowns=_sum_stat(defense, 'defensive_touchdowns'),
        fumbles_recovered=_sum_stat(opponent_fumbles, 'fumbles_lost'),
        points_allowed=points_allowed,
    )


class ScoreSyncer:
    """
    Pulls in-flight playoff games from ESPN and upserts player scores.

    Points are computed under the default scoring format; league-specific
    settings are applied later from the stored stats (see leaderboard).
    """

    def __init__(
        self,
        store: LeagueStore,
        fetcher: Optional[ESPNDataFetcher] = None,
        scoring_format: str = 'PPR',
        now: Optional[Callable[[], datetime]] = None,
    ):
        """
        Initialize syncer.

        Args:
            store: Persistence for players, schedule and scores
            fetcher: ESPN client (default: a new ESPNDataFetcher)
            scoring_format: Format used for stored point totals
            now: Clock for last_synced_at (default: current UTC time)
        """
        self.store = store
        self.fetcher = fetcher or ESPNDataFetcher()
        self.scoring_format = scoring_format
        self.settings = normalize_scoring_settings(scoring_format)
        self._now = now or (lambda: datetime.now(timezone.utc))

    def games_to_sync(self, round: str) -> List[Dict[str, Any]]:
        """
        Scoreboard events that still need reconciling.

        In-progress and upcoming games are always included. Completed games
        are included until their stored status is final, so the final stat
        line and status get written once.
        """
        selected = []
        for event in self.fetcher.get_playoff_games(round):
            if is_active(event):
                selected.append(event)
                continue
            stored = self.store.get_game(str(event.get('id')))
            if stored is None or stored.status != STATUS_FINAL:
                selected.append(event)
        return selected

    def sync_scores(self, round: str) -> SyncResult:
        """
        Reconcile every in-flight game of a round into stored scores.

        A failure in one game is recorded in errors and the remaining games
        are still processed. A failure before any game can be processed
        (invalid round, scoreboard unavailable) sets success=False.

        Args:
            round: 'WC', 'DIV', 'CONF', or 'SB'

        Returns:
            SyncResult summary
        """
        result = SyncResult()

        try:
            validate_round(round)
            games = self.games_to_sync(round)
            logger.info(f'Found {len(games)} playoff games to sync for {round}')

            for event in games:
                game_id = str(event.get('id'))
                try:
                    result.games_processed += 1
                    self._sync_event(event, round, result)
                except Exception as e:
                    message = f'Error processing game {game_id}: {e}'
                    logger.error(message)
                    result.errors.append(message)

        except Exception as e:
            result.success = False
            result.errors.append(f'Fatal error: {e}')
            logger.error(f'Sync failed: {e}')

        logger.info(
            f'Sync {round}: {result.games_processed} games, '
            f'{result.players_updated} players, {len(result.errors)} errors'
        )
        return result

    def sync_game(self, game_id: str, round: str) -> SyncResult:
        """
        Sync a single game by ESPN id, e.g. to re-pull a corrected stat line.

        Team defenses and the stored status are updated only if the game is
        on the round's scoreboard.
        """
        result = SyncResult(games_processed=1)

        try:
            validate_round(round)
            frame = self.fetcher.get_box_score(game_id)
            if frame.is_empty():
                result.errors.append('No boxscore data available')
                return result

            self._score_athletes(frame, game_id, round, result)

            event = next(
                (e for e in self.fetcher.get_playoff_games(round) if str(e.get('id')) == str(game_id)),
                None,
            )
            if event is not None:
                self._score_defenses(frame, event, game_id, round, result)
                self.store.update_game_status(game_id, game_status(event))

        except Exception as e:
            result.success = False
            result.errors.append(f'Error: {e}')
            logger.error(f'Sync of game {game_id} failed: {e}')

        return result

    def _sync_event(self, event: Dict[str, Any], round: str, result: SyncResult) -> None:
        game_id = str(event.get('id'))
        frame = self.fetcher.get_box_score(game_id)

        if frame.is_empty():
            logger.info(f'No boxscore data for game {game_id}')
        else:
            self._score_athletes(frame, game_id, round, result)
            self._score_defenses(frame, event, game_id, round, result)

        status = game_status(event)
        self.store.update_game_status(game_id, status)
        logger.debug(f'Game {game_id} status: {status}')

    def _score_athletes(
        self, frame: pl.DataFrame, game_id: str, round: str, result: SyncResult
    ) -> None:
        for athlete_id, stats in athlete_stats(frame).items():
            player = self.store.get_player_by_espn_id(athlete_id)
            if not player:
                logger.debug(f'Player not found for ESPN ID {athlete_id}')
                continue
            self._save_score(player['player_key'], stats, game_id, round, result)

    def _score_defenses(
        self,
        frame: pl.DataFrame,
        event: Dict[str, Any],
        game_id: str,
        round: str,
        result: SyncResult,
    ) -> None:
        scores = game_scores(event)
        state, _ = game_state(event)

        for team in frame.get_column('team').unique(maintain_order=True).to_list():
            defense = self.store.get_team_defense(team)
            if not defense:
                continue

            points_allowed = None
            if state != ESPN_STATE_PRE:
                opponents = [score for abbrev, score in scores.items() if abbrev != team]
                if opponents:
                    points_allowed = float(opponents[0])

            stats = team_defense_stats(frame, team, points_allowed)
            self._save_score(defense['player_key'], stats, game_id, round, result)

    def _save_score(
        self,
        player_key: str,
        stats: PlayerStats,
        game_id: str,
        round: str,
        result: SyncResult,
    ) -> None:
        points = calculate_fantasy_points(stats, self.settings)
        score = PlayerScore(
            player_key=player_key,
            round=round,
            points=points,
            stats=stats,
            espn_game_id=game_id,
            last_synced_at=self._now().isoformat(),
        )
        try:
            self.store.upsert_player_score(score)
        except sqlite3.Error as e:
            result.errors.append(f'Error upserting {player_key}: {e}')
            return
        result.players_updated += 1
        logger.debug(f'Updated {player_key}: {points} pts')
