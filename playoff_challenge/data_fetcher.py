"""ESPN public site API client for playoff scoreboards and box scores."""

import logging
from typing import Any, Dict, List, Optional

import polars as pl
import requests

from .constants import (
    ESPN_POSTSEASON_TYPE,
    ESPN_STATE_IN,
    ESPN_STATE_PRE,
    ROUND_TO_ESPN_WEEK,
    STATUS_FINAL,
    STATUS_IN_PROGRESS,
    STATUS_SCHEDULED,
    TEAM_ABBREV_NORMALIZE,
)

logger = logging.getLogger('playoff_challenge.data_fetcher')

DEFAULT_BASE_URL = 'https://site.api.espn.com/apis/site/v2/sports/football/nfl'

BOX_SCORE_SCHEMA = {
    'team': pl.Utf8,
    'category': pl.Utf8,
    'athlete_id': pl.Utf8,
    'athlete_name': pl.Utf8,
    'labels': pl.List(pl.Utf8),
    'stats': pl.List(pl.Utf8),
}


def normalize_team(team: Optional[str]) -> str:
    """Normalize an ESPN team abbreviation to player key format."""
    team = (team or '').upper()
    return TEAM_ABBREV_NORMALIZE.get(team, team)


def _competition(event: Dict[str, Any]) -> Dict[str, Any]:
    competitions = event.get('competitions') or [{}]
    return competitions[0] or {}


def game_state(event: Dict[str, Any]) -> tuple[str, bool]:
    """Return (state, completed) for a scoreboard event; state is 'pre', 'in' or 'post'."""
    status_type = (_competition(event).get('status') or {}).get('type') or {}
    return status_type.get('state', ''), bool(status_type.get('completed', False))


def game_status(event: Dict[str, Any]) -> str:
    """Map a scoreboard event onto a stored game status."""
    state, completed = game_state(event)
    if completed:
        return STATUS_FINAL
    if state == ESPN_STATE_IN:
        return STATUS_IN_PROGRESS
    return STATUS_SCHEDULED


def is_active(event: Dict[str, Any]) -> bool:
    """True for games that are in progress or not yet started."""
    state, completed = game_state(event)
    return not completed and state in (ESPN_STATE_IN, ESPN_STATE_PRE)


def game_scores(event: Dict[str, Any]) -> Dict[str, int]:
    """Current score per team abbreviation for a scoreboard event."""
    scores = {}
    for competitor in _competition(event).get('competitors') or []:
        team = normalize_team((competitor.get('team') or {}).get('abbreviation'))
        try:
            scores[team] = int(float(competitor.get('score') or 0))
        except (TypeError, ValueError):
            scores[team] = 0
    return scores


def box_score_frame(summary: Dict[str, Any]) -> pl.DataFrame:
    """
    Flatten a game summary's box score into one row per team/category/athlete.

    Labels are taken from the athlete entry when present, otherwise from the
    category (ESPN normally reports them once per category).

    Args:
        summary: Response from the summary endpoint

    Returns:
        DataFrame with columns team, category, athlete_id, athlete_name, labels, stats
        (empty when the game has no box score yet)
    """
    rows = []
    players = ((summary or {}).get('boxscore') or {}).get('players') or []

    for team_data in players:
        team = normalize_team((team_data.get('team') or {}).get('abbreviation'))

        for category in team_data.get('statistics') or []:
            category_name = category.get('name', '')
            category_labels = [str(label) for label in category.get('labels') or []]

            for athlete_stats in category.get('athletes') or []:
                athlete = athlete_stats.get('athlete') or {}
                athlete_id = athlete.get('id')
                if athlete_id is None:
                    continue
                rows.append({
                    'team': team,
                    'category': category_name,
                    'athlete_id': str(athlete_id),
                    'athlete_name': athlete.get('displayName', ''),
                    'labels': [str(label) for label in athlete_stats.get('labels') or category_labels],
                    'stats': [str(value) for value in athlete_stats.get('stats') or []],
                })

    return pl.DataFrame(rows, schema=BOX_SCORE_SCHEMA)


class ESPNDataFetcher:
    """Fetches and caches playoff scoreboards and game summaries from ESPN."""

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 10.0,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.session = session or requests.Session()
        self._scoreboards: Dict[Optional[str], Dict[str, Any]] = {}

    def _get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        url = f'{self.base_url}/{path}'
        logger.debug(f'GET {url} params={params}')
        response = self.session.get(url, params=params, timeout=self.timeout)
        response.raise_for_status()
        return response.json()

    def get_scoreboard(self, round: Optional[str] = None) -> Dict[str, Any]:
        """
        Fetch the scoreboard, limited to one playoff round when given.

        Responses are cached per round for the life of the fetcher.

        Raises:
            requests.RequestException: On network errors or non-2xx responses
        """
        if round not in self._scoreboards:
            params = None
            if round is not None:
                params = {'seasontype': ESPN_POSTSEASON_TYPE, 'week': ROUND_TO_ESPN_WEEK[round]}
            logger.info(f'Loading ESPN scoreboard for {round or "current week"}...')
            self._scoreboards[round] = self._get('scoreboard', params)
        return self._scoreboards[round]

    def get_playoff_games(self, round: Optional[str] = None) -> List[Dict[str, Any]]:
        """All scoreboard events for the round."""
        return list(self.get_scoreboard(round).get('events') or [])

    def get_active_games(self, round: Optional[str] = None) -> List[Dict[str, Any]]:
        """Scoreboard events that are in progress or upcoming."""
        return [event for event in self.get_playoff_games(round) if is_active(event)]

    def get_game_summary(self, game_id: str) -> Dict[str, Any]:
        """
        Fetch the detailed summary (including box score) for one game.

        Raises:
            requests.RequestException: On network errors or non-2xx responses
        """
        logger.debug(f'Loading ESPN summary for game {game_id}')
        return self._get('summary', {'event': game_id})

    def get_box_score(self, game_id: str) -> pl.DataFrame:
        """Box score for one game as a flat DataFrame."""
        return box_score_frame(self.get_game_summary(game_id))

    def clear_cache(self) -> None:
        self._scoreboards.clear()
