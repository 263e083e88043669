"""Player lock and elimination checks based on the playoff schedule."""

from datetime import datetime, timezone
from typing import Dict, List, Optional

from .constants import ROUNDS
from .models import LockStatus, Roster
from .rosters import team_from_player_key
from .rounds import validate_round
from .store import LeagueStore


def _player_team(store: LeagueStore, player_key: str) -> str:
    player = store.get_players([player_key]).get(player_key)
    if player:
        return player['team']
    return team_from_player_key(player_key)


def is_player_locked(
    store: LeagueStore,
    player_key: str,
    round: str,
    now: Optional[datetime] = None,
) -> LockStatus:
    """
    Check whether a player's game for the round has kicked off.

    Players without a scheduled game (or without a kickoff time) are not locked.
    A naive `now` is read as UTC, like naive kickoff times.
    """
    now = now or datetime.now(timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    game = store.get_game_for_team(round, _player_team(store, player_key))
    if game is None or game.kickoff() is None:
        return LockStatus(is_locked=False)

    kickoff = game.kickoff()
    is_locked = now >= kickoff
    return LockStatus(
        is_locked=is_locked,
        kickoff_time=kickoff,
        seconds_until_lock=0.0 if is_locked else (kickoff - now).total_seconds(),
    )


def get_roster_lock_status(
    store: LeagueStore,
    roster: Roster,
    round: str,
    now: Optional[datetime] = None,
) -> Dict[str, LockStatus]:
    """Lock status for every player on a roster, keyed by player key."""
    return {key: is_player_locked(store, key, round, now) for key in roster.player_keys()}


def get_eliminated_players(store: LeagueStore, roster: Roster, current_round: str) -> List[str]:
    """
    Players on a roster whose team has no game in the current or any later round.

    Rounds are compared by bracket order, not alphabetically.
    """
    validate_round(current_round)
    remaining_rounds = ROUNDS[ROUNDS.index(current_round):]

    active_teams = set()
    for round in remaining_rounds:
        for game in store.get_games(round):
            active_teams.add(game.home_team)
            active_teams.add(game.away_team)

    return [key for key in roster.player_keys() if _player_team(store, key) not in active_teams]


def get_next_lock_time(store: LeagueStore, round: str) -> Optional[datetime]:
    """Earliest kickoff in the round, or None if nothing is scheduled."""
    kickoffs = [game.kickoff() for game in store.get_games(round)]
    kickoffs = [k for k in kickoffs if k is not None]
    return min(kickoffs) if kickoffs else None
