"""Round advancement: carry rosters into the next playoff round.

A slot whose player's team is scheduled in the next round keeps the player
and its multiplier goes up by one (capped at 4). A slot whose team is not
scheduled (eliminated) is cleared and its multiplier resets to 1.
"""

import logging
import sqlite3
from typing import Iterable, Optional, Set

from .constants import (
    MAX_WEEKS_HELD,
    MIN_WEEKS_HELD,
    ROSTER_SLOTS,
    STATUS_FINAL,
    STATUS_IN_PROGRESS,
)
from .models import AdvanceResult, Game, Roster, RosterSlot
from .rosters import team_from_player_key
from .rounds import CurrentRoundCache, get_next_round, validate_round, write_current_round
from .store import LeagueStore

logger = logging.getLogger('playoff_challenge.advancement')


def active_teams_for(games: Iterable[Game]) -> Set[str]:
    """Teams scheduled in a set of games (home and away)."""
    teams = set()
    for game in games:
        teams.add(game.home_team)
        teams.add(game.away_team)
    return teams


def advance_slot(slot: RosterSlot, active_teams: Set[str]) -> RosterSlot:
    """Next-round value for one slot."""
    if not slot.player_key:
        return RosterSlot(None, MIN_WEEKS_HELD)

    if team_from_player_key(slot.player_key) in active_teams:
        return RosterSlot(slot.player_key, min(slot.weeks_held + 1, MAX_WEEKS_HELD))

    return RosterSlot(None, MIN_WEEKS_HELD)


def advance_roster(roster: Roster, next_round: str, active_teams: Set[str]) -> Roster:
    """Build the next-round draft roster. The new roster is unsubmitted and not final."""
    return Roster(
        user_id=roster.user_id,
        league_id=roster.league_id,
        round=next_round,
        slots={name: advance_slot(roster.slot(name), active_teams) for name in ROSTER_SLOTS},
        submitted_at=None,
        is_final=False,
    )


def advance_round(
    store: LeagueStore,
    current_round: str,
    league_id: Optional[str] = None,
    round_cache: Optional[CurrentRoundCache] = None,
) -> AdvanceResult:
    """
    Advance rosters from current_round to the next round.

    Advancement happens only when every game of the current round is final
    and the next round's schedule is loaded; otherwise a non-advancing
    result explains why and nothing is written. Re-running for a round that
    was already advanced overwrites the same (user, league, round) rows.

    A storage error stops the run and is reported in the result. Rosters
    already written by that run stay written.

    Args:
        store: League store
        current_round: Round that just finished
        league_id: Limit to one league (default: all leagues). The global
            current round only moves on an all-league run.
        round_cache: Cache to invalidate after the current round changes

    Returns:
        AdvanceResult

    Raises:
        ValueError: If current_round is not a playoff round
    """
    validate_round(current_round)
    logger.info(f'Advance check for round: {current_round}')

    next_round = get_next_round(current_round)
    if next_round is None:
        return AdvanceResult(
            advanced=False,
            message=f'Season complete - {current_round} was the final round, no further rounds',
            previous_round=current_round,
        )

    try:
        games = store.get_games(current_round)
        if not games:
            return AdvanceResult(
                advanced=False,
                message='No games scheduled for this round yet',
                previous_round=current_round,
                next_round=next_round,
            )

        games_final = sum(1 for g in games if g.status == STATUS_FINAL)
        if games_final < len(games):
            in_progress = any(g.status == STATUS_IN_PROGRESS for g in games)
            return AdvanceResult(
                advanced=False,
                message='Games still in progress' if in_progress else 'Not all games are final yet',
                previous_round=current_round,
                next_round=next_round,
                games_total=len(games),
                games_final=games_final,
            )

        next_games = store.get_games(next_round)
        if not next_games:
            return AdvanceResult(
                advanced=False,
                message=f'Next round ({next_round}) schedule not loaded yet',
                previous_round=current_round,
                next_round=next_round,
                games_total=len(games),
                games_final=games_final,
            )

        active_teams = active_teams_for(next_games)
        rosters = store.get_rosters(current_round, league_id)

        for roster in rosters:
            store.upsert_roster(advance_roster(roster, next_round, active_teams))

        # The current round is global; a single-league run leaves it for the
        # all-league run so the other leagues still advance.
        if league_id is None:
            write_current_round(store, next_round)

    except sqlite3.Error as e:
        logger.error(f'Round advancement failed: {e}')
        return AdvanceResult(
            advanced=False,
            success=False,
            message='Round advancement failed',
            previous_round=current_round,
            next_round=next_round,
            error=str(e),
        )

    if league_id is None and round_cache is not None:
        round_cache.invalidate()

    if rosters:
        message = f'Advanced from {current_round} to {next_round}'
    else:
        message = f'Advanced to {next_round} (no rosters to copy)'
    logger.info(f'{message}: {len(rosters)} rosters, active teams {sorted(active_teams)}')

    return AdvanceResult(
        advanced=True,
        message=message,
        previous_round=current_round,
        next_round=next_round,
        rosters_advanced=len(rosters),
        games_total=len(games),
        games_final=games_final,
    )
