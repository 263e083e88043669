"""Roster totals and league leaderboards."""

import logging
from typing import Dict, List, Mapping, Optional

from .constants import ROSTER_SLOTS
from .models import LeaderboardEntry, PlayerScore, Roster, RosterScore, SlotScore
from .schemas import ScoringSettings
from .scoring import calculate_fantasy_points, normalize_scoring_settings, round_points
from .store import LeagueStore

logger = logging.getLogger('playoff_challenge.leaderboard')


def calculate_roster_score(roster: Roster, player_points: Mapping[str, float]) -> RosterScore:
    """
    Total a roster: each filled slot scores base points times its multiplier.

    Args:
        roster: Roster for one round
        player_points: Player key -> base points for the round (missing = 0)

    Returns:
        RosterScore with total rounded to 2 decimals and one breakdown entry per filled slot
    """
    result = RosterScore()
    total = 0.0

    for name in ROSTER_SLOTS:
        slot = roster.slot(name)
        if not slot.player_key:
            continue
        base_points = player_points.get(slot.player_key, 0.0) or 0.0
        final_points = base_points * slot.weeks_held
        result.breakdown.append(SlotScore(
            slot=name,
            player_key=slot.player_key,
            base_points=base_points,
            multiplier=slot.weeks_held,
            final_points=round_points(final_points),
        ))
        total += final_points

    result.total_points = round_points(total)
    return result


def league_settings(store: LeagueStore, league_id: str, default_format: str = 'PPR') -> ScoringSettings:
    """Normalized scoring settings for a league (defaults if the league is unknown)."""
    league = store.get_league(league_id)
    if league is None:
        logger.warning(f'League {league_id} not found, using {default_format} defaults')
        return normalize_scoring_settings(default_format)
    return normalize_scoring_settings(league['scoring_format'], league.get('scoring_settings'))


def rescore(scores: Mapping[str, PlayerScore], settings: ScoringSettings) -> Dict[str, float]:
    """
    Base points per player under a league's settings.

    Stored points are computed under the default format at sync time, so
    they are recomputed from the stored stats; rows without stats keep
    their stored points.
    """
    points = {}
    for player_key, score in scores.items():
        if score.stats.is_empty():
            points[player_key] = score.points
        else:
            points[player_key] = calculate_fantasy_points(score.stats, settings)
    return points


def rank_rosters(
    rosters: List[Roster], player_points: Mapping[str, float]
) -> List[LeaderboardEntry]:
    """Rank rosters by total, highest first. Ties share a rank."""
    totals = [(roster, calculate_roster_score(roster, player_points)) for roster in rosters]
    totals.sort(key=lambda item: item[1].total_points, reverse=True)

    entries = []
    previous_total: Optional[float] = None
    rank = 0
    for position, (roster, score) in enumerate(totals, 1):
        if score.total_points != previous_total:
            rank = position
            previous_total = score.total_points
        entries.append(LeaderboardEntry(
            rank=rank,
            user_id=roster.user_id,
            league_id=roster.league_id,
            round=roster.round,
            points=score.total_points,
            breakdown=score.breakdown,
        ))
    return entries


def build_leaderboard(store: LeagueStore, league_id: str, round: str) -> List[LeaderboardEntry]:
    """
    Leaderboard for one league and round.

    Args:
        store: League store
        league_id: League to rank
        round: Playoff round

    Returns:
        Entries ordered by rank
    """
    settings = league_settings(store, league_id)
    player_points = rescore(store.get_player_scores(round), settings)
    rosters = store.get_rosters(round, league_id)
    return rank_rosters(rosters, player_points)
