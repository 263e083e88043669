from .models import (
    PlayerStats,
    PlayerScore,
    Roster,
    RosterSlot,
    Game,
    SyncResult,
    AdvanceResult,
    LeaderboardEntry,
)
from .scoring import (
    normalize_scoring_settings,
    calculate_fantasy_points,
    calculate_fantasy_points_breakdown,
    points_allowed_bonus,
)
from .stat_extractor import parse_espn_stats, merge_stats
from .data_fetcher import ESPNDataFetcher, box_score_frame
from .store import LeagueStore, open_store
from .rounds import (
    CurrentRoundCache,
    get_next_round,
    get_previous_round,
    read_current_round,
    write_current_round,
)
from .sync import ScoreSyncer
from .advancement import advance_round, advance_roster
from .rosters import apply_slot_changes, team_from_player_key
from .leaderboard import build_leaderboard, calculate_roster_score
from .player_locks import (
    is_player_locked,
    get_roster_lock_status,
    get_eliminated_players,
    get_next_lock_time,
)

__all__ = [
    # Models
    'PlayerStats',
    'PlayerScore',
    'Roster',
    'RosterSlot',
    'Game',
    'SyncResult',
    'AdvanceResult',
    'LeaderboardEntry',
    # Scoring
    'normalize_scoring_settings',
    'calculate_fantasy_points',
    'calculate_fantasy_points_breakdown',
    'points_allowed_bonus',
    'parse_espn_stats',
    'merge_stats',
    # Data fetching
    'ESPNDataFetcher',
    'box_score_frame',
    # Persistence
    'LeagueStore',
    'open_store',
    # Rounds
    'CurrentRoundCache',
    'get_next_round',
    'get_previous_round',
    'read_current_round',
    'write_current_round',
    # Pipeline
    'ScoreSyncer',
    'advance_round',
    'advance_roster',
    # Rosters and leaderboards
    'apply_slot_changes',
    'team_from_player_key',
    'build_leaderboard',
    'calculate_roster_score',
    # Player locks
    'is_player_locked',
    'get_roster_lock_status',
    'get_eliminated_players',
    'get_next_lock_time',
]
