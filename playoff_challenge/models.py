"""Data models for the playoff challenge scoring pipeline."""

from dataclasses import asdict, dataclass, field, fields
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional

from .constants import MIN_WEEKS_HELD, ROSTER_SLOTS

# PlayerStats field name -> key used in the stored stats JSON
STAT_JSON_KEYS = {
    'passing_yards': 'passingYards',
    'passing_touchdowns': 'passingTouchdowns',
    'interceptions': 'interceptions',
    'rushing_yards': 'rushingYards',
    'rushing_touchdowns': 'rushingTouchdowns',
    'receiving_yards': 'receivingYards',
    'receiving_touchdowns': 'receivingTouchdowns',
    'receptions': 'receptions',
    'fumbles_lost': 'fumblesLost',
    'field_goals_made': 'fieldGoalsMade',
    'extra_points_made': 'extraPointsMade',
    'defensive_touchdowns': 'defensiveTouchdowns',
    'sacks': 'sacks',
    'interceptions_made': 'interceptionsMade',
    'fumbles_recovered': 'fumblesRecovered',
    'safeties': 'safeties',
    'points_allowed': 'pointsAllowed',
}
JSON_KEY_TO_STAT = {v: k for k, v in STAT_JSON_KEYS.items()}


@dataclass
class PlayerStats:
    """Sparse per-game stat line. None means the stat was not reported."""
    passing_yards: Optional[float] = None
    passing_touchdowns: Optional[float] = None
    interceptions: Optional[float] = None
    rushing_yards: Optional[float] = None
    rushing_touchdowns: Optional[float] = None
    receiving_yards: Optional[float] = None
    receiving_touchdowns: Optional[float] = None
    receptions: Optional[float] = None
    fumbles_lost: Optional[float] = None
    field_goals_made: Optional[float] = None
    extra_points_made: Optional[float] = None
    defensive_touchdowns: Optional[float] = None
    sacks: Optional[float] = None
    interceptions_made: Optional[float] = None
    fumbles_recovered: Optional[float] = None
    safeties: Optional[float] = None
    points_allowed: Optional[float] = None

    def is_empty(self) -> bool:
        return all(getattr(self, f.name) is None for f in fields(self))

    def to_dict(self) -> Dict[str, float]:
        """Serialize present fields using the stored camelCase keys."""
        return {
            STAT_JSON_KEYS[f.name]: getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name) is not None
        }

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> 'PlayerStats':
        """Build from stored JSON. Accepts camelCase or snake_case keys; ignores the rest."""
        stats = cls()
        if not data:
            return stats
        for key, value in data.items():
            name = JSON_KEY_TO_STAT.get(key, key)
            if name in STAT_JSON_KEYS and isinstance(value, (int, float)) and not isinstance(value, bool):
                setattr(stats, name, float(value))
        return stats


@dataclass
class PlayerScore:
    """Stored fantasy score for one player in one round."""
    player_key: str
    round: str
    points: float
    stats: PlayerStats = field(default_factory=PlayerStats)
    espn_game_id: Optional[str] = None
    last_synced_at: Optional[str] = None


@dataclass
class RosterSlot:
    """One roster slot: the player held and the loyalty multiplier."""
    player_key: Optional[str] = None
    weeks_held: int = MIN_WEEKS_HELD


@dataclass
class Roster:
    """A user's 8-slot roster for one league and round."""
    user_id: str
    league_id: str
    round: str
    slots: Dict[str, RosterSlot] = field(
        default_factory=lambda: {slot: RosterSlot() for slot in ROSTER_SLOTS}
    )
    submitted_at: Optional[str] = None
    is_final: bool = False
    id: Optional[int] = None

    def slot(self, name: str) -> RosterSlot:
        return self.slots.get(name) or RosterSlot()

    def player_keys(self) -> List[str]:
        """Non-empty player keys, in slot order."""
        keys = []
        for name in ROSTER_SLOTS:
            key = self.slot(name).player_key
            if key:
                keys.append(key)
        return keys

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> 'Roster':
        """Build from a flat rosters-table row (qb_player_key, qb_weeks_held, ...)."""
        slots = {}
        for name in ROSTER_SLOTS:
            slots[name] = RosterSlot(
                player_key=row.get(f'{name}_player_key') or None,
                weeks_held=int(row.get(f'{name}_weeks_held') or MIN_WEEKS_HELD),
            )
        return cls(
            id=row.get('id'),
            user_id=row['user_id'],
            league_id=row['league_id'],
            round=row['round'],
            slots=slots,
            submitted_at=row.get('submitted_at'),
            is_final=bool(row.get('is_final') or False),
        )

    def to_row(self) -> Dict[str, Any]:
        """Flatten into rosters-table columns."""
        row: Dict[str, Any] = {
            'user_id': self.user_id,
            'league_id': self.league_id,
            'round': self.round,
        }
        for name in ROSTER_SLOTS:
            slot = self.slot(name)
            row[f'{name}_player_key'] = slot.player_key
            row[f'{name}_weeks_held'] = slot.weeks_held
        row['submitted_at'] = self.submitted_at
        row['is_final'] = self.is_final
        return row


@dataclass
class Game:
    """A scheduled playoff game."""
    espn_game_id: str
    round: str
    home_team: str
    away_team: str
    kickoff_time: Optional[str] = None
    status: str = 'scheduled'

    def kickoff(self) -> Optional[datetime]:
        """Kickoff as an aware datetime; naive stored times are treated as UTC."""
        if not self.kickoff_time:
            return None
        kickoff = datetime.fromisoformat(self.kickoff_time.replace('Z', '+00:00'))
        if kickoff.tzinfo is None:
            kickoff = kickoff.replace(tzinfo=timezone.utc)
        return kickoff


@dataclass
class SyncResult:
    """Summary of one sync run. errors may be non-empty even when success is True."""
    success: bool = True
    games_processed: int = 0
    players_updated: int = 0
    errors: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'success': self.success,
            'gamesProcessed': self.games_processed,
            'playersUpdated': self.players_updated,
            'errors': list(self.errors),
        }


@dataclass
class AdvanceResult:
    """Outcome of a round advancement attempt."""
    advanced: bool
    message: str
    success: bool = True
    previous_round: Optional[str] = None
    next_round: Optional[str] = None
    rosters_advanced: int = 0
    games_total: Optional[int] = None
    games_final: Optional[int] = None
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            'success': self.success,
            'advanced': self.advanced,
            'message': self.message,
            'previousRound': self.previous_round,
            'nextRound': self.next_round,
            'rostersAdvanced': self.rosters_advanced,
        }
        if self.games_total is not None:
            data['gamesTotal'] = self.games_total
            data['gamesFinal'] = self.games_final
        if self.error:
            data['error'] = self.error
        return data


@dataclass
class SlotScore:
    """Score contribution of one roster slot."""
    slot: str
    player_key: str
    base_points: float
    multiplier: int
    final_points: float


@dataclass
class RosterScore:
    """Total for a roster with its per-slot breakdown."""
    total_points: float = 0.0
    breakdown: List[SlotScore] = field(default_factory=list)


@dataclass
class LeaderboardEntry:
    """A ranked roster total."""
    rank: int
    user_id: str
    league_id: str
    round: str
    points: float
    breakdown: List[SlotScore] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class LockStatus:
    """Whether a player is locked for a round, based on kickoff time."""
    is_locked: bool
    kickoff_time: Optional[datetime] = None
    seconds_until_lock: Optional[float] = None
