"""Pydantic schemas for scoring settings, configuration, and seed files."""

from pydantic import BaseModel, Field, field_validator

from .constants import GAME_STATUSES, POSITIONS, ROUNDS, SCORING_FORMATS


class PassingRules(BaseModel):
    """Passing point values."""

    yards_per_point: float = Field(..., gt=0)
    touchdown: float
    interception: float

    class Config:
        extra = 'forbid'
        frozen = True


class RushingRules(BaseModel):
    """Rushing point values."""

    yards_per_point: float = Field(..., gt=0)
    touchdown: float

    class Config:
        extra = 'forbid'
        frozen = True


class ReceivingRules(BaseModel):
    """Receiving point values. reception depends on the scoring format."""

    yards_per_point: float = Field(..., gt=0)
    touchdown: float
    reception: float

    class Config:
        extra = 'forbid'
        frozen = True


class FumbleRules(BaseModel):
    """Fumble point values."""

    lost: float

    class Config:
        extra = 'forbid'
        frozen = True


class KickingRules(BaseModel):
    """Kicking point values."""

    field_goal: float
    extra_point: float

    class Config:
        extra = 'forbid'
        frozen = True


class DefenseRules(BaseModel):
    """Defense/special teams point values. Points-allowed tiers are fixed."""

    touchdown: float
    sack: float
    interception: float
    fumble_recovery: float
    safety: float

    class Config:
        extra = 'forbid'
        frozen = True


class ScoringSettings(BaseModel):
    """Fully-populated league scoring settings."""

    passing: PassingRules
    rushing: RushingRules
    receiving: ReceivingRules
    fumbles: FumbleRules
    kicking: KickingRules
    defense: DefenseRules

    class Config:
        extra = 'forbid'
        frozen = True


class AppConfig(BaseModel):
    """Application configuration settings."""

    database_path: str = Field(..., min_length=1)
    default_scoring_format: str = Field(default='PPR')
    default_round: str = Field(default='WC')
    round_cache_ttl_seconds: float = Field(default=30.0, ge=0)
    espn_base_url: str = Field(..., min_length=1)
    request_timeout_seconds: float = Field(default=10.0, gt=0)

    @field_validator('default_scoring_format')
    @classmethod
    def validate_format(cls, v):
        """Ensure the scoring format is known."""
        if v not in SCORING_FORMATS:
            raise ValueError(f'Invalid scoring format: {v}')
        return v

    @field_validator('default_round')
    @classmethod
    def validate_round(cls, v):
        """Ensure the round is one of the playoff rounds."""
        if v not in ROUNDS:
            raise ValueError(f'Invalid round: {v}')
        return v

    class Config:
        extra = 'forbid'


class PoolPlayer(BaseModel):
    """Player in the selectable player pool."""

    player_key: str = Field(..., min_length=3)
    espn_id: str | None = None
    full_name: str = Field(..., min_length=1)
    team: str = Field(..., min_length=2, max_length=3)
    position: str
    is_active: bool = True

    @field_validator('position')
    @classmethod
    def validate_position(cls, v):
        """Ensure the position is valid."""
        if v not in POSITIONS:
            raise ValueError(f'Invalid position: {v}')
        return v

    class Config:
        extra = 'forbid'


class PlayersFile(BaseModel):
    """Complete players.json file structure."""

    players: list[PoolPlayer]

    class Config:
        extra = 'forbid'


class ScheduledGame(BaseModel):
    """Game in the playoff schedule."""

    espn_game_id: str = Field(..., min_length=1)
    round: str
    home_team: str = Field(..., min_length=2, max_length=3)
    away_team: str = Field(..., min_length=2, max_length=3)
    kickoff_time: str | None = None
    status: str = 'scheduled'

    @field_validator('round')
    @classmethod
    def validate_round(cls, v):
        """Ensure the round is one of the playoff rounds."""
        if v not in ROUNDS:
            raise ValueError(f'Invalid round: {v}')
        return v

    @field_validator('status')
    @classmethod
    def validate_status(cls, v):
        """Ensure the status is a stored game status."""
        if v not in GAME_STATUSES:
            raise ValueError(f'Invalid game status: {v}')
        return v

    class Config:
        extra = 'forbid'


class ScheduleFile(BaseModel):
    """Complete schedule.json file structure."""

    games: list[ScheduledGame]

    class Config:
        extra = 'forbid'
