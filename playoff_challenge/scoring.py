"""Scoring settings normalization and fantasy point calculation."""

import copy
import math
from typing import Any, Dict, Mapping, Optional, Tuple, Union

from .constants import (
    BASE_SCORING,
    POINTS_ALLOWED_FLOOR,
    POINTS_ALLOWED_TIERS,
    RECEPTION_POINTS,
    SCORING_FORMATS,
)
from .models import PlayerStats
from .schemas import ScoringSettings

SettingsOverride = Union[ScoringSettings, Mapping[str, Any], None]


def round_points(value: float) -> float:
    """Round to 2 decimals with halves going up (0.125 -> 0.13, -0.125 -> -0.12)."""
    return math.floor(value * 100 + 0.5) / 100


def default_scoring_table(scoring_format: str) -> Dict[str, Dict[str, float]]:
    """
    Return the default scoring table for a format as plain dicts.

    Args:
        scoring_format: 'PPR', 'HALF_PPR', or 'STANDARD'

    Raises:
        ValueError: If the format is unknown
    """
    if scoring_format not in SCORING_FORMATS:
        raise ValueError(f'Unknown scoring format: {scoring_format}')

    table = copy.deepcopy(BASE_SCORING)
    table['receiving']['reception'] = RECEPTION_POINTS[scoring_format]
    return table


def normalize_scoring_settings(
    scoring_format: str, override: SettingsOverride = None
) -> ScoringSettings:
    """
    Build fully-populated scoring settings for a league.

    Each category present in the override is shallow-merged over the format
    default, so a partially overridden category keeps its other defaults.
    Normalizing an already-normalized settings object returns the same values.

    Args:
        scoring_format: 'PPR', 'HALF_PPR', or 'STANDARD'
        override: Partial settings (dict or ScoringSettings), or None

    Returns:
        Frozen ScoringSettings

    Raises:
        ValueError: If the format is unknown
        ValidationError: If an overridden value is invalid (e.g. yards_per_point <= 0)

    Example:
        settings = normalize_scoring_settings('HALF_PPR', {'passing': {'touchdown': 6}})
        settings.passing.touchdown      # 6
        settings.passing.interception   # -2 (default)
        settings.receiving.reception    # 0.5
    """
    table = default_scoring_table(scoring_format)

    if isinstance(override, ScoringSettings):
        override = override.model_dump()

    if override:
        for category, defaults in table.items():
            rules = override.get(category)
            if not isinstance(rules, Mapping):
                continue
            for rule, value in rules.items():
                if rule in defaults and value is not None:
                    defaults[rule] = value

    return ScoringSettings.model_validate(table)


def points_allowed_bonus(points_allowed: float) -> int:
    """
    Defense bonus for points allowed.

    Tiers: 0 -> 10, 1-6 -> 7, 7-13 -> 4, 14-20 -> 1, 21-27 -> 0,
    28-34 -> -1, 35+ -> -4. The table is fixed for every format.
    """
    for max_allowed, bonus in POINTS_ALLOWED_TIERS:
        if points_allowed <= max_allowed:
            return bonus
    return POINTS_ALLOWED_FLOOR


def calculate_fantasy_points_breakdown(
    stats: PlayerStats, settings: ScoringSettings
) -> Tuple[float, Dict[str, float]]:
    """
    Score one player's stat line, returning the total and a per-stat breakdown.

    Every term is applied only when its stat is present and non-zero, so a
    missing stat never counts as a penalty. points_allowed is the exception:
    its tier bonus applies whenever it is reported, including 0.

    Args:
        stats: Player stats for one game
        settings: Normalized league scoring settings

    Returns:
        (total points rounded to 2 decimals, breakdown by stat)
    """
    points = 0.0
    breakdown: Dict[str, float] = {}

    def add(name: str, value: float) -> None:
        nonlocal points
        breakdown[name] = value
        points += value

    # Passing
    if stats.passing_yards:
        add('passing_yards', stats.passing_yards / settings.passing.yards_per_point)
    if stats.passing_touchdowns:
        add('passing_touchdowns', stats.passing_touchdowns * settings.passing.touchdown)
    if stats.interceptions:
        add('interceptions', stats.interceptions * settings.passing.interception)

    # Rushing
    if stats.rushing_yards:
        add('rushing_yards', stats.rushing_yards / settings.rushing.yards_per_point)
    if stats.rushing_touchdowns:
        add('rushing_touchdowns', stats.rushing_touchdowns * settings.rushing.touchdown)

    # Receiving
    if stats.receiving_yards:
        add('receiving_yards', stats.receiving_yards / settings.receiving.yards_per_point)
    if stats.receiving_touchdowns:
        add('receiving_touchdowns', stats.receiving_touchdowns * settings.receiving.touchdown)
    if stats.receptions and settings.receiving.reception:
        add('receptions', stats.receptions * settings.receiving.reception)

    # Fumbles
    if stats.fumbles_lost:
        add('fumbles_lost', stats.fumbles_lost * settings.fumbles.lost)

    # Kicking
    if stats.field_goals_made:
        add('field_goals', stats.field_goals_made * settings.kicking.field_goal)
    if stats.extra_points_made:
        add('extra_points', stats.extra_points_made * settings.kicking.extra_point)

    # Defense/ST
    if stats.defensive_touchdowns:
        add('defensive_touchdowns', stats.defensive_touchdowns * settings.defense.touchdown)
    if stats.sacks:
        add('sacks', stats.sacks * settings.defense.sack)
    if stats.interceptions_made:
        add('interceptions_made', stats.interceptions_made * settings.defense.interception)
    if stats.fumbles_recovered:
        add('fumbles_recovered', stats.fumbles_recovered * settings.defense.fumble_recovery)
    if stats.safeties:
        add('safeties', stats.safeties * settings.defense.safety)
    if stats.points_allowed is not None:
        add('points_allowed', points_allowed_bonus(stats.points_allowed))

    return round_points(points), breakdown


def calculate_fantasy_points(
    stats: PlayerStats, settings: Optional[ScoringSettings] = None
) -> float:
    """
    Score one player's stat line.

    Args:
        stats: Player stats for one game
        settings: Normalized scoring settings (default: PPR defaults)

    Returns:
        Fantasy points rounded to 2 decimals

    Example:
        stats = PlayerStats(passing_yards=250, passing_touchdowns=2, interceptions=1)
        calculate_fantasy_points(stats)  # 16.0
    """
    if settings is None:
        settings = normalize_scoring_settings('PPR')
    points, _ = calculate_fantasy_points_breakdown(stats, settings)
    return points
