"""Map ESPN box score stat labels onto PlayerStats.

ESPN reuses generic labels ("YDS", "TD", "INT") in every stat category, so
each category gets its own alias table. Box score categories are named
passing, rushing, receiving, fumbles, kicking, defensive, and interceptions.
Categories not listed here (kickReturns, puntReturns, punting) are ignored.
"""

import re
from dataclasses import fields
from typing import Dict, Optional, Sequence

from .models import PlayerStats

CATEGORY_ALIASES: Dict[str, Dict[str, str]] = {
    'passing': {
        'yds': 'passing_yards',
        'passing yards': 'passing_yards',
        'td': 'passing_touchdowns',
        'passing touchdowns': 'passing_touchdowns',
        'int': 'interceptions',
        'interceptions thrown': 'interceptions',
    },
    'rushing': {
        'yds': 'rushing_yards',
        'rushing yards': 'rushing_yards',
        'td': 'rushing_touchdowns',
        'rushing touchdowns': 'rushing_touchdowns',
    },
    'receiving': {
        'rec': 'receptions',
        'receptions': 'receptions',
        'yds': 'receiving_yards',
        'receiving yards': 'receiving_yards',
        'td': 'receiving_touchdowns',
        'receiving touchdowns': 'receiving_touchdowns',
    },
    'fumbles': {
        'lost': 'fumbles_lost',
        'fl': 'fumbles_lost',
        'fumbles lost': 'fumbles_lost',
    },
    'kicking': {
        'fg': 'field_goals_made',
        'field goals made': 'field_goals_made',
        'xp': 'extra_points_made',
        'extra points made': 'extra_points_made',
    },
    'defensive': {
        'sacks': 'sacks',
        'td': 'defensive_touchdowns',
    },
    # Return TDs are already in the defensive category's TD column
    'interceptions': {
        'int': 'interceptions_made',
    },
}

# Used when no category is supplied: generic labels mean passing stats
GENERIC_ALIASES: Dict[str, str] = {
    'yds': 'passing_yards',
    'passing yards': 'passing_yards',
    'td': 'passing_touchdowns',
    'passing touchdowns': 'passing_touchdowns',
    'int': 'interceptions',
    'interceptions thrown': 'interceptions',
    'rushing yards': 'rushing_yards',
    'rushing touchdowns': 'rushing_touchdowns',
    'rec': 'receptions',
    'receptions': 'receptions',
    'receiving yards': 'receiving_yards',
    'receiving touchdowns': 'receiving_touchdowns',
    'fl': 'fumbles_lost',
    'fumbles lost': 'fumbles_lost',
    'fg': 'field_goals_made',
    'field goals made': 'field_goals_made',
    'xp': 'extra_points_made',
    'extra points made': 'extra_points_made',
}

# Leading number, so "2/3" (made/attempted) reads as 2
_LEADING_NUMBER = re.compile(r'^\s*([-+]?(?:\d+\.?\d*|\.\d+))')


def parse_stat_value(value: Optional[str]) -> float:
    """Parse an ESPN stat string. Non-numeric values ("--", "") become 0."""
    if value is None:
        return 0.0
    match = _LEADING_NUMBER.match(str(value))
    if not match:
        return 0.0
    return float(match.group(1))


def parse_espn_stats(
    labels: Sequence[str],
    values: Sequence[str],
    category: Optional[str] = None,
) -> PlayerStats:
    """
    Convert parallel ESPN label/value arrays into PlayerStats.

    Args:
        labels: Stat labels, e.g. ["C/ATT", "YDS", "AVG", "TD", "INT"]
        values: Matching stat strings, e.g. ["22/31", "275", "8.9", "2", "1"]
        category: Box score category name ('passing', 'rushing', ...).
            None uses the generic table where "yds"/"td" mean passing.

    Returns:
        PlayerStats with only the recognized stats set
    """
    if category is None:
        aliases = GENERIC_ALIASES
    else:
        aliases = CATEGORY_ALIASES.get(category.lower(), {})

    stats = PlayerStats()
    for index, label in enumerate(labels):
        name = aliases.get(str(label).strip().lower())
        if not name:
            continue
        value = values[index] if index < len(values) else None
        setattr(stats, name, parse_stat_value(value))

    return stats


def merge_stats(base: PlayerStats, update: PlayerStats) -> PlayerStats:
    """Combine two stat lines for the same athlete; reported fields in update win."""
    merged = PlayerStats()
    for f in fields(PlayerStats):
        new_value = getattr(update, f.name)
        setattr(merged, f.name, new_value if new_value is not None else getattr(base, f.name))
    return merged
