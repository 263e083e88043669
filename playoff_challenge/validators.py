"""Validation functions for rosters and scoring results."""

import math

from .constants import MAX_WEEKS_HELD, MIN_WEEKS_HELD, ROSTER_SLOTS, SLOT_POSITIONS
from .models import LeaderboardEntry, PlayerScore, Roster, RosterScore
from .rosters import position_from_player_key

# Defense keys end in DEF ("BUF-DEF") while the slot position is DST
_KEY_POSITION = {'DST': 'DEF'}


def validate_roster(roster: Roster) -> list[str]:
    """
    Validate a roster against the slot and multiplier rules.

    Checks:
    - Multipliers are within 1-4
    - Empty slots have a multiplier of 1
    - Each player fits the slot's position
    - No player appears in two slots

    Args:
        roster: Roster to validate

    Returns:
        List of validation error messages (empty if valid)
    """
    errors = []
    label = f'{roster.user_id}/{roster.league_id}/{roster.round}'

    seen = set()
    duplicates = set()

    for name in ROSTER_SLOTS:
        slot = roster.slot(name)

        if not MIN_WEEKS_HELD <= slot.weeks_held <= MAX_WEEKS_HELD:
            errors.append(
                f'{label} {name} multiplier {slot.weeks_held} outside {MIN_WEEKS_HELD}-{MAX_WEEKS_HELD}'
            )

        if not slot.player_key:
            if slot.weeks_held != MIN_WEEKS_HELD:
                errors.append(f'{label} {name} is empty but has multiplier {slot.weeks_held}')
            continue

        expected = SLOT_POSITIONS[name]
        position = position_from_player_key(slot.player_key)
        if position != _KEY_POSITION.get(expected, expected):
            errors.append(f'{label} {name} holds {slot.player_key} (expected a {expected})')

        if slot.player_key in seen:
            duplicates.add(slot.player_key)
        seen.add(slot.player_key)

    if duplicates:
        errors.append(f'{label} has duplicate players: {", ".join(sorted(duplicates))}')

    return errors


def validate_player_score(score: PlayerScore) -> list[str]:
    """
    Check that a player's round score is reasonable.

    Sanity checks:
    - Points are a finite number
    - Points in a reasonable range (-20 to 100)

    Returns:
        List of warning messages (empty if no issues)
    """
    warnings = []

    if not isinstance(score.points, (int, float)) or not math.isfinite(score.points):
        warnings.append(f'{score.player_key} has invalid points: {score.points!r}')
        return warnings

    if score.points > 100:
        warnings.append(
            f'{score.player_key} scored {score.points:.2f} pts in {score.round} (unusually high - check for scoring bug)'
        )
    elif score.points < -20:
        warnings.append(
            f'{score.player_key} scored {score.points:.2f} pts in {score.round} (unusually low - check for scoring bug)'
        )

    return warnings


def validate_roster_score(label: str, score: RosterScore) -> list[str]:
    """
    Check that a roster total is reasonable and matches its breakdown.

    Sanity checks:
    - Total in a reasonable range (0 to 800, multipliers included)
    - Breakdown sums to the total (within rounding)
    """
    warnings = []

    if score.total_points > 800:
        warnings.append(f'{label} scored {score.total_points:.2f} pts (unusually high - check for scoring bug)')
    elif score.total_points < 0:
        warnings.append(f'{label} scored {score.total_points:.2f} pts (negative total - check for scoring bug)')

    breakdown_sum = sum(s.final_points for s in score.breakdown)
    diff = abs(breakdown_sum - score.total_points)
    if diff > 0.1:
        warnings.append(
            f'{label} breakdown sum ({breakdown_sum:.2f}) != total ({score.total_points:.2f}) - difference: {diff:.2f}'
        )

    return warnings


def validate_all_scores(scores: dict[str, PlayerScore]) -> tuple[list[str], list[str]]:
    """
    Validate all stored scores for a round.

    Args:
        scores: Dict of player_key -> PlayerScore

    Returns:
        Tuple of (errors, warnings)
        - errors: Scores stored under a key that doesn't match the record
        - warnings: Issues to review
    """
    errors: list[str] = []
    warnings: list[str] = []

    for player_key, score in scores.items():
        if score.player_key != player_key:
            errors.append(f'Score stored under {player_key} belongs to {score.player_key}')
        warnings.extend(validate_player_score(score))

    return errors, warnings


def validate_leaderboard(entries: list[LeaderboardEntry]) -> list[str]:
    """
    Check a ranked leaderboard for ordering and per-entry totals.

    Returns:
        List of warning messages (empty if no issues)
    """
    warnings = []

    for previous, entry in zip(entries, entries[1:]):
        if entry.points > previous.points:
            warnings.append(
                f'{entry.user_id} ({entry.points:.2f}) is ranked below {previous.user_id} ({previous.points:.2f})'
            )
        if entry.rank < previous.rank:
            warnings.append(f'{entry.user_id} has rank {entry.rank} after rank {previous.rank}')

    for entry in entries:
        label = f'{entry.user_id}/{entry.league_id}/{entry.round}'
        warnings.extend(validate_roster_score(label, RosterScore(entry.points, entry.breakdown)))

    return warnings
