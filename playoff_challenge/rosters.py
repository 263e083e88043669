"""Roster helpers: player key parsing and user slot edits."""

from typing import Mapping, Optional

from .constants import MIN_WEEKS_HELD, ROSTER_SLOTS
from .models import Roster, RosterSlot


def team_from_player_key(player_key: Optional[str]) -> str:
    """
    Extract the team abbreviation from a player key.

    Keys look like "J.Allen-BUF-QB" (or "BUF-DEF" for defenses); the team is
    the second-to-last '-' segment, so hyphenated last names still work
    ("J.Smith-Njigba-SEA-WR" -> "SEA").

    Returns:
        Team abbreviation, or '' if the key has no team segment
    """
    if not player_key:
        return ''
    parts = player_key.split('-')
    if len(parts) < 2:
        return ''
    return parts[-2]


def position_from_player_key(player_key: Optional[str]) -> str:
    """Last '-' segment of a player key ("QB", "RB", ..., "DEF")."""
    if not player_key or '-' not in player_key:
        return ''
    return player_key.split('-')[-1]


def apply_slot_changes(
    roster: Roster,
    changes: Mapping[str, Optional[str]],
    submitted_at: Optional[str] = None,
) -> Roster:
    """
    Apply a user's slot picks to a roster.

    A slot that keeps the same player keeps its multiplier; a slot that gets
    a different player (or is cleared) resets to 1. Slots not mentioned in
    changes are left as they are.

    Args:
        roster: Existing roster for the round
        changes: Slot name -> new player key (None or '' clears the slot)
        submitted_at: Submission timestamp to record

    Returns:
        A new Roster; the input is not modified

    Raises:
        ValueError: If changes names an unknown slot
    """
    unknown = set(changes) - set(ROSTER_SLOTS)
    if unknown:
        raise ValueError(f'Unknown roster slots: {", ".join(sorted(unknown))}')

    slots = {}
    for name in ROSTER_SLOTS:
        current = roster.slot(name)
        if name not in changes:
            slots[name] = RosterSlot(current.player_key, current.weeks_held)
            continue

        new_key = changes[name] or None
        if new_key is None:
            slots[name] = RosterSlot(None, MIN_WEEKS_HELD)
        elif new_key == current.player_key:
            slots[name] = RosterSlot(new_key, current.weeks_held)
        else:
            slots[name] = RosterSlot(new_key, MIN_WEEKS_HELD)

    return Roster(
        id=roster.id,
        user_id=roster.user_id,
        league_id=roster.league_id,
        round=roster.round,
        slots=slots,
        submitted_at=submitted_at if submitted_at is not None else roster.submitted_at,
        is_final=roster.is_final,
    )
