"""Playoff round sequencing and the current-round cache."""

import logging
import time
from typing import Callable, Optional

from .constants import CURRENT_ROUND_KEY, ROUNDS
from .store import LeagueStore

logger = logging.getLogger('playoff_challenge.rounds')


def validate_round(round: str) -> str:
    """Return the round unchanged, or raise ValueError if it isn't WC/DIV/CONF/SB."""
    if round not in ROUNDS:
        raise ValueError(f'Invalid round: {round!r} (expected one of {", ".join(ROUNDS)})')
    return round


def get_next_round(current: str) -> Optional[str]:
    """Next round in bracket order, or None after the Super Bowl or for unknown rounds."""
    if current not in ROUNDS:
        return None
    index = ROUNDS.index(current)
    if index >= len(ROUNDS) - 1:
        return None
    return ROUNDS[index + 1]


def get_previous_round(current: str) -> Optional[str]:
    """Previous round in bracket order, or None for the Wild Card or unknown rounds."""
    if current not in ROUNDS:
        return None
    index = ROUNDS.index(current)
    if index == 0:
        return None
    return ROUNDS[index - 1]


def read_current_round(store: LeagueStore, default: str = 'WC') -> str:
    """
    Read the current round from app_settings.

    The value is stored as a JSON string ('"WC"'); stray quotes are stripped
    for rows written by other tools. Missing or unrecognized values fall back
    to default.
    """
    value = store.get_app_setting(CURRENT_ROUND_KEY)
    if value is None:
        logger.warning(f'No current round stored, defaulting to {default}')
        return default
    round = str(value).replace('"', '').strip()
    if round not in ROUNDS:
        logger.error(f'Stored current round {value!r} is invalid, defaulting to {default}')
        return default
    return round


def write_current_round(store: LeagueStore, round: str) -> None:
    store.set_app_setting(CURRENT_ROUND_KEY, validate_round(round))


class CurrentRoundCache:
    """
    Caches the current round for a fixed time-to-live.

    Owned by the caller's process; pass it to code that needs the round and
    call invalidate() after changing the stored value.

    Example:
        cache = CurrentRoundCache(lambda: read_current_round(store), ttl_seconds=30)
        cache.get()         # reads the store
        cache.get()         # cached
        cache.invalidate()  # next get() reads again
    """

    def __init__(
        self,
        loader: Callable[[], str],
        ttl_seconds: float = 30.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._loader = loader
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._value: Optional[str] = None
        self._expires_at = 0.0

    @classmethod
    def for_store(cls, store: LeagueStore, ttl_seconds: float = 30.0, default: str = 'WC') -> 'CurrentRoundCache':
        return cls(lambda: read_current_round(store, default), ttl_seconds)

    def get(self) -> str:
        now = self._clock()
        if self._value is not None and now < self._expires_at:
            return self._value
        self._value = self._loader()
        self._expires_at = now + self.ttl_seconds
        return self._value

    def invalidate(self) -> None:
        self._value = None
        self._expires_at = 0.0
