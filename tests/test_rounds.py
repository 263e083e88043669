"""Tests for round sequencing and the current-round cache."""

import pytest

from playoff_challenge.constants import ROUND_NAMES, ROUNDS
from playoff_challenge.rounds import (
    CurrentRoundCache,
    get_next_round,
    get_previous_round,
    read_current_round,
    validate_round,
    write_current_round,
)


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


class TestRoundOrder:
    """Tests for bracket-order helpers."""

    def test_rounds_in_bracket_order(self):
        assert ROUNDS == ['WC', 'DIV', 'CONF', 'SB']
        assert ROUND_NAMES['CONF'] == 'Conference'

    @pytest.mark.parametrize('current,expected', [
        ('WC', 'DIV'),
        ('DIV', 'CONF'),
        ('CONF', 'SB'),
        ('SB', None),
        ('XX', None),
    ])
    def test_next_round(self, current, expected):
        assert get_next_round(current) == expected

    @pytest.mark.parametrize('current,expected', [
        ('WC', None),
        ('DIV', 'WC'),
        ('SB', 'CONF'),
        ('XX', None),
    ])
    def test_previous_round(self, current, expected):
        assert get_previous_round(current) == expected

    def test_validate_round(self):
        assert validate_round('DIV') == 'DIV'
        with pytest.raises(ValueError):
            validate_round('div')


class TestCurrentRoundSetting:
    """Tests for the stored current round."""

    def test_round_trip(self, store):
        write_current_round(store, 'CONF')
        assert read_current_round(store) == 'CONF'

    def test_stored_as_json_string(self, store):
        write_current_round(store, 'WC')
        row = store.conn.execute("SELECT value FROM app_settings WHERE key = 'current_round'").fetchone()
        assert row['value'] == '"WC"'

    def test_missing_defaults(self, store):
        assert read_current_round(store) == 'WC'
        assert read_current_round(store, default='DIV') == 'DIV'

    def test_extra_quotes_stripped(self, store):
        store.set_app_setting('current_round', '"SB"')
        assert read_current_round(store) == 'SB'

    def test_invalid_value_defaults(self, store):
        store.set_app_setting('current_round', 'Pro Bowl')
        assert read_current_round(store) == 'WC'

    def test_write_rejects_invalid_round(self, store):
        with pytest.raises(ValueError):
            write_current_round(store, 'PRE')


class TestCurrentRoundCache:
    """Tests for the TTL cache."""

    def test_cached_within_ttl(self):
        clock = FakeClock()
        values = iter(['WC', 'DIV'])
        cache = CurrentRoundCache(lambda: next(values), ttl_seconds=30, clock=clock)

        assert cache.get() == 'WC'
        clock.now = 29.9
        assert cache.get() == 'WC'

    def test_reloads_after_ttl(self):
        clock = FakeClock()
        values = iter(['WC', 'DIV'])
        cache = CurrentRoundCache(lambda: next(values), ttl_seconds=30, clock=clock)

        cache.get()
        clock.now = 30.0
        assert cache.get() == 'DIV'

    def test_invalidate_forces_reload(self):
        values = iter(['WC', 'DIV'])
        cache = CurrentRoundCache(lambda: next(values), ttl_seconds=3600, clock=FakeClock())

        cache.get()
        cache.invalidate()
        assert cache.get() == 'DIV'

    def test_for_store(self, store):
        write_current_round(store, 'DIV')
        cache = CurrentRoundCache.for_store(store)
        assert cache.get() == 'DIV'
        assert cache.ttl_seconds == 30.0
