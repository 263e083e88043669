"""Tests for kickoff locks and elimination checks."""

from datetime import datetime, timezone

from conftest import roster_with
from playoff_challenge.models import Game
from playoff_challenge.player_locks import (
    get_eliminated_players,
    get_next_lock_time,
    get_roster_lock_status,
    is_player_locked,
)

BUF_KICKOFF = datetime(2026, 1, 10, 21, 30, tzinfo=timezone.utc)


class TestIsPlayerLocked:
    """Tests for per-player lock status."""

    def test_before_kickoff(self, seeded_store):
        now = datetime(2026, 1, 10, 20, 30, tzinfo=timezone.utc)
        status = is_player_locked(seeded_store, 'J.Allen-BUF-QB', 'WC', now)
        assert not status.is_locked
        assert status.kickoff_time == BUF_KICKOFF
        assert status.seconds_until_lock == 3600

    def test_at_kickoff(self, seeded_store):
        status = is_player_locked(seeded_store, 'J.Allen-BUF-QB', 'WC', BUF_KICKOFF)
        assert status.is_locked
        assert status.seconds_until_lock == 0

    def test_team_without_game(self, seeded_store):
        status = is_player_locked(seeded_store, 'P.Mahomes-KC-QB', 'WC', BUF_KICKOFF)
        assert not status.is_locked
        assert status.kickoff_time is None

    def test_naive_kickoff_treated_as_utc(self, store):
        store.upsert_games([Game('1', 'DIV', 'KC', 'HOU', '2026-01-18T20:00:00')])
        now = datetime(2026, 1, 18, 20, 0, 1, tzinfo=timezone.utc)
        assert is_player_locked(store, 'P.Mahomes-KC-QB', 'DIV', now).is_locked

    def test_naive_now_treated_as_utc(self, seeded_store):
        before = is_player_locked(seeded_store, 'J.Allen-BUF-QB', 'WC', datetime(2026, 1, 10))
        assert not before.is_locked
        assert before.seconds_until_lock == 21.5 * 3600
        assert is_player_locked(seeded_store, 'J.Allen-BUF-QB', 'WC', datetime(2026, 1, 10, 22, 0)).is_locked

    def test_roster_lock_status(self, seeded_store):
        roster = roster_with('u1', 'L1', 'WC', qb=('J.Allen-BUF-QB', 1), wr1=('M.Evans-TB-WR', 1))
        now = datetime(2026, 1, 10, 22, 0, tzinfo=timezone.utc)

        status = get_roster_lock_status(seeded_store, roster, 'WC', now)

        assert status['J.Allen-BUF-QB'].is_locked
        assert not status['M.Evans-TB-WR'].is_locked


class TestEliminatedPlayers:
    """Tests for schedule-driven elimination."""

    def test_team_not_in_remaining_rounds(self, seeded_store):
        seeded_store.upsert_games([Game('401671801', 'DIV', 'KC', 'BUF', '2026-01-18T20:00:00Z')])
        roster = roster_with(
            'u1', 'L1', 'DIV',
            qb=('J.Allen-BUF-QB', 2),
            rb1=('N.Harris-PIT-RB', 1),
            dst=('BUF-DEF', 2),
        )

        assert get_eliminated_players(seeded_store, roster, 'DIV') == ['N.Harris-PIT-RB']

    def test_later_rounds_count_as_alive(self, store):
        """Test that bracket order is used: a CONF team is alive during DIV."""
        store.upsert_games([Game('2', 'CONF', 'KC', 'BUF', '2026-01-25T20:00:00Z')])
        roster = roster_with('u1', 'L1', 'DIV', qb=('J.Allen-BUF-QB', 2))
        assert get_eliminated_players(store, roster, 'DIV') == []

    def test_earlier_rounds_ignored(self, seeded_store):
        roster = roster_with('u1', 'L1', 'DIV', qb=('J.Allen-BUF-QB', 2))
        assert get_eliminated_players(seeded_store, roster, 'DIV') == ['J.Allen-BUF-QB']


class TestNextLockTime:
    def test_earliest_kickoff(self, seeded_store):
        assert get_next_lock_time(seeded_store, 'WC') == BUF_KICKOFF

    def test_nothing_scheduled(self, seeded_store):
        assert get_next_lock_time(seeded_store, 'SB') is None
