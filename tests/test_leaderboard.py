"""Tests for roster totals and league leaderboards."""

from conftest import roster_with
from playoff_challenge.leaderboard import (
    build_leaderboard,
    calculate_roster_score,
    league_settings,
    rank_rosters,
    rescore,
)
from playoff_challenge.models import PlayerScore, PlayerStats


class TestCalculateRosterScore:
    """Tests for multiplier-weighted roster totals."""

    def test_multipliers_applied(self):
        roster = roster_with('u1', 'L1', 'DIV', qb=('J.Allen-BUF-QB', 3), rb1=('J.Cook-BUF-RB', 1))
        score = calculate_roster_score(roster, {'J.Allen-BUF-QB': 20.5, 'J.Cook-BUF-RB': 12.0})

        assert score.total_points == 73.5
        assert [s.slot for s in score.breakdown] == ['qb', 'rb1']
        assert score.breakdown[0].base_points == 20.5
        assert score.breakdown[0].multiplier == 3
        assert score.breakdown[0].final_points == 61.5

    def test_player_without_score_counts_zero(self):
        roster = roster_with('u1', 'L1', 'DIV', qb=('J.Allen-BUF-QB', 2))
        score = calculate_roster_score(roster, {})
        assert score.total_points == 0.0
        assert score.breakdown[0].final_points == 0.0

    def test_half_cent_totals_round_up(self):
        roster = roster_with('u1', 'L1', 'DIV', qb=('J.Allen-BUF-QB', 1))
        score = calculate_roster_score(roster, {'J.Allen-BUF-QB': 0.125})
        assert score.breakdown[0].final_points == 0.13
        assert score.total_points == 0.13

    def test_empty_roster(self):
        score = calculate_roster_score(roster_with('u1', 'L1', 'DIV'), {'J.Allen-BUF-QB': 30})
        assert score.total_points == 0.0
        assert score.breakdown == []


class TestRankRosters:
    """Tests for leaderboard ordering."""

    def test_ties_share_rank(self):
        rosters = [
            roster_with('low', 'L1', 'WC', qb=('Q.B-AAA-QB', 1)),
            roster_with('high', 'L1', 'WC', qb=('Q.B-BBB-QB', 1)),
            roster_with('tied', 'L1', 'WC', qb=('Q.B-CCC-QB', 1)),
        ]
        points = {'Q.B-AAA-QB': 10.0, 'Q.B-BBB-QB': 25.0, 'Q.B-CCC-QB': 25.0}

        entries = rank_rosters(rosters, points)

        assert [(e.user_id, e.rank) for e in entries] == [('high', 1), ('tied', 1), ('low', 3)]

    def test_entry_dict(self):
        entries = rank_rosters([roster_with('u1', 'L1', 'WC', k=('T.Bass-BUF-K', 2))], {'T.Bass-BUF-K': 7.0})
        data = entries[0].to_dict()
        assert data['points'] == 14.0
        assert data['breakdown'][0]['slot'] == 'k'


class TestLeagueScoring:
    """Tests for league settings applied at leaderboard time."""

    def test_unknown_league_uses_defaults(self, store):
        settings = league_settings(store, 'missing')
        assert settings.receiving.reception == 1.0

    def test_league_override(self, store):
        store.upsert_league('L1', 'Main', 'HALF_PPR', {'passing': {'touchdown': 6}})
        settings = league_settings(store, 'L1')
        assert settings.receiving.reception == 0.5
        assert settings.passing.touchdown == 6

    def test_rescore_uses_stats(self, store):
        store.upsert_league('L1', 'Standard', 'STANDARD')
        scores = {
            'K.Shakir-BUF-WR': PlayerScore(
                'K.Shakir-BUF-WR', 'WC', 22.5,
                PlayerStats(receptions=7, receiving_yards=95, receiving_touchdowns=1),
            ),
        }
        assert rescore(scores, league_settings(store, 'L1')) == {'K.Shakir-BUF-WR': 15.5}

    def test_rescore_keeps_points_without_stats(self, store):
        scores = {'BUF-DEF': PlayerScore('BUF-DEF', 'WC', 8.0)}
        assert rescore(scores, league_settings(store, 'L1')) == {'BUF-DEF': 8.0}

    def test_build_leaderboard(self, seeded_store):
        seeded_store.upsert_league('L1', 'Half', 'HALF_PPR')
        seeded_store.upsert_player_score(PlayerScore(
            'K.Shakir-BUF-WR', 'WC', 22.5,
            PlayerStats(receptions=7, receiving_yards=95, receiving_touchdowns=1),
        ))
        seeded_store.upsert_player_score(PlayerScore(
            'J.Allen-BUF-QB', 'WC', 27.0,
            PlayerStats(passing_yards=275, passing_touchdowns=2, interceptions=1,
                        rushing_yards=40, rushing_touchdowns=1),
        ))
        seeded_store.upsert_roster(roster_with('u1', 'L1', 'WC', wr1=('K.Shakir-BUF-WR', 1)))
        seeded_store.upsert_roster(roster_with('u2', 'L1', 'WC', qb=('J.Allen-BUF-QB', 1)))
        seeded_store.upsert_roster(roster_with('u3', 'L2', 'WC', qb=('J.Allen-BUF-QB', 1)))

        entries = build_leaderboard(seeded_store, 'L1', 'WC')

        assert [(e.user_id, e.points) for e in entries] == [('u2', 27.0), ('u1', 19.0)]
