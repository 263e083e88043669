"""Shared fixtures: an in-memory store and ESPN payload builders."""

import pytest

from playoff_challenge.models import Game, Roster, RosterSlot
from playoff_challenge.store import open_store

BUF_PIT_GAME_ID = '401671789'
TB_WAS_GAME_ID = '401671791'

POOL = [
    {'player_key': 'J.Allen-BUF-QB', 'espn_id': '3918298', 'full_name': 'Josh Allen', 'team': 'BUF', 'position': 'QB'},
    {'player_key': 'J.Cook-BUF-RB', 'espn_id': '4379399', 'full_name': 'James Cook', 'team': 'BUF', 'position': 'RB'},
    {'player_key': 'K.Shakir-BUF-WR', 'espn_id': '4373678', 'full_name': 'Khalil Shakir', 'team': 'BUF', 'position': 'WR'},
    {'player_key': 'T.Bass-BUF-K', 'espn_id': '3917232', 'full_name': 'Tyler Bass', 'team': 'BUF', 'position': 'K'},
    {'player_key': 'BUF-DEF', 'espn_id': None, 'full_name': 'Buffalo Bills', 'team': 'BUF', 'position': 'DST'},
    {'player_key': 'R.Wilson-PIT-QB', 'espn_id': '14881', 'full_name': 'Russell Wilson', 'team': 'PIT', 'position': 'QB'},
    {'player_key': 'N.Harris-PIT-RB', 'espn_id': '4241457', 'full_name': 'Najee Harris', 'team': 'PIT', 'position': 'RB'},
    {'player_key': 'PIT-DEF', 'espn_id': None, 'full_name': 'Pittsburgh Steelers', 'team': 'PIT', 'position': 'DST'},
    {'player_key': 'J.Daniels-WAS-QB', 'espn_id': '4426348', 'full_name': 'Jayden Daniels', 'team': 'WAS', 'position': 'QB'},
    {'player_key': 'M.Evans-TB-WR', 'espn_id': '16737', 'full_name': 'Mike Evans', 'team': 'TB', 'position': 'WR'},
]

PASSING_LABELS = ['C/ATT', 'YDS', 'AVG', 'TD', 'INT']
RUSHING_LABELS = ['CAR', 'YDS', 'AVG', 'TD', 'LONG']
RECEIVING_LABELS = ['REC', 'YDS', 'AVG', 'TD', 'LONG', 'TGTS']
FUMBLES_LABELS = ['FUM', 'LOST', 'REC']
KICKING_LABELS = ['FG', 'PCT', 'LONG', 'XP', 'PTS']
DEFENSIVE_LABELS = ['TOT', 'SOLO', 'SACKS', 'TFL', 'PD', 'QB HTS', 'TD']
INTERCEPTIONS_LABELS = ['INT', 'YDS', 'TD']


def build_event(game_id, home='BUF', away='PIT', home_score=0, away_score=0, state='in', completed=False):
    """Scoreboard event in ESPN's shape."""
    return {
        'id': game_id,
        'competitions': [{
            'status': {'type': {'state': state, 'completed': completed}},
            'competitors': [
                {'homeAway': 'home', 'team': {'abbreviation': home}, 'score': str(home_score)},
                {'homeAway': 'away', 'team': {'abbreviation': away}, 'score': str(away_score)},
            ],
        }],
    }


def build_summary(teams):
    """
    Game summary in ESPN's shape.

    teams: {abbreviation: {category: (labels, [(athlete_id, name, stats), ...])}}
    """
    players = []
    for abbreviation, categories in teams.items():
        statistics = []
        for name, (labels, athletes) in categories.items():
            statistics.append({
                'name': name,
                'labels': labels,
                'athletes': [
                    {'athlete': {'id': athlete_id, 'displayName': display}, 'stats': stats}
                    for athlete_id, display, stats in athletes
                ],
            })
        players.append({'team': {'abbreviation': abbreviation}, 'statistics': statistics})
    return {'boxscore': {'players': players}}


def buf_pit_summary():
    """BUF 31, PIT 17."""
    return build_summary({
        'BUF': {
            'passing': (PASSING_LABELS, [('3918298', 'Josh Allen', ['22/31', '275', '8.9', '2', '1'])]),
            'rushing': (RUSHING_LABELS, [
                ('3918298', 'Josh Allen', ['6', '40', '6.7', '1', '14']),
                ('4379399', 'James Cook', ['18', '96', '5.3', '1', '22']),
            ]),
            'receiving': (RECEIVING_LABELS, [('4373678', 'Khalil Shakir', ['7', '95', '13.6', '1', '31', '9'])]),
            'kicking': (KICKING_LABELS, [('3917232', 'Tyler Bass', ['1/1', '100.0', '45', '4/4', '7'])]),
            'defensive': (DEFENSIVE_LABELS, [
                ('9001', 'Greg Rousseau', ['5', '3', '2', '1', '0', '3', '0']),
                ('9002', 'Ed Oliver', ['4', '4', '1', '0', '1', '1', '0']),
            ]),
            'interceptions': (INTERCEPTIONS_LABELS, [('9003', 'Taron Johnson', ['1', '12', '0'])]),
        },
        'PIT': {
            'passing': (PASSING_LABELS, [('14881', 'Russell Wilson', ['19/33', '210', '6.4', '1', '1'])]),
            'rushing': (RUSHING_LABELS, [('4241457', 'Najee Harris', ['15', '60', '4.0', '0', '12'])]),
            'fumbles': (FUMBLES_LABELS, [('4241457', 'Najee Harris', ['1', '1', '0'])]),
            'defensive': (DEFENSIVE_LABELS, [('9101', 'T.J. Watt', ['7', '5', '1', '1', '0', '2', '0'])]),
        },
    })


def empty_roster(user_id, league_id, round):
    return Roster(user_id=user_id, league_id=league_id, round=round)


def roster_with(user_id, league_id, round, **slots):
    """Roster with slots given as name=(player_key, weeks_held)."""
    roster = empty_roster(user_id, league_id, round)
    for name, (player_key, weeks_held) in slots.items():
        roster.slots[name] = RosterSlot(player_key, weeks_held)
    return roster


@pytest.fixture
def store():
    """Empty in-memory store."""
    store = open_store(':memory:')
    yield store
    store.close()


@pytest.fixture
def seeded_store(store):
    """Store with the player pool and the two Wild Card games."""
    store.upsert_players(POOL)
    store.upsert_games([
        Game(BUF_PIT_GAME_ID, 'WC', 'BUF', 'PIT', '2026-01-10T21:30:00Z'),
        Game(TB_WAS_GAME_ID, 'WC', 'TB', 'WAS', '2026-01-11T01:00:00Z'),
    ])
    return store
