"""Constants and mappings for the playoff challenge scoring pipeline."""

# Playoff rounds, in bracket order
ROUNDS = ['WC', 'DIV', 'CONF', 'SB']

ROUND_NAMES = {
    'WC': 'Wild Card',
    'DIV': 'Divisional',
    'CONF': 'Conference',
    'SB': 'Super Bowl',
}

# ESPN postseason week numbers (week 4 is the Pro Bowl)
ROUND_TO_ESPN_WEEK = {
    'WC': 1,
    'DIV': 2,
    'CONF': 3,
    'SB': 5,
}
ESPN_POSTSEASON_TYPE = 3

SCORING_FORMATS = ('PPR', 'HALF_PPR', 'STANDARD')

RECEPTION_POINTS = {
    'PPR': 1.0,
    'HALF_PPR': 0.5,
    'STANDARD': 0.0,
}

# Format-independent defaults; receiving.reception is filled in per format
BASE_SCORING = {
    'passing': {'yards_per_point': 25, 'touchdown': 4, 'interception': -2},
    'rushing': {'yards_per_point': 10, 'touchdown': 6},
    'receiving': {'yards_per_point': 10, 'touchdown': 6},
    'fumbles': {'lost': -2},
    'kicking': {'field_goal': 3, 'extra_point': 1},
    'defense': {
        'touchdown': 6,
        'sack': 1,
        'interception': 2,
        'fumble_recovery': 2,
        'safety': 2,
    },
}

# (max points allowed, bonus); 35+ falls through to POINTS_ALLOWED_FLOOR
POINTS_ALLOWED_TIERS = [
    (0, 10),
    (6, 7),
    (13, 4),
    (20, 1),
    (27, 0),
    (34, -1),
]
POINTS_ALLOWED_FLOOR = -4

# Roster slots in display order, with the position each slot accepts
ROSTER_SLOTS = ['qb', 'rb1', 'rb2', 'wr1', 'wr2', 'te', 'k', 'dst']
SLOT_POSITIONS = {
    'qb': 'QB',
    'rb1': 'RB',
    'rb2': 'RB',
    'wr1': 'WR',
    'wr2': 'WR',
    'te': 'TE',
    'k': 'K',
    'dst': 'DST',
}
POSITIONS = ('QB', 'RB', 'WR', 'TE', 'K', 'DST')

MIN_WEEKS_HELD = 1
MAX_WEEKS_HELD = 4

# Stored game statuses
STATUS_SCHEDULED = 'scheduled'
STATUS_IN_PROGRESS = 'in_progress'
STATUS_FINAL = 'final'
GAME_STATUSES = (STATUS_SCHEDULED, STATUS_IN_PROGRESS, STATUS_FINAL)

# ESPN competition states
ESPN_STATE_PRE = 'pre'
ESPN_STATE_IN = 'in'
ESPN_STATE_POST = 'post'

CURRENT_ROUND_KEY = 'current_round'

# Team abbreviation normalization (ESPN format -> player key format)
TEAM_ABBREV_NORMALIZE = {
    'WSH': 'WAS',
}
