WINNERS = 'winners'
LOSERS = 'losers'
FINALS = 'finals'

SIDES = (WINNERS, LOSERS, FINALS)


class Participant:
    def __init__(self, id, ref, seed, eliminated=False):
        self.id = id
        self.ref = ref
        self.seed = seed
        self.eliminated = eliminated

    def to_dict(self):
        return {'id': self.id, 'ref': self.ref, 'seed': self.seed, 'eliminated': self.eliminated}

    @classmethod
    def from_dict(cls, data):
        return cls(data['id'], data['ref'], data['seed'], eliminated=data.get('eliminated', False))

    def __repr__(self):
        return f"Participant(id={self.id}, ref={self.ref}, seed={self.seed}, eliminated={self.eliminated})"


class Region:
    def __init__(self, id, position, name=None):
        self.id = id
        self.position = position
        self.name = name if name else f"Region {position}"

    def to_dict(self):
        return {'id': self.id, 'position': self.position, 'name': self.name}

    @classmethod
    def from_dict(cls, data):
        return cls(data['id'], data['position'], name=data.get('name'))

    def __repr__(self):
        return f"Region(id={self.id}, position={self.position}, name={self.name})"


class Match:
    """
    One node of a bracket graph.

    ``id`` is the match's position in the list it was generated into.
    ``slot_a``/``slot_b`` hold participant ids (or team refs for fixed games)
    once known. ``winner_to``/``loser_to`` name the downstream match id and
    the ``*_is_slot_a`` flags say which of its two slots gets filled.
    """

    def __init__(self, id, round, match_number, side=WINNERS, region_id=None, tournament_id=None, bracket_id=None):
        self.id = id
        self.round = round
        self.match_number = match_number
        self.side = side
        self.region_id = region_id
        self.tournament_id = tournament_id
        self.bracket_id = bracket_id
        self.region_position = None
        self.slot_a = None
        self.slot_b = None
        self.winner = None
        self.winner_to = None
        self.winner_is_slot_a = None
        self.loser_to = None
        self.loser_is_slot_a = None
        self.is_reset = False
        self.skipped = False

    @property
    def code(self):
        if self.side == FINALS:
            return 'BR' if self.is_reset else 'GF'
        if self.region_position is not None:
            return f"R{self.round}-E{self.region_position}-G{self.match_number}"
        prefix = 'L' if self.side == LOSERS else 'W'
        if self.tournament_id is not None:
            prefix = 'R'
        return f"{prefix}{self.round}-M{self.match_number}"

    @property
    def slots(self):
        return (self.slot_a, self.slot_b)

    def set_slot(self, is_slot_a, value):
        if is_slot_a:
            self.slot_a = value
        else:
            self.slot_b = value

    def to_dict(self):
        return {
            'id': self.id,
            'code': self.code,
            'round': self.round,
            'match_number': self.match_number,
            'side': self.side,
            'region_id': self.region_id,
            'region_position': self.region_position,
            'tournament_id': self.tournament_id,
            'bracket_id': self.bracket_id,
            'slot_a': self.slot_a,
            'slot_b': self.slot_b,
            'winner': self.winner,
            'winner_to': self.winner_to,
            'winner_is_slot_a': self.winner_is_slot_a,
            'loser_to': self.loser_to,
            'loser_is_slot_a': self.loser_is_slot_a,
            'is_reset': self.is_reset,
            'skipped': self.skipped,
        }

    @classmethod
    def from_dict(cls, data):
        match = cls(data['id'], data['round'], data['match_number'], side=data.get('side', WINNERS),
                    region_id=data.get('region_id'), tournament_id=data.get('tournament_id'),
                    bracket_id=data.get('bracket_id'))
        match.region_position = data.get('region_position')
        for field in ('slot_a', 'slot_b', 'winner', 'winner_to', 'winner_is_slot_a',
                      'loser_to', 'loser_is_slot_a'):
            setattr(match, field, data.get(field))
        match.is_reset = data.get('is_reset', False)
        match.skipped = data.get('skipped', False)
        return match

    def __repr__(self):
        return (f"Match(id={self.id}, code={self.code}, slots=({self.slot_a}, {self.slot_b}), "
                f"winner_to={self.winner_to}, loser_to={self.loser_to})")
