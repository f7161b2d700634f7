BYE = 'BYE'
UPPER = 'upper'
LOWER = 'lower'
PENDING = 'pending'
COMPLETED = 'completed'


class Entrant:
    def __init__(self, id, name=None, team_id=None):
        self.id = id
        self.name = name if name is not None else id
        self.team_id = team_id  # Doubles partners share a team id

    def __repr__(self):
        return f"Entrant(id={self.id}, name={self.name}, team_id={self.team_id})"


class Group:
    def __init__(self, id, entrant_ids=None):
        self.id = id
        self.entrant_ids = list(entrant_ids) if entrant_ids else []

    def __len__(self):
        return len(self.entrant_ids)

    def __repr__(self):
        return f"Group(id={self.id}, entrant_ids={self.entrant_ids})"


class Fixture:
    def __init__(self, round, board, entrant_a, entrant_b, group_id=None):
        self.round = round
        self.board = board
        self.entrant_a = entrant_a
        self.entrant_b = entrant_b
        self.group_id = group_id

    @property
    def pair(self):
        return frozenset((self.entrant_a, self.entrant_b))

    def as_dict(self):
        return {
            'round': self.round,
            'board': self.board,
            'entrants': [self.entrant_a, self.entrant_b],
            'group': self.group_id,
        }

    def __eq__(self, other):
        if not isinstance(other, Fixture):
            return NotImplemented
        return self.as_dict() == other.as_dict()

    def __repr__(self):
        return (f"Fixture(round={self.round}, board={self.board}, "
                f"{self.entrant_a} vs {self.entrant_b}, group_id={self.group_id})")


class Standing:
    def __init__(self, entrant_id, group_id, rank, wins=0, losses=0, leg_diff=0):
        self.entrant_id = entrant_id
        self.group_id = group_id
        self.rank = rank
        self.wins = wins
        self.losses = losses
        self.leg_diff = leg_diff

    def __repr__(self):
        return f"Standing(entrant_id={self.entrant_id}, group_id={self.group_id}, rank={self.rank})"


class SeededEntrant:
    def __init__(self, entrant_id, group_id, rank, seed, name=None):
        self.entrant_id = entrant_id
        self.group_id = group_id
        self.rank = rank
        self.seed = seed
        self.name = name

    def as_tuple(self):
        return (self.entrant_id, self.group_id, self.rank, self.seed)

    def __eq__(self, other):
        if not isinstance(other, SeededEntrant):
            return NotImplemented
        return self.as_tuple() == other.as_tuple()

    def __repr__(self):
        return (f"SeededEntrant(entrant_id={self.entrant_id}, group_id={self.group_id}, "
                f"rank={self.rank}, seed={self.seed})")


class Slot:
    """One side of a bracket match.

    ``entrant_id`` is an entrant id, the ``BYE`` sentinel, or ``None`` while the
    feeding match is still undecided.
    """

    def __init__(self, entrant_id=None, seed=None, group_id=None, rank=None):
        self.entrant_id = entrant_id
        self.seed = seed
        self.group_id = group_id
        self.rank = rank

    @classmethod
    def bye(cls, seed=None):
        return cls(BYE, seed=seed)

    @property
    def is_bye(self):
        return self.entrant_id == BYE

    @property
    def is_resolved(self):
        return self.entrant_id is not None and not self.is_bye

    def copy(self):
        return Slot(self.entrant_id, self.seed, self.group_id, self.rank)

    def as_dict(self):
        return {
            'entrant': self.entrant_id,
            'seed': self.seed,
            'group': self.group_id,
            'rank': self.rank,
        }

    @classmethod
    def from_dict(cls, data):
        return cls(data.get('entrant'), data.get('seed'), data.get('group'), data.get('rank'))

    def __repr__(self):
        return f"Slot(entrant_id={self.entrant_id}, seed={self.seed}, group_id={self.group_id}, rank={self.rank})"


class BracketMatch:
    def __init__(self, round, match_number, label, upper=None, lower=None,
                 next_key=None, next_slot=None):
        self.round = round
        self.match_number = match_number
        self.label = label
        self.upper = upper if upper is not None else Slot()
        self.lower = lower if lower is not None else Slot()
        self.next_key = next_key
        self.next_slot = next_slot
        self.winner = None
        self.scores = None

    @property
    def key(self):
        return (self.round, self.match_number)

    @property
    def status(self):
        return COMPLETED if self.winner is not None else PENDING

    @property
    def is_bye(self):
        return self.upper.is_bye or self.lower.is_bye

    @property
    def is_playable(self):
        """Both entrants known and no result yet."""
        return self.winner is None and self.upper.is_resolved and self.lower.is_resolved

    def slot(self, name):
        if name == UPPER:
            return self.upper
        if name == LOWER:
            return self.lower
        raise KeyError(name)

    def winner_slot(self):
        if self.winner is None:
            return None
        return self.upper if self.upper.entrant_id == self.winner else self.lower

    def as_dict(self):
        return {
            'round': self.round,
            'match_number': self.match_number,
            'label': self.label,
            'upper': self.upper.as_dict(),
            'lower': self.lower.as_dict(),
            'winner': self.winner,
            'scores': list(self.scores) if self.scores is not None else None,
            'status': self.status,
            'next': list(self.next_key) if self.next_key else None,
            'next_slot': self.next_slot,
        }

    @classmethod
    def from_dict(cls, data):
        match = cls(
            data['round'],
            data['match_number'],
            data.get('label'),
            upper=Slot.from_dict(data.get('upper') or {}),
            lower=Slot.from_dict(data.get('lower') or {}),
            next_key=tuple(data['next']) if data.get('next') else None,
            next_slot=data.get('next_slot'),
        )
        match.winner = data.get('winner')
        match.scores = tuple(data['scores']) if data.get('scores') is not None else None
        return match

    def __repr__(self):
        return (f"BracketMatch(round={self.round}, match_number={self.match_number}, "
                f"{self.upper.entrant_id} vs {self.lower.entrant_id}, winner={self.winner})")


class Bracket:
    """Single elimination bracket keyed by ``(round, match_number)``."""

    def __init__(self, bracket_size, seeded=None, matches=None, champion=None):
        self.bracket_size = bracket_size
        self.seeded = list(seeded) if seeded else []
        self.matches = dict(matches) if matches else {}
        self.champion = champion

    @property
    def total_rounds(self):
        return max(self.bracket_size.bit_length() - 1, 0)

    @property
    def byes(self):
        return self.bracket_size - len(self.seeded) if self.seeded else 0

    @property
    def is_complete(self):
        return self.champion is not None

    def get(self, round_number, match_number):
        return self.matches.get((round_number, match_number))

    def __getitem__(self, key):
        return self.matches[key]

    def __contains__(self, key):
        return key in self.matches

    def __len__(self):
        return len(self.matches)

    def round_matches(self, round_number):
        return [self.matches[key] for key in sorted(self.matches) if key[0] == round_number]

    def rounds(self):
        return {r: self.round_matches(r) for r in range(1, self.total_rounds + 1)}

    @property
    def final(self):
        return self.get(self.total_rounds, 1) if self.total_rounds else None

    def playable_matches(self):
        return [self.matches[key] for key in sorted(self.matches) if self.matches[key].is_playable]

    def as_dict(self):
        return {
            'bracket_size': self.bracket_size,
            'total_rounds': self.total_rounds,
            'byes': self.byes,
            'champion': self.champion,
            'seeded': [
                {'entrant': s.entrant_id, 'group': s.group_id, 'rank': s.rank, 'seed': s.seed, 'name': s.name}
                for s in self.seeded
            ],
            'matches': [self.matches[key].as_dict() for key in sorted(self.matches)],
        }

    @classmethod
    def from_dict(cls, data):
        seeded = [
            SeededEntrant(s['entrant'], s.get('group'), s.get('rank'), s['seed'], name=s.get('name'))
            for s in data.get('seeded', [])
        ]
        matches = {}
        for match_data in data.get('matches', []):
            match = BracketMatch.from_dict(match_data)
            matches[match.key] = match
        return cls(data['bracket_size'], seeded=seeded, matches=matches, champion=data.get('champion'))

    def __repr__(self):
        return (f"Bracket(bracket_size={self.bracket_size}, matches={len(self.matches)}, "
                f"champion={self.champion})")
