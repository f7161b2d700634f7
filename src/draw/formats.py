from .elimination import get_round_name
from .errors import InvalidInput


class RoundFormat:
    def __init__(self, round, name, legs_to_win):
        self.round = round
        self.name = name
        self.legs_to_win = legs_to_win

    @property
    def best_of(self):
        return self.legs_to_win * 2 - 1

    @property
    def description(self):
        return f"Best of {self.best_of}"

    def as_dict(self):
        return {'round': self.round, 'name': self.name, 'legs_to_win': self.legs_to_win,
                'format': self.description}

    def __repr__(self):
        return f"RoundFormat(round={self.round}, name={self.name}, legs_to_win={self.legs_to_win})"


def default_legs_to_win(matches_in_round):
    # Final best of 7, semis and quarters best of 5, earlier rounds best of 3
    if matches_in_round == 1:
        return 4
    elif matches_in_round in (2, 4):
        return 3
    return 2


def default_round_formats(bracket, overrides=None):
    """Build the round -> RoundFormat map for a bracket, applying legs overrides."""
    overrides = overrides or {}
    formats = {}
    for round_number, matches in bracket.rounds().items():
        legs = overrides.get(round_number, default_legs_to_win(len(matches)))
        formats[round_number] = RoundFormat(round_number, get_round_name(len(matches), round_number), legs)
    for round_number, legs in overrides.items():
        if round_number not in formats:
            raise InvalidInput(f"Bracket has no round {round_number}")
        _check_legs(legs)
    return formats


def _check_legs(legs_to_win):
    if isinstance(legs_to_win, bool) or not isinstance(legs_to_win, int) or legs_to_win < 1:
        raise InvalidInput(f"Legs to win must be a positive integer, got {legs_to_win!r}")


def update_round_format(formats, round_number, legs_to_win):
    """Return a copy of ``formats`` with one round's legs to win changed."""
    if round_number not in formats:
        raise InvalidInput(f"No format for round {round_number}")
    _check_legs(legs_to_win)
    updated = dict(formats)
    current = formats[round_number]
    updated[round_number] = RoundFormat(round_number, current.name, legs_to_win)
    return updated
