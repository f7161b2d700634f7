"""
Exceptions raised by the draw core.

All of them derive from DrawError.
"""


class DrawError(Exception):
    """Base exception for all draw errors."""

    pass


class InvalidInput(DrawError):
    """Raised when counts, ids or scores are unusable; nothing is generated."""

    pass


class TiedScore(DrawError):
    """Raised when a knockout result has equal scores."""

    pass


class UnsupportedSeedingShape(DrawError):
    """Raised when crossover seeding would pair group-mates in the first round."""

    pass


class StructuralInconsistency(DrawError):
    """Raised when a result is recorded for a match that cannot take one."""

    pass
