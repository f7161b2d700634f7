"""
Recording knockout results and advancing winners.

A match moves from pending to completed once, when a decisive score is
recorded. The winner is copied forward into its linked next-round slot;
nothing is ever written backwards.
"""
import logging
import math
from numbers import Real

from .errors import InvalidInput, StructuralInconsistency, TiedScore

logger = logging.getLogger(__name__)


def propagate_winner(bracket, match) -> None:
    """Write ``match.winner`` into the linked slot, or crown the champion."""
    winner_slot = match.winner_slot()
    if match.next_key is None:
        bracket.champion = match.winner
        logger.info("%s wins the %s; tournament complete", match.winner, match.label)
        return

    next_match = bracket.matches.get(match.next_key)
    if next_match is None:
        raise StructuralInconsistency(
            f"Match {match.key} links to missing match {match.next_key}"
        )
    next_slot = next_match.slot(match.next_slot)
    if next_slot.is_resolved and next_slot.entrant_id != match.winner:
        raise StructuralInconsistency(
            f"Slot {match.next_slot} of match {match.next_key} already holds {next_slot.entrant_id}"
        )
    filled = winner_slot.copy()
    next_slot.entrant_id = filled.entrant_id
    next_slot.seed = filled.seed
    next_slot.group_id = filled.group_id
    next_slot.rank = filled.rank
    logger.debug("%s advances from %s to %s (%s)", match.winner, match.key, match.next_key, match.next_slot)


def _check_score(value, name):
    if isinstance(value, bool) or not isinstance(value, Real):
        raise InvalidInput(f"{name} must be a number, got {value!r}")
    if not math.isfinite(value):
        raise InvalidInput(f"{name} must be finite, got {value}")
    if value < 0:
        raise InvalidInput(f"{name} cannot be negative, got {value}")


def record_result(bracket, round_number, match_number, score1, score2, formats=None):
    """
    Record a decisive result and advance the winner.

    Args:
        bracket: Bracket to mutate.
        round_number, match_number: Key of the match being scored.
        score1, score2: Scores for the upper and lower slot.
        formats: Optional round format map; when given, the winner must reach
            exactly the round's legs to win.

    Returns:
        The same bracket, mutated.
    """
    match = bracket.get(round_number, match_number)
    if match is None:
        raise InvalidInput(f"No match at round {round_number}, match {match_number}")
    if match.winner is not None:
        raise StructuralInconsistency(f"Match {match.key} is already completed")
    for slot_name, slot in (('upper', match.upper), ('lower', match.lower)):
        if not slot.is_resolved:
            state = 'a bye' if slot.is_bye else 'unresolved'
            raise StructuralInconsistency(f"Match {match.key} {slot_name} slot is {state}")

    _check_score(score1, 'score1')
    _check_score(score2, 'score2')
    if score1 == score2:
        raise TiedScore(f"Match {match.key} cannot end {score1}-{score2}; enter a decisive score")

    if formats is not None:
        round_format = formats.get(round_number)
        if round_format is not None:
            high, low = max(score1, score2), min(score1, score2)
            if high != round_format.legs_to_win:
                raise InvalidInput(
                    f"{round_format.name} is {round_format.description}; "
                    f"the winner needs {round_format.legs_to_win} legs, got {high}"
                )
            if low >= round_format.legs_to_win:
                raise InvalidInput(f"Loser cannot reach {round_format.legs_to_win} legs")

    winner_slot = match.upper if score1 > score2 else match.lower
    match.scores = (score1, score2)
    match.winner = winner_slot.entrant_id
    logger.info("%s %s: %s beat %s %s-%s", match.label, match.key, match.winner,
                (match.lower if winner_slot is match.upper else match.upper).entrant_id,
                max(score1, score2), min(score1, score2))
    propagate_winner(bracket, match)
    return bracket
