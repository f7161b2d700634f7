"""
Single elimination bracket generation.
"""
import logging
import math
from typing import List, Optional, Sequence

from .advancement import propagate_winner
from .errors import InvalidInput
from .models import Bracket, BracketMatch, Entrant, SeededEntrant, Slot, LOWER, UPPER

logger = logging.getLogger(__name__)


def get_round_name(matches_in_round: int, round_number: Optional[int] = None) -> str:
    """Name a round by how many matches it holds."""
    if matches_in_round == 1:
        return "Final"
    elif matches_in_round == 2:
        return "Semi-Final"
    elif matches_in_round == 4:
        return "Quarter-Final"
    elif matches_in_round > 0 and matches_in_round & (matches_in_round - 1) == 0:
        return f"Round of {matches_in_round * 2}"
    else:
        return f"Round {round_number}"


def calculate_bracket_size(num_entrants: int) -> int:
    """Calculate the bracket size (next power of 2)."""
    if num_entrants <= 0:
        return 0
    return 2 ** math.ceil(math.log2(num_entrants))


def calculate_byes(num_entrants: int) -> int:
    """Calculate number of byes needed."""
    return calculate_bracket_size(num_entrants) - num_entrants


def generate_bracket_order(bracket_size: int) -> List[int]:
    """
    Generate the standard tournament bracket order.

    Starting from [1, 2], every seed ``s`` is followed by
    ``2 * len + 1 - s`` until the bracket is full, so adjacent entries are
    first round opponents and higher seeds meet as late as possible.

    For 8: [1, 8, 4, 5, 2, 7, 3, 6] -> 1v8, 4v5, 2v7, 3v6
    """
    if bracket_size < 2:
        return [1] if bracket_size == 1 else []
    order = [1, 2]
    while len(order) < bracket_size:
        next_order = []
        for seed in order:
            next_order.extend([seed, 2 * len(order) + 1 - seed])
        order = next_order
    return order


def _normalise_seeds(seeded_entrants: Sequence) -> List[SeededEntrant]:
    seeded = []
    seen = set()
    for index, item in enumerate(seeded_entrants):
        if isinstance(item, SeededEntrant):
            entry = SeededEntrant(item.entrant_id, item.group_id, item.rank, index + 1, name=item.name)
        elif isinstance(item, Entrant):
            entry = SeededEntrant(item.id, None, None, index + 1, name=item.name)
        else:
            entry = SeededEntrant(item, None, None, index + 1)
        if entry.entrant_id is None:
            raise InvalidInput(f"Seed {index + 1} has no entrant id")
        if entry.entrant_id in seen:
            raise InvalidInput(f"Entrant {entry.entrant_id} is seeded more than once")
        seen.add(entry.entrant_id)
        seeded.append(entry)
    return seeded


def _seed_slot(entry: SeededEntrant) -> Slot:
    return Slot(entry.entrant_id, seed=entry.seed, group_id=entry.group_id, rank=entry.rank)


def _next_link(round_number: int, match_number: int, total_rounds: int):
    if round_number >= total_rounds:
        return None, None
    next_slot = UPPER if match_number % 2 == 1 else LOWER
    return (round_number + 1, (match_number + 1) // 2), next_slot


def build_bracket(seeded_entrants: Sequence) -> Bracket:
    """
    Build a complete single elimination bracket from a seed-ordered list.

    Round 1 pairs seed ``s`` with seed ``S + 1 - s``; matches are numbered in
    bracket order so the top two seeds can only meet in the final. Missing
    opponents are byes, resolved at once and carried into round 2.
    Later rounds are unresolved placeholders linked to their feeding matches.
    """
    seeded = _normalise_seeds(seeded_entrants)
    if not seeded:
        raise InvalidInput("At least one seeded entrant is required")

    bracket_size = calculate_bracket_size(len(seeded))
    bracket = Bracket(bracket_size, seeded=seeded)
    if bracket_size == 1:
        bracket.champion = seeded[0].entrant_id
        logger.info("Single entrant %s is champion without a match", bracket.champion)
        return bracket

    total_rounds = bracket.total_rounds
    seed_to_entry = {entry.seed: entry for entry in seeded}
    bracket_order = generate_bracket_order(bracket_size)

    matches_in_round = bracket_size // 2
    round_name = get_round_name(matches_in_round, 1)
    for index in range(0, bracket_size, 2):
        match_number = index // 2 + 1
        upper_seed, lower_seed = bracket_order[index], bracket_order[index + 1]
        upper_entry = seed_to_entry.get(upper_seed)
        lower_entry = seed_to_entry.get(lower_seed)
        next_key, next_slot = _next_link(1, match_number, total_rounds)
        match = BracketMatch(
            1, match_number, round_name,
            upper=_seed_slot(upper_entry) if upper_entry else Slot.bye(upper_seed),
            lower=_seed_slot(lower_entry) if lower_entry else Slot.bye(lower_seed),
            next_key=next_key, next_slot=next_slot,
        )
        bracket.matches[match.key] = match

    for round_number in range(2, total_rounds + 1):
        matches_in_round //= 2
        round_name = get_round_name(matches_in_round, round_number)
        for match_number in range(1, matches_in_round + 1):
            next_key, next_slot = _next_link(round_number, match_number, total_rounds)
            match = BracketMatch(round_number, match_number, round_name,
                                 next_key=next_key, next_slot=next_slot)
            bracket.matches[match.key] = match

    # Byes resolve without a score
    for match in bracket.round_matches(1):
        if match.is_bye:
            present = match.lower if match.upper.is_bye else match.upper
            match.winner = present.entrant_id
            propagate_winner(bracket, match)

    logger.info("Built bracket: %d entrants, size %d, %d byes, %d rounds",
                len(seeded), bracket_size, bracket.byes, total_rounds)
    return bracket
