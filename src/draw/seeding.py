"""
Crossover seeding from group standings into a knockout bracket.
"""
import logging
from typing import Dict, List, Sequence

from .elimination import calculate_bracket_size
from .errors import InvalidInput, UnsupportedSeedingShape
from .models import SeededEntrant, Standing

logger = logging.getLogger(__name__)


def _ranked_standings(group_id, standings: Sequence) -> List[Standing]:
    """Normalise one group's standings and order them by rank."""
    ranked = []
    for position, item in enumerate(standings, start=1):
        if isinstance(item, Standing):
            ranked.append(Standing(item.entrant_id, group_id, item.rank,
                                   item.wins, item.losses, item.leg_diff))
        else:
            ranked.append(Standing(item, group_id, position))

    ranks = [s.rank for s in ranked]
    for standing in ranked:
        if isinstance(standing.rank, bool) or not isinstance(standing.rank, int):
            raise InvalidInput(f"Group {group_id} rank for {standing.entrant_id} must be an integer, "
                               f"got {standing.rank!r}")
    if len(set(ranks)) != len(ranks):
        raise InvalidInput(f"Group {group_id} has duplicate ranks: {sorted(ranks)}")
    if sorted(ranks) != list(range(1, len(ranks) + 1)):
        raise InvalidInput(f"Group {group_id} ranks must run 1..{len(ranks)}, got {sorted(ranks)}")
    return sorted(ranked, key=lambda s: s.rank)


def _check_first_round(seeded: List[SeededEntrant]) -> None:
    bracket_size = calculate_bracket_size(len(seeded))
    by_seed = {entry.seed: entry for entry in seeded}
    for seed in range(1, bracket_size // 2 + 1):
        top = by_seed.get(seed)
        bottom = by_seed.get(bracket_size + 1 - seed)
        if top and bottom and top.group_id == bottom.group_id:
            raise UnsupportedSeedingShape(
                f"Seeds {top.seed} and {bottom.seed} both come from group {top.group_id} "
                f"and would meet in the first round"
            )


def seed_from_standings(standings_by_group: Dict[str, Sequence], advance_count: int) -> List[SeededEntrant]:
    """
    Create a seeded list of entrants advancing from groups.

    All group winners are seeded first, then all runners-up and so on, groups
    taken in id order within each rank. With seed ``s`` meeting ``S + 1 - s``
    in the bracket this gives the crossover: for two groups A_i meets
    B_(P+1-i) and the group winners sit in opposite halves.

    Args:
        standings_by_group: group id -> Standings (or entrant ids in rank order)
        advance_count: how many finishers advance from each group

    Returns:
        SeededEntrant list ordered by seed.
    """
    if isinstance(advance_count, bool) or not isinstance(advance_count, int) or advance_count < 1:
        raise InvalidInput(f"Advance count must be a positive integer, got {advance_count!r}")
    if not standings_by_group:
        raise InvalidInput("At least one group of standings is required")

    group_ids = sorted(standings_by_group)
    ranked = {}
    owner = {}
    for group_id in group_ids:
        ranked[group_id] = _ranked_standings(group_id, standings_by_group[group_id])
        for standing in ranked[group_id]:
            if owner.setdefault(standing.entrant_id, group_id) != group_id:
                raise InvalidInput(
                    f"Entrant {standing.entrant_id} is listed in groups {owner[standing.entrant_id]} and {group_id}"
                )

    seeded = []
    for position in range(1, advance_count + 1):
        for group_id in group_ids:
            if position <= len(ranked[group_id]):
                standing = ranked[group_id][position - 1]
                seeded.append(SeededEntrant(standing.entrant_id, group_id, standing.rank, len(seeded) + 1))

    if not seeded:
        raise InvalidInput("No entrants advance from the given standings")
    if len(group_ids) > 1:
        _check_first_round(seeded)

    logger.info("Seeded %d entrants from %d group(s), top %d advancing",
                len(seeded), len(group_ids), advance_count)
    return seeded


def seed_label(entrant: SeededEntrant, group_count: int) -> str:
    """Display label: group and rank ("A1") with several groups, "#1" with one."""
    if group_count > 1 and entrant.group_id is not None:
        return f"{entrant.group_id}{entrant.rank}"
    return f"#{entrant.rank if entrant.rank is not None else entrant.seed}"
