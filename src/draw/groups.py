"""
Group stage distribution: splitting entrants into balanced groups.
"""
import logging
import random
from typing import Dict, List, Optional, Sequence

from .errors import InvalidInput
from .models import Entrant, Group

logger = logging.getLogger(__name__)


def group_letter(index: int) -> str:
    """Letter id for a 0-indexed group: A..Z, then AA, AB, ..."""
    letters = ''
    index += 1
    while index > 0:
        index, remainder = divmod(index - 1, 26)
        letters = chr(65 + remainder) + letters
    return letters


def calculate_group_distribution(total: int, group_count: int) -> Dict:
    """
    Calculate balanced group sizes.

    The first ``total % group_count`` groups receive one extra member so no
    two groups differ by more than one.
    """
    if group_count <= 0:
        raise InvalidInput(f"Group count must be positive, got {group_count}")
    base_size, remainder = divmod(total, group_count)
    group_sizes = [base_size + 1 if i < remainder else base_size for i in range(group_count)]
    return {
        'group_sizes': group_sizes,
        'base_size': base_size,
        'larger_groups': remainder,
    }


def build_team_units(entrants: Sequence[Entrant]) -> List[List[Entrant]]:
    """
    Collapse doubles partners into single units.

    Entrants sharing a team id form one unit placed where the first partner
    appears; entrants without a team id stay on their own.
    """
    units = []
    by_team = {}
    for entrant in entrants:
        if entrant.team_id is None:
            units.append([entrant])
        elif entrant.team_id in by_team:
            by_team[entrant.team_id].append(entrant)
        else:
            unit = [entrant]
            by_team[entrant.team_id] = unit
            units.append(unit)
    return units


def _unit_ids(unit) -> List[str]:
    if isinstance(unit, Entrant):
        return [unit.id]
    if isinstance(unit, str):
        return [unit]
    return [member.id if isinstance(member, Entrant) else member for member in unit]


def _check_units(units) -> None:
    seen_ids = set()
    team_owner = {}
    for index, unit in enumerate(units):
        members = [unit] if isinstance(unit, (Entrant, str)) else list(unit)
        if not members:
            raise InvalidInput(f"Unit {index + 1} is empty")
        for member in members:
            member_id = member.id if isinstance(member, Entrant) else member
            if member_id in seen_ids:
                raise InvalidInput(f"Entrant {member_id} appears more than once")
            seen_ids.add(member_id)
            team_id = getattr(member, 'team_id', None)
            if team_id is None:
                continue
            if team_owner.setdefault(team_id, index) != index:
                raise InvalidInput(f"Team {team_id} is split across units; group partners together first")


def distribute_groups(entrants: Sequence, group_count: int, shuffle: bool = False,
                      rng: Optional[int] = None) -> List[Group]:
    """
    Split ordered entrants into ``group_count`` groups of near-equal size.

    Args:
        entrants: Seed-ordered units. A unit is an Entrant, an entrant id, or a
            sequence of Entrants forming one doubles team.
        group_count: Number of groups, 1..len(entrants).
        shuffle: Randomise units before the split (pre-ranking assignment).
        rng: Optional seed making the shuffle reproducible.

    Returns:
        Groups A, B, C, ... whose entrant ids keep the unit order.
    """
    units = list(entrants)
    if isinstance(group_count, bool) or not isinstance(group_count, int):
        raise InvalidInput(f"Group count must be an integer, got {group_count!r}")
    if group_count <= 0:
        raise InvalidInput(f"Group count must be positive, got {group_count}")
    if group_count > len(units):
        raise InvalidInput(f"Cannot split {len(units)} entrants into {group_count} groups")
    _check_units(units)
    if rng is not None and (isinstance(rng, bool) or not isinstance(rng, int)):
        raise InvalidInput(f"Shuffle seed must be an integer, got {rng!r}")

    if shuffle:
        random.Random(rng).shuffle(units)

    distribution = calculate_group_distribution(len(units), group_count)
    groups = []
    index = 0
    for group_index, size in enumerate(distribution['group_sizes']):
        entrant_ids = []
        for unit in units[index:index + size]:
            entrant_ids.extend(_unit_ids(unit))
        groups.append(Group(group_letter(group_index), entrant_ids))
        index += size

    logger.info("Distributed %d units into %d groups (sizes %s)",
                len(units), group_count, distribution['group_sizes'])
    return groups
