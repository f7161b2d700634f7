"""
Round-robin fixture generation for group play.

Uses the circle method: position 1 stays fixed while every other position
rotates one step per round. Odd groups are scheduled as the next even size;
the extra position is a phantom and any pairing with it is a bye.
"""
import logging
from typing import Dict, Iterator, List, Optional, Sequence, Tuple

from .errors import InvalidInput
from .groups import calculate_group_distribution
from .models import Fixture, Group

logger = logging.getLogger(__name__)


def _circle_rounds(size: int) -> Iterator[List[Tuple[int, int]]]:
    """Yield each round's 0-indexed position pairs for an even ``size``."""
    positions = list(range(size))
    for _ in range(size - 1):
        yield [(positions[i], positions[size - 1 - i]) for i in range(size // 2)]
        positions = [positions[0], positions[-1]] + positions[1:-1]


def _check_entrant_ids(entrant_ids: Sequence[str]) -> None:
    if len(set(entrant_ids)) != len(entrant_ids):
        raise InvalidInput("Entrant ids in a group must be unique")


def schedule_round_robin(entrant_ids: Sequence[str], board_numbers: Sequence[int],
                         group_id: Optional[str] = None) -> List[Fixture]:
    """
    Generate a complete round-robin for one group.

    Boards are handed out in generation order across all rounds, so board
    ``board_numbers[i % len(board_numbers)]`` goes to the i-th fixture.

    Returns K*(K-1)/2 fixtures, or an empty list for fewer than 2 entrants.
    """
    entrant_ids = list(entrant_ids)
    boards = list(board_numbers)
    if not boards:
        raise InvalidInput("At least one board number is required")
    _check_entrant_ids(entrant_ids)

    count = len(entrant_ids)
    if count < 2:
        logger.info("Group %s has %d entrant(s); no fixtures to schedule", group_id, count)
        return []

    effective_size = count if count % 2 == 0 else count + 1
    fixtures = []
    for round_index, pairs in enumerate(_circle_rounds(effective_size), start=1):
        for first, second in pairs:
            if first >= count or second >= count:
                bye_entrant = entrant_ids[first if first < count else second]
                logger.debug("Group %s round %d: bye for %s", group_id, round_index, bye_entrant)
                continue
            board = boards[len(fixtures) % len(boards)]
            fixture = Fixture(round_index, board, entrant_ids[first], entrant_ids[second], group_id)
            logger.debug("Group %s round %d, board %s: %s vs %s",
                         group_id, round_index, board, fixture.entrant_a, fixture.entrant_b)
            fixtures.append(fixture)

    logger.info("Group %s: %d entrants, %d rounds, %d fixtures on boards %s",
                group_id, count, effective_size - 1, len(fixtures), boards)
    return fixtures


def round_robin_byes(entrant_ids: Sequence[str]) -> Dict[str, int]:
    """Map each entrant to the round it sits out. Empty for even groups."""
    entrant_ids = list(entrant_ids)
    _check_entrant_ids(entrant_ids)
    count = len(entrant_ids)
    if count < 2 or count % 2 == 0:
        return {}

    byes = {}
    for round_index, pairs in enumerate(_circle_rounds(count + 1), start=1):
        for first, second in pairs:
            if first >= count:
                byes[entrant_ids[second]] = round_index
            elif second >= count:
                byes[entrant_ids[first]] = round_index
    return byes


def allocate_boards(board_numbers: Sequence[int], group_count: int) -> List[List[int]]:
    """
    Split a board inventory between groups.

    Each group gets a contiguous run of boards, runs differing in length by at
    most one. With fewer boards than groups, groups share boards in turn.
    """
    boards = list(board_numbers)
    if not boards:
        raise InvalidInput("At least one board number is required")
    if group_count <= 0:
        raise InvalidInput(f"Group count must be positive, got {group_count}")

    if len(boards) < group_count:
        return [[boards[i % len(boards)]] for i in range(group_count)]

    allocation = []
    index = 0
    for size in calculate_group_distribution(len(boards), group_count)['group_sizes']:
        allocation.append(boards[index:index + size])
        index += size
    return allocation


def generate_group_stage(groups: Sequence[Group], boards_per_group=None) -> Dict[str, List[Fixture]]:
    """
    Schedule every group.

    Args:
        groups: Groups from distribute_groups.
        boards_per_group: Board lists indexed like ``groups``, or a dict keyed
            by group id. Groups without boards play on board 1.

    Returns:
        dict of group id -> fixtures
    """
    boards_per_group = boards_per_group or []
    schedule = {}
    for index, group in enumerate(groups):
        if isinstance(boards_per_group, dict):
            boards = boards_per_group.get(group.id)
        else:
            boards = boards_per_group[index] if index < len(boards_per_group) else None
        schedule[group.id] = schedule_round_robin(group.entrant_ids, boards or [1], group.id)
    return schedule
