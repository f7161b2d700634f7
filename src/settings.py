"""
Loading host-side configuration and input files for the draw.
"""
import csv
import logging
import os

import yaml

from draw.errors import InvalidInput
from draw.models import Entrant, Standing

logger = logging.getLogger(__name__)

BASE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
DATA_DIR = os.environ.get('DRAW_DATA_DIR', os.path.join(BASE_DIR, 'data'))


def get_default_settings():
    """Return default settings."""
    return {
        'group_count': 2,
        'advance_per_group': 2,
        'shuffle_groups': False,
        'shuffle_seed': None,
        'round_formats': {},
    }


def load_settings(path=None):
    """Load settings from YAML file, merging with defaults."""
    defaults = get_default_settings()
    path = path or os.path.join(DATA_DIR, 'settings.yaml')
    if not os.path.exists(path):
        logger.warning("Settings file %s not found, using defaults", path)
        return defaults
    with open(path, 'r', encoding='utf-8') as f:
        data = yaml.safe_load(f)
    if not data:
        return defaults
    for key, value in defaults.items():
        if key not in data:
            data[key] = value
    data['round_formats'] = {int(k): int(v) for k, v in (data['round_formats'] or {}).items()}
    return data


def load_entrants(path):
    """
    Load seed-ordered entrants from YAML.

    Accepts a list of names, or a list of mappings with ``id``, ``name`` and
    optional ``team``.
    """
    with open(path, 'r', encoding='utf-8') as f:
        data = yaml.safe_load(f) or []
    entrants = []
    for item in data:
        if isinstance(item, dict):
            entrant_id = str(item.get('id', item.get('name')))
            entrants.append(Entrant(entrant_id, item.get('name', entrant_id), item.get('team')))
        else:
            entrants.append(Entrant(str(item)))
    return entrants


def load_boards(path):
    """Load board numbers from a CSV file with a ``board_number`` column."""
    boards = []
    with open(path, mode='r', encoding='utf-8') as file:
        reader = csv.DictReader(file)
        for row in reader:
            value = (row.get('board_number') or '').strip()
            if value:
                boards.append(int(value))
    return boards


def load_standings(path):
    """
    Load final group standings from YAML.

    Each group maps to a list of entrant ids in rank order, or to a list of
    mappings with ``entrant`` and optional ``rank``, ``wins``, ``losses``,
    ``leg_diff``.
    """
    with open(path, 'r', encoding='utf-8') as f:
        data = yaml.safe_load(f) or {}
    standings = {}
    for group_id, rows in data.items():
        group_id = str(group_id)
        if rows is not None and not isinstance(rows, list):
            raise InvalidInput(f"Standings for group {group_id} in {path} must be a list")
        group_standings = []
        for position, row in enumerate(rows or [], start=1):
            if isinstance(row, dict):
                group_standings.append(Standing(
                    str(row['entrant']), group_id, row.get('rank', position),
                    wins=row.get('wins', 0), losses=row.get('losses', 0), leg_diff=row.get('leg_diff', 0),
                ))
            else:
                group_standings.append(Standing(str(row), group_id, position))
        standings[group_id] = group_standings
    return standings
