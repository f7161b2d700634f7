"""
Shared pytest fixtures for draw tests.

Running tests:
    pytest tests/
"""
import pytest
import sys
import os
import yaml

# Add src directory to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from draw.models import Entrant, Standing


@pytest.fixture
def client():
    """Create a test client for the JSON API."""
    from app import app
    app.config['TESTING'] = True
    with app.test_client() as client:
        yield client


@pytest.fixture
def six_entrants():
    """Six seed-ordered entrants."""
    return [Entrant(f"P{i}", name=f"Player {i}") for i in range(1, 7)]


@pytest.fixture
def doubles_entrants():
    """Three doubles teams and one solo entrant, partners listed apart."""
    return [
        Entrant("a1", team_id="T1"),
        Entrant("b1", team_id="T2"),
        Entrant("solo"),
        Entrant("a2", team_id="T1"),
        Entrant("c1", team_id="T3"),
        Entrant("b2", team_id="T2"),
        Entrant("c2", team_id="T3"),
    ]


@pytest.fixture
def two_group_standings():
    """Final standings for two groups of four."""
    return {
        'A': [Standing(f"A{r}", 'A', r, wins=4 - r) for r in range(1, 5)],
        'B': [Standing(f"B{r}", 'B', r, wins=4 - r) for r in range(1, 5)],
    }


@pytest.fixture
def four_group_standings():
    """Final standings for four groups of four, entrant ids like 'C2'."""
    return {
        group: [Standing(f"{group}{r}", group, r) for r in range(1, 5)]
        for group in ['A', 'B', 'C', 'D']
    }


@pytest.fixture
def data_dir(tmp_path):
    """Temporary data directory with entrants, boards, standings and settings files."""
    entrants = [{'id': f"p{i}", 'name': f"Player {i}"} for i in range(1, 9)]
    (tmp_path / "entrants.yaml").write_text(yaml.dump(entrants, default_flow_style=False))
    (tmp_path / "boards.csv").write_text("board_number\n1\n2\n3\n4\n")
    (tmp_path / "standings.yaml").write_text(yaml.dump({
        'A': ['p1', 'p3', 'p5', 'p7'],
        'B': ['p2', 'p4', 'p6', 'p8'],
    }, default_flow_style=False))
    (tmp_path / "settings.yaml").write_text(yaml.dump({
        'group_count': 2,
        'advance_per_group': 2,
    }, default_flow_style=False))
    return tmp_path
