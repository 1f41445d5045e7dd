"""
Shared pytest fixtures for bracket engine tests.

Running tests:
    pytest tests/
"""
import pytest
import sys
import os

# Add src directory to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from brackets.models import Region


@pytest.fixture
def regions():
    """Four regions, deliberately out of position order."""
    return [
        Region('south', 3, name='South'),
        Region('east', 1, name='East'),
        Region('midwest', 4, name='Midwest'),
        Region('west', 2, name='West'),
    ]


@pytest.fixture
def names():
    """Factory for participant name lists of a given size."""
    def make(count):
        return [f"Player {i}" for i in range(1, count + 1)]
    return make


@pytest.fixture
def temp_data_dir(tmp_path, monkeypatch):
    """Point the Flask app at a temporary data directory."""
    import app as app_module
    data_dir = tmp_path / "data"
    data_dir.mkdir()
    monkeypatch.setitem(app_module.app.config, 'DATA_DIR', str(data_dir))
    return str(data_dir)


@pytest.fixture
def client(temp_data_dir):
    """Create a test client backed by a temporary data directory."""
    from app import app
    app.config['TESTING'] = True
    with app.test_client() as client:
        yield client


def by_side(matches, side):
    return [m for m in matches if m.side == side]


def incoming(matches):
    """Map match id -> list of (source id, kind, is_slot_a) feeding it."""
    feeds = {m.id: [] for m in matches}
    for m in matches:
        if m.winner_to is not None:
            feeds[m.winner_to].append((m.id, 'winner', m.winner_is_slot_a))
        if m.loser_to is not None:
            feeds[m.loser_to].append((m.id, 'loser', m.loser_is_slot_a))
    return feeds


def topology(bracket):
    """Shape of a generated bracket with participant ids replaced by seeds."""
    seeds = {p.id: p.seed for p in bracket['participants']}
    return [
        (m.side, m.round, m.match_number, m.winner_to, m.winner_is_slot_a,
         m.loser_to, m.loser_is_slot_a, seeds.get(m.slot_a), seeds.get(m.slot_b), m.is_reset)
        for m in bracket['matches']
    ]


def assert_each_slot_fed_once(matches):
    """Every slot of every match is filled by exactly one participant or link."""
    feeds = incoming(matches)
    for m in matches:
        claims = [is_slot_a for _, _, is_slot_a in feeds[m.id]]
        if m.slot_a is not None:
            claims.append(True)
        if m.slot_b is not None:
            claims.append(False)
        assert sorted(claims) == [False, True], f"{m.code} slots fed by {claims}"
