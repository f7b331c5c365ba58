"""
Pytest configuration and shared fixtures.
"""
import os
import pytest

# Set environment BEFORE main is imported by any test module
os.environ.setdefault("ENVIRONMENT", "test")
os.environ["RATE_LIMIT"] = "10000/minute"

from engine import GameState, build_cities


@pytest.fixture(autouse=True)
def reset_game_store():
    """Start every test with an empty in-process game store."""
    from api.game_store import game_store

    game_store.clear()
    yield
    game_store.clear()


@pytest.fixture
def make_state():
    """Build a deterministic game state on the default board.

    Keyword `cubes` maps city IDs to cube counts; every other keyword is
    passed to GameState.
    """
    def _make_state(cubes=None, **overrides):
        cities = build_cities()
        for city_id, count in (cubes or {}).items():
            cities[city_id].cubes = count
        fields = {
            "game_id": "test_game",
            "cities": cities,
            "pawn_at": "ATL",
            "actions_left": 4,
            "phase": "action",
            "infection_deck": ["MAD", "SAN"],
            "player_deck": ["PAR", "MAD", "SAN"],
            "hand": [],
        }
        fields.update(overrides)
        return GameState(**fields)

    return _make_state
