"""
Tests for serialization, legal actions and text conversion.
"""
import pytest
import json
from engine import (
    Rules,
    EventType,
    Action,
    CityPayload,
    create_initial_state,
    serialize_game_state,
    deserialize_game_state,
    serialize_action,
    deserialize_action,
    serialize_action_payload,
    deserialize_action_payload,
    legal_actions,
    state_to_text,
    legal_actions_to_text,
)


def test_serialize_deserialize_game_state_roundtrip():
    """Test that GameState can be serialized and deserialized correctly."""
    original_state = create_initial_state("test_game", rules=Rules(outbreak_limit=5), seed=3)
    original_state = original_state.step(Action.MOVE, CityPayload(city_id="CHI"))

    serialized = serialize_game_state(original_state)
    json_str = json.dumps(serialized)
    deserialized_state = deserialize_game_state(json.loads(json_str))

    assert serialize_game_state(deserialized_state) == serialized
    assert deserialized_state.pawn_at == "CHI"
    assert deserialized_state.rules.outbreak_limit == 5
    assert deserialized_state.cities["ATL"].position == (20.0, 70.0)
    assert deserialized_state.events[0].type == EventType.MOVED
    assert serialized["total_cubes"] == original_state.total_cubes()


def test_action_serialization():
    assert serialize_action(Action.END_TURN) == "end_turn"
    assert deserialize_action("treat") == Action.TREAT
    with pytest.raises(ValueError):
        deserialize_action("fly")


def test_action_payload_serialization():
    payload = CityPayload(city_id="PAR")

    data = serialize_action_payload(payload)

    assert data == {"type": "CityPayload", "city_id": "PAR"}
    assert deserialize_action_payload(data) == payload
    # The type tag is optional for city payloads
    assert deserialize_action_payload({"city_id": "MAD"}) == CityPayload(city_id="MAD")
    with pytest.raises(ValueError):
        deserialize_action_payload({"type": "CityPayload"})
    with pytest.raises(ValueError):
        deserialize_action_payload({"city_id": ["MAD"]})
    with pytest.raises(ValueError):
        deserialize_action_payload({"type": "TilePayload", "tile_id": 1})


def test_legal_actions_match_button_state(make_state):
    """Only actions whose preconditions hold are listed."""
    state = make_state(hand=["CHI", "PAR"])

    actions = legal_actions(state)

    moves = {p.city_id for a, p in actions if a == Action.MOVE}
    assert moves == {"CHI", "MAD", "SAN"}
    assert (Action.TREAT, None) not in actions
    assert (Action.CURE, None) not in actions
    assert (Action.END_TURN, None) in actions
    assert len([a for a, _ in actions if a == Action.SELECT_CITY]) == 5


def test_legal_actions_include_treat_and_cure(make_state):
    state = make_state(cubes={"ATL": 1}, hand=["CHI", "PAR", "MAD"])

    actions = legal_actions(state)

    assert (Action.TREAT, None) in actions
    assert (Action.CURE, None) in actions


def test_legal_actions_without_actions_left(make_state):
    state = make_state(cubes={"ATL": 1}, actions_left=0, hand=["CHI", "PAR", "MAD"])

    actions = {a for a, _ in legal_actions(state)}

    assert actions == {Action.SELECT_CITY, Action.END_TURN}


def test_legal_actions_are_accepted(make_state):
    """Every listed action steps without being rejected."""
    state = make_state(cubes={"ATL": 2}, hand=["CHI", "PAR", "MAD"])

    for action, payload in legal_actions(state):
        new_state = state.step(action, payload)
        assert EventType.ACTION_REJECTED not in [e.type for e in new_state.events]


def test_no_legal_actions_when_finished(make_state):
    state = make_state(phase="finished", outcome="won")

    assert legal_actions(state) == []


def test_state_to_text(make_state):
    state = make_state(cubes={"PAR": 2}, hand=["CHI"], outbreaks=1, message="New turn.")

    text = state_to_text(state)

    assert "Outbreaks: 1/7" in text
    assert "Pawn at: Atlanta" in text
    assert "Hand (1): Chicago" in text
    assert "Paris: 2 cubes" in text
    assert "Atlanta [station, pawn]" in text
    assert "Status: New turn." in text


def test_legal_actions_to_text(make_state):
    state = make_state()

    text = legal_actions_to_text(legal_actions(state), state)

    assert "- Move -> Chicago" in text
    assert "- End Turn" in text
