"""
Pure game engine for the outbreak board game.
This module contains no web framework dependencies.
"""
from .engine import (
    Rules,
    City,
    EventType,
    GameEvent,
    GameState,
    Action,
    ActionPayload,
    CityPayload,
    DEFAULT_MAP,
    build_cities,
    build_deck,
    create_initial_state,
)
from .game import Game
from .serialization import (
    serialize_game_state,
    deserialize_game_state,
    serialize_city,
    deserialize_city,
    serialize_event,
    deserialize_event,
    serialize_action,
    deserialize_action,
    serialize_action_payload,
    deserialize_action_payload,
    legal_actions,
    state_to_text,
    legal_actions_to_text,
)

__all__ = [
    "Rules",
    "City",
    "EventType",
    "GameEvent",
    "GameState",
    "Action",
    "ActionPayload",
    "CityPayload",
    "DEFAULT_MAP",
    "build_cities",
    "build_deck",
    "create_initial_state",
    "Game",
    "serialize_game_state",
    "deserialize_game_state",
    "serialize_city",
    "deserialize_city",
    "serialize_event",
    "deserialize_event",
    "serialize_action",
    "deserialize_action",
    "serialize_action_payload",
    "deserialize_action_payload",
    "legal_actions",
    "state_to_text",
    "legal_actions_to_text",
]
