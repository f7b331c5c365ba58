"""
Serialization and text conversion for the outbreak game engine.
"""
from typing import Dict, List, Optional, Any, Tuple
from dataclasses import asdict

from .engine import (
    Rules,
    City,
    EventType,
    GameEvent,
    GameState,
    Action,
    ActionPayload,
    CityPayload,
)


def serialize_game_state(state: GameState) -> Dict[str, Any]:
    """
    Serialize GameState to a JSON-serializable dictionary.
    """
    return {
        "game_id": state.game_id,
        "cities": {city_id: serialize_city(c) for city_id, c in state.cities.items()},
        "pawn_at": state.pawn_at,
        "selected_city": state.selected_city,
        "actions_left": state.actions_left,
        "outbreaks": state.outbreaks,
        "cured": state.cured,
        "phase": state.phase,
        "infection_deck": list(state.infection_deck),
        "player_deck": list(state.player_deck),
        "hand": list(state.hand),
        "turn_number": state.turn_number,
        "outcome": state.outcome,
        "loss_reason": state.loss_reason,
        "message": state.message,
        "events": [serialize_event(e) for e in state.events],
        "rules": asdict(state.rules),
        "total_cubes": state.total_cubes(),
    }


def deserialize_game_state(data: Dict[str, Any]) -> GameState:
    """
    Deserialize a dictionary to GameState.
    """
    rules = Rules(**data["rules"]) if data.get("rules") else Rules()
    return GameState(
        game_id=data["game_id"],
        cities={city_id: deserialize_city(c) for city_id, c in data.get("cities", {}).items()},
        pawn_at=data.get("pawn_at", rules.start_city),
        selected_city=data.get("selected_city"),
        actions_left=data.get("actions_left", rules.actions_per_turn),
        outbreaks=data.get("outbreaks", 0),
        cured=data.get("cured", False),
        phase=data.get("phase", "action"),
        infection_deck=list(data.get("infection_deck", [])),
        player_deck=list(data.get("player_deck", [])),
        hand=list(data.get("hand", [])),
        turn_number=data.get("turn_number", 0),
        outcome=data.get("outcome"),
        loss_reason=data.get("loss_reason"),
        message=data.get("message", ""),
        events=[deserialize_event(e) for e in data.get("events", [])],
        rules=rules,
    )


def serialize_city(city: City) -> Dict[str, Any]:
    """Serialize a City to a dictionary."""
    return {
        "id": city.id,
        "name": city.name,
        "position": list(city.position),
        "links": list(city.links),
        "station": city.station,
        "cubes": city.cubes,
    }


def deserialize_city(data: Dict[str, Any]) -> City:
    """Deserialize a dictionary to a City."""
    return City(
        id=data["id"],
        name=data["name"],
        position=tuple(data["position"]),
        links=list(data.get("links", [])),
        station=data.get("station", False),
        cubes=data.get("cubes", 0),
    )


def serialize_event(event: GameEvent) -> Dict[str, Any]:
    """Serialize a GameEvent to a dictionary."""
    return {
        "type": event.type.value,
        "message": event.message,
        "data": dict(event.data),
    }


def deserialize_event(data: Dict[str, Any]) -> GameEvent:
    """Deserialize a dictionary to a GameEvent."""
    return GameEvent(
        type=EventType(data["type"]),
        message=data.get("message", ""),
        data=dict(data.get("data", {})),
    )


def serialize_action(action: Action) -> str:
    """Serialize an Action to a string."""
    return action.value


def deserialize_action(value: str) -> Action:
    """Deserialize a string to an Action."""
    return Action(value)


def serialize_action_payload(payload: ActionPayload) -> Dict[str, Any]:
    """Serialize an ActionPayload to a dictionary."""
    if isinstance(payload, CityPayload):
        return {
            "type": "CityPayload",
            "city_id": payload.city_id,
        }
    else:
        raise ValueError(f"Unknown payload type: {type(payload)}")


def deserialize_action_payload(data: Dict[str, Any]) -> ActionPayload:
    """Deserialize a dictionary to an ActionPayload."""
    payload_type = data.get("type", "CityPayload")
    if payload_type == "CityPayload":
        if "city_id" not in data:
            raise ValueError("CityPayload requires 'city_id'")
        if not isinstance(data["city_id"], str):
            raise ValueError("CityPayload 'city_id' must be a string")
        return CityPayload(city_id=data["city_id"])
    else:
        raise ValueError(f"Unknown payload type: {payload_type}")


def legal_actions(state: GameState) -> List[Tuple[Action, Optional[ActionPayload]]]:
    """
    Get all actions whose preconditions hold in the current state.
    Returns a list of (Action, Optional[ActionPayload]) tuples.

    Mirrors which buttons a client should enable: an action missing from this
    list would come back as a rejected no-op.
    """
    legal = []
    if state.phase != "action":
        return legal

    for city_id in state.cities:
        legal.append((Action.SELECT_CITY, CityPayload(city_id=city_id)))

    if state.actions_left > 0:
        here = state.cities[state.pawn_at]
        for neighbor_id in here.links:
            legal.append((Action.MOVE, CityPayload(city_id=neighbor_id)))
        if here.cubes > 0:
            legal.append((Action.TREAT, None))
        if here.station and not state.cured and len(state.hand) >= state.rules.hand_to_cure:
            legal.append((Action.CURE, None))

    legal.append((Action.END_TURN, None))
    return legal


def state_to_text(state: GameState) -> str:
    """
    Convert a game state to a readable status summary.
    """
    lines = []
    here = state.cities.get(state.pawn_at)
    lines.append(f"Turn {state.turn_number} - phase: {state.phase}")
    lines.append(f"Actions left: {state.actions_left}")
    lines.append(f"Outbreaks: {state.outbreaks}/{state.rules.outbreak_limit}")
    lines.append(f"Infection rate: {state.rules.infections_per_turn}")
    lines.append(f"Cured: {'Yes' if state.cured else 'No'}")
    lines.append(f"Pawn at: {here.name if here else state.pawn_at}")
    if state.selected_city:
        lines.append(f"Selected: {state.cities[state.selected_city].name}")

    hand_names = [state.cities[card].name if card in state.cities else card for card in state.hand]
    lines.append(f"Hand ({len(state.hand)}): {', '.join(hand_names) if hand_names else '(empty)'}")
    lines.append(f"Decks: {len(state.player_deck)} player, {len(state.infection_deck)} infection")

    lines.append("Cities:")
    for city in state.cities.values():
        flags = []
        if city.station:
            flags.append("station")
        if city.id == state.pawn_at:
            flags.append("pawn")
        suffix = f" [{', '.join(flags)}]" if flags else ""
        links = ", ".join(state.cities[n].name for n in city.links)
        lines.append(f"  {city.name}{suffix}: {city.cubes} cubes (links: {links})")

    if state.outcome:
        lines.append(f"Outcome: {state.outcome}")
    if state.message:
        lines.append(f"Status: {state.message}")
    return "\n".join(lines)


def legal_actions_to_text(actions: List[Tuple[Action, Optional[ActionPayload]]], state: Optional[GameState] = None) -> str:
    """Describe a list of legal actions, one per line."""
    lines = []
    for action, payload in actions:
        label = action.value.replace("_", " ").title()
        if isinstance(payload, CityPayload):
            city_name = state.cities[payload.city_id].name if state and payload.city_id in state.cities else payload.city_id
            label += f" -> {city_name}"
        lines.append(f"- {label}")
    return "\n".join(lines)
