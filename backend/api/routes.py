"""API routes for the outbreak game."""
from fastapi import APIRouter, HTTPException
from pydantic import BaseModel
from typing import List, Dict, Optional, Any
import uuid

from engine import (
    ActionPayload,
    create_initial_state,
    serialize_game_state,
    deserialize_game_state,
    serialize_action,
    deserialize_action,
    serialize_action_payload,
    deserialize_action_payload,
    serialize_event,
    legal_actions,
    legal_actions_to_text,
)
from .game_store import game_store
from .logging_config import get_logger, activity_logger, bind_game
from .monitoring import active_games, record_step
from .websocket_routes import broadcast_game_state_update, broadcast_game_event

logger = get_logger("routes")

router = APIRouter()


class StepLog(BaseModel):
    """Log entry for a game step."""
    step_idx: int
    action: Dict[str, Any]  # Serialized action
    state_before: Dict[str, Any]
    state_after: Dict[str, Any]
    accepted: bool
    message: str
    legal_actions_text: str  # Allowed actions before the step, as shown to agents
    timestamp: str


# Request/Response models
class CreateGameRequest(BaseModel):
    """Request to create a new game."""
    rng_seed: Optional[int] = None  # Optional RNG seed for reproducibility


class CreateGameResponse(BaseModel):
    """Response when creating a new game."""
    game_id: str
    initial_state: Dict[str, Any]


class ActRequest(BaseModel):
    """Request to perform an action."""
    action: Dict[str, Any]  # Serialized Action JSON: {"type": ..., "payload": ...}


class ActResponse(BaseModel):
    """Response after performing an action."""
    new_state: Dict[str, Any]
    accepted: bool
    message: str
    events: List[Dict[str, Any]]


class ReplayResponse(BaseModel):
    """Response containing game replay logs."""
    game_id: str
    steps: List[StepLog]


def _load_state_json(game_id: str) -> Dict[str, Any]:
    if game_store.get_game(game_id) is None:
        raise HTTPException(status_code=404, detail="Game not found")
    state_json = game_store.get_latest_state(game_id)
    if state_json is None:
        raise HTTPException(status_code=404, detail="Game state not found.")
    return state_json


@router.post("/games", response_model=CreateGameResponse)
async def create_game(request: Optional[CreateGameRequest] = None):
    """Create a new game and return the initial state."""
    rng_seed = request.rng_seed if request else None
    game_id = str(uuid.uuid4())

    initial_state = create_initial_state(game_id, seed=rng_seed)
    serialized_state = serialize_game_state(initial_state)
    game_store.create_game(game_id, serialized_state, rng_seed=rng_seed)

    active_games.inc()
    activity_logger.log_game_created(game_id, rng_seed)

    return CreateGameResponse(
        game_id=game_id,
        initial_state=serialized_state
    )


@router.get("/games/{game_id}")
async def get_game(game_id: str):
    """Get current game state (serialized JSON)."""
    return _load_state_json(game_id)


@router.get("/games/{game_id}/legal_actions")
async def get_legal_actions(game_id: str):
    """Get the actions whose preconditions hold in the current game state."""
    current_state = deserialize_game_state(_load_state_json(game_id))

    serialized_actions = []
    for action, payload in legal_actions(current_state):
        action_dict = {
            "type": serialize_action(action),
        }
        if payload:
            action_dict["payload"] = serialize_action_payload(payload)
        serialized_actions.append(action_dict)

    return {"legal_actions": serialized_actions}


@router.post("/games/{game_id}/act", response_model=ActResponse)
async def act(game_id: str, request: ActRequest):
    """Apply an action to the game and return the new state."""
    bind_game(game_id)
    state_json = _load_state_json(game_id)
    current_state = deserialize_game_state(state_json)

    # Deserialize action
    try:
        action_dict = request.action
        action_type = action_dict.get("type")
        if not action_type:
            raise ValueError("Action must have a 'type' field")

        action = deserialize_action(action_type)

        payload: Optional[ActionPayload] = None
        payload_data = action_dict.get("payload")
        if payload_data is not None:
            if isinstance(payload_data, dict):
                payload = deserialize_action_payload(payload_data)
            else:
                raise ValueError("Payload must be a JSON object or null")
    except (ValueError, KeyError) as e:
        raise HTTPException(status_code=400, detail=f"Invalid action format: {str(e)}")

    legal_actions_text = legal_actions_to_text(legal_actions(current_state), current_state)

    # Apply step
    try:
        new_state = current_state.step(action, payload)
    except ValueError as e:
        logger.warning("invalid_action", action=action.value, error=str(e))
        raise HTTPException(status_code=400, detail=f"Invalid action: {str(e)}")

    accepted = record_step(action.value, new_state)
    state_after = serialize_game_state(new_state)
    events = [serialize_event(e) for e in new_state.events]

    game_store.save_game_state(game_id, state_after)
    game_store.add_step(
        game_id=game_id,
        action=action_dict,
        state_before=state_json,
        state_after=state_after,
        accepted=accepted,
        message=new_state.message,
        legal_actions_text=legal_actions_text,
    )
    activity_logger.log_game_action(
        game_id,
        action.value,
        accepted,
        message=new_state.message,
        details={"payload": action_dict.get("payload"), "phase": new_state.phase},
    )

    await broadcast_game_state_update(game_id, state_after)
    for event in events:
        await broadcast_game_event(game_id, event)

    return ActResponse(
        new_state=state_after,
        accepted=accepted,
        message=new_state.message,
        events=events,
    )


@router.get("/games/{game_id}/replay", response_model=ReplayResponse)
async def get_replay(game_id: str):
    """Get the sequence of logged steps for a game."""
    if game_store.get_game(game_id) is None:
        raise HTTPException(status_code=404, detail="Game not found")

    steps = [
        StepLog(
            step_idx=record.step_idx,
            action=record.action,
            state_before=record.state_before,
            state_after=record.state_after,
            accepted=record.accepted,
            message=record.message,
            legal_actions_text=record.legal_actions_text,
            timestamp=record.timestamp,
        )
        for record in game_store.get_steps(game_id)
    ]

    return ReplayResponse(
        game_id=game_id,
        steps=steps
    )
