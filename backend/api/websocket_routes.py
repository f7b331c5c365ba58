"""
WebSocket routes: push game state and events to every watcher of a game.

Clients only read over the socket. Actions go through POST /games/{id}/act,
which broadcasts the new state followed by each event of the step.
"""
from typing import Any, Dict, Optional
from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from engine import deserialize_game_state, legal_actions, serialize_action, serialize_action_payload
from .websocket_manager import connection_manager
from .game_store import game_store
from .logging_config import get_logger, activity_logger, bind_game, unbind_game
from .monitoring import websocket_connections

logger = get_logger("websocket")

router = APIRouter()


def _state_message(game_id: str) -> Dict[str, Any]:
    return {"type": "game_state", "data": game_store.get_latest_state(game_id)}


def _legal_actions_message(game_id: str) -> Dict[str, Any]:
    state = deserialize_game_state(game_store.get_latest_state(game_id))
    actions = []
    for action, payload in legal_actions(state):
        entry = {"type": serialize_action(action)}
        if payload is not None:
            entry["payload"] = serialize_action_payload(payload)
        actions.append(entry)
    return {"type": "legal_actions", "data": actions}


def _reply_to(message_type: Optional[str], game_id: str) -> Dict[str, Any]:
    """Build the reply for one client message."""
    if message_type == "ping":
        return {"type": "pong"}
    if message_type == "get_state":
        return _state_message(game_id)
    if message_type == "get_legal_actions":
        return _legal_actions_message(game_id)
    if message_type == "action":
        return {"type": "error", "message": "Actions should be sent via REST API"}
    return {"type": "error", "message": f"Unknown message type: {message_type}"}


@router.websocket("/ws/game/{game_id}")
async def websocket_game_endpoint(websocket: WebSocket, game_id: str):
    """Send the current state, then answer client messages until disconnect."""
    await connection_manager.connect(websocket, game_id)
    websocket_connections.labels(game_id=game_id).inc()
    bind_game(game_id)
    activity_logger.log_websocket_event("connected", game_id)

    try:
        if game_store.get_game(game_id) is None:
            logger.warning("game_not_found")
            await connection_manager.send_personal_message(
                {"type": "error", "message": "Game not found"}, websocket
            )
            await websocket.close()
            return

        await connection_manager.send_personal_message(_state_message(game_id), websocket)

        while True:
            data = await websocket.receive_json()
            if isinstance(data, dict):
                reply = _reply_to(data.get("type"), game_id)
            else:
                logger.warning("malformed_websocket_message", received=type(data).__name__)
                reply = {"type": "error", "message": "Messages must be JSON objects"}
            await connection_manager.send_personal_message(reply, websocket)

    except WebSocketDisconnect:
        activity_logger.log_websocket_event("disconnected", game_id)
    finally:
        await connection_manager.disconnect(websocket)
        websocket_connections.labels(game_id=game_id).dec()
        logger.debug("websocket_cleanup", watchers=connection_manager.get_connection_count(game_id))
        unbind_game()


async def broadcast_game_state_update(game_id: str, state_json: dict):
    """Send the post-step state to every watcher of the game."""
    await connection_manager.broadcast_to_game(game_id, {
        "type": "game_state_update",
        "data": state_json
    })


async def broadcast_game_event(game_id: str, event_json: dict):
    """Send one serialized GameEvent to every watcher of the game."""
    await connection_manager.broadcast_to_game(game_id, {
        "type": "game_event",
        "event_type": event_json["type"],
        "data": event_json
    })
