"""
Tracks which WebSockets are watching which game.
"""
from collections import defaultdict
from typing import Dict, Set, Optional
from fastapi import WebSocket
import asyncio

from .logging_config import get_logger

logger = get_logger("websocket_manager")


class ConnectionManager:
    """Watchers per game, with cleanup of sockets that fail to receive."""

    def __init__(self):
        self.watchers: Dict[str, Set[WebSocket]] = defaultdict(set)
        self.game_of: Dict[WebSocket, str] = {}
        self._lock = asyncio.Lock()

    async def connect(self, websocket: WebSocket, game_id: str):
        await websocket.accept()
        async with self._lock:
            self.watchers[game_id].add(websocket)
            self.game_of[websocket] = game_id

    async def disconnect(self, websocket: WebSocket):
        async with self._lock:
            game_id = self.game_of.pop(websocket, None)
            if game_id is None:
                return
            self.watchers[game_id].discard(websocket)
            if not self.watchers[game_id]:
                del self.watchers[game_id]

    async def send_personal_message(self, message: dict, websocket: WebSocket):
        try:
            await websocket.send_json(message)
        except Exception as e:
            logger.warning("send_failed", message_type=message.get("type"), error=str(e))
            await self.disconnect(websocket)

    async def broadcast_to_game(self, game_id: str, message: dict, exclude: Optional[WebSocket] = None) -> int:
        """Send a message to every watcher of a game. Returns how many received it."""
        async with self._lock:
            targets = [ws for ws in self.watchers.get(game_id, ()) if ws is not exclude]

        dead = []
        for websocket in targets:
            try:
                await websocket.send_json(message)
            except Exception as e:
                logger.warning("broadcast_failed", game_id=game_id, message_type=message.get("type"), error=str(e))
                dead.append(websocket)

        for websocket in dead:
            await self.disconnect(websocket)
        return len(targets) - len(dead)

    def get_connection_count(self, game_id: str) -> int:
        return len(self.watchers.get(game_id, ()))


connection_manager = ConnectionManager()
