"""
Tests for the WebSocket connection manager, using stand-in sockets.
"""
import asyncio
from api.websocket_manager import ConnectionManager


class FakeSocket:
    def __init__(self, broken=False):
        self.broken = broken
        self.accepted = False
        self.sent = []

    async def accept(self):
        self.accepted = True

    async def send_json(self, message):
        if self.broken:
            raise RuntimeError("socket closed")
        self.sent.append(message)


def test_broadcast_reaches_only_watchers_of_the_game():
    async def scenario():
        manager = ConnectionManager()
        a, b, other = FakeSocket(), FakeSocket(), FakeSocket()
        await manager.connect(a, "g1")
        await manager.connect(b, "g1")
        await manager.connect(other, "g2")

        delivered = await manager.broadcast_to_game("g1", {"type": "game_state_update"}, exclude=b)
        return manager, a, b, other, delivered

    manager, a, b, other, delivered = asyncio.run(scenario())

    assert a.accepted
    assert delivered == 1
    assert a.sent == [{"type": "game_state_update"}]
    assert b.sent == []
    assert other.sent == []
    assert manager.get_connection_count("g1") == 2


def test_broken_socket_is_dropped_on_broadcast():
    async def scenario():
        manager = ConnectionManager()
        good, broken = FakeSocket(), FakeSocket(broken=True)
        await manager.connect(good, "g1")
        await manager.connect(broken, "g1")
        delivered = await manager.broadcast_to_game("g1", {"type": "game_event"})
        return manager, delivered

    manager, delivered = asyncio.run(scenario())

    assert delivered == 1
    assert manager.get_connection_count("g1") == 1


def test_disconnect_forgets_empty_games():
    async def scenario():
        manager = ConnectionManager()
        socket = FakeSocket()
        await manager.connect(socket, "g1")
        await manager.disconnect(socket)
        # A second disconnect is harmless
        await manager.disconnect(socket)
        return manager

    manager = asyncio.run(scenario())

    assert manager.get_connection_count("g1") == 0
    assert "g1" not in manager.watchers
