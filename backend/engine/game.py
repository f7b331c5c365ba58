"""
Game session wrapper around the pure engine.
Holds the current state and history and pushes each step's events to
subscribed listeners.
"""
from typing import Callable, List, Optional

from .engine import Action, ActionPayload, GameEvent, GameState, Rules, create_initial_state

Listener = Callable[[GameEvent, GameState], None]


class Game:
    """Main game session class."""

    def __init__(self, state: GameState):
        self.state = state
        self.listeners: List[Listener] = []
        self.history: List[GameState] = [state]

    @classmethod
    def new(cls, game_id: str, rules: Optional[Rules] = None, seed: Optional[int] = None) -> "Game":
        """Start a new game from the default board."""
        return cls(create_initial_state(game_id, rules=rules, seed=seed))

    @property
    def is_over(self) -> bool:
        return self.state.phase == "finished"

    def subscribe(self, listener: Listener) -> None:
        """Register a callback invoked as listener(event, new_state) for every event."""
        if listener not in self.listeners:
            self.listeners.append(listener)

    def unsubscribe(self, listener: Listener) -> None:
        """Remove a previously registered callback."""
        if listener in self.listeners:
            self.listeners.remove(listener)

    def apply(self, action: Action, payload: Optional[ActionPayload] = None) -> GameState:
        """Step the game and notify listeners. Returns the new state."""
        new_state = self.state.step(action, payload)
        self.state = new_state
        self.history.append(new_state)
        for event in new_state.events:
            for listener in list(self.listeners):
                listener(event, new_state)
        return new_state
