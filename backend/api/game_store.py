"""
In-process storage of games and their step logs.
Nothing survives a restart; every game lives in this process only.
"""
from typing import Dict, List, Optional, Any
from dataclasses import dataclass, field
from datetime import datetime, timezone
import threading


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass
class StepRecord:
    """One applied action with the states around it."""
    step_idx: int
    action: Dict[str, Any]
    state_before: Dict[str, Any]
    state_after: Dict[str, Any]
    accepted: bool
    message: str
    legal_actions_text: str = ""
    timestamp: str = field(default_factory=_now)


@dataclass
class StoredGame:
    """A game and everything recorded about it."""
    game_id: str
    current_state: Dict[str, Any]
    rng_seed: Optional[int] = None
    created_at: str = field(default_factory=_now)
    steps: List[StepRecord] = field(default_factory=list)


class GameStore:
    """Process-local game storage keyed by game ID."""

    def __init__(self):
        # game_id -> StoredGame
        self.games: Dict[str, StoredGame] = {}
        self._lock = threading.Lock()

    def create_game(self, game_id: str, initial_state: Dict[str, Any], rng_seed: Optional[int] = None) -> StoredGame:
        """Register a new game with its initial serialized state."""
        game = StoredGame(game_id=game_id, current_state=initial_state, rng_seed=rng_seed)
        with self._lock:
            self.games[game_id] = game
        return game

    def get_game(self, game_id: str) -> Optional[StoredGame]:
        """Get a game by ID."""
        return self.games.get(game_id)

    def get_latest_state(self, game_id: str) -> Optional[Dict[str, Any]]:
        """Get the current serialized state of a game."""
        game = self.get_game(game_id)
        return game.current_state if game else None

    def save_game_state(self, game_id: str, state_json: Dict[str, Any]) -> None:
        """Replace the current serialized state of a game."""
        with self._lock:
            game = self.games.get(game_id)
            if game is None:
                raise KeyError(f"Game {game_id} not found")
            game.current_state = state_json

    def add_step(
        self,
        game_id: str,
        action: Dict[str, Any],
        state_before: Dict[str, Any],
        state_after: Dict[str, Any],
        accepted: bool,
        message: str,
        legal_actions_text: str = "",
    ) -> StepRecord:
        """Append a step to a game's log."""
        with self._lock:
            game = self.games.get(game_id)
            if game is None:
                raise KeyError(f"Game {game_id} not found")
            record = StepRecord(
                step_idx=len(game.steps),
                action=action,
                state_before=state_before,
                state_after=state_after,
                accepted=accepted,
                message=message,
                legal_actions_text=legal_actions_text,
            )
            game.steps.append(record)
        return record

    def get_steps(self, game_id: str) -> List[StepRecord]:
        """Get the step log of a game."""
        game = self.get_game(game_id)
        return list(game.steps) if game else []

    def count(self) -> int:
        return len(self.games)

    def clear(self) -> None:
        """Forget every game."""
        with self._lock:
            self.games.clear()


# Global game store instance
game_store = GameStore()
