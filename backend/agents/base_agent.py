"""
Base agent interface for outbreak game agents.
"""
from abc import ABC, abstractmethod
from typing import Tuple, Optional, List
from engine import GameState, Action, ActionPayload
from engine.serialization import legal_actions


class BaseAgent(ABC):
    """
    An automated player.

    Each call sees the current state and the actions that would be accepted
    in it, and picks one of them. Agents hold no game state of their own.
    """

    def __init__(self, name: str = "agent"):
        self.name = name

    @abstractmethod
    def choose_action(
        self,
        state: GameState,
        legal_actions_list: List[Tuple[Action, Optional[ActionPayload]]]
    ) -> Tuple[Action, Optional[ActionPayload], Optional[str]]:
        """
        Pick the next action.

        Args:
            state: Current game state
            legal_actions_list: Output of legal_actions(state), never empty while the game runs

        Returns:
            (action, payload, reasoning); reasoning is free text for logs and may be None
        """

    def get_legal_actions(self, state: GameState) -> List[Tuple[Action, Optional[ActionPayload]]]:
        return legal_actions(state)
