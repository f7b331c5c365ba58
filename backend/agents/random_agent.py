"""
Random agent that randomly selects valid actions (never just selects cities).
"""
import random
from typing import Tuple, Optional, List
from engine import GameState, Action, ActionPayload
from .base_agent import BaseAgent


class RandomAgent(BaseAgent):
    """
    Random agent that picks valid actions randomly.

    This agent:
    - Skips SELECT_CITY, which is free and would never advance the game
    - Randomly selects from all other legal actions
    """

    def __init__(self, name: str = "random", rng: Optional[random.Random] = None):
        super().__init__(name)
        self.rng = rng or random.Random()

    def choose_action(
        self,
        state: GameState,
        legal_actions_list: List[Tuple[Action, Optional[ActionPayload]]]
    ) -> Tuple[Action, Optional[ActionPayload], Optional[str]]:
        """
        Randomly choose an action from legal actions, excluding city selection.

        Args:
            state: Current game state
            legal_actions_list: List of (Action, Optional[ActionPayload]) tuples

        Returns:
            A randomly chosen action with a short reasoning string
        """
        candidates = [
            (action, payload)
            for action, payload in legal_actions_list
            if action != Action.SELECT_CITY
        ]
        if not candidates:
            raise ValueError("No legal actions available")

        action, payload = self.rng.choice(candidates)
        action_name = action.value.replace("_", " ").title()
        return (action, payload, f"Randomly selected: {action_name}")
