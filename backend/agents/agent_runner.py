"""
Agent runner for playing games with agents.
"""
from typing import Callable, Optional, Tuple

import structlog

from engine import Action, Game, GameState
from .base_agent import BaseAgent

logger = structlog.get_logger("agent_runner")


class AgentRunner:
    """
    Runs a game with an agent, handling automatic gameplay.
    """

    def __init__(
        self,
        game: Game,
        agent: BaseAgent,
        max_turns: int = 100
    ):
        """
        Initialize the agent runner.

        Args:
            game: Game session to drive (listeners on it see every event)
            agent: Agent choosing every action
            max_turns: Maximum number of turns before stopping
        """
        self.game = game
        self.agent = agent
        self.max_turns = max_turns
        self.turn_count = 0
        self.action_count = 0

    @property
    def state(self) -> GameState:
        return self.game.state

    def run_automatic(
        self,
        progress_callback: Optional[Callable[[int, int], None]] = None
    ) -> Tuple[GameState, bool, Optional[str]]:
        """
        Run the game automatically until completion, error, or max turns.

        Args:
            progress_callback: Optional callback for progress updates
                              Signature: (turn_count: int, action_count: int) -> None

        Returns:
            Tuple of (final_state, completed, error_message)
            - completed: True if game finished normally, False if stopped early
            - error_message: None if no error, otherwise error description
        """
        while self.turn_count < self.max_turns:
            if self.game.is_over:
                logger.info(
                    "game_finished",
                    game_id=self.state.game_id,
                    agent=self.agent.name,
                    outcome=self.state.outcome,
                    loss_reason=self.state.loss_reason,
                    turns=self.turn_count,
                    actions=self.action_count,
                )
                return self.state, True, None

            game_continues, error = self.run_step()
            if error:
                logger.error("agent_run_failed", game_id=self.state.game_id, error=error)
                return self.state, False, error

            if progress_callback and self.action_count % 20 == 0:
                progress_callback(self.turn_count, self.action_count)

        if self.game.is_over:
            return self.state, True, None
        return self.state, False, f"Reached maximum turn limit ({self.max_turns})"

    def run_step(self) -> Tuple[bool, Optional[str]]:
        """
        Let the agent take a single action.

        Returns:
            Tuple of (game_continues, error_message)
        """
        if self.game.is_over:
            return False, None

        legal_actions_list = self.agent.get_legal_actions(self.state)
        if not legal_actions_list:
            return False, f"No legal actions available in phase {self.state.phase}"

        try:
            action, payload, reasoning = self.agent.choose_action(self.state, legal_actions_list)
        except ValueError as e:
            return False, f"Agent error: {str(e)}"

        try:
            self.game.apply(action, payload)
        except ValueError as e:
            return False, f"Invalid action {action.value}: {str(e)}"

        logger.debug("agent_action", action=action.value, reasoning=reasoning, message=self.state.message)
        if action == Action.END_TURN:
            self.turn_count += 1
        self.action_count += 1
        return not self.game.is_over, None
