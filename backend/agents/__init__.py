"""
Agent infrastructure for the outbreak game.
"""
from .base_agent import BaseAgent
from .random_agent import RandomAgent
from .agent_runner import AgentRunner

__all__ = ['BaseAgent', 'RandomAgent', 'AgentRunner']
