#!/usr/bin/env python3
"""
Play games with random agents and report outcome statistics.

Usage:
    python -m scripts.simulate [--games N] [--seed S] [--max-turns N] [--verbose]
"""
import sys
import argparse
import random
from collections import Counter
from pathlib import Path

# Add parent directory to path to import modules
sys.path.insert(0, str(Path(__file__).parent.parent))

from engine import Game, GameEvent, GameState, EventType, state_to_text
from agents import RandomAgent, AgentRunner


def simulate(num_games: int = 10, seed: int = None, max_turns: int = 100, verbose: bool = False) -> Counter:
    """Play `num_games` random games and count outcomes.

    Args:
        num_games: Number of games to play
        seed: Base seed; game i uses seed + i for its decks and agent
        max_turns: Turn limit per game
        verbose: Print every event and the final board of each game
    """
    results = Counter()
    outbreak_total = 0

    for i in range(num_games):
        game_seed = seed + i if seed is not None else None
        random.seed(game_seed)
        game = Game.new(f"sim_{i}", seed=game_seed)

        if verbose:
            def print_event(event: GameEvent, state: GameState):
                if event.type != EventType.CITY_SELECTED:
                    print(f"  [turn {state.turn_number}] {event.message}")
            game.subscribe(print_event)
            print(f"=== Game {i} ===")

        runner = AgentRunner(game, RandomAgent(rng=random.Random(game_seed)), max_turns=max_turns)
        final_state, completed, error = runner.run_automatic()

        if error:
            results["unfinished"] += 1
            if verbose:
                print(f"  Stopped: {error}")
        else:
            key = final_state.outcome if final_state.outcome == "won" else f"lost: {final_state.loss_reason}"
            results[key] += 1
        outbreak_total += final_state.outbreaks

        if verbose:
            print(state_to_text(final_state))
            print()

    print(f"=== {num_games} games ===")
    for outcome, count in results.most_common():
        print(f"  {outcome}: {count}")
    if num_games:
        print(f"  average outbreaks: {outbreak_total / num_games:.2f}")
    return results


def main():
    parser = argparse.ArgumentParser(description="Run random-agent games of the outbreak simulation")
    parser.add_argument("--games", type=int, default=10, help="Number of games to play")
    parser.add_argument("--seed", type=int, default=None, help="Base random seed for deterministic runs")
    parser.add_argument("--max-turns", type=int, default=100, help="Maximum turns per game")
    parser.add_argument("--verbose", action="store_true", help="Print every event and final board")
    args = parser.parse_args()

    simulate(args.games, seed=args.seed, max_turns=args.max_turns, verbose=args.verbose)
    return 0


if __name__ == "__main__":
    sys.exit(main())
