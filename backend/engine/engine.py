"""
Pure game engine for the outbreak board game.
No I/O, no globals - pure functional game logic.
"""
from enum import Enum
from typing import Dict, List, Optional, Tuple, Any
from dataclasses import dataclass, field
import random
import copy


@dataclass(frozen=True)
class Rules:
    """Fixed game constants."""
    max_cubes_per_city: int = 3
    outbreak_limit: int = 7
    infections_per_turn: int = 2
    hand_to_cure: int = 3
    actions_per_turn: int = 4
    player_cards_per_turn: int = 2
    infection_copies: int = 5  # Copies of each city in the infection deck
    player_copies: int = 4  # Copies of each city in the player deck
    initial_infections: int = 3
    initial_hand: int = 2
    start_city: str = "ATL"
    reshuffle_infection_deck: bool = True  # False: empty infection deck at draw time loses the game


@dataclass
class City:
    """A city on the board."""
    id: str
    name: str
    position: Tuple[float, float]  # Viewport percent (x, y)
    links: List[str] = field(default_factory=list)  # Adjacent city IDs
    station: bool = False
    cubes: int = 0


class EventType(Enum):
    """Things that can happen during a step."""
    CITY_SELECTED = "city_selected"
    MOVED = "moved"
    TREATED = "treated"
    CURED = "cured"
    ACTION_REJECTED = "action_rejected"
    CARD_DRAWN = "card_drawn"
    CITY_INFECTED = "city_infected"
    OUTBREAK = "outbreak"
    INFECTION_DECK_RESHUFFLED = "infection_deck_reshuffled"
    TURN_STARTED = "turn_started"
    GAME_WON = "game_won"
    GAME_LOST = "game_lost"


@dataclass(frozen=True)
class GameEvent:
    """Something that happened while resolving an action."""
    type: EventType
    message: str = ""
    data: Dict[str, Any] = field(default_factory=dict)


# id -> (name, position, links, station)
DEFAULT_MAP = {
    "ATL": ("Atlanta", (20.0, 70.0), ["CHI", "MAD"], True),
    "CHI": ("Chicago", (28.0, 55.0), ["ATL", "PAR"], False),
    "PAR": ("Paris", (62.0, 50.0), ["CHI", "MAD"], False),
    "MAD": ("Madrid", (58.0, 62.0), ["ATL", "PAR"], False),
    "SAN": ("San Diego", (40.0, 62.0), ["CHI", "ATL"], False),
}


def build_cities(city_map: Optional[Dict[str, tuple]] = None) -> Dict[str, City]:
    """Build the city graph, making every link symmetric."""
    city_map = city_map or DEFAULT_MAP
    cities = {
        city_id: City(id=city_id, name=name, position=position, links=list(links), station=station)
        for city_id, (name, position, links, station) in city_map.items()
    }
    for city in cities.values():
        for neighbor_id in city.links:
            neighbor = cities[neighbor_id]
            if city.id not in neighbor.links:
                neighbor.links.append(city.id)
    return cities


def build_deck(city_ids: List[str], copies: int, rng: Optional[random.Random] = None) -> List[str]:
    """Build a shuffled deck holding `copies` cards of every city."""
    deck = [city_id for city_id in city_ids for _ in range(copies)]
    (rng or random).shuffle(deck)
    return deck


@dataclass
class GameState:
    """Current state of the game - immutable operations via step()."""
    game_id: str
    cities: Dict[str, City] = field(default_factory=dict)
    pawn_at: str = "ATL"
    selected_city: Optional[str] = None
    actions_left: int = 4
    outbreaks: int = 0
    cured: bool = False
    phase: str = "action"  # "action", "draw", "infect", "finished"
    infection_deck: List[str] = field(default_factory=list)
    player_deck: List[str] = field(default_factory=list)
    hand: List[str] = field(default_factory=list)
    turn_number: int = 0
    outcome: Optional[str] = None  # "won" or "lost" once finished
    loss_reason: Optional[str] = None
    message: str = ""  # Status line: outcome of the last step
    events: List[GameEvent] = field(default_factory=list)  # Events produced by the last step
    rules: Rules = field(default_factory=Rules)

    def total_cubes(self) -> int:
        """Total cubes across all cities."""
        return sum(c.cubes for c in self.cities.values())

    def step(self, action: 'Action', payload: Optional['ActionPayload'] = None) -> 'GameState':
        """
        Pure function that takes an action and returns a new GameState.
        No side effects, no I/O, no globals.

        Rule violations do not raise: the returned state only differs in its
        status message and a single ACTION_REJECTED event. Malformed input
        (unknown action, unknown city, wrong payload) raises ValueError.
        """
        new_state = copy.deepcopy(self)
        new_state.events = []

        if new_state.phase == "finished":
            return self._reject("Game is over.")

        if action == Action.SELECT_CITY:
            return self._handle_select_city(new_state, payload)
        elif action == Action.MOVE:
            result = self._handle_move(new_state, payload)
        elif action == Action.TREAT:
            result = self._handle_treat(new_state)
        elif action == Action.CURE:
            result = self._handle_cure(new_state)
        elif action == Action.END_TURN:
            return self._handle_end_turn(new_state)
        else:
            raise ValueError(f"Unknown action: {action}")

        # Mopping up the last cube after the cure wins on the spot
        rejected = any(e.type == EventType.ACTION_REJECTED for e in result.events)
        if not rejected and self._is_won(result):
            self._finish(result, won=True)
        return result

    def _reject(self, message: str) -> 'GameState':
        """Turn a failed precondition into a no-op carrying a status message."""
        rejected = copy.deepcopy(self)
        rejected.message = message
        rejected.events = [GameEvent(EventType.ACTION_REJECTED, message)]
        return rejected

    def _city(self, state: 'GameState', city_id: str) -> City:
        if not isinstance(city_id, str) or city_id not in state.cities:
            raise ValueError(f"Unknown city: {city_id}")
        return state.cities[city_id]

    def _spend_action(self, new_state: 'GameState') -> Optional[str]:
        """Return why an action cannot be spent, or None if it can."""
        if new_state.phase != "action":
            return f"Cannot act during the {new_state.phase} phase."
        if new_state.actions_left <= 0:
            return "No actions left."
        return None

    def _handle_select_city(self, new_state: 'GameState', payload: Optional['ActionPayload']) -> 'GameState':
        """Handle selecting a city on the board (free)."""
        if payload is None or not isinstance(payload, CityPayload):
            raise ValueError("SELECT_CITY requires CityPayload")
        city = self._city(new_state, payload.city_id)
        new_state.selected_city = city.id
        new_state.message = f"Selected {city.name}."
        new_state.events.append(GameEvent(EventType.CITY_SELECTED, new_state.message, {"city_id": city.id}))
        return new_state

    def _handle_move(self, new_state: 'GameState', payload: Optional['ActionPayload']) -> 'GameState':
        """Handle moving the pawn to an adjacent city."""
        if payload is not None and not isinstance(payload, CityPayload):
            raise ValueError("MOVE requires CityPayload")
        target_id = payload.city_id if payload is not None else new_state.selected_city
        if target_id is None:
            return self._reject("Select a city first.")

        target = self._city(new_state, target_id)
        here = new_state.cities[new_state.pawn_at]
        if target.id not in here.links:
            return self._reject("Not connected.")
        reason = self._spend_action(new_state)
        if reason:
            return self._reject(reason)

        new_state.pawn_at = target.id
        new_state.actions_left -= 1
        new_state.message = f"Moved to {target.name}."
        new_state.events.append(GameEvent(
            EventType.MOVED, new_state.message, {"from": here.id, "to": target.id}
        ))
        return new_state

    def _handle_treat(self, new_state: 'GameState') -> 'GameState':
        """Handle removing one cube from the pawn's city."""
        here = new_state.cities[new_state.pawn_at]
        if here.cubes <= 0:
            return self._reject("Nothing to treat here.")
        reason = self._spend_action(new_state)
        if reason:
            return self._reject(reason)

        here.cubes -= 1
        new_state.actions_left -= 1
        new_state.message = f"Treated 1 cube in {here.name}."
        new_state.events.append(GameEvent(
            EventType.TREATED, new_state.message, {"city_id": here.id, "cubes": here.cubes}
        ))
        return new_state

    def _handle_cure(self, new_state: 'GameState') -> 'GameState':
        """Handle curing the disease at a research station."""
        here = new_state.cities[new_state.pawn_at]
        needed = new_state.rules.hand_to_cure
        if not here.station:
            return self._reject("You must be at a research station.")
        if new_state.cured:
            return self._reject("Already cured.")
        if len(new_state.hand) < needed:
            return self._reject(f"Need {needed} cards to cure.")
        reason = self._spend_action(new_state)
        if reason:
            return self._reject(reason)

        spent = new_state.hand[:needed]
        del new_state.hand[:needed]
        new_state.cured = True
        new_state.actions_left -= 1
        new_state.message = "Disease cured! Now mop up the board to win."
        new_state.events.append(GameEvent(EventType.CURED, new_state.message, {"cards": spent}))
        return new_state

    def _handle_end_turn(self, new_state: 'GameState') -> 'GameState':
        """Handle ending the turn: draw, infect, then evaluate win/loss."""
        if new_state.phase != "action":
            return self._reject(f"Cannot end turn during the {new_state.phase} phase.")

        new_state.phase = "draw"
        for _ in range(new_state.rules.player_cards_per_turn):
            if not new_state.player_deck:
                self._finish(new_state, won=False, reason="Player deck empty.")
                return new_state
            self._draw_player_card(new_state)

        new_state.phase = "infect"
        for _ in range(new_state.rules.infections_per_turn):
            city_id = self._draw_infection(new_state)
            if city_id is None:
                self._finish(new_state, won=False, reason="Infection deck empty.")
                return new_state
            self._infect(new_state, city_id)

        if new_state.outbreaks >= new_state.rules.outbreak_limit:
            self._finish(new_state, won=False, reason="Too many outbreaks.")
            return new_state
        if self._is_won(new_state):
            self._finish(new_state, won=True)
            return new_state

        new_state.phase = "action"
        new_state.actions_left = new_state.rules.actions_per_turn
        new_state.turn_number += 1
        new_state.message = "New turn."
        new_state.events.append(GameEvent(
            EventType.TURN_STARTED, new_state.message, {"turn_number": new_state.turn_number}
        ))
        return new_state

    def _draw_player_card(self, state: 'GameState') -> None:
        """Move the top player card into the hand. Caller checks the deck is not empty."""
        card = state.player_deck.pop()
        state.hand.append(card)
        state.events.append(GameEvent(
            EventType.CARD_DRAWN, f"Drew {state.cities[card].name}.", {"city_id": card}
        ))

    def _draw_infection(self, state: 'GameState') -> Optional[str]:
        """Draw the top infection card, rebuilding the deck when it runs out."""
        if not state.infection_deck:
            if not state.rules.reshuffle_infection_deck:
                return None
            state.infection_deck = build_deck(list(state.cities), state.rules.infection_copies)
            state.events.append(GameEvent(EventType.INFECTION_DECK_RESHUFFLED, "Infection deck reshuffled."))
        return state.infection_deck.pop()

    def _infect(self, state: 'GameState', city_id: str) -> None:
        """Add one cube to a city, or outbreak into its neighbors if it is full.

        Outbreaks do not chain: a neighbor already at the cap just stays there.
        """
        city = state.cities[city_id]
        max_cubes = state.rules.max_cubes_per_city
        if city.cubes < max_cubes:
            city.cubes += 1
            state.events.append(GameEvent(
                EventType.CITY_INFECTED, f"{city.name} infected.", {"city_id": city.id, "cubes": city.cubes}
            ))
            return

        state.outbreaks += 1
        spread_to = []
        for neighbor_id in city.links:
            neighbor = state.cities[neighbor_id]
            if neighbor.cubes < max_cubes:
                neighbor.cubes += 1
                spread_to.append(neighbor_id)
        state.message = f"Outbreak in {city.name}!"
        state.events.append(GameEvent(
            EventType.OUTBREAK, state.message,
            {"city_id": city.id, "spread_to": spread_to, "outbreaks": state.outbreaks}
        ))

    def _is_won(self, state: 'GameState') -> bool:
        return state.cured and state.total_cubes() == 0

    def _finish(self, state: 'GameState', won: bool, reason: Optional[str] = None) -> None:
        """Move the game into its terminal phase."""
        state.phase = "finished"
        state.actions_left = 0
        if won:
            state.outcome = "won"
            state.message = "You win! Cured and cleaned."
            state.events.append(GameEvent(EventType.GAME_WON, state.message))
        else:
            state.outcome = "lost"
            state.loss_reason = reason
            state.message = f"You lose. {reason}"
            state.events.append(GameEvent(EventType.GAME_LOST, state.message, {"reason": reason}))


def create_initial_state(game_id: str, rules: Optional[Rules] = None, seed: Optional[int] = None) -> GameState:
    """Build the board, shuffle both decks, seed infections and deal the starting hand."""
    rules = rules or Rules()
    rng = random.Random(seed) if seed is not None else None
    cities = build_cities()
    if rules.start_city not in cities:
        raise ValueError(f"Unknown start city: {rules.start_city}")
    if not rules.reshuffle_infection_deck and len(cities) * rules.infection_copies < rules.initial_infections:
        raise ValueError("Infection deck is too small for the initial infections")

    state = GameState(
        game_id=game_id,
        cities=cities,
        pawn_at=rules.start_city,
        actions_left=rules.actions_per_turn,
        infection_deck=build_deck(list(cities), rules.infection_copies, rng),
        player_deck=build_deck(list(cities), rules.player_copies, rng),
        rules=rules,
    )
    for _ in range(rules.initial_infections):
        state._infect(state, state._draw_infection(state))
    for _ in range(rules.initial_hand):
        state._draw_player_card(state)

    state.message = "Your turn. Select a city to interact."
    state.events = []
    return state


class Action(Enum):
    """Actions that can be taken in the game."""
    SELECT_CITY = "select_city"
    MOVE = "move"
    TREAT = "treat"
    CURE = "cure"
    END_TURN = "end_turn"


@dataclass(frozen=True)
class CityPayload:
    """Payload for SELECT_CITY and MOVE actions."""
    city_id: str


# Action payload types
ActionPayload = CityPayload
