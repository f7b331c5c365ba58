"""
Tests for the game session and its event listeners.
"""
from engine import Game, EventType, Action, CityPayload


def test_listeners_receive_every_event(make_state):
    game = Game(make_state(infection_deck=["PAR", "PAR"]))
    received = []
    game.subscribe(lambda event, state: received.append((event.type, state.turn_number)))

    game.apply(Action.MOVE, CityPayload(city_id="CHI"))
    game.apply(Action.END_TURN)

    assert received == [
        (EventType.MOVED, 0),
        (EventType.CARD_DRAWN, 1),
        (EventType.CARD_DRAWN, 1),
        (EventType.CITY_INFECTED, 1),
        (EventType.CITY_INFECTED, 1),
        (EventType.TURN_STARTED, 1),
    ]
    assert game.state.pawn_at == "CHI"
    assert len(game.history) == 3


def test_rejected_action_is_reported(make_state):
    game = Game(make_state())
    messages = []
    game.subscribe(lambda event, state: messages.append(event.message))

    game.apply(Action.TREAT)

    assert messages == ["Nothing to treat here."]


def test_unsubscribe(make_state):
    game = Game(make_state())
    received = []

    def listener(event, state):
        received.append(event)

    game.subscribe(listener)
    game.subscribe(listener)
    game.apply(Action.MOVE, CityPayload(city_id="CHI"))
    game.unsubscribe(listener)
    game.apply(Action.MOVE, CityPayload(city_id="ATL"))

    assert len(received) == 1


def test_new_game_is_not_over():
    game = Game.new("test_game", seed=1)

    assert not game.is_over
    assert game.state.game_id == "test_game"
