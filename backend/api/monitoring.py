"""
Monitoring and metrics collection for the application.
"""
from prometheus_client import Counter, Histogram, Gauge
from engine import EventType, GameState
from .logging_config import activity_logger

# Prometheus metrics
http_requests_total = Counter(
    'http_requests_total',
    'Total HTTP requests',
    ['method', 'endpoint', 'status']
)

http_request_duration_seconds = Histogram(
    'http_request_duration_seconds',
    'HTTP request duration in seconds',
    ['method', 'endpoint']
)

websocket_connections = Gauge(
    'websocket_connections_total',
    'Current WebSocket connections',
    ['game_id']
)

active_games = Gauge(
    'active_games_total',
    'Number of games that have not finished yet'
)

game_actions_total = Counter(
    'game_actions_total',
    'Game actions applied',
    ['action', 'accepted']
)

outbreaks_total = Counter(
    'outbreaks_total',
    'Outbreaks across all games'
)

games_finished_total = Counter(
    'games_finished_total',
    'Finished games by outcome',
    ['outcome']
)


def record_step(action: str, new_state: GameState) -> bool:
    """Update game metrics for one applied step. Returns whether the action was accepted."""
    accepted = not any(e.type == EventType.ACTION_REJECTED for e in new_state.events)
    game_actions_total.labels(action=action, accepted=str(accepted).lower()).inc()

    for event in new_state.events:
        if event.type == EventType.OUTBREAK:
            outbreaks_total.inc()
        elif event.type in (EventType.GAME_WON, EventType.GAME_LOST):
            games_finished_total.labels(outcome=new_state.outcome).inc()
            active_games.dec()
            activity_logger.log_game_finished(
                new_state.game_id, new_state.outcome, new_state.loss_reason, new_state.turn_number
            )
    return accepted
