"""
Structured logging for the game server.

Development prints colored key/value lines; production emits one JSON object
per line. Game-scoped context (game_id) is carried through structlog
contextvars so every log line inside a request is tagged with its game.
"""
import structlog
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional


def _level_for(environment: str) -> int:
    return logging.INFO if environment == "production" else logging.DEBUG


def configure_logging(environment: str = "development"):
    """Configure stdlib logging and structlog for the given environment."""
    level = _level_for(environment)
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)

    if environment == "production":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    return structlog.get_logger("outbreak").bind(environment=environment)


def get_logger(name: Optional[str] = None):
    """Get a structlog logger, optionally named after its component."""
    return structlog.get_logger(name) if name else structlog.get_logger()


def bind_game(game_id: str) -> None:
    """Tag every following log line in this context with the game ID."""
    structlog.contextvars.bind_contextvars(game_id=game_id)


def unbind_game() -> None:
    structlog.contextvars.unbind_contextvars("game_id")


class ActivityLogger:
    """Audit trail of what happens in games: creation, actions, endings, sockets."""

    def __init__(self):
        self.logger = get_logger("activity")

    def _now(self) -> str:
        return datetime.now(timezone.utc).isoformat()

    def log_game_created(self, game_id: str, rng_seed: Optional[int] = None):
        self.logger.info("game_created", game_id=game_id, rng_seed=rng_seed, timestamp=self._now())

    def log_game_action(
        self,
        game_id: str,
        action: str,
        accepted: bool,
        message: str = "",
        details: Optional[Dict[str, Any]] = None
    ):
        """Log one applied action. Rejected actions are logged at debug level."""
        log = self.logger.info if accepted else self.logger.debug
        log(
            "game_action",
            game_id=game_id,
            action=action,
            accepted=accepted,
            message=message,
            details=details or {},
            timestamp=self._now(),
        )

    def log_game_finished(self, game_id: str, outcome: str, loss_reason: Optional[str], turn_number: int):
        self.logger.info(
            "game_finished",
            game_id=game_id,
            outcome=outcome,
            loss_reason=loss_reason,
            turn_number=turn_number,
            timestamp=self._now(),
        )

    def log_websocket_event(self, event_type: str, game_id: str, details: Optional[Dict[str, Any]] = None):
        self.logger.info(
            "websocket_event",
            event_type=event_type,
            game_id=game_id,
            details=details or {},
            timestamp=self._now(),
        )


activity_logger = ActivityLogger()
