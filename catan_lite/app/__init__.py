"""Services d'application pour orchestrer le moteur Catan-Lite."""

from .config import GameConfig
from .event_bus import EventBus
from .events import ActionAppliedEvent, GameEndedEvent, GameStartedEvent
from .game_service import GameService

__all__ = [
    "EventBus",
    "GameConfig",
    "GameService",
    "GameStartedEvent",
    "ActionAppliedEvent",
    "GameEndedEvent",
]
