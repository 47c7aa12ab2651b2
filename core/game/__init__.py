"""Game engine and state management."""

from core.game.events import GameEvent, EventType
from core.game.state import Difficulty, GamePhase, GameState, PileRef, PileType, Selection
from core.game.deal import initialize_game
from core.game.rules import can_place_on_foundation, can_place_on_tableau
from core.game.engine import KlondikeGame

__all__ = [
    "GameEvent",
    "EventType",
    "Difficulty",
    "GamePhase",
    "GameState",
    "PileRef",
    "PileType",
    "Selection",
    "initialize_game",
    "can_place_on_foundation",
    "can_place_on_tableau",
    "KlondikeGame",
]
