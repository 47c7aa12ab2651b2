"""Pydantic schemas for API requests and responses."""

from pydantic import AfterValidator, BaseModel, Field
from typing import Annotated, Literal

from config import DifficultyName
from core.game.state import PileRef


def _check_pile(value: str) -> str:
    """Reject pile strings the engine cannot address."""
    PileRef.parse(value)
    return value.strip().lower()


PileName = Annotated[str, AfterValidator(_check_pile)]


# Game schemas
class NewGameRequest(BaseModel):
    """Request to deal a new game."""

    difficulty: DifficultyName | None = Field(
        default=None,
        description="Preset to play; keeps the session's current one if omitted",
    )


class MoveRequest(BaseModel):
    """Request to move a card or run between piles."""

    source: PileName = Field(..., description="'waste' or 'tableau-{0..6}'")
    source_index: int = Field(default=0, ge=0, description="Index of the first card to move")
    dest: PileName = Field(..., description="'foundation-{0..3}' or 'tableau-{0..6}'")
    dest_index: int = Field(default=0, ge=0, description="Accepted for drop position; unused")


class AutoMoveRequest(BaseModel):
    """Request to send a top card to any foundation that accepts it."""

    source: PileName
    source_index: int = Field(default=0, ge=0)


class SelectRequest(BaseModel):
    """Request to select a card."""

    pile: PileName
    index: int = Field(..., ge=0)


class CardResponse(BaseModel):
    """Card representation; rank and suit are hidden while face-down."""

    id: str | None
    rank: str | None
    suit: str | None
    color: Literal["red", "black"] | None
    face_up: bool


class SelectionResponse(BaseModel):
    """Selected card pointer."""

    pile: str
    index: int
    card: CardResponse


class DifficultyResponse(BaseModel):
    """Difficulty settings."""

    name: str
    cards_drawn: int
    pass_limit: int | None


class GameStateResponse(BaseModel):
    """Current table."""

    phase: str
    difficulty: DifficultyResponse
    stock_count: int
    waste: list[CardResponse]
    visible_waste: list[CardResponse]
    foundations: list[list[CardResponse]]
    tableau: list[list[CardResponse]]
    selected: SelectionResponse | None
    pass_count: int
    passes_remaining: int | None
    can_draw: bool
    can_recycle: bool
    is_won: bool


class WonResponse(BaseModel):
    """Win check result."""

    won: bool
