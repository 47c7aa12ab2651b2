"""Game API endpoints."""

import logging
import time
from dataclasses import replace
from random import Random
from fastapi import APIRouter, HTTPException, Header
from typing import Annotated, Any

from api.schemas import (
    AutoMoveRequest,
    CardResponse,
    DifficultyResponse,
    GameStateResponse,
    MoveRequest,
    NewGameRequest,
    SelectRequest,
    SelectionResponse,
    WonResponse,
)
from api.session import create_session, extract_session_id, get_session_store
from config import config
from core.cards import Card, Rank, Suit
from core.game import Difficulty, GameState, KlondikeGame, PileRef, Selection

logger = logging.getLogger(__name__)

router = APIRouter()

# In-memory game cache (for performance, backed by session store)
_games: dict[str, KlondikeGame] = {}

# Session data keys
SESSION_KEY_GAME = "game"
SESSION_KEY_CREATED_AT = "created_at"
SESSION_KEY_LAST_ACTIVITY = "last_activity"

SessionHeader = Annotated[str, Header(alias="X-Session-ID")]


def _serialize_card(card: Card) -> dict[str, Any]:
    """Serialize a card to a dict."""
    return {"suit": card.suit.value, "rank": card.rank.value, "face_up": card.face_up}


def _deserialize_card(data: dict[str, Any]) -> Card:
    """Deserialize a card from a dict."""
    return Card(Suit(data["suit"]), Rank(data["rank"]), data["face_up"])


def _serialize_pile(cards: tuple[Card, ...]) -> list[dict[str, Any]]:
    return [_serialize_card(c) for c in cards]


def _deserialize_pile(data: list[dict[str, Any]]) -> tuple[Card, ...]:
    return tuple(_deserialize_card(c) for c in data)


def _serialize_state(state: GameState) -> dict[str, Any]:
    """Serialize a game snapshot for session storage."""
    selected = None
    if state.selected is not None:
        selected = {"pile": str(state.selected.pile), "index": state.selected.index}

    return {
        "stock": _serialize_pile(state.stock),
        "waste": _serialize_pile(state.waste),
        "foundations": [_serialize_pile(f) for f in state.foundations],
        "tableau": [_serialize_pile(t) for t in state.tableau],
        "selected": selected,
        "difficulty": {
            "name": state.difficulty.name,
            "cards_drawn": state.difficulty.cards_drawn,
            "pass_limit": state.difficulty.pass_limit,
        },
        "pass_count": state.pass_count,
    }


def _deserialize_state(data: dict[str, Any]) -> GameState:
    """Restore a game snapshot from session data."""
    state = GameState(
        stock=_deserialize_pile(data["stock"]),
        waste=_deserialize_pile(data["waste"]),
        foundations=tuple(_deserialize_pile(f) for f in data["foundations"]),
        tableau=tuple(_deserialize_pile(t) for t in data["tableau"]),
        difficulty=Difficulty(**data["difficulty"]),
        pass_count=data["pass_count"],
    )

    # The selected card is looked up again rather than stored twice
    if data.get("selected"):
        pile = PileRef.parse(data["selected"]["pile"])
        index = data["selected"]["index"]
        cards = state.pile(pile)
        if 0 <= index < len(cards):
            state = replace(state, selected=Selection(pile, index, cards[index]))

    return state


async def _save_game(session_id: str, game: KlondikeGame) -> None:
    """Save game to session store."""
    store = await get_session_store()
    session_data = await store.get(session_id) or {}
    session_data[SESSION_KEY_GAME] = _serialize_state(game.get_state())
    session_data[SESSION_KEY_LAST_ACTIVITY] = int(time.time())
    session_data.setdefault(SESSION_KEY_CREATED_AT, int(time.time()))
    await store.set(session_id, session_data)


async def _get_game(session_id: str) -> KlondikeGame:
    """Get the game for a session, or fail with 401/404."""
    if extract_session_id(session_id) is None:
        _games.pop(session_id, None)
        raise HTTPException(status_code=401, detail="Invalid session")

    if session_id in _games:
        return _games[session_id]

    store = await get_session_store()
    session_data = await store.get(session_id)
    if not session_data or SESSION_KEY_GAME not in session_data:
        raise HTTPException(status_code=404, detail="No game for this session")

    game = KlondikeGame(state=_deserialize_state(session_data[SESSION_KEY_GAME]))
    _games[session_id] = game
    return game


def _evict_expired_games() -> None:
    """Drop cached games whose session token has expired."""
    expired = [sid for sid in _games if extract_session_id(sid) is None]
    for sid in expired:
        del _games[sid]
    if expired:
        logger.debug("Evicted %d expired games from the cache", len(expired))


def _card_response(card: Card) -> CardResponse:
    """Convert a Card, hiding what a face-down card is."""
    if not card.face_up:
        return CardResponse(id=None, rank=None, suit=None, color=None, face_up=False)
    return CardResponse(
        id=card.id,
        rank=str(card.rank),
        suit=card.suit.value,
        color=card.color,
        face_up=True,
    )


def _game_state_response(game: KlondikeGame) -> GameStateResponse:
    """Convert game state to response."""
    state = game.get_state()

    selected = None
    if state.selected is not None:
        selected = SelectionResponse(
            pile=str(state.selected.pile),
            index=state.selected.index,
            card=_card_response(state.selected.card),
        )

    return GameStateResponse(
        phase=game.phase.name,
        difficulty=DifficultyResponse(
            name=state.difficulty.name,
            cards_drawn=state.difficulty.cards_drawn,
            pass_limit=state.difficulty.pass_limit,
        ),
        stock_count=len(state.stock),
        waste=[_card_response(c) for c in state.waste],
        visible_waste=[_card_response(c) for c in state.visible_waste],
        foundations=[[_card_response(c) for c in f] for f in state.foundations],
        tableau=[[_card_response(c) for c in t] for t in state.tableau],
        selected=selected,
        pass_count=state.pass_count,
        passes_remaining=state.passes_remaining,
        can_draw=game.can_draw,
        can_recycle=state.can_recycle,
        is_won=game.is_game_won(),
    )


@router.post("/new")
async def new_game(
    request: NewGameRequest | None = None,
    session_id: Annotated[str | None, Header(alias="X-Session-ID")] = None,
) -> dict[str, str]:
    """Deal a new game, creating a session if needed."""
    _evict_expired_games()

    previous = None
    if session_id is not None and extract_session_id(session_id) is not None:
        try:
            previous = await _get_game(session_id)
        except HTTPException:
            previous = None
    else:
        session_id = await create_session()

    if request is not None and request.difficulty is not None:
        difficulty = Difficulty.from_name(request.difficulty)
    elif previous is not None:
        difficulty = previous.difficulty
    else:
        difficulty = Difficulty.from_name(config.game.default_difficulty)

    rng = Random(config.game.seed) if config.game.seed is not None else None
    game = KlondikeGame(difficulty=difficulty, rng=rng)
    _games[session_id] = game
    await _save_game(session_id, game)

    logger.info("Session started a %s game", difficulty.name)
    return {"session_id": session_id}


@router.get("/state")
async def get_state(session_id: SessionHeader) -> GameStateResponse:
    """Get current game state."""
    game = await _get_game(session_id)
    return _game_state_response(game)


@router.post("/draw")
async def draw(session_id: SessionHeader) -> GameStateResponse:
    """Draw from the stock, or recycle the waste."""
    game = await _get_game(session_id)

    if not game.draw_from_stock():
        raise HTTPException(status_code=400, detail="Cannot draw from stock")

    await _save_game(session_id, game)
    return _game_state_response(game)


@router.post("/move")
async def move(request: MoveRequest, session_id: SessionHeader) -> GameStateResponse:
    """Move a card or run between piles."""
    game = await _get_game(session_id)

    source = PileRef.parse(request.source)
    dest = PileRef.parse(request.dest)
    if not game.move_cards(source, request.source_index, dest, request.dest_index):
        raise HTTPException(status_code=400, detail=f"Cannot move from {source} to {dest}")

    await _save_game(session_id, game)
    return _game_state_response(game)


@router.post("/auto-move")
async def auto_move(request: AutoMoveRequest, session_id: SessionHeader) -> GameStateResponse:
    """Send a top card to whichever foundation accepts it."""
    game = await _get_game(session_id)

    if not game.try_auto_move_to_foundation(PileRef.parse(request.source), request.source_index):
        raise HTTPException(status_code=400, detail="No foundation accepts this card")

    await _save_game(session_id, game)
    return _game_state_response(game)


@router.post("/select")
async def select(request: SelectRequest, session_id: SessionHeader) -> GameStateResponse:
    """Select a card."""
    game = await _get_game(session_id)

    if not game.select_card(PileRef.parse(request.pile), request.index):
        raise HTTPException(status_code=400, detail="No card at that position")

    await _save_game(session_id, game)
    return _game_state_response(game)


@router.delete("/select")
async def clear_selection(session_id: SessionHeader) -> GameStateResponse:
    """Clear the selection (a no-op if nothing is selected)."""
    game = await _get_game(session_id)
    if game.clear_selection():
        await _save_game(session_id, game)
    return _game_state_response(game)


@router.get("/won")
async def won(session_id: SessionHeader) -> WonResponse:
    """Check whether the game is won."""
    game = await _get_game(session_id)
    return WonResponse(won=game.is_game_won())
