"""Pure state transitions for Klondike.

Each function takes a GameState and returns the next one. A request that is
not legal returns the very same object it was given, so callers detect a
rejection with an identity check (``new is old``).
"""

from dataclasses import replace

from core.cards import Card
from core.game.rules import can_place_on_foundation, can_place_on_tableau
from core.game.state import FOUNDATION_COUNT, GameState, PileRef, PileType, Selection


def draw_from_stock(state: GameState) -> GameState:
    """
    Turn cards from the stock onto the waste, or recycle an empty stock.

    A recycle spends a pass even when the waste is empty too; only the pass
    limit can refuse it.
    """
    if state.stock:
        count = min(state.difficulty.cards_drawn, len(state.stock))
        drawn = tuple(card.turned(face_up=True) for card in state.stock[:count])
        return replace(state, stock=state.stock[count:], waste=state.waste + drawn)

    if not state.can_recycle:
        return state

    return replace(
        state,
        stock=tuple(card.turned(face_up=False) for card in reversed(state.waste)),
        waste=(),
        pass_count=state.pass_count + 1,
    )


def movable_run(state: GameState, source: PileRef, source_index: int) -> tuple[Card, ...]:
    """
    Resolve which cards a move from ``source`` would pick up.

    The waste gives up its top card whatever the index. A tableau pile gives
    up everything from ``source_index`` to its top, provided that slice starts
    on a face-up card. Other piles give up nothing.
    """
    if source.kind == PileType.WASTE:
        return state.waste[-1:]

    if source.kind == PileType.TABLEAU:
        pile = state.tableau[source.index]
        if not 0 <= source_index < len(pile) or not pile[source_index].face_up:
            return ()
        return pile[source_index:]

    return ()


def is_legal_move(state: GameState, run: tuple[Card, ...], source: PileRef, dest: PileRef) -> bool:
    """Decide whether ``run`` may land on ``dest``."""
    if not run or source == dest:
        return False

    if dest.kind == PileType.FOUNDATION:
        return len(run) == 1 and can_place_on_foundation(run[0], state.foundations[dest.index])

    if dest.kind == PileType.TABLEAU:
        return can_place_on_tableau(run[0], state.top_card(dest))

    return False


def _replace_pile(piles: tuple[tuple[Card, ...], ...], index: int, cards: tuple[Card, ...]):
    return piles[:index] + (cards,) + piles[index + 1:]


def move_cards(
    state: GameState,
    source: PileRef,
    source_index: int,
    dest: PileRef,
    dest_index: int = 0,
) -> GameState:
    """
    Move a card or run between piles.

    Args:
        state: Current state
        source: Pile to take cards from (waste or a tableau pile)
        source_index: Position of the first card to take; ignored for the waste
        dest: Pile to place the cards on (a foundation or tableau pile)
        dest_index: Accepted for callers that track drop position; cards are
            always placed on top

    Returns:
        The new state, or ``state`` itself if the move is illegal
    """
    run = movable_run(state, source, source_index)
    if not is_legal_move(state, run, source, dest):
        return state

    waste = state.waste
    tableau = state.tableau
    foundations = state.foundations

    if source.kind == PileType.WASTE:
        waste = waste[:-1]
    else:
        remaining = tableau[source.index][:source_index]
        if remaining:
            remaining = remaining[:-1] + (remaining[-1].turned(face_up=True),)
        tableau = _replace_pile(tableau, source.index, remaining)

    if dest.kind == PileType.FOUNDATION:
        foundations = _replace_pile(foundations, dest.index, foundations[dest.index] + run)
    else:
        tableau = _replace_pile(tableau, dest.index, tableau[dest.index] + run)

    return replace(
        state,
        waste=waste,
        tableau=tableau,
        foundations=foundations,
        selected=None,
    )


def auto_move_to_foundation(state: GameState, source: PileRef, source_index: int) -> GameState:
    """
    Send the top card of ``source`` to the first foundation that accepts it.

    Only the waste top or the top card of a tableau pile qualifies. At most
    one move is made.
    """
    if source.kind == PileType.TABLEAU and source_index != len(state.tableau[source.index]) - 1:
        return state
    if source.kind not in (PileType.WASTE, PileType.TABLEAU):
        return state

    for index in range(FOUNDATION_COUNT):
        moved = move_cards(state, source, source_index, PileRef.foundation(index))
        if moved is not state:
            return moved
    return state


def select_card(state: GameState, pile: PileRef, index: int) -> GameState:
    """Point the selection at a card; no-op if the index holds no card."""
    cards = state.pile(pile)
    if not 0 <= index < len(cards):
        return state
    return replace(state, selected=Selection(pile=pile, index=index, card=cards[index]))


def clear_selection(state: GameState) -> GameState:
    if state.selected is None:
        return state
    return replace(state, selected=None)


def is_game_won(state: GameState) -> bool:
    """True when all four foundations hold a full suit."""
    return all(len(pile) == 13 for pile in state.foundations)
