"""Klondike game engine with phase state machine."""

import logging
from random import Random
from typing import Callable

from transitions import Machine

from core.game import moves
from core.game.deal import initialize_game
from core.game.events import EventEmitter, EventType, GameEvent
from core.game.state import Difficulty, GamePhase, GameState, PileRef, PileType, assert_partition

logger = logging.getLogger(__name__)


class KlondikeGame:
    """
    Klondike game engine.

    Owns the one authoritative GameState. Every command either swaps in a
    new snapshot and returns True, or leaves the snapshot untouched and
    returns False. Illegal requests never raise.

    This is the core game logic, completely UI-agnostic.
    Communication happens through events and return values only.
    """

    # Phase machine states
    STATES = [p.name.lower() for p in GamePhase]

    # Phase machine transitions
    TRANSITIONS = [
        {"trigger": "complete_foundations", "source": "playing", "dest": "won"},
        {"trigger": "redeal", "source": "*", "dest": "playing"},
    ]

    def __init__(
        self,
        difficulty: Difficulty | None = None,
        rng: Random | None = None,
        state: GameState | None = None,
    ) -> None:
        """
        Initialize a new Klondike game.

        Args:
            difficulty: Draw and recycling rules (normal if not provided)
            rng: Random number generator for reproducible deals
            state: Resume from an existing snapshot instead of dealing
        """
        self._rng = rng or Random()
        self.events = EventEmitter()

        # Initialize phase machine
        self.machine = Machine(
            model=self,
            states=self.STATES,
            transitions=self.TRANSITIONS,
            initial="playing",
            auto_transitions=False,
            model_attribute="_machine_state",
        )

        if state is not None:
            assert_partition(state)
            self._state = state
            if moves.is_game_won(state):
                self.complete_foundations()
        else:
            self._state = initialize_game(difficulty or Difficulty.normal(), self._rng)

    @property
    def phase(self) -> GamePhase:
        """Get current game phase as enum."""
        return GamePhase[self._machine_state.upper()]  # type: ignore

    @property
    def difficulty(self) -> Difficulty:
        return self._state.difficulty

    def get_state(self) -> GameState:
        """Return the current (immutable) state snapshot."""
        return self._state

    def subscribe(
        self,
        handler: Callable[[GameEvent], None],
        event_type: EventType | None = None,
    ) -> None:
        """Subscribe to game events."""
        self.events.subscribe(handler, event_type)

    def new_game(self, difficulty: Difficulty | None = None) -> bool:
        """
        Discard the current table and deal a new one.

        Args:
            difficulty: Rules for the new game (keeps the current ones if omitted)

        Returns:
            Always True
        """
        difficulty = difficulty or self._state.difficulty
        self._state = initialize_game(difficulty, self._rng)
        assert_partition(self._state)
        self.redeal()

        logger.info("New %s game dealt", difficulty.name)
        self.events.emit_new(
            EventType.GAME_STARTED,
            difficulty=difficulty.name,
            cards_drawn=difficulty.cards_drawn,
            pass_limit=difficulty.pass_limit,
        )
        return True

    def draw_from_stock(self) -> bool:
        """
        Draw from the stock, or recycle the waste when the stock is empty.

        Returns:
            True if cards were drawn or the stock was recycled
        """
        before = self._state
        after = moves.draw_from_stock(before)
        if after is before:
            return self._reject("draw", "Stock cannot be recycled")

        self._commit(after)
        if before.stock:
            drawn = after.waste[len(before.waste):]
            self.events.emit_new(
                EventType.CARDS_DRAWN,
                cards=[card.id for card in drawn],
                stock_remaining=len(after.stock),
            )
        else:
            self.events.emit_new(
                EventType.STOCK_RECYCLED,
                pass_count=after.pass_count,
                passes_remaining=after.passes_remaining,
            )
        return True

    def move_cards(
        self,
        source: PileRef,
        source_index: int,
        dest: PileRef,
        dest_index: int = 0,
    ) -> bool:
        """
        Move a card or face-up run from one pile to another.

        Args:
            source: Waste or tableau pile to take from
            source_index: Index of the first card to move (ignored for the waste)
            dest: Foundation or tableau pile to place on
            dest_index: Accepted but unused; cards always go on top

        Returns:
            True if the move was legal and applied
        """
        before = self._state
        after = moves.move_cards(before, source, source_index, dest, dest_index)
        if after is before:
            return self._reject("move", "Illegal move", source=str(source), dest=str(dest))

        self._announce_move(before, after, source, dest)
        return True

    def try_auto_move_to_foundation(self, source: PileRef, source_index: int) -> bool:
        """
        Send a top card to whichever foundation accepts it.

        Returns:
            True if the card went to a foundation
        """
        before = self._state
        after = moves.auto_move_to_foundation(before, source, source_index)
        if after is before:
            return self._reject("auto-move", "No foundation accepts this card", source=str(source))

        dest = next(
            PileRef.foundation(i)
            for i in range(len(after.foundations))
            if len(after.foundations[i]) != len(before.foundations[i])
        )
        self._announce_move(before, after, source, dest)
        return True

    def select_card(self, pile: PileRef, index: int) -> bool:
        """Record which card the view has selected."""
        after = moves.select_card(self._state, pile, index)
        if after is self._state:
            return self._reject("select", "No card at that position", pile=str(pile), index=index)

        self._state = after
        self.events.emit_new(EventType.CARD_SELECTED, pile=str(pile), index=index, card=after.selected.card.id)
        return True

    def clear_selection(self) -> bool:
        after = moves.clear_selection(self._state)
        if after is self._state:
            return False
        self._state = after
        self.events.emit_new(EventType.SELECTION_CLEARED)
        return True

    def is_game_won(self) -> bool:
        """Check whether every foundation is complete."""
        return moves.is_game_won(self._state)

    @property
    def can_draw(self) -> bool:
        """Check if drawing (or recycling) would do anything."""
        return self.phase == GamePhase.PLAYING and (bool(self._state.stock) or self._state.can_recycle)

    def _commit(self, state: GameState) -> None:
        """Swap in a new snapshot after checking the table is intact."""
        assert_partition(state)
        self._state = state
        logger.debug(
            "State updated: stock=%d waste=%d foundations=%s passes=%d",
            len(state.stock),
            len(state.waste),
            [len(f) for f in state.foundations],
            state.pass_count,
        )

    def _announce_move(self, before: GameState, after: GameState, source: PileRef, dest: PileRef) -> None:
        """Commit a move and publish what it did."""
        self._commit(after)
        moved = after.pile(dest)[len(before.pile(dest)):]
        self.events.emit_new(
            EventType.CARDS_MOVED,
            source=str(source),
            dest=str(dest),
            cards=[card.id for card in moved],
        )

        new_top = after.top_card(source) if source.kind == PileType.TABLEAU else None
        if new_top is not None:
            was_showing = before.tableau[source.index][len(after.tableau[source.index]) - 1].face_up
            if not was_showing:
                self.events.emit_new(EventType.CARD_REVEALED, pile=str(source), card=new_top.id)

        if self.is_game_won() and self.phase == GamePhase.PLAYING:
            self.complete_foundations()
            logger.info("Game won")
            self.events.emit_new(EventType.GAME_WON)

    def _reject(self, action: str, reason: str, **data) -> bool:
        """Report a rejected request; the state is left as it was."""
        logger.debug("Rejected %s: %s %s", action, reason, data)
        self.events.emit_new(EventType.MOVE_REJECTED, action=action, reason=reason, **data)
        return False
