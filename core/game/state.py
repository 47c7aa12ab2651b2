"""Game state model: difficulty presets, pile references and the state snapshot."""

from collections import Counter
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Iterator

from core.cards import Card, Rank, Suit

FOUNDATION_COUNT = 4
TABLEAU_COUNT = 7
DECK_SIZE = len(Suit) * len(Rank)


class GamePhase(Enum):
    """
    Game phase machine states.

    Flow: PLAYING → WON, and any phase → PLAYING on a new deal
    """

    # Cards in play
    PLAYING = auto()

    # All four foundations complete
    WON = auto()

    def __str__(self) -> str:
        return self.name.title()


@dataclass(frozen=True)
class Difficulty:
    """
    Draw and recycling rules for a game.

    cards_drawn is how many cards each draw turns onto the waste;
    pass_limit bounds how many times the waste may be recycled
    into the stock (None for unlimited).
    """

    name: str = "normal"
    cards_drawn: int = 3
    pass_limit: int | None = None

    def __post_init__(self) -> None:
        """Validate the combination."""
        if self.cards_drawn not in (1, 3):
            raise ValueError("cards_drawn must be 1 or 3")
        if self.pass_limit is not None and self.pass_limit < 0:
            raise ValueError("pass_limit must be non-negative")

    @property
    def unlimited_passes(self) -> bool:
        return self.pass_limit is None

    @classmethod
    def easy(cls) -> "Difficulty":
        """Draw one, recycle freely."""
        return cls(name="easy", cards_drawn=1, pass_limit=None)

    @classmethod
    def normal(cls) -> "Difficulty":
        """Draw three, recycle freely."""
        return cls(name="normal", cards_drawn=3, pass_limit=None)

    @classmethod
    def hard(cls) -> "Difficulty":
        """Draw three, at most three recycles."""
        return cls(name="hard", cards_drawn=3, pass_limit=3)

    @classmethod
    def from_name(cls, name: str) -> "Difficulty":
        """Look up a preset by name."""
        presets = {
            "easy": cls.easy,
            "normal": cls.normal,
            "hard": cls.hard,
        }
        try:
            return presets[name.strip().lower()]()
        except KeyError:
            raise ValueError(f"Unknown difficulty: {name}") from None


class PileType(Enum):
    """Kinds of pile on the table."""

    STOCK = "stock"
    WASTE = "waste"
    FOUNDATION = "foundation"
    TABLEAU = "tableau"


_PILE_COUNTS = {
    PileType.STOCK: 1,
    PileType.WASTE: 1,
    PileType.FOUNDATION: FOUNDATION_COUNT,
    PileType.TABLEAU: TABLEAU_COUNT,
}


@dataclass(frozen=True)
class PileRef:
    """A reference to one pile; out-of-range indexes cannot be constructed."""

    kind: PileType
    index: int = 0

    def __post_init__(self) -> None:
        count = _PILE_COUNTS[self.kind]
        if not 0 <= self.index < count:
            raise ValueError(f"{self.kind.value} index must be in [0, {count - 1}], got {self.index}")

    def __str__(self) -> str:
        if self.kind in (PileType.STOCK, PileType.WASTE):
            return self.kind.value
        return f"{self.kind.value}-{self.index}"

    @classmethod
    def stock(cls) -> "PileRef":
        return cls(PileType.STOCK)

    @classmethod
    def waste(cls) -> "PileRef":
        return cls(PileType.WASTE)

    @classmethod
    def foundation(cls, index: int) -> "PileRef":
        return cls(PileType.FOUNDATION, index)

    @classmethod
    def tableau(cls, index: int) -> "PileRef":
        return cls(PileType.TABLEAU, index)

    @classmethod
    def parse(cls, s: str) -> "PileRef":
        """Parse the wire form: 'stock', 'waste', 'foundation-2', 'tableau-6'."""
        text = s.strip().lower()
        kind_str, sep, index_str = text.partition("-")

        try:
            kind = PileType(kind_str)
        except ValueError:
            raise ValueError(f"Invalid pile: {s}") from None

        if kind in (PileType.STOCK, PileType.WASTE):
            if sep:
                raise ValueError(f"Invalid pile: {s}")
            return cls(kind)

        if not index_str.isdigit():
            raise ValueError(f"Invalid pile: {s}")
        return cls(kind, int(index_str))


@dataclass(frozen=True)
class Selection:
    """A view-level pointer at a card; carries no move semantics."""

    pile: PileRef
    index: int
    card: Card


def _empty_piles(count: int) -> tuple[tuple[Card, ...], ...]:
    return tuple(() for _ in range(count))


@dataclass(frozen=True)
class GameState:
    """
    Immutable snapshot of a Klondike table.

    Every pile is a tuple ordered bottom first. Transitions build a new
    GameState; nothing in a snapshot is ever modified.
    """

    stock: tuple[Card, ...] = ()
    waste: tuple[Card, ...] = ()
    foundations: tuple[tuple[Card, ...], ...] = field(
        default_factory=lambda: _empty_piles(FOUNDATION_COUNT)
    )
    tableau: tuple[tuple[Card, ...], ...] = field(
        default_factory=lambda: _empty_piles(TABLEAU_COUNT)
    )
    selected: Selection | None = None
    difficulty: Difficulty = field(default_factory=Difficulty.normal)
    pass_count: int = 0

    def pile(self, ref: PileRef) -> tuple[Card, ...]:
        """Return the cards of the referenced pile."""
        if ref.kind == PileType.STOCK:
            return self.stock
        if ref.kind == PileType.WASTE:
            return self.waste
        if ref.kind == PileType.FOUNDATION:
            return self.foundations[ref.index]
        return self.tableau[ref.index]

    def top_card(self, ref: PileRef) -> Card | None:
        """Return the top card of a pile, or None if it is empty."""
        cards = self.pile(ref)
        return cards[-1] if cards else None

    def all_cards(self) -> Iterator[Card]:
        """Iterate over every card on the table."""
        yield from self.stock
        yield from self.waste
        for pile in self.foundations:
            yield from pile
        for pile in self.tableau:
            yield from pile

    @property
    def passes_remaining(self) -> int | None:
        """Recycles left before the stock is exhausted for good (None if unlimited)."""
        if self.difficulty.pass_limit is None:
            return None
        return max(self.difficulty.pass_limit - self.pass_count, 0)

    @property
    def can_recycle(self) -> bool:
        """Whether an empty stock may be refilled from the waste (even an empty one)."""
        if self.stock:
            return False
        remaining = self.passes_remaining
        return remaining is None or remaining > 0

    @property
    def visible_waste(self) -> tuple[Card, ...]:
        """The waste cards a view fans out: the last cards_drawn of them."""
        return self.waste[-self.difficulty.cards_drawn:]


def assert_partition(state: GameState) -> None:
    """
    Assert that the table holds each of the 52 cards exactly once.

    A failure here is an engine defect, never a user error.
    """
    counts = Counter(card.identity for card in state.all_cards())
    duplicates = [f"{rank}{suit}" for (suit, rank), n in counts.items() if n > 1]
    assert not duplicates, f"Duplicate cards on table: {duplicates}"
    assert len(counts) == DECK_SIZE, f"Expected {DECK_SIZE} cards, found {len(counts)}"
    assert len(state.foundations) == FOUNDATION_COUNT
    assert len(state.tableau) == TABLEAU_COUNT
    assert state.pass_count >= 0
    assert all(not card.face_up for card in state.stock), "Face-up card in stock"
