"""Card and Deck classes - immutable card representations."""

from dataclasses import dataclass, replace
from enum import Enum
from random import Random
from typing import Iterator


class Suit(Enum):
    """Card suits, valued by the name used in card ids."""

    HEARTS = "hearts"
    DIAMONDS = "diamonds"
    CLUBS = "clubs"
    SPADES = "spades"

    def __str__(self) -> str:
        symbols = {
            Suit.HEARTS: "♥",
            Suit.DIAMONDS: "♦",
            Suit.CLUBS: "♣",
            Suit.SPADES: "♠",
        }
        return symbols[self]

    @property
    def is_red(self) -> bool:
        """Hearts and diamonds are red."""
        return self in (Suit.HEARTS, Suit.DIAMONDS)

    @property
    def color(self) -> str:
        """Return 'red' or 'black'."""
        return "red" if self.is_red else "black"


class Rank(Enum):
    """Card ranks, Ace low and King high."""

    ACE = 1
    TWO = 2
    THREE = 3
    FOUR = 4
    FIVE = 5
    SIX = 6
    SEVEN = 7
    EIGHT = 8
    NINE = 9
    TEN = 10
    JACK = 11
    QUEEN = 12
    KING = 13

    def __str__(self) -> str:
        if 2 <= self.value <= 10:
            return str(self.value)
        return {
            Rank.ACE: "A",
            Rank.JACK: "J",
            Rank.QUEEN: "Q",
            Rank.KING: "K",
        }[self]


_RANK_LABELS = {str(rank): rank for rank in Rank}
_RANK_LABELS["T"] = Rank.TEN

_SUIT_LABELS = {
    "H": Suit.HEARTS,
    "♥": Suit.HEARTS,
    "D": Suit.DIAMONDS,
    "♦": Suit.DIAMONDS,
    "C": Suit.CLUBS,
    "♣": Suit.CLUBS,
    "S": Suit.SPADES,
    "♠": Suit.SPADES,
}


@dataclass(frozen=True, slots=True)
class Card:
    """
    Immutable playing card.

    Orientation is part of the value: turning a card over yields a new Card,
    so a card held by one pile can never change under another.
    """

    suit: Suit
    rank: Rank
    face_up: bool = False

    def __str__(self) -> str:
        return f"{self.rank}{self.suit}"

    def __repr__(self) -> str:
        side = "up" if self.face_up else "down"
        return f"Card({self.rank.name}, {self.suit.name}, {side})"

    @property
    def id(self) -> str:
        """Stable key such as 'hearts-A' or 'spades-10'."""
        return f"{self.suit.value}-{self.rank}"

    @property
    def identity(self) -> tuple[Suit, Rank]:
        """The (suit, rank) pair, ignoring orientation."""
        return (self.suit, self.rank)

    @property
    def is_red(self) -> bool:
        return self.suit.is_red

    @property
    def color(self) -> str:
        return self.suit.color

    def turned(self, face_up: bool) -> "Card":
        """Return this card with the given orientation."""
        if self.face_up == face_up:
            return self
        return replace(self, face_up=face_up)

    @classmethod
    def from_string(cls, s: str, face_up: bool = True) -> "Card":
        """Create a card from a string like '5♠', 'AH', '10d'."""
        s = s.strip().upper()
        if len(s) < 2:
            raise ValueError(f"Invalid card string: {s}")

        rank_str = s[:-1]
        suit_str = s[-1]

        if rank_str not in _RANK_LABELS:
            raise ValueError(f"Invalid rank: {rank_str}")
        if suit_str not in _SUIT_LABELS:
            raise ValueError(f"Invalid suit: {suit_str}")

        return cls(_SUIT_LABELS[suit_str], _RANK_LABELS[rank_str], face_up)


class Deck:
    """A standard 52-card deck, every card face-down."""

    def __init__(self, rng: Random | None = None) -> None:
        """Initialize a new deck in suit-then-rank order."""
        self._rng = rng or Random()
        self._cards = [Card(suit, rank) for suit in Suit for rank in Rank]

    def shuffle(self) -> None:
        """Shuffle the deck in place (Fisher-Yates via Random.shuffle)."""
        self._rng.shuffle(self._cards)

    def __iter__(self) -> Iterator[Card]:
        return iter(self._cards)


def create_deck(rng: Random | None = None) -> list[Card]:
    """
    Build a freshly shuffled 52-card deck.

    Args:
        rng: Random source for the permutation; pass a seeded Random
            for a reproducible deal.

    Returns:
        All 52 cards, face-down, in shuffled order
    """
    deck = Deck(rng=rng)
    deck.shuffle()
    return list(deck)
