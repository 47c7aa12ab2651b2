"""Pytest fixtures for Klondike engine tests."""

import pytest
from random import Random

from core.cards import Card, Rank, Suit
from core.game import Difficulty, GameState, KlondikeGame


def parse_card(text: str | Card) -> Card:
    """'5S' is a face-up five of spades; '#5S' is the same card face-down."""
    if isinstance(text, Card):
        return text
    if text.startswith("#"):
        return Card.from_string(text[1:], face_up=False)
    return Card.from_string(text)


def parse_pile(specs) -> tuple[Card, ...]:
    return tuple(parse_card(s) for s in specs)


@pytest.fixture
def rng():
    """Seeded random number generator for reproducible tests."""
    return Random(42)


@pytest.fixture
def game(rng):
    """A freshly dealt normal game."""
    return KlondikeGame(difficulty=Difficulty.normal(), rng=rng)


@pytest.fixture
def build_state():
    """
    Factory for hand-built tables.

    Cards not placed explicitly are put face-down in the stock (or face-up
    on the waste with rest="waste") so the table always holds all 52.
    Pass fill=False to build a partial table.
    """

    def _build(
        tableau=None,
        foundations=None,
        waste=(),
        stock=None,
        difficulty=None,
        pass_count=0,
        rest="stock",
        fill=True,
    ) -> GameState:
        tableau_piles = [parse_pile(p) for p in (tableau or [])]
        tableau_piles += [()] * (7 - len(tableau_piles))
        foundation_piles = [parse_pile(p) for p in (foundations or [])]
        foundation_piles += [()] * (4 - len(foundation_piles))
        waste_pile = parse_pile(waste)
        stock_pile = parse_pile(stock or ())

        used = {c.identity for pile in tableau_piles + foundation_piles for c in pile}
        used |= {c.identity for c in waste_pile + stock_pile}
        leftover = [
            Card(suit, rank)
            for suit in Suit
            for rank in Rank
            if (suit, rank) not in used
        ]

        if fill and rest == "stock":
            stock_pile += tuple(leftover)
        elif fill and rest == "waste":
            waste_pile = tuple(c.turned(face_up=True) for c in leftover) + waste_pile

        return GameState(
            stock=stock_pile,
            waste=waste_pile,
            foundations=tuple(foundation_piles),
            tableau=tuple(tableau_piles),
            difficulty=difficulty or Difficulty.normal(),
            pass_count=pass_count,
        )

    return _build


RANK_LABELS = ("A", "2", "3", "4", "5", "6", "7", "8", "9", "10", "J", "Q", "K")


@pytest.fixture
def full_suit():
    """Return a helper giving Ace to King of one suit, as card strings."""

    def _full_suit(suit_letter: str) -> list[str]:
        return [f"{rank}{suit_letter}" for rank in RANK_LABELS]

    return _full_suit


@pytest.fixture
def near_win_state(build_state, full_suit):
    """Everything home except the King of spades, which sits on the waste."""
    foundations = [full_suit("H"), full_suit("D"), full_suit("C"), full_suit("S")[:12]]
    return build_state(foundations=foundations, waste=["KS"])
