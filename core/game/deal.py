"""Dealing a new Klondike table."""

from random import Random

from core.cards import Card, create_deck
from core.game.state import TABLEAU_COUNT, Difficulty, GameState


def initialize_game(difficulty: Difficulty | None = None, rng: Random | None = None) -> GameState:
    """
    Shuffle a deck and deal the opening layout.

    The tableau is dealt in rounds: round i puts one card on each of piles
    i..6, and the card that opens a round on pile i is turned face-up. That
    leaves piles of 1..7 cards with only the top card showing. The 24 cards
    left over become the stock, face-down, in shuffled order.

    Args:
        difficulty: Draw and recycling rules (normal if not provided)
        rng: Random source for the shuffle

    Returns:
        The opening GameState
    """
    deck = create_deck(rng)
    tableau: list[list[Card]] = [[] for _ in range(TABLEAU_COUNT)]

    position = 0
    for deal_round in range(TABLEAU_COUNT):
        for pile in range(deal_round, TABLEAU_COUNT):
            card = deck[position]
            position += 1
            tableau[pile].append(card.turned(face_up=deal_round == pile))

    return GameState(
        stock=tuple(card.turned(face_up=False) for card in deck[position:]),
        tableau=tuple(tuple(pile) for pile in tableau),
        difficulty=difficulty or Difficulty.normal(),
    )
