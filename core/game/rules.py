"""Klondike placement rules.

These predicates are the only place a placement is judged legal. They are
pure: they read the cards they are given and nothing else.
"""

from typing import Sequence

from core.cards import Card, Rank


def can_place_on_tableau(card: Card, target: Card | None) -> bool:
    """
    Check whether a card may be laid on a tableau pile.

    Args:
        card: The leading (bottom-most) card of the run being moved
        target: Top card of the destination pile, or None if it is empty

    Returns:
        True if the placement is legal
    """
    if target is None:
        return card.rank == Rank.KING

    return card.is_red != target.is_red and card.rank.value == target.rank.value - 1


def can_place_on_foundation(card: Card, foundation: Sequence[Card]) -> bool:
    """
    Check whether a card may be added to a foundation pile.

    Args:
        card: The single card being moved
        foundation: The destination foundation, bottom first

    Returns:
        True if the placement is legal
    """
    if not foundation:
        return card.rank == Rank.ACE

    top = foundation[-1]
    return card.suit == top.suit and card.rank.value == top.rank.value + 1
