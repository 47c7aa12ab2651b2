"""Core Klondike engine - 100% UI-agnostic."""

from core.cards import Card, Deck, Rank, Suit, create_deck

__all__ = [
    "Card",
    "Deck",
    "Rank",
    "Suit",
    "create_deck",
]
