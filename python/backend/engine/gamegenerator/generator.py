"""Deals shuffled memory boards."""

from __future__ import annotations

import random

from backend.config import PALETTE
from backend.models.board import Board
from backend.models.card import Symbol


class GameGenerator:
    """Builds a board from the first *pairs* palette symbols, each dealt twice."""

    @staticmethod
    def deck(pairs: int, palette: tuple[Symbol, ...] = PALETTE) -> list[Symbol]:
        """Return the unshuffled deck: the chosen symbols, then the same again."""
        if pairs < 1:
            raise ValueError(f"A board needs at least one pair, got {pairs}.")
        if pairs > len(palette):
            raise ValueError(
                f"Cannot deal {pairs} pairs from a palette of {len(palette)} symbols."
            )
        chosen = list(palette[:pairs])
        return chosen + chosen

    @staticmethod
    def shuffle(items: list, rng: random.Random) -> None:
        """Shuffle *items* in-place using *rng*."""
        rng.shuffle(items)

    @staticmethod
    def generate(
        pairs: int,
        rng: random.Random | None = None,
        palette: tuple[Symbol, ...] = PALETTE,
    ) -> Board:
        """Return a freshly shuffled board with ``2 * pairs`` cards."""
        deck = GameGenerator.deck(pairs, palette)
        GameGenerator.shuffle(deck, rng or random.Random())
        return Board.from_symbols(deck)
