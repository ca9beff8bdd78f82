"""Test helpers shared across modules."""

from __future__ import annotations

from collections import defaultdict

from backend.engine.gameplay.game import GamePlay
from backend.models.card import Symbol


class ManualClock:
    """Monotonic clock that only moves when a test says so."""

    def __init__(self, start: float = 100.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def pair_ids(game: GamePlay) -> dict[Symbol, list[int]]:
    """Map each symbol on the current board to its two card ids."""
    pairs: dict[Symbol, list[int]] = defaultdict(list)
    for card in game.snapshot().cards:
        pairs[card.symbol].append(card.id)
    return dict(pairs)


def mismatched_ids(game: GamePlay) -> tuple[int, int]:
    """Return two card ids with different symbols."""
    (a, _), (b, _) = list(pair_ids(game).values())[:2]
    return a, b


def clear_board(game: GamePlay) -> None:
    """Match every pair on the current board."""
    for a, b in pair_ids(game).values():
        game.flip_card(a)
        game.flip_card(b)
