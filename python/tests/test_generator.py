"""Board dealing: composition, ids, seeding and limits."""

from __future__ import annotations

import random
from collections import Counter

import pytest

from backend.config import PALETTE
from backend.engine.gamegenerator import GameGenerator
from backend.models.board import Board
from backend.models.card import Symbol


@pytest.mark.parametrize("pairs", range(2, len(PALETTE) + 1))
def test_every_symbol_dealt_exactly_twice(pairs: int) -> None:
    board = GameGenerator.generate(pairs, random.Random(pairs))

    assert len(board) == 2 * pairs
    counts = Counter(board.symbols())
    assert set(counts) == set(PALETTE[:pairs])
    assert all(n == 2 for n in counts.values())


def test_ids_follow_deal_order() -> None:
    board = GameGenerator.generate(5, random.Random(0))
    assert [c.id for c in board.cards] == list(range(10))
    assert not any(c.is_matched for c in board.cards)


def test_same_seed_same_deal() -> None:
    a = GameGenerator.generate(8, random.Random(42))
    b = GameGenerator.generate(8, random.Random(42))
    assert a.symbols() == b.symbols()


def test_different_seeds_deal_differently() -> None:
    seen = {tuple(GameGenerator.generate(16, random.Random(s)).symbols()) for s in range(5)}
    assert len(seen) > 1


def test_shuffle_is_a_permutation() -> None:
    items = list(range(20))
    GameGenerator.shuffle(items, random.Random(3))
    assert sorted(items) == list(range(20))


@pytest.mark.parametrize("pairs", [0, -1, len(PALETTE) + 1])
def test_rejects_impossible_pair_counts(pairs: int) -> None:
    with pytest.raises(ValueError):
        GameGenerator.generate(pairs)


def test_board_rejects_unpaired_symbols() -> None:
    with pytest.raises(ValueError):
        Board.from_symbols([Symbol.STAR, Symbol.STAR, Symbol.BALLOON])


def test_board_queries() -> None:
    board = Board.from_symbols([Symbol.STAR, Symbol.UFO, Symbol.UFO, Symbol.STAR])
    assert board.pairs == 2
    assert board.get_card(3).symbol is Symbol.STAR
    assert board.get_card(4) is None
    assert board.get_card(-1) is None
    assert not board.is_cleared()

    board.cards[1].is_matched = board.cards[2].is_matched = True
    assert board.matched_count() == 1
    board.cards[0].is_matched = board.cards[3].is_matched = True
    assert board.is_cleared()
    assert Board().is_cleared() is False
