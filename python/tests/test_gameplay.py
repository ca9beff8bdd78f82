"""Engine behaviour: sessions, flips, matches, the level clock and deferred actions.

Time is driven by ``ManualClock``; nothing here sleeps.
"""

from __future__ import annotations

import random

import pytest

from backend.config import HIGHSCORE_KEY, GameRules
from backend.engine.gameplay.game import GamePlay
from backend.engine.scheduler import Scheduler
from backend.errors import ValidationError
from backend.models.card import Symbol
from backend.models.highscore import ScoreStore
from backend.models.session import FlipResult, GamePhase
from backend.storage import MemoryStore
from helpers import ManualClock, clear_board, mismatched_ids, pair_ids


def _run_for(game: GamePlay, clock: ManualClock, seconds: float) -> None:
    clock.advance(seconds)
    game.pump()


# -- starting a session -------------------------------------------------------


@pytest.mark.parametrize("name", ["", "   ", "\t\n"])
def test_blank_name_is_rejected(game: GamePlay, name: str) -> None:
    with pytest.raises(ValidationError):
        game.start_game(name)

    snap = game.snapshot()
    assert snap.phase is GamePhase.LANDING
    assert snap.cards == ()
    assert game.scheduler.pending == 0


def test_start_game_deals_level_one(game: GamePlay) -> None:
    game.start_game("  Ada  ")
    snap = game.snapshot()

    assert snap.phase is GamePhase.PLAYING
    assert snap.player_name == "Ada"
    assert (snap.level, snap.pairs, snap.time_limit, snap.time_left) == (1, 2, 12, 12)
    assert snap.completed_level == 0
    assert len(snap.cards) == 4
    assert not any(c.face_up for c in snap.cards)


# -- flipping -----------------------------------------------------------------


def test_flipping_same_card_twice_unflips_it(game: GamePlay) -> None:
    game.start_game("Ada")

    assert game.flip_card(0) is FlipResult.FLIPPED
    assert game.snapshot().selection == (0,)
    assert game.flip_card(0) is FlipResult.UNFLIPPED
    assert game.snapshot().selection == ()
    assert not game.snapshot().cards[0].face_up


def test_matching_pair_marks_both_matched(game: GamePlay) -> None:
    game.start_game("Ada")
    a, b = pair_ids(game)[Symbol.STAR]

    game.flip_card(a)
    assert game.flip_card(b) is FlipResult.MATCHED

    snap = game.snapshot()
    assert snap.cards[a].is_matched and snap.cards[b].is_matched
    assert snap.matched_pairs == 1
    assert snap.selection == ()
    assert game.flip_card(a) is FlipResult.IGNORED


def test_matched_count_never_decreases(game: GamePlay) -> None:
    game.start_game("Ada")
    x, y = mismatched_ids(game)
    counts = []
    for card_id in (x, y, x, *pair_ids(game)[Symbol.STAR]):
        game.flip_card(card_id)
        counts.append(game.snapshot().matched_pairs)
    assert counts == sorted(counts)


def test_mismatch_stays_visible_until_delay(game: GamePlay, clock: ManualClock) -> None:
    game.start_game("Ada")
    a, b = mismatched_ids(game)
    other = next(i for i in range(4) if i not in (a, b))

    game.flip_card(a)
    assert game.flip_card(b) is FlipResult.MISMATCHED
    assert game.flip_card(other) is FlipResult.IGNORED

    _run_for(game, clock, 0.5)
    assert game.snapshot().selection == (a, b)

    _run_for(game, clock, 0.5)
    assert game.snapshot().selection == ()
    assert not any(c.is_matched for c in game.snapshot().cards)


def test_stale_hide_leaves_newer_selection(clock: ManualClock) -> None:
    rules = GameRules()
    g = GamePlay(
        ScoreStore(MemoryStore()),
        scheduler=Scheduler(clock),
        rng=random.Random(9),
        rules=rules,
    )
    g.start_game("Ada")
    g.advance_level()  # three pairs, so a fresh mismatch is possible
    ids = pair_ids(g)
    (a, _), (b, _), (c, _) = list(ids.values())

    g.flip_card(a)
    g.flip_card(b)                     # mismatch, hide due at t+1.0
    _run_for(g, clock, 0.5)
    assert g.flip_card(a) is FlipResult.UNFLIPPED
    assert g.flip_card(c) is FlipResult.MISMATCHED  # hide due at t+1.5

    _run_for(g, clock, 0.5)
    assert g.snapshot().selection == (b, c)

    _run_for(g, clock, 0.5)
    assert g.snapshot().selection == ()


def test_flip_ignored_outside_play(game: GamePlay) -> None:
    assert game.flip_card(0) is FlipResult.IGNORED
    game.start_game("Ada")
    assert game.flip_card(99) is FlipResult.IGNORED
    assert game.flip_card(-1) is FlipResult.IGNORED


# -- level progression --------------------------------------------------------


def test_clearing_level_one_advances_after_delay(game: GamePlay, clock: ManualClock) -> None:
    game.start_game("Ada")
    (a, b), (c, d) = pair_ids(game).values()

    game.flip_card(a)
    game.flip_card(b)
    game.flip_card(c)
    assert game.flip_card(d) is FlipResult.LEVEL_COMPLETE

    snap = game.snapshot()
    assert snap.completed_level == 1
    assert snap.level_cleared
    assert snap.level == 1

    _run_for(game, clock, 0.5)
    assert game.snapshot().level == 1

    _run_for(game, clock, 0.5)
    snap = game.snapshot()
    assert (snap.level, snap.pairs, snap.time_limit, snap.time_left) == (2, 3, 16, 16)
    assert len(snap.cards) == 6
    assert not any(c.is_matched for c in snap.cards)
    assert snap.selection == ()
    assert snap.matched_pairs == 0
    assert not snap.level_cleared


def test_clock_stops_while_level_is_cleared(game: GamePlay, clock: ManualClock) -> None:
    game.start_game("Ada")
    _run_for(game, clock, 3)
    clear_board(game)
    left = game.snapshot().time_left
    assert left == 9

    game.tick()
    assert game.snapshot().time_left == left


@pytest.mark.parametrize("level", [1, 2, 3, 7, 14])
def test_advance_level_follows_formulas(game: GamePlay, level: int) -> None:
    game.start_game("Ada")
    for _ in range(level - 1):
        game.advance_level()
    assert game.snapshot().level == level

    game.advance_level()
    snap = game.snapshot()
    assert snap.level == level + 1
    assert snap.pairs == level + 2
    assert snap.time_limit == 12 + level * 4
    assert snap.time_left == snap.time_limit
    assert len(snap.cards) == 2 * snap.pairs


def test_running_out_of_symbols_ends_the_game(clock: ManualClock) -> None:
    rules = GameRules(palette=(Symbol.STAR, Symbol.BALLOON, Symbol.ART))
    store = ScoreStore(MemoryStore(), rules)
    game = GamePlay(store, rules=rules, scheduler=Scheduler(clock), rng=random.Random(1))
    assert rules.max_level == 2

    game.start_game("Ada")
    clear_board(game)
    _run_for(game, clock, 1)
    assert game.snapshot().level == 2

    clear_board(game)
    _run_for(game, clock, 1)
    assert game.snapshot().phase is GamePhase.GAME_OVER
    assert [r.level for r in store.scores] == [2]


# -- clock and game end -------------------------------------------------------


def test_tick_counts_down_each_second(game: GamePlay, clock: ManualClock) -> None:
    game.start_game("Ada")
    _run_for(game, clock, 1)
    assert game.snapshot().time_left == 11
    _run_for(game, clock, 4.5)
    assert game.snapshot().time_left == 7


def test_timeout_without_completed_level_saves_nothing(
    game: GamePlay, clock: ManualClock, kv: MemoryStore, store: ScoreStore
) -> None:
    game.start_game("Ada")
    _run_for(game, clock, 12)

    snap = game.snapshot()
    assert snap.phase is GamePhase.GAME_OVER
    assert snap.time_left == 0
    assert game.last_record is None
    assert store.scores == []
    assert kv.get(HIGHSCORE_KEY) is None
    assert game.scheduler.pending == 0


def test_timeout_after_level_one_submits_score(
    game: GamePlay, clock: ManualClock, store: ScoreStore
) -> None:
    game.start_game("Ada")
    clear_board(game)
    _run_for(game, clock, 1)
    assert game.snapshot().level == 2

    _run_for(game, clock, 16)
    assert game.snapshot().phase is GamePhase.GAME_OVER
    assert game.last_record is not None
    assert [(r.name, r.level) for r in store.scores] == [("Ada", 1)]


def test_give_up_cancels_pending_advance(game: GamePlay, clock: ManualClock) -> None:
    game.start_game("Ada")
    clear_board(game)
    record = game.give_up()
    assert record is not None and record.level == 1

    before = game.snapshot()
    _run_for(game, clock, 5)
    assert game.snapshot() == before
    assert before.phase is GamePhase.GAME_OVER
    assert before.cards == ()


def test_end_game_outside_play_is_noop(game: GamePlay, store: ScoreStore) -> None:
    assert game.end_game() is None
    game.start_game("Ada")
    game.give_up()
    assert game.end_game() is None
    assert store.scores == []


def test_new_session_discards_old_deferred_work(game: GamePlay, clock: ManualClock) -> None:
    game.start_game("Ada")
    a, b = mismatched_ids(game)
    game.flip_card(a)
    game.flip_card(b)

    game.start_game("Grace")
    game.flip_card(0)
    _run_for(game, clock, 0.5)
    assert game.snapshot().selection == (0,)
    _run_for(game, clock, 0.5)

    snap = game.snapshot()
    assert snap.player_name == "Grace"
    assert snap.selection == (0,)
    assert snap.time_left == 11


def test_return_to_landing_only_from_game_over(game: GamePlay) -> None:
    game.return_to_landing()
    assert game.snapshot().phase is GamePhase.LANDING

    game.start_game("Ada")
    game.return_to_landing()
    assert game.snapshot().phase is GamePhase.PLAYING

    game.give_up()
    game.return_to_landing()
    assert game.snapshot().phase is GamePhase.LANDING


def test_scores_accumulate_across_sessions(
    game: GamePlay, clock: ManualClock, store: ScoreStore
) -> None:
    for name, levels in (("Ada", 1), ("Grace", 2)):
        game.start_game(name)
        for _ in range(levels):
            clear_board(game)
            _run_for(game, clock, 1)
        game.give_up()

    assert [(r.name, r.level) for r in store.scores] == [("Grace", 2), ("Ada", 1)]
