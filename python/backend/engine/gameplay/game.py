"""Core gameplay logic: flips, matches, the level clock and game end."""

from __future__ import annotations

import logging
import random
from typing import Callable

from backend.config import DEFAULT_RULES, GameRules
from backend.engine.gamegenerator import GameGenerator
from backend.engine.gamestate import GameState
from backend.engine.scheduler import Scheduler
from backend.errors import ValidationError
from backend.models.highscore import ScoreRecord, ScoreStore
from backend.models.session import FlipResult, GamePhase, GameSession, GameSnapshot

logger = logging.getLogger(__name__)


class GamePlay:
    """Orchestrates a player's session from the first deal to game over.

    All mutation happens through the public methods below or through
    callbacks run by ``pump()``; frontends only read ``snapshot()``.
    """

    def __init__(
        self,
        scores: ScoreStore | None = None,
        *,
        rules: GameRules = DEFAULT_RULES,
        scheduler: Scheduler | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self.rules = rules
        self.scores = scores
        self.scheduler = scheduler or Scheduler()
        self._rng = rng or random.Random()
        self.state = GameState()
        self.last_record: ScoreRecord | None = None

    # -- session lifecycle ----------------------------------------------------

    def start_game(self, player_name: str) -> None:
        """Begin a new session at level 1.

        Raises ``ValidationError`` (and changes nothing) if the name is blank.
        """
        name = (player_name or "").strip()
        if not name:
            raise ValidationError("Please enter your name!")

        self.scheduler.cancel_all()
        self.last_record = None
        self.state.session = GameSession(player_name=name, phase=GamePhase.PLAYING)
        self._deal(1)
        logger.info("Started game for %s", name)

    def advance_level(self) -> None:
        """Deal the next level, or end the game once the palette runs out."""
        s = self.state.session
        if s.phase is not GamePhase.PLAYING:
            return
        next_level = s.level + 1
        if next_level > self.rules.max_level:
            logger.info("No symbols left for level %d, ending game", next_level)
            self.end_game()
            return
        self._deal(next_level)
        logger.info("Advanced to level %d (%d pairs, %ds)", s.level, s.pairs, s.time_limit)

    def end_game(self) -> ScoreRecord | None:
        """Move to game over and submit a score if a level was completed."""
        s = self.state.session
        if s.phase is not GamePhase.PLAYING:
            return None

        self.scheduler.cancel_all()
        self.state.finish()
        logger.info("Game over for %s at level %d (completed %d)", s.player_name, s.level, s.completed_level)

        if s.completed_level <= 0:
            return None
        record = ScoreRecord.create(s.player_name, s.completed_level)
        self.last_record = record
        if self.scores is not None:
            self.scores.submit(record)
        return record

    def give_up(self) -> ScoreRecord | None:
        return self.end_game()

    def return_to_landing(self) -> None:
        if self.state.session.phase is GamePhase.GAME_OVER:
            self.state.session.phase = GamePhase.LANDING

    # -- card handling --------------------------------------------------------

    def flip_card(self, card_id: int) -> FlipResult:
        """Turn a card face up (or back down if it is already selected)."""
        state = self.state
        if not state.is_active:
            return FlipResult.IGNORED
        card = state.board.get_card(card_id)
        if card is None or card.is_matched:
            return FlipResult.IGNORED

        if card_id in state.selection:
            state.selection.remove(card_id)
            return FlipResult.UNFLIPPED
        if len(state.selection) >= 2:
            return FlipResult.IGNORED

        state.selection.append(card_id)
        logger.debug("Flipped card %d (%s)", card_id, card.symbol.name)
        if len(state.selection) < 2:
            return FlipResult.FLIPPED
        return self._resolve_pair()

    def _resolve_pair(self) -> FlipResult:
        state = self.state
        s = state.session
        first, second = (state.board.cards[i] for i in state.selection)

        if first.symbol != second.symbol:
            pair = tuple(state.selection)
            self._defer(self.rules.reveal_delay, lambda: self._hide_pair(pair))
            return FlipResult.MISMATCHED

        first.is_matched = True
        second.is_matched = True
        state.selection.clear()
        s.matched_pairs += 1

        if s.matched_pairs < s.pairs:
            return FlipResult.MATCHED
        s.completed_level = s.level
        s.level_cleared = True
        self._defer(self.rules.reveal_delay, self.advance_level)
        logger.info("Level %d cleared with %ds left", s.level, s.time_left)
        return FlipResult.LEVEL_COMPLETE

    def _hide_pair(self, pair: tuple[int, ...]) -> None:
        # The player may have un-flipped one of the pair and picked another.
        if tuple(self.state.selection) == pair:
            self.state.selection.clear()

    # -- clock ----------------------------------------------------------------

    def tick(self) -> None:
        """Take one second off the clock; end the game when it hits zero."""
        if not self.state.is_active:
            return
        s = self.state.session
        s.time_left = max(0, s.time_left - 1)
        if s.time_left == 0:
            logger.info("Time is up at level %d", s.level)
            self.end_game()

    def pump(self) -> int:
        """Run every deferred action that is due. Call this from the UI loop."""
        total = 0
        while True:
            ran = self.scheduler.run_due()
            if not ran:
                return total
            total += ran

    def snapshot(self) -> GameSnapshot:
        return self.state.snapshot()

    # -- helpers --------------------------------------------------------------

    def _deal(self, level: int) -> None:
        board = GameGenerator.generate(
            self.rules.pairs_for(level), self._rng, self.rules.palette
        )
        self.state.deal(level, self.rules.time_limit_for(level), board)
        self._schedule_tick(self.scheduler.clock() + self.rules.tick_interval)

    def _defer(self, delay: float, action: Callable[[], None]) -> None:
        generation = self.state.generation

        def guarded() -> None:
            if generation == self.state.generation:
                action()

        self.scheduler.call_later(delay, guarded)

    def _schedule_tick(self, due: float) -> None:
        generation = self.state.generation

        def on_tick() -> None:
            if generation != self.state.generation:
                return
            self.tick()
            if generation == self.state.generation and self.state.is_active:
                self._schedule_tick(due + self.rules.tick_interval)

        self.scheduler.call_at(due, on_tick)
