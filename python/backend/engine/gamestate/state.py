"""Tracks the mutable state of a game in progress."""

from __future__ import annotations

from backend.models.board import Board
from backend.models.session import CardView, GamePhase, GameSession, GameSnapshot


class GameState:
    """Holds the session, the current board, the face-up selection and the generation.

    ``generation`` changes whenever the board is replaced or the session
    ends; deferred work tagged with an older value must not run.
    """

    def __init__(self) -> None:
        self.session = GameSession()
        self.board = Board()
        self.selection: list[int] = []
        self.generation: int = 0

    # -- level lifecycle ------------------------------------------------------

    def deal(self, level: int, time_limit: int, board: Board) -> None:
        s = self.session
        s.level = level
        s.pairs = board.pairs
        s.time_limit = time_limit
        s.time_left = time_limit
        s.matched_pairs = 0
        s.level_cleared = False
        self.board = board
        self.selection.clear()
        self.generation += 1

    def finish(self) -> None:
        self.session.phase = GamePhase.GAME_OVER
        self.board = Board()
        self.selection.clear()
        self.generation += 1

    # -- queries --------------------------------------------------------------

    @property
    def is_active(self) -> bool:
        """True while the player can flip cards and the clock runs."""
        return self.session.phase is GamePhase.PLAYING and not self.session.level_cleared

    def is_face_up(self, card_id: int) -> bool:
        card = self.board.get_card(card_id)
        return card is not None and (card.is_matched or card_id in self.selection)

    def snapshot(self) -> GameSnapshot:
        s = self.session
        return GameSnapshot(
            phase=s.phase,
            player_name=s.player_name,
            level=s.level,
            pairs=s.pairs,
            time_limit=s.time_limit,
            time_left=s.time_left,
            completed_level=s.completed_level,
            matched_pairs=s.matched_pairs,
            level_cleared=s.level_cleared,
            cards=tuple(
                CardView(
                    id=c.id,
                    symbol=c.symbol,
                    is_matched=c.is_matched,
                    face_up=self.is_face_up(c.id),
                )
                for c in self.board.cards
            ),
            selection=tuple(self.selection),
        )
