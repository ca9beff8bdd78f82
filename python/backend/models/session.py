"""Session and snapshot models shared between the engine and the frontends."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from backend.models.card import Symbol


class GamePhase(StrEnum):
    LANDING = "landing"
    PLAYING = "playing"
    GAME_OVER = "game_over"


class FlipResult(StrEnum):
    """Outcome of a single ``flip_card`` call."""

    IGNORED = "ignored"
    FLIPPED = "flipped"
    UNFLIPPED = "unflipped"
    MATCHED = "matched"
    MISMATCHED = "mismatched"
    LEVEL_COMPLETE = "level_complete"


@dataclass
class GameSession:
    """Per-player progress. ``pairs`` and ``time_limit`` follow ``level``."""

    player_name: str = ""
    level: int = 1
    pairs: int = 2
    time_limit: int = 12
    time_left: int = 12
    completed_level: int = 0
    matched_pairs: int = 0
    phase: GamePhase = GamePhase.LANDING
    level_cleared: bool = False


@dataclass(frozen=True)
class CardView:
    id: int
    symbol: Symbol
    is_matched: bool
    face_up: bool


@dataclass(frozen=True)
class GameSnapshot:
    """Read-only view of the engine handed to frontends for rendering."""

    phase: GamePhase
    player_name: str
    level: int
    pairs: int
    time_limit: int
    time_left: int
    completed_level: int
    matched_pairs: int
    level_cleared: bool
    cards: tuple[CardView, ...]
    selection: tuple[int, ...]

    @property
    def is_playing(self) -> bool:
        return self.phase is GamePhase.PLAYING
