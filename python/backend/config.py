"""Game rules and storage constants."""

from __future__ import annotations

from dataclasses import dataclass

from backend.models.card import Symbol

# Deal order: level N uses the first N + 1 symbols.
PALETTE: tuple[Symbol, ...] = tuple(Symbol)

HIGHSCORE_KEY = "memoryMatchHighScores"
STORE_FILENAME = "storage.json"
LOG_FILENAME = "memory-maestro.log"


@dataclass(frozen=True)
class GameRules:
    """Tunable constants for level progression and scoring."""

    base_pairs: int = 2
    base_time_limit: int = 12
    time_step: int = 4
    reveal_delay: float = 1.0
    tick_interval: float = 1.0
    max_scores: int = 10
    palette: tuple[Symbol, ...] = PALETTE

    def __post_init__(self) -> None:
        if self.tick_interval <= 0:
            raise ValueError("tick_interval must be positive")
        if not self.base_pairs <= len(self.palette):
            raise ValueError("palette is too small for the first level")

    def pairs_for(self, level: int) -> int:
        return self.base_pairs + (level - 1)

    def time_limit_for(self, level: int) -> int:
        return self.base_time_limit + (level - 1) * self.time_step

    @property
    def max_level(self) -> int:
        """Highest level whose board still fits in the palette."""
        return len(self.palette) - self.base_pairs + 1


DEFAULT_RULES = GameRules()
