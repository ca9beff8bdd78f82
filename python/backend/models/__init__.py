from backend.models.board import Board
from backend.models.card import Card, Symbol
from backend.models.session import (
    CardView,
    FlipResult,
    GamePhase,
    GameSession,
    GameSnapshot,
)

__all__ = [
    "Board",
    "Card",
    "CardView",
    "FlipResult",
    "GamePhase",
    "GameSession",
    "GameSnapshot",
    "Symbol",
]
