"""Card and symbol models for the memory game."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


class Symbol(StrEnum):
    STAR = "\u2b50"
    BALLOON = "\U0001f388"
    ART = "\U0001f3a8"
    TARGET = "\U0001f3af"
    CIRCUS = "\U0001f3aa"
    MASKS = "\U0001f3ad"
    GUITAR = "\U0001f3b8"
    TRUMPET = "\U0001f3ba"
    BASKETBALL = "\U0001f3c0"
    SOCCER = "\u26bd"
    RAINBOW = "\U0001f308"
    HIBISCUS = "\U0001f33a"
    PIZZA = "\U0001f355"
    BURGER = "\U0001f354"
    ROCKET = "\U0001f680"
    UFO = "\U0001f6f8"


@dataclass
class Card:
    """A single card on the board. ``id`` is its position index."""

    id: int
    symbol: Symbol
    is_matched: bool = False
