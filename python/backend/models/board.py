"""Board model for the memory game."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field

from backend.models.card import Card, Symbol


@dataclass
class Board:
    """Represents the cards dealt for one level.

    Cards are stored in deal order; a card's ``id`` is its index.
    """

    cards: list[Card] = field(default_factory=list)

    # -- construction helpers -------------------------------------------------

    @classmethod
    def from_symbols(cls, symbols: list[Symbol]) -> Board:
        """Create a board from symbols already in deal order.

        Example::

            Board.from_symbols([Symbol.STAR, Symbol.BALLOON, Symbol.STAR, Symbol.BALLOON])
        """
        counts = Counter(symbols)
        odd = [s for s, n in counts.items() if n != 2]
        if odd:
            raise ValueError(
                f"Every symbol must appear exactly twice, got {dict(counts)}."
            )
        return cls(cards=[Card(id=i, symbol=s) for i, s in enumerate(symbols)])

    # -- queries --------------------------------------------------------------

    @property
    def pairs(self) -> int:
        return len(self.cards) // 2

    def get_card(self, card_id: int) -> Card | None:
        if 0 <= card_id < len(self.cards):
            return self.cards[card_id]
        return None

    def symbols(self) -> list[Symbol]:
        return [c.symbol for c in self.cards]

    def matched_count(self) -> int:
        """Number of pairs already matched."""
        return sum(1 for c in self.cards if c.is_matched) // 2

    def is_cleared(self) -> bool:
        """Check if every card on the board has been matched."""
        return bool(self.cards) and all(c.is_matched for c in self.cards)

    def copy(self) -> Board:
        return Board(
            cards=[Card(id=c.id, symbol=c.symbol, is_matched=c.is_matched) for c in self.cards]
        )

    def __len__(self) -> int:
        return len(self.cards)
