"""
Combination detection for the Okey simulation.
Classifies a 3-card group as a sequence, a triple or nothing, and scores it.
"""

from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from typing import Iterable

from .deck import Card


class ComboType(Enum):
    NONE = "none"
    SEQUENCE = "sequence"
    TRIPLE = "triple"


COMBO_SIZE = 3
SAME_COLOR_BONUS = 40  # Flush bonus on sequences


@dataclass(frozen=True)
class ComboResult:
    """Result of scoring exactly three cards."""
    cards: tuple[Card, ...]
    combo_type: ComboType
    score: int
    is_same_color: bool = False

    @property
    def is_combo(self) -> bool:
        return self.combo_type != ComboType.NONE

    def __str__(self) -> str:
        played = " ".join(str(c) for c in self.cards)
        if not self.is_combo:
            return f"{played} (no combo)"
        flush = " same color" if self.is_same_color else ""
        return f"{played} {self.combo_type.value}{flush}: {self.score}"


def sequence_score(start_rank: int, same_color: bool = False) -> int:
    """1-2-3 scores 10 up to 6-7-8 at 60, plus the flush bonus."""
    return start_rank * 10 + (SAME_COLOR_BONUS if same_color else 0)


def triple_score(rank: int) -> int:
    """Three of a kind: rank 1 scores 20 up to rank 8 at 90."""
    return rank * 10 + 10


class ComboDetector:
    """Scores card groups. Results are cached per card set."""

    def detect(self, cards: Iterable[Card]) -> ComboResult:
        cards = sorted(cards, key=lambda c: c.sort_key)
        if len(cards) != COMBO_SIZE:
            return ComboResult(tuple(cards), ComboType.NONE, 0)
        return _classify(frozenset(cards))


@lru_cache(maxsize=None)
def _classify(group: frozenset) -> ComboResult:
    cards = tuple(sorted(group, key=lambda c: c.sort_key))
    # Duplicates collapse in the frozenset
    if len(cards) != COMBO_SIZE:
        return ComboResult(cards, ComboType.NONE, 0)

    low, mid, high = cards
    colors = {c.color for c in cards}

    if mid.rank == low.rank + 1 and high.rank == mid.rank + 1:
        same_color = len(colors) == 1
        return ComboResult(cards, ComboType.SEQUENCE,
                           sequence_score(low.rank, same_color), same_color)

    # A triple needs one card of each color
    if low.rank == mid.rank == high.rank and len(colors) == COMBO_SIZE:
        return ComboResult(cards, ComboType.TRIPLE, triple_score(low.rank))

    return ComboResult(cards, ComboType.NONE, 0)


_detector = ComboDetector()


def score_combo(cards: Iterable[Card]) -> ComboResult:
    """Convenience function to score a card group."""
    return _detector.detect(cards)
