"""
Deck model for the Okey combination game.
Defines the fixed 24-card catalog, hand slots and the derived draw pool.
"""

import random
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional


class Color(Enum):
    RED = "red"
    BLUE = "blue"
    YELLOW = "yellow"


COLOR_ORDER = {color: i for i, color in enumerate(Color)}
RANKS = [1, 2, 3, 4, 5, 6, 7, 8]
HAND_SLOTS = 5


@dataclass(frozen=True)
class Card:
    color: Color
    rank: int

    @property
    def id(self) -> str:
        """Stable identifier, e.g. 'red-7'."""
        return f"{self.color.value}-{self.rank}"

    @property
    def sort_key(self) -> tuple[int, int]:
        return (self.rank, COLOR_ORDER[self.color])

    def __str__(self) -> str:
        return f"{self.color.value[0].upper()}{self.rank}"

    def __repr__(self) -> str:
        return f"Card({self.id})"


# Built once, read-only afterwards
FULL_DECK: tuple[Card, ...] = tuple(
    Card(color=color, rank=rank) for color in Color for rank in RANKS
)
_CARDS_BY_ID = {card.id: card for card in FULL_DECK}


def card_by_id(card_id: str) -> Card:
    """Resolve a card identifier against the catalog."""
    try:
        return _CARDS_BY_ID[card_id]
    except KeyError:
        raise ValueError(f"Unknown card id: {card_id!r}") from None


def draw_pool(held: Iterable[Card], removed: Iterable[Card]) -> list[Card]:
    """Catalog cards that are neither held nor removed, in catalog order."""
    unavailable = set(held) | set(removed)
    return [card for card in FULL_DECK if card not in unavailable]


def shuffled(cards: Iterable[Card], rng: random.Random = None) -> list[Card]:
    """Return a uniformly shuffled copy of cards."""
    cards = list(cards)
    (rng or random.Random()).shuffle(cards)
    return cards


class Hand:
    """Fixed row of hand slots, each empty or holding one card."""

    def __init__(self, slots: list[Optional[Card]] = None):
        slots = list(slots) if slots is not None else []
        if len(slots) > HAND_SLOTS:
            raise ValueError(f"Hand has {len(slots)} slots, maximum is {HAND_SLOTS}")
        held = [c for c in slots if c is not None]
        if len(set(held)) != len(held):
            raise ValueError("Hand holds the same card in more than one slot")
        self.slots: list[Optional[Card]] = slots + [None] * (HAND_SLOTS - len(slots))

    @classmethod
    def from_cards(cls, cards: Iterable[Card]) -> "Hand":
        return cls(list(cards))

    @property
    def cards(self) -> list[Card]:
        """Held cards in slot order."""
        return [c for c in self.slots if c is not None]

    def add(self, card: Card) -> int:
        """Put card into the first empty slot. Returns the slot index."""
        if card in self.slots:
            raise ValueError(f"{card.id} is already in hand")
        for i, slot in enumerate(self.slots):
            if slot is None:
                self.slots[i] = card
                return i
        raise ValueError("Hand is full")

    def _check_index(self, index: int) -> None:
        if not 0 <= index < HAND_SLOTS:
            raise ValueError(f"Slot index must be 0 to {HAND_SLOTS - 1}, got {index}")

    def set_slot(self, index: int, card: Card) -> None:
        self._check_index(index)
        if card in self.slots and self.slots[index] != card:
            raise ValueError(f"{card.id} is already in hand")
        self.slots[index] = card

    def clear_slot(self, index: int) -> Optional[Card]:
        self._check_index(index)
        card = self.slots[index]
        self.slots[index] = None
        return card

    def remove(self, cards: Iterable[Card]) -> list[Card]:
        """Empty the slots holding the given cards and return those cards."""
        removed = []
        for card in cards:
            if card in self.slots:
                self.slots[self.slots.index(card)] = None
                removed.append(card)
        return removed

    def sort(self) -> None:
        """Pack held cards to the front, by color then rank."""
        ordered = sorted(self.cards, key=lambda c: (COLOR_ORDER[c.color], c.rank))
        self.slots = ordered + [None] * (HAND_SLOTS - len(ordered))

    def clear(self) -> list[Card]:
        cards = self.cards
        self.slots = [None] * HAND_SLOTS
        return cards

    def size(self) -> int:
        return len(self.cards)

    def is_full(self) -> bool:
        return self.size() == HAND_SLOTS

    def __contains__(self, card: Card) -> bool:
        return card in self.slots

    def __str__(self) -> str:
        return ", ".join(str(c) if c else "--" for c in self.slots)

    def __repr__(self) -> str:
        return f"Hand({self.__str__()})"
