"""
Game state and simulation loop for the Okey game.
"""

import json
import logging
import random
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Optional

from .deck import Card, Hand, HAND_SLOTS, card_by_id, draw_pool, shuffled
from .combo_detector import ComboResult
from .history import GameHistory
from .strategy import GreedyStrategy, DiscardAdvisor

logger = logging.getLogger(__name__)


class ChestTier(Enum):
    BRONZE = "bronze"
    SILVER = "silver"
    GOLD = "gold"


@dataclass
class GameConfig:
    """Configuration for games and advice."""
    hand_size: int = HAND_SLOTS
    silver_threshold: int = 300
    gold_threshold: int = 400
    chest_trials: int = 20  # Games per embedded chest estimate

    def __post_init__(self):
        if not 3 <= self.hand_size <= HAND_SLOTS:
            raise ValueError(f"hand_size must be between 3 and {HAND_SLOTS}, got {self.hand_size}")


def chest_for_score(score: int, config: GameConfig = None) -> ChestTier:
    """Bucket a final score: bronze below 300, silver below 400, else gold."""
    config = config or GameConfig()
    if score >= config.gold_threshold:
        return ChestTier.GOLD
    if score >= config.silver_threshold:
        return ChestTier.SILVER
    return ChestTier.BRONZE


@dataclass
class ChestOdds:
    """Share of simulated games ending in each chest tier."""
    bronze: float
    silver: float
    gold: float
    trials: int

    @classmethod
    def from_scores(cls, scores: list[int], config: GameConfig = None) -> "ChestOdds":
        if not scores:
            return cls(0.0, 0.0, 0.0, 0)
        tiers = [chest_for_score(s, config) for s in scores]
        n = len(scores)
        return cls(
            bronze=tiers.count(ChestTier.BRONZE) / n,
            silver=tiers.count(ChestTier.SILVER) / n,
            gold=tiers.count(ChestTier.GOLD) / n,
            trials=n,
        )

    def to_dict(self) -> dict:
        return {"bronze": self.bronze, "silver": self.silver,
                "gold": self.gold, "trials": self.trials}


@dataclass
class GameResult:
    """Result of a game played to the end."""
    final_score: int
    chest: ChestTier
    plays: list[ComboResult] = field(default_factory=list)
    discards: list[Card] = field(default_factory=list)
    history: Optional[GameHistory] = None


class GameState:
    """
    Tracks hand slots, removed cards and the running score.

    Held and removed cards are always disjoint; whatever is neither is the
    draw pool. Removed cards keep the order they were removed in.
    """

    def __init__(self, hand: Hand = None, removed: Iterable[Card] = None,
                 score: int = 0, config: GameConfig = None):
        self.config = config or GameConfig()
        self.hand = hand or Hand()
        self.removed: dict[Card, None] = dict.fromkeys(removed or ())
        self.score = score
        self.validate()

    def validate(self) -> None:
        if self.score < 0:
            raise ValueError(f"Score cannot be negative: {self.score}")
        overlap = [c for c in self.hand.cards if c in self.removed]
        if overlap:
            ids = ", ".join(sorted(c.id for c in overlap))
            raise ValueError(f"Cards both held and removed: {ids}")

    def draw_pool(self) -> list[Card]:
        return draw_pool(self.hand.cards, self.removed)

    @property
    def chest(self) -> ChestTier:
        return chest_for_score(self.score, self.config)

    def set_card(self, index: int, card: Card) -> None:
        """Place a card from the draw pool into a hand slot."""
        if card in self.removed:
            raise ValueError(f"{card.id} has been removed")
        self.hand.set_slot(index, card)

    def clear_slot(self, index: int) -> Optional[Card]:
        return self.hand.clear_slot(index)

    def toggle_removed(self, card: Card) -> bool:
        """
        Mark a card as removed, or return it to the draw pool if it already
        was. A held card leaves its slot. Returns True if now removed.
        """
        if card in self.removed:
            del self.removed[card]
            return False
        self.hand.remove([card])
        self.removed[card] = None
        return True

    def refill(self, pile: list[Card]) -> list[Card]:
        """Draw from the end of pile until the hand is full or pile is empty."""
        drawn = []
        while self.hand.size() < self.config.hand_size and pile:
            card = pile.pop()
            self.hand.add(card)
            drawn.append(card)
        return drawn

    def play(self, combo: ComboResult) -> int:
        """Score a combination and move its cards out of the game."""
        if not combo.is_combo:
            raise ValueError(f"Not a scoring combination: {combo}")
        missing = [c for c in combo.cards if c not in self.hand]
        if missing:
            raise ValueError(f"Cards not in hand: {', '.join(c.id for c in missing)}")
        self.hand.remove(combo.cards)
        self.removed.update(dict.fromkeys(combo.cards))
        self.score += combo.score
        return self.score

    def discard(self, card: Card) -> None:
        if card not in self.hand:
            raise ValueError(f"{card.id} is not in hand")
        self.hand.remove([card])
        self.removed[card] = None

    def reset(self) -> None:
        self.hand.clear()
        self.removed.clear()
        self.score = 0

    def copy(self) -> "GameState":
        return GameState(Hand(list(self.hand.slots)), list(self.removed), self.score, self.config)

    def to_snapshot(self) -> dict:
        """Plain record of the state; removed ids are listed in removal order."""
        return {
            "removedCardIds": [c.id for c in self.removed],
            "handIds": [c.id if c else None for c in self.hand.slots],
            "currentScore": self.score,
        }

    @classmethod
    def from_snapshot(cls, data: dict, config: GameConfig = None) -> "GameState":
        removed = [card_by_id(i) for i in data.get("removedCardIds", [])]
        if len(set(removed)) != len(removed):
            raise ValueError("removedCardIds lists the same card twice")
        slots = [card_by_id(i) if i else None for i in data.get("handIds", [])]
        score = data.get("currentScore", 0)
        if not isinstance(score, int):
            raise ValueError(f"currentScore must be an integer, got {score!r}")
        return cls(Hand(slots), removed, score, config)

    def to_json(self) -> str:
        return json.dumps(self.to_snapshot())

    @classmethod
    def from_json(cls, text: str, config: GameConfig = None) -> "GameState":
        return cls.from_snapshot(json.loads(text), config)


def simulate_game(game: GameState, strategy: GreedyStrategy = None,
                  rng: random.Random = None,
                  history: GameHistory = None) -> GameResult:
    """
    Play a game to the end from the given state with the greedy policy.
    The state is modified in place.
    """
    if strategy is None:
        strategy = GreedyStrategy()
    rng = rng or random.Random()

    pile = shuffled(game.draw_pool(), rng)
    plays = []
    discards = []

    if history is not None:
        history.add_game_start(score=game.score,
                               hand=[c.id for c in game.hand.cards],
                               pool_size=len(pile))

    while True:
        game.refill(pile)

        if game.hand.size() < 3 and not pile:
            break

        move = strategy.select_move(game.hand.cards)
        if move is not None:
            game.play(move)
            plays.append(move)
            logger.debug("Played %s (total %d)", move, game.score)
            if history is not None:
                history.add_play(move.combo_type.value, [c.id for c in move.cards],
                                 move.score, game.score)
            continue

        if not pile:
            break

        card = strategy.select_discard(game.hand.cards, game.removed, game.score)
        if card is None:
            break
        game.discard(card)
        discards.append(card)
        logger.debug("Discarded %s", card.id)
        if history is not None:
            history.add_discard(card.id, len(pile))

    chest = game.chest
    if history is not None:
        history.add_game_end(final_score=game.score, chest=chest.value,
                             plays=len(plays), discards=len(discards))

    return GameResult(
        final_score=game.score,
        chest=chest,
        plays=plays,
        discards=discards,
        history=history,
    )


def estimate_chests(hand: Iterable[Card], removed: Iterable[Card], score: int = 0,
                    trials: int = 20, rng: random.Random = None,
                    config: GameConfig = None) -> ChestOdds:
    """
    Monte Carlo estimate of the chest reached from a partial state.
    Each trial gets its own generator and its own copy of the state.
    """
    config = config or GameConfig()
    rng = rng or random.Random()
    start = GameState(Hand.from_cards(hand), removed, score, config)

    scores = []
    for _ in range(trials):
        trial_rng = random.Random(rng.getrandbits(64))
        strategy = GreedyStrategy(DiscardAdvisor(config=config, rng=trial_rng))
        result = simulate_game(start.copy(), strategy, trial_rng)
        scores.append(result.final_score)

    return ChestOdds.from_scores(scores, config)


def new_game(config: GameConfig = None) -> GameState:
    """Fresh game: empty hand, nothing removed, zero score."""
    return GameState(config=config)
