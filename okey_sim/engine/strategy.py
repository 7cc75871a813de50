"""
Move selection and discard advice for the Okey simulation.
"""

import logging
import random
from dataclasses import dataclass
from itertools import combinations
from typing import TYPE_CHECKING, Iterable, Optional

from .deck import Card, FULL_DECK, HAND_SLOTS, draw_pool
from .combo_detector import ComboDetector, ComboResult, ComboType, COMBO_SIZE

if TYPE_CHECKING:
    from .game import ChestOdds, GameConfig

logger = logging.getLogger(__name__)

# Ranking tuning constants. Changing any of them changes the advised discard order.
SCORE_EXPONENT = 3          # Cubing favors rare big combos over frequent small ones
HIGH_RANK_START = 6         # 6s, 7s and 8s feed the 100 and 90 point combos
HIGH_RANK_BONUS = 50000     # Per rank above 5
RETENTION_WEIGHT = 0.1

_detector = ComboDetector()


@dataclass
class Prediction:
    """Best combination reachable on the next draw after a discard."""
    kept_cards: list[Card]
    drawn_card: Optional[Card]
    score: int
    combo_type: ComboType

    def __str__(self) -> str:
        kept = " ".join(str(c) for c in self.kept_cards)
        drawn = f" + {self.drawn_card}" if self.drawn_card else ""
        return f"{kept}{drawn} -> {self.combo_type.value} {self.score}"


@dataclass
class DiscardSuggestion:
    """Outcome statistics for discarding one held card."""
    card: Card
    outs: int
    pool_size: int
    weighted_score: int       # Sum of cubed best scores over winning draws
    max_possible_score: int
    retention_value: int      # Worth of the cards that stay in hand
    opportunity_cost: int     # Worth of the discarded card itself
    score_index: float        # Higher means a better card to discard
    prediction: Optional[Prediction] = None
    chest_odds: Optional["ChestOdds"] = None

    @property
    def probability(self) -> float:
        """Chance the next draw completes a combination."""
        return self.outs / self.pool_size

    @property
    def expected_potential(self) -> float:
        """Cube root of the mean cubed best score over the draw pool."""
        return (self.weighted_score / self.pool_size) ** (1 / SCORE_EXPONENT)

    def to_dict(self) -> dict:
        return {
            "card": self.card.id,
            "probability": self.probability,
            "outs": self.outs,
            "expected_potential": round(self.expected_potential, 2),
            "max_possible_score": self.max_possible_score,
            "opportunity_cost": self.opportunity_cost,
            "score_index": self.score_index,
            "prediction": str(self.prediction) if self.prediction else None,
        }


def find_best_moves(cards: Iterable[Optional[Card]]) -> list[ComboResult]:
    """
    Score every 3-card subset of the hand and return the scoring ones,
    best first. Ties keep subset enumeration order.
    """
    cards = [c for c in cards if c is not None]
    if len(cards) < COMBO_SIZE:
        return []

    results = (_detector.detect(group) for group in combinations(cards, COMBO_SIZE))
    return sorted((r for r in results if r.is_combo), key=lambda r: r.score, reverse=True)


def high_rank_bonus(rank: int) -> int:
    if rank < HIGH_RANK_START:
        return 0
    return HIGH_RANK_BONUS * (rank - HIGH_RANK_START + 1)


def card_worth(card: Card, context: Iterable[Card]) -> int:
    """
    Intrinsic worth of a card: the high rank bonus plus the cubed score of
    every combination it forms with two other cards from context.
    """
    worth = high_rank_bonus(card.rank)
    # Partners more than two ranks away never combine
    others = [c for c in context if c != card and abs(c.rank - card.rank) <= 2]
    for pair in combinations(others, 2):
        result = _detector.detect((card,) + pair)
        if result.is_combo:
            worth += result.score ** SCORE_EXPONENT
    return worth


def check_state(hand: list[Card], removed: set[Card]) -> None:
    """Fail fast on hands the caller should never pass in."""
    if len(hand) > HAND_SLOTS:
        raise ValueError(f"Hand has {len(hand)} cards, maximum is {HAND_SLOTS}")
    if len(set(hand)) != len(hand):
        raise ValueError("Hand holds the same card twice")
    overlap = removed.intersection(hand)
    if overlap:
        ids = ", ".join(sorted(c.id for c in overlap))
        raise ValueError(f"Cards both held and removed: {ids}")


class DiscardAdvisor:
    """
    Ranks held cards by how desirable they are to discard.

    Each candidate is scored by sweeping every possible next draw with the
    remaining cards, then weighing what stays in hand against the
    worth of the discarded card. The first suggestion is the advised discard.
    """

    def __init__(self, config: "GameConfig" = None, rng: random.Random = None):
        self.config = config
        self.rng = rng or random.Random()

    def analyze(self, hand: Iterable[Optional[Card]], removed: Iterable[Card],
                current_score: int = 0,
                include_chest_stats: bool = False) -> list[DiscardSuggestion]:
        hand = [c for c in hand if c is not None]
        removed = set(removed)
        check_state(hand, removed)

        pool = draw_pool(hand, removed)
        if not pool:
            return []

        live = [c for c in FULL_DECK if c not in removed]
        worths = {card: card_worth(card, live) for card in hand}
        hand_worth = sum(worths.values())

        suggestions = []
        for card in hand:
            kept = [c for c in hand if c != card]
            suggestion = self._sweep_draws(card, kept, pool)
            suggestion.opportunity_cost = worths[card]
            suggestion.retention_value = hand_worth - worths[card]
            suggestion.score_index = (suggestion.weighted_score
                                      + RETENTION_WEIGHT * suggestion.retention_value)
            suggestions.append(suggestion)

        suggestions.sort(key=lambda s: s.score_index, reverse=True)

        if include_chest_stats and suggestions:
            self._attach_chest_odds(suggestions[0], hand, removed, current_score)

        logger.debug("Discard order: %s", [s.card.id for s in suggestions])
        return suggestions

    def _sweep_draws(self, card: Card, kept: list[Card],
                     pool: list[Card]) -> DiscardSuggestion:
        """Try every card in the pool as the next draw."""
        outs = 0
        weighted = 0
        max_score = 0
        best_move = None
        best_draw = None

        for drawn in pool:
            moves = find_best_moves(kept + [drawn])
            if not moves:
                continue
            move = moves[0]
            outs += 1
            weighted += move.score ** SCORE_EXPONENT
            if move.score > max_score:
                max_score = move.score
                best_move = move
                best_draw = drawn

        prediction = None
        if best_move is not None:
            prediction = Prediction(
                kept_cards=[c for c in best_move.cards if c in kept],
                drawn_card=best_draw if best_draw in best_move.cards else None,
                score=best_move.score,
                combo_type=best_move.combo_type,
            )

        return DiscardSuggestion(
            card=card,
            outs=outs,
            pool_size=len(pool),
            weighted_score=weighted,
            max_possible_score=max_score,
            retention_value=0,
            opportunity_cost=0,
            score_index=0.0,
            prediction=prediction,
        )

    def _attach_chest_odds(self, suggestion: DiscardSuggestion, hand: list[Card],
                           removed: set[Card], current_score: int) -> None:
        # Imported here: the game loop depends on this module
        from .game import GameConfig, estimate_chests

        config = self.config or GameConfig()
        kept = [c for c in hand if c != suggestion.card]
        suggestion.chest_odds = estimate_chests(
            kept,
            removed | {suggestion.card},
            current_score,
            trials=config.chest_trials,
            rng=self.rng,
            config=config,
        )


class GreedyStrategy:
    """
    Play the best combination whenever one exists, otherwise discard the
    advisor's top card. The advisor runs without chest estimates so that
    simulated games never nest further simulations.
    """

    def __init__(self, advisor: DiscardAdvisor = None):
        self.advisor = advisor or DiscardAdvisor()

    def select_move(self, hand: Iterable[Optional[Card]]) -> Optional[ComboResult]:
        moves = find_best_moves(hand)
        return moves[0] if moves else None

    def select_discard(self, hand: Iterable[Optional[Card]], removed: Iterable[Card],
                       current_score: int = 0) -> Optional[Card]:
        suggestions = self.advisor.analyze(hand, removed, current_score,
                                           include_chest_stats=False)
        return suggestions[0].card if suggestions else None


def analyze_discards(hand: Iterable[Optional[Card]], removed: Iterable[Card],
                     current_score: int = 0, include_chest_stats: bool = False,
                     rng: random.Random = None, config: "GameConfig" = None) -> list[DiscardSuggestion]:
    """Convenience function to rank discards for a hand."""
    advisor = DiscardAdvisor(config=config, rng=rng)
    return advisor.analyze(hand, removed, current_score, include_chest_stats)
