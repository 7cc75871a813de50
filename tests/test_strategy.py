import random

import pytest

from okey_sim.engine.deck import FULL_DECK, card_by_id
from okey_sim.engine.combo_detector import ComboType, score_combo
from okey_sim.engine.game import GameConfig
from okey_sim.engine.strategy import (DiscardAdvisor, GreedyStrategy, analyze_discards,
                                      card_worth, find_best_moves, high_rank_bonus)


def ids(cards):
    return [c.id for c in cards]


# find_best_moves

def test_fewer_than_three_cards_has_no_moves(cards):
    assert find_best_moves([]) == []
    assert find_best_moves(cards("red-1", "red-2")) == []


def test_single_scoring_triple(cards):
    hand = cards("red-1", "blue-1", "yellow-1", "red-5", "blue-8")
    moves = find_best_moves(hand)

    assert len(moves) == 1
    assert moves[0] == score_combo(cards("red-1", "blue-1", "yellow-1"))
    assert moves[0].score == 20


def test_hand_without_combinations(no_combo_hand):
    assert find_best_moves(no_combo_hand) == []


def test_moves_sorted_best_first_with_stable_ties(cards):
    hand = cards("red-6", "red-7", "red-8", "blue-6", "blue-8")
    moves = find_best_moves(hand)

    assert [m.score for m in moves] == [100, 60, 60, 60]
    assert ids(moves[0].cards) == ["red-6", "red-7", "red-8"]
    # Equal scores keep subset enumeration order
    assert [ids(m.cards) for m in moves[1:]] == [
        ["red-6", "red-7", "blue-8"],
        ["blue-6", "red-7", "red-8"],
        ["blue-6", "red-7", "blue-8"],
    ]


def test_empty_slots_are_ignored(cards):
    hand = [None] + cards("red-2", "red-3") + [None] + cards("red-4")
    assert [m.score for m in find_best_moves(hand)] == [60]


# card worth

def test_high_rank_bonus():
    assert [high_rank_bonus(r) for r in range(1, 9)] == [
        0, 0, 0, 0, 0, 50000, 100000, 150000
    ]


def test_card_worth_against_full_deck():
    # 1-2-3: one 50 point flush and eight 10s, plus the 20 point triple
    assert card_worth(card_by_id("blue-1"), FULL_DECK) == 50**3 + 8 * 10**3 + 20**3
    # 6-7-8: one 100 flush and eight 60s, the 90 triple, and the rank bonus
    assert card_worth(card_by_id("red-8"), FULL_DECK) == (
        150000 + 100**3 + 8 * 60**3 + 90**3
    )


def test_card_worth_only_counts_live_partners(cards):
    live = cards("red-1", "red-2", "red-3", "blue-5")
    assert card_worth(card_by_id("red-1"), live) == 50**3


# analyze_discards

EXPECTED_ORDER = ["blue-1", "yellow-3", "blue-5", "red-8", "red-7"]


def test_discard_order_puts_low_potential_cards_first(no_combo_hand):
    suggestions = analyze_discards(no_combo_hand, set())
    assert [s.card.id for s in suggestions] == EXPECTED_ORDER


def test_discard_order_is_independent_of_hand_order(no_combo_hand):
    suggestions = analyze_discards(list(reversed(no_combo_hand)), set())
    assert [s.card.id for s in suggestions] == EXPECTED_ORDER


def test_draw_sweep_statistics(no_combo_hand):
    suggestions = {s.card.id: s for s in analyze_discards(no_combo_hand, set())}

    outs = {card_id: s.outs for card_id, s in suggestions.items()}
    assert outs == {"blue-1": 6, "yellow-3": 3, "blue-5": 6, "red-8": 9, "red-7": 6}

    for s in suggestions.values():
        assert s.pool_size == 19
        assert s.probability == s.outs / 19
        assert 0 <= s.probability <= 1

    # Keeping red-7 and red-8: any 6 completes 6-7-8, the red one for 100
    # Any 4 completes 3-4-5 for 30
    assert suggestions["blue-1"].weighted_score == 100**3 + 2 * 60**3 + 3 * 30**3
    assert suggestions["blue-1"].max_possible_score == 100
    assert suggestions["red-8"].max_possible_score == 50
    assert suggestions["red-7"].max_possible_score == 30
    assert suggestions["blue-1"].expected_potential == pytest.approx(
        ((100**3 + 2 * 60**3 + 3 * 30**3) / 19) ** (1 / 3)
    )


def test_score_index_combines_draws_and_kept_worth(no_combo_hand):
    suggestions = analyze_discards(no_combo_hand, set())
    worths = {c.id: card_worth(c, FULL_DECK) for c in no_combo_hand}
    hand_worth = sum(worths.values())

    for s in suggestions:
        assert s.opportunity_cost == worths[s.card.id]
        assert s.retention_value == hand_worth - worths[s.card.id]
        assert s.score_index == pytest.approx(s.weighted_score + 0.1 * s.retention_value)

    assert [s.score_index for s in suggestions] == pytest.approx(
        [2837000, 2666500, 2420300, 1436400, 915200]
    )


def test_prediction_names_kept_cards_and_draw(no_combo_hand):
    top = analyze_discards(no_combo_hand, set())[0]

    assert top.prediction is not None
    assert ids(top.prediction.kept_cards) == ["red-7", "red-8"]
    assert top.prediction.drawn_card.id == "red-6"
    assert top.prediction.score == 100
    assert top.prediction.combo_type == ComboType.SEQUENCE


def test_prediction_uses_first_best_draw(no_combo_hand):
    by_card = {s.card.id: s for s in analyze_discards(no_combo_hand, set())}
    prediction = by_card["red-8"].prediction

    assert ids(prediction.kept_cards) == ["blue-5", "red-7"]
    assert prediction.drawn_card.id == "red-6"
    assert prediction.score == 50


def test_removed_cards_shrink_the_pool(cards, no_combo_hand):
    removed = set(cards("red-6", "blue-6", "yellow-6"))
    suggestions = {s.card.id: s for s in analyze_discards(no_combo_hand, removed)}

    assert suggestions["blue-1"].pool_size == 16
    # Without 6s only a 4 helps
    assert suggestions["blue-1"].outs == 3
    assert suggestions["blue-1"].max_possible_score == 30


def test_one_suggestion_per_held_card(cards):
    hand = cards("red-1", "blue-4", "yellow-7", "red-8")
    suggestions = analyze_discards(hand, set())
    assert sorted(s.card.id for s in suggestions) == sorted(ids(hand))


def test_empty_pool_gives_no_advice(no_combo_hand):
    removed = set(FULL_DECK) - set(no_combo_hand)
    assert analyze_discards(no_combo_hand, removed) == []


def test_held_and_removed_overlap_is_rejected(no_combo_hand):
    with pytest.raises(ValueError):
        analyze_discards(no_combo_hand, {no_combo_hand[0]})


def test_oversized_hand_is_rejected(cards):
    hand = cards("red-1", "red-3", "red-5", "blue-1", "blue-3", "blue-5")
    with pytest.raises(ValueError):
        analyze_discards(hand, set())


def test_chest_odds_attached_to_top_suggestion(no_combo_hand):
    suggestions = analyze_discards(no_combo_hand, set(), current_score=120,
                                   include_chest_stats=True, rng=random.Random(3))
    odds = suggestions[0].chest_odds

    assert odds is not None
    assert odds.trials == 20
    assert odds.bronze + odds.silver + odds.gold == pytest.approx(1.0)
    assert all(s.chest_odds is None for s in suggestions[1:])


def test_chest_odds_are_reproducible_with_a_seed(no_combo_hand):
    first = analyze_discards(no_combo_hand, set(), include_chest_stats=True,
                             rng=random.Random(11))
    second = analyze_discards(no_combo_hand, set(), include_chest_stats=True,
                              rng=random.Random(11))
    assert first[0].chest_odds == second[0].chest_odds


def test_chest_trials_follow_config(no_combo_hand):
    advisor = DiscardAdvisor(config=GameConfig(chest_trials=4), rng=random.Random(0))
    top = advisor.analyze(no_combo_hand, set(), include_chest_stats=True)[0]
    assert top.chest_odds.trials == 4


def test_chest_odds_off_by_default(no_combo_hand):
    assert all(s.chest_odds is None for s in analyze_discards(no_combo_hand, set()))


# GreedyStrategy

def test_greedy_plays_best_move(cards):
    strategy = GreedyStrategy()
    move = strategy.select_move(cards("red-6", "red-7", "red-8", "blue-6", "blue-8"))
    assert move.score == 100


def test_greedy_discards_top_suggestion(no_combo_hand):
    strategy = GreedyStrategy()
    assert strategy.select_move(no_combo_hand) is None
    assert strategy.select_discard(no_combo_hand, set()).id == "blue-1"


def test_greedy_has_nothing_to_discard_without_pool(no_combo_hand):
    removed = set(FULL_DECK) - set(no_combo_hand)
    assert GreedyStrategy().select_discard(no_combo_hand, removed) is None
