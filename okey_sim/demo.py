#!/usr/bin/env python3
"""
Demo script for the Okey simulation.
Shows combination scoring, discard advice and batch simulation.
"""

import random
import time

from okey_sim.engine.deck import card_by_id
from okey_sim.engine.combo_detector import score_combo
from okey_sim.engine.strategy import analyze_discards, find_best_moves
from okey_sim.simulator import Simulator


def demo_scoring():
    """Demonstrate combination scoring."""
    print("=" * 60)
    print("COMBINATION SCORING DEMO")
    print("=" * 60)

    groups = [
        ["red-6", "red-7", "red-8"],        # Same color sequence, the maximum
        ["red-3", "blue-4", "yellow-5"],    # Mixed sequence
        ["red-8", "blue-8", "yellow-8"],    # Triple
        ["red-2", "red-2", "red-2"],        # Not a triple
        ["red-1", "blue-2", "yellow-4"],    # Nothing
    ]

    for ids in groups:
        result = score_combo(card_by_id(i) for i in ids)
        print(f"  {', '.join(ids):<32} {result.combo_type.value:<9} {result.score:>4}")


def demo_advice(hand_ids: list[str], chest: bool = False, seed: int = None):
    """Show best moves and ranked discards for a hand."""
    print("\n" + "=" * 60)
    print("DISCARD ADVICE DEMO")
    print("=" * 60)

    hand = [card_by_id(i) for i in hand_ids]
    print(f"\nHand: {', '.join(hand_ids)}")

    moves = find_best_moves(hand)
    if moves:
        print(f"Best move: {moves[0]}")
        return

    suggestions = analyze_discards(hand, set(), include_chest_stats=chest,
                                   rng=random.Random(seed))
    print(f"\n{'Discard':<10} {'P(win)':>7} {'Outs':>5} {'Pot.':>7} {'Max':>5}  Prediction")
    print("-" * 60)
    for s in suggestions:
        print(f"{s.card.id:<10} {s.probability:>7.1%} {s.outs:>5} "
              f"{s.expected_potential:>7.1f} {s.max_possible_score:>5}  {s.prediction or '-'}")

    top = suggestions[0]
    if top.chest_odds:
        odds = top.chest_odds
        print(f"\nAfter discarding {top.card.id}: gold {odds.gold:.0%}, "
              f"silver {odds.silver:.0%}, bronze {odds.bronze:.0%} "
              f"({odds.trials} games)")


def demo_batch(runs: int, preset: str, seed: int = None):
    """Run a batch of full games."""
    print("\n" + "=" * 60)
    print(f"BATCH SIMULATION DEMO ({runs} games)")
    print("=" * 60)

    sim = Simulator(preset, seed=seed)
    start_time = time.time()
    stats = sim.run_batch(runs, verbose=True)
    elapsed = time.time() - start_time

    print(stats)
    print(f"Done ({elapsed:.1f}s)")


if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(description="Okey advisor and simulator demo")
    parser.add_argument("--runs", type=int, default=200, help="Number of games in the batch")
    parser.add_argument("--preset", type=str, default="standard", help="Preset name")
    parser.add_argument("--seed", type=int, help="Random seed for reproducible runs")
    parser.add_argument("--hand", nargs=5, metavar="CARD",
                        default=["red-7", "red-8", "blue-1", "yellow-3", "blue-5"],
                        help="Five card ids for the advice demo")
    parser.add_argument("--chest", action="store_true", help="Estimate chest odds for the advice")
    parser.add_argument("--single", action="store_true", help="Play one verbose game instead of a batch")

    args = parser.parse_args()

    demo_scoring()
    demo_advice(args.hand, chest=args.chest, seed=args.seed)
    if args.single:
        print()
        print(Simulator(args.preset, seed=args.seed).run(verbose=True))
    else:
        demo_batch(args.runs, args.preset, args.seed)
