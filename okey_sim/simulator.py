"""
Main API for the Okey simulation.
Plays full games with the greedy policy and aggregates the results.
"""

import logging
import random
from dataclasses import dataclass
from typing import Callable, Optional, Union

from .engine.game import (ChestOdds, ChestTier, GameConfig, GameState,
                          chest_for_score, simulate_game)
from .engine.history import GameHistory
from .engine.strategy import DiscardAdvisor, GreedyStrategy
from .presets import Preset, get_preset, list_presets

logger = logging.getLogger(__name__)


@dataclass
class GameSummary:
    """Summary of a single simulated game."""
    final_score: int
    chest: ChestTier
    plays: list  # (combo_type, score) tuples
    discards: list[str]
    preset_used: str
    history: Optional[GameHistory] = None

    def __str__(self):
        lines = [
            f"{'='*50}",
            f"  {self.chest.value.upper()} CHEST - {self.final_score} points",
            f"{'='*50}",
            f"  Plays: {len(self.plays)}, Discards: {len(self.discards)}",
        ]
        for combo_type, score in self.plays:
            lines.append(f"    {combo_type:<10} {score:>4}")
        lines.append(f"{'='*50}")
        return "\n".join(lines)

    def to_dict(self):
        return {
            "final_score": self.final_score,
            "chest": self.chest.value,
            "plays": self.plays,
            "discards": self.discards,
            "preset_used": self.preset_used,
        }


@dataclass
class SimulationStats:
    """Aggregate results of many simulated games."""
    total_games: int
    total_score: int
    high_score: int
    bronze_count: int
    silver_count: int
    gold_count: int
    preset_used: str = "standard"

    @classmethod
    def from_scores(cls, scores: list[int], config: GameConfig = None,
                    preset_used: str = "standard") -> "SimulationStats":
        tiers = [chest_for_score(s, config) for s in scores]
        return cls(
            total_games=len(scores),
            total_score=sum(scores),
            high_score=max(scores, default=0),
            bronze_count=tiers.count(ChestTier.BRONZE),
            silver_count=tiers.count(ChestTier.SILVER),
            gold_count=tiers.count(ChestTier.GOLD),
            preset_used=preset_used,
        )

    @property
    def average_score(self) -> float:
        if self.total_games == 0:
            return 0.0
        return self.total_score / self.total_games

    @property
    def chest_odds(self) -> ChestOdds:
        n = self.total_games
        if n == 0:
            return ChestOdds(0.0, 0.0, 0.0, 0)
        return ChestOdds(self.bronze_count / n, self.silver_count / n,
                         self.gold_count / n, n)

    def __str__(self):
        lines = [
            f"{'='*50}",
            f"  BATCH RESULTS ({self.total_games} games)",
            f"  Preset: {self.preset_used}",
            f"{'='*50}",
            f"  Avg score: {self.average_score:.0f}",
            f"  High score: {self.high_score}",
            "",
            "  Chest distribution:",
        ]

        counts = [("Gold", self.gold_count), ("Silver", self.silver_count),
                  ("Bronze", self.bronze_count)]
        for name, count in counts:
            pct = count / self.total_games * 100 if self.total_games else 0
            bar = "█" * int(pct / 2)
            lines.append(f"    {name:<7} {count:>5} ({pct:>5.1f}%) {bar}")

        lines.append(f"{'='*50}")
        return "\n".join(lines)

    def to_dict(self):
        return {
            "total_games": self.total_games,
            "average_score": round(self.average_score),
            "high_score": self.high_score,
            "bronze_count": self.bronze_count,
            "silver_count": self.silver_count,
            "gold_count": self.gold_count,
            "preset_used": self.preset_used,
        }


class Simulator:
    """
    Main simulator class.

    Usage:
        sim = Simulator(seed=7)
        summary = sim.run()
        print(summary)

        # Or run many:
        stats = sim.run_batch(runs=1000)
        print(stats)
    """

    def __init__(self, preset: Union[str, Preset] = "standard", seed: int = None):
        if isinstance(preset, str):
            p = get_preset(preset)
            if p is None:
                raise ValueError(f"Unknown preset: {preset}. Available: {list_presets()}")
            self.preset_name = preset
        else:
            p = preset
            self.preset_name = p.name

        self.preset = p
        self.config = p.build_config()
        self.rng = random.Random(seed)

    def _new_trial(self):
        """Independent generator and strategy for one game."""
        trial_rng = random.Random(self.rng.getrandbits(64))
        strategy = GreedyStrategy(DiscardAdvisor(config=self.config, rng=trial_rng))
        return trial_rng, strategy

    def run(self, verbose: bool = False) -> GameSummary:
        """
        Play one full game from a fresh shuffled deck.

        Args:
            verbose: Print each play and discard

        Returns:
            GameSummary with results and the game history
        """
        trial_rng, strategy = self._new_trial()
        history = GameHistory(preset_name=self.preset_name)
        result = simulate_game(GameState(config=self.config), strategy, trial_rng, history)

        if verbose:
            for event in history.events:
                if event.event_type == "play":
                    data = event.data
                    print(f"Turn {event.turn}: {data['combo_type']} "
                          f"{' '.join(data['cards'])} +{data['score']} = {data['total']}")
                elif event.event_type == "discard":
                    print(f"Turn {event.turn}: discard {event.data['card']}")

        return GameSummary(
            final_score=result.final_score,
            chest=result.chest,
            plays=[(combo.combo_type.value, combo.score) for combo in result.plays],
            discards=[card.id for card in result.discards],
            preset_used=self.preset_name,
            history=history,
        )

    def run_batch(self, runs: int = 100, verbose: bool = False,
                  on_progress: Callable[[int, int], None] = None,
                  should_stop: Callable[[], bool] = None) -> SimulationStats:
        """
        Play many independent games from fresh decks and aggregate scores.

        Args:
            runs: Number of games
            verbose: Print progress
            on_progress: Called with (games_done, runs) after each game
            should_stop: Checked before each game; a True result ends the
                batch early and the stats cover the games already played

        Returns:
            SimulationStats over the games played
        """
        if runs < 1:
            raise ValueError(f"runs must be at least 1, got {runs}")

        scores = []
        for i in range(runs):
            if should_stop and should_stop():
                logger.info("Batch stopped after %d of %d games", i, runs)
                break

            trial_rng, strategy = self._new_trial()
            result = simulate_game(GameState(config=self.config), strategy, trial_rng)
            scores.append(result.final_score)

            if verbose and (i + 1) % 100 == 0:
                print(f"  Game {i + 1}/{runs}...")
            if on_progress:
                on_progress(i + 1, runs)

        logger.debug("Batch of %d games finished", len(scores))
        return SimulationStats.from_scores(scores, self.config, self.preset_name)


# Convenience functions
def run(preset: str = "standard", seed: int = None, verbose: bool = False) -> GameSummary:
    """Quick single game with a new simulator."""
    return Simulator(preset, seed).run(verbose)


def run_simulation_batch(runs: int = 100, seed: int = None,
                         preset: str = "standard") -> SimulationStats:
    """Quick batch run with a new simulator."""
    return Simulator(preset, seed).run_batch(runs)
