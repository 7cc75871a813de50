"""
Okey Game Advisor and Simulator
"""

from .engine.deck import Card, Color, Hand, FULL_DECK, card_by_id
from .engine.combo_detector import ComboType, ComboResult, score_combo
from .engine.strategy import DiscardSuggestion, analyze_discards, find_best_moves
from .engine.game import ChestTier, GameConfig, GameState, chest_for_score
from .simulator import Simulator, SimulationStats, GameSummary, run_simulation_batch

__version__ = "0.1.0"
