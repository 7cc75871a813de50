"""
Okey simulation engine components.
"""

from .deck import Card, Color, Hand, FULL_DECK, RANKS, HAND_SLOTS, card_by_id, draw_pool
from .combo_detector import ComboType, ComboResult, ComboDetector, score_combo
from .strategy import (DiscardAdvisor, DiscardSuggestion, GreedyStrategy, Prediction,
                       analyze_discards, card_worth, find_best_moves)
from .game import (ChestOdds, ChestTier, GameConfig, GameResult, GameState,
                   chest_for_score, estimate_chests, simulate_game)
from .history import GameHistory
