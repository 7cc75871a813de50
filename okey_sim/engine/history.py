"""
Game history tracking.
Captures the plays and discards of a simulated game.
"""

import json
from dataclasses import dataclass, asdict


@dataclass
class GameEvent:
    """Single event in a game."""
    turn: int
    event_type: str  # "game_start", "play", "discard", "game_end"
    data: dict
    timestamp: int = 0  # event sequence number


class GameHistory:
    """Ordered log of what happened in one game."""

    def __init__(self, preset_name: str = "standard"):
        self.events: list[GameEvent] = []
        self.metadata = {"preset": preset_name}
        self._event_counter = 0
        self._turn = 0

    def add_event(self, event_type: str, data: dict):
        """Add an event to the history."""
        self.events.append(GameEvent(
            turn=self._turn,
            event_type=event_type,
            data=data,
            timestamp=self._event_counter
        ))
        self._event_counter += 1

    def add_game_start(self, score: int, hand: list, pool_size: int):
        self.add_event("game_start", {
            "starting_score": score,
            "starting_hand": hand,
            "pool_size": pool_size,
        })

    def add_play(self, combo_type: str, cards: list, score: int, total: int):
        """Log a scored combination."""
        self._turn += 1
        self.add_event("play", {
            "combo_type": combo_type,
            "cards": cards,
            "score": score,
            "total": total,
        })

    def add_discard(self, card: str, pool_remaining: int):
        """Log a discarded card."""
        self._turn += 1
        self.add_event("discard", {
            "card": card,
            "pool_remaining": pool_remaining,
        })

    def add_game_end(self, final_score: int, chest: str, plays: int, discards: int):
        self.add_event("game_end", {
            "final_score": final_score,
            "chest": chest,
            "plays": plays,
            "discards": discards,
        })

    def get_plays(self) -> list[GameEvent]:
        return [e for e in self.events if e.event_type == "play"]

    def get_discards(self) -> list[GameEvent]:
        return [e for e in self.events if e.event_type == "discard"]

    def best_play(self) -> dict:
        """Highest scoring play, or an empty dict if nothing was played."""
        plays = self.get_plays()
        if not plays:
            return {}
        return max(plays, key=lambda e: e.data["score"]).data

    def to_dict(self) -> dict:
        """Convert to dict for JSON serialization."""
        end = next((e for e in self.events if e.event_type == "game_end"), None)
        return {
            "metadata": self.metadata,
            "events": [asdict(e) for e in self.events],
            "summary": {
                "plays": len(self.get_plays()),
                "discards": len(self.get_discards()),
                "final_score": end.data["final_score"] if end else None,
                "chest": end.data["chest"] if end else None,
            },
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), indent=2)

    @classmethod
    def from_dict(cls, data: dict) -> "GameHistory":
        history = cls(preset_name=data["metadata"]["preset"])
        history.metadata = data["metadata"]

        for event_data in data["events"]:
            history.events.append(GameEvent(**event_data))
            history._event_counter = max(history._event_counter, event_data["timestamp"] + 1)
            history._turn = max(history._turn, event_data["turn"])

        return history
