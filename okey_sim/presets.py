"""
Preset configurations for the Okey simulation.
Trade estimate precision against latency for the embedded chest odds.
"""

from dataclasses import dataclass, field, fields
from typing import Optional

from .engine.game import GameConfig


@dataclass
class Preset:
    """A named set of GameConfig overrides."""
    name: str
    description: str
    config_overrides: dict = field(default_factory=dict)

    def build_config(self) -> GameConfig:
        known = {f.name for f in fields(GameConfig)}
        for key in self.config_overrides:
            if key not in known:
                raise ValueError(f"Unknown config option in preset {self.name!r}: {key}")
        return GameConfig(**self.config_overrides)


# Built-in presets
PRESETS = {
    "standard": Preset(
        name="Standard",
        description="Default thresholds, 20 games per chest estimate",
    ),

    "quick": Preset(
        name="Quick",
        description="Coarser chest estimates for fast advice",
        config_overrides={"chest_trials": 8},
    ),

    "thorough": Preset(
        name="Thorough",
        description="Tighter chest estimates at higher cost",
        config_overrides={"chest_trials": 100},
    ),
}


def get_preset(name: str) -> Optional[Preset]:
    """Get a preset by name."""
    return PRESETS.get(name.lower().replace(" ", "_"))


def list_presets() -> list[str]:
    """List all available preset names."""
    return list(PRESETS.keys())
