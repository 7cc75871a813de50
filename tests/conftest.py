import random

import pytest

from okey_sim.engine.deck import card_by_id


@pytest.fixture
def cards():
    """Build a card list from ids, e.g. cards("red-1", "blue-2")."""
    def _cards(*ids):
        return [card_by_id(i) for i in ids]
    return _cards


@pytest.fixture
def no_combo_hand(cards):
    # Ranks 1, 3, 5, 7, 8: no run of three and no repeated rank
    return cards("red-7", "red-8", "blue-1", "yellow-3", "blue-5")


@pytest.fixture
def rng():
    return random.Random(1234)
