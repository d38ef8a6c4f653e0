"""
Shared fixtures for engine tests.
"""

import pytest

from kitten_engine.engine import GameEngine
from kitten_engine.models import CardType, CatName
from kitten_engine.rules import create_options


def build_game(n=3, seed="test-seed", start=True, **overrides):
    """Create a game with players P0..P(n-1), started unless asked otherwise."""
    engine = GameEngine(create_options(player_count=n, seed=seed, **overrides), clock=lambda: 1000.0)
    for i in range(n):
        assert engine.add_player(f"P{i}", f"Player{i}").success
    if start:
        assert engine.start().success
    return engine


def discard_from_hand(engine, player_id, card_type):
    """Move every card of a type from a hand to the discard pile."""
    player = engine.state.get_player(player_id)
    moved = [c for c in player.hand if c.type == card_type]
    for card in moved:
        player.hand.remove(card)
        engine.state.discard_pile.append(card)
    return moved


def empty_hand(engine, player_id):
    """Move a whole hand to the discard pile."""
    player = engine.state.get_player(player_id)
    engine.state.discard_pile.extend(player.hand)
    player.hand = []


def safe_top(engine):
    """Put a harmless cat on top of the draw pile so the next draw is predictable."""
    return engine.debug_put_on_top(CardType.NORMAL, CatName.BOSS_KITTEN)


@pytest.fixture
def game():
    return build_game(3)


@pytest.fixture
def make_game():
    return build_game


@pytest.fixture
def helpers():
    """Scenario helpers: discard_type, clear_hand, put_safe_top."""
    class Helpers:
        discard_type = staticmethod(discard_from_hand)
        clear_hand = staticmethod(empty_hand)
        put_safe_top = staticmethod(safe_top)
    return Helpers
