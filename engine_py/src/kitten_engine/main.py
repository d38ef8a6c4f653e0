#!/usr/bin/env python3
"""Seeded self-play driver for the engine"""

import logging
import os
from typing import Optional

from .engine import GameEngine
from .models import CardType
from .ranking import finish_ranks
from .rules import GameOptions, create_options
from .shuffle import count_cards

logger = logging.getLogger(__name__)


def run_simulation(options: GameOptions, max_steps: int = 2000) -> GameEngine:
    """
    Play a game where every turn the current player just draws.

    Stops when the game finishes, the deck runs out or ``max_steps`` draws
    have been made.
    """
    engine = GameEngine(options)
    for i in range(options.player_count):
        engine.add_player(f"p{i}", f"Player {i}")
    engine.start()

    for _ in range(max_steps):
        if engine.state.finished:
            break
        result = engine.draw(engine.current_player.id)
        if result.effect_type == "DECK_EMPTY":
            logger.warning(f"Game {engine.state.id}: deck ran out before a winner")
            break
    return engine


def _env_flag(name: str) -> bool:
    return os.getenv(name, "false").lower() == "true"


def main(seed: Optional[str] = None):
    logging.basicConfig(level=os.getenv("LOG_LEVEL", "info").upper())

    options = create_options(
        player_count=int(os.getenv("KITTEN_PLAYERS", 4)),
        expansion_enabled=_env_flag("KITTEN_EXPANSION"),
        imploding_enabled=_env_flag("KITTEN_IMPLODING"),
        seed=seed or os.getenv("KITTEN_SEED")
    )
    engine = run_simulation(options)
    state = engine.state

    print(f"Seed: {engine.rng.seed}")
    print(f"Finished: {state.finished}, winner: {state.winner_id}")
    for player_id, rank in sorted(finish_ranks(state).items(), key=lambda item: item[1]):
        print(f"  {rank}. {state.get_player(player_id).name}")
    defuses_left = sum(count_cards(p.hand, CardType.DEFUSE) for p in state.players)
    print(f"Defuses still held: {defuses_left}")


if __name__ == "__main__":
    main()
