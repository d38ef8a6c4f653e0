# engine_py/src/kitten_engine/ranking.py

from typing import Dict

from .models import GameState


def finish_ranks(state: GameState) -> Dict[str, int]:
    """
    Rank players by how long they survived.

    The winner is ranked 1, the last player eliminated 2, and so on back to
    the first player eliminated. While the game is still running, eliminated
    players are ranked behind everyone still alive and the survivors are not
    ranked yet.

    Args:
        state: The game, usually finished

    Returns:
        Mapping of player id to finish rank
    """
    ranks = {}
    if state.finished and state.winner_id:
        ranks[state.winner_id] = 1

    next_rank = len(state.alive_players()) + 1
    for player_id in reversed(state.elimination_order):
        ranks[player_id] = next_rank
        next_rank += 1
    return ranks
