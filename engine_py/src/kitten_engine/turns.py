"""
Turn order, elimination and victory detection.
"""

import logging

from .models import Card, GameState, Player

logger = logging.getLogger(__name__)


def next_alive_index(state: GameState, from_index: int) -> int:
    """Seat index of the first alive player after ``from_index`` in the current direction."""
    total = len(state.players)
    idx = from_index
    for _ in range(total):
        idx = (idx + state.direction) % total
        if state.players[idx].alive:
            return idx
    return from_index


def move_turn_to(state: GameState, index: int):
    """Make ``index`` the current player; they owe at least one turn."""
    state.current_player_index = index
    player = state.players[index]
    if player.remaining_turns < 1:
        player.remaining_turns = 1


def advance_turn(state: GameState):
    """Pass the turn to the next alive player in the current direction."""
    if state.finished:
        return
    move_turn_to(state, next_alive_index(state, state.current_player_index))
    logger.debug(f"Game {state.id}: turn passes to {state.current_player.id}")


def check_victory(state: GameState) -> bool:
    """
    Finish the game when at most one player is alive.

    Returns:
        True if the game is finished
    """
    alive = state.alive_players()
    if len(alive) <= 1:
        state.finished = True
        state.winner_id = alive[0].id if alive else None
        if alive:
            state.log(f"{alive[0].name} wins!")
            logger.info(f"Game {state.id} finished, winner {alive[0].id}")
        else:
            state.log("Game over with no survivors")
            logger.info(f"Game {state.id} finished without a winner")
    return state.finished


def eliminate_player(state: GameState, player: Player, fatal_card: Card):
    """
    Remove a player from play: the fatal card and the whole hand go to the
    discard pile, then victory is checked and the turn moves on.
    """
    player.alive = False
    player.remaining_turns = 0
    state.discard_pile.append(fatal_card)
    state.discard_pile.extend(player.hand)
    player.hand = []
    state.elimination_order.append(player.id)
    state.log(f"{player.name} exploded!")
    logger.info(f"Game {state.id}: player {player.id} eliminated by {fatal_card.type.value}")

    if not check_victory(state):
        advance_turn(state)
