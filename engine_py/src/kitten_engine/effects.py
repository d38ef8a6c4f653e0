"""
Card effect implementation.
"""

import logging
from typing import Any, Dict

from .constants import (
    EFFECT_ALTER_FUTURE, EFFECT_ALTER_MISMATCH, EFFECT_ATTACK, EFFECT_DRAW_BOTTOM,
    EFFECT_NO_EFFECT, EFFECT_NOTHING_TO_SALVAGE, EFFECT_REVERSE, EFFECT_SALVAGE,
    EFFECT_SALVAGE_REBURIED, EFFECT_SEE_FUTURE, EFFECT_SHUFFLE, EFFECT_SKIP,
    SEE_FUTURE_COUNT
)
from .favor import start_favor
from .models import Card, CardType, DrawSource, GameState, PendingAction, Player
from .rng import SeededRandom
from .serialization import cards_to_list
from .turns import advance_turn, move_turn_to, next_alive_index

logger = logging.getLogger(__name__)


def apply_skip(state: GameState, player: Player) -> Dict[str, Any]:
    """
    Apply Skip - end the player's turn without drawing.

    Args:
        state: Current game state
        player: Player who played the skip

    Returns:
        Effect description
    """
    player.remaining_turns = 0
    advance_turn(state)
    state.log(f"{player.name} skipped")
    return {"type": EFFECT_SKIP, "player_id": player.id}


def apply_attack(state: GameState, player: Player, target_id=None) -> Dict[str, Any]:
    """
    Apply Attack - end the player's turn and make the victim owe one more turn.

    The attacker owes nothing afterwards. The victim owes
    ``max(remaining_turns, 1) + 1``: one extra turn on top of their own,
    whatever the attacker still owed.

    Without a usable ``target_id`` the victim is the next alive player;
    with one (targeted attack) the turn passes straight to that player.

    Args:
        state: Current game state
        player: Player who played the attack
        target_id: Explicit victim for a targeted attack

    Returns:
        Effect description
    """
    player.remaining_turns = 0
    target_index = None
    if target_id is not None and target_id != player.id:
        target_index = next(
            (i for i, p in enumerate(state.players) if p.id == target_id and p.alive),
            None
        )
    if target_index is None:
        target_index = next_alive_index(state, state.current_player_index)

    victim = state.players[target_index]
    victim.remaining_turns = max(victim.remaining_turns, 1) + 1
    move_turn_to(state, target_index)
    state.log(f"{player.name} attacked {victim.name} ({victim.remaining_turns} turns)")
    return {"type": EFFECT_ATTACK, "player_id": player.id, "target_id": victim.id, "turns": victim.remaining_turns}


def apply_reverse(state: GameState, player: Player) -> Dict[str, Any]:
    """Apply Reverse - flip the turn direction."""
    state.direction = -state.direction
    state.log(f"{player.name} reversed the turn order")
    return {"type": EFFECT_REVERSE, "direction": state.direction}


def apply_shuffle(state: GameState, rng: SeededRandom, player: Player) -> Dict[str, Any]:
    """Apply Shuffle - randomize the draw pile in place."""
    rng.shuffle(state.draw_pile)
    state.log(f"{player.name} shuffled the deck")
    return {"type": EFFECT_SHUFFLE}


def apply_see_future(state: GameState, player: Player) -> Dict[str, Any]:
    """Apply See the Future - report the top cards to the player, mutate nothing."""
    top = state.draw_pile[:SEE_FUTURE_COUNT]
    state.log(f"{player.name} saw the future")
    return {"type": EFFECT_SEE_FUTURE, "player_id": player.id, "cards": cards_to_list(top)}


def apply_alter_future(state: GameState, player: Player, order=None) -> Dict[str, Any]:
    """
    Apply Alter the Future - reorder the top N cards to ``order``.

    The order must name exactly the ids of the current top N cards;
    anything else leaves the pile untouched.
    """
    if order:
        top = state.draw_pile[:len(order)]
        by_id = {c.id: c for c in top}
        if len(top) == len(order) and set(by_id) == set(order):
            state.draw_pile[:len(order)] = [by_id[card_id] for card_id in order]
            state.log(f"{player.name} altered the future")
            return {
                "type": EFFECT_ALTER_FUTURE,
                "player_id": player.id,
                "cards": cards_to_list(state.draw_pile[:SEE_FUTURE_COUNT])
            }
        logger.debug(f"Game {state.id}: alter order {order} does not match the top {len(order)} cards")
        return {
            "type": EFFECT_ALTER_MISMATCH,
            "player_id": player.id,
            "cards": cards_to_list(state.draw_pile[:SEE_FUTURE_COUNT])
        }

    state.log(f"{player.name} looked at the future")
    return {
        "type": EFFECT_ALTER_FUTURE,
        "player_id": player.id,
        "cards": cards_to_list(state.draw_pile[:SEE_FUTURE_COUNT])
    }


def apply_reactive_effect(state: GameState, rng: SeededRandom, pending: PendingAction, player: Player) -> Dict[str, Any]:
    """Run the effect of a resolved, non-canceled reactive play."""
    card_type = pending.card_type
    params = pending.params

    if card_type == CardType.SKIP:
        return apply_skip(state, player)
    if card_type == CardType.ATTACK:
        return apply_attack(state, player)
    if card_type == CardType.TARGETED_ATTACK:
        return apply_attack(state, player, params.target_id)
    if card_type == CardType.REVERSE:
        return apply_reverse(state, player)
    if card_type == CardType.SHUFFLE:
        return apply_shuffle(state, rng, player)
    if card_type == CardType.SEE_FUTURE:
        return apply_see_future(state, player)
    if card_type == CardType.ALTER_FUTURE:
        return apply_alter_future(state, player, params.order)
    if card_type == CardType.FAVOR:
        return start_favor(state, rng, player, params.target_id)
    raise ValueError(f"{card_type.value} is not a reactive card")


def apply_draw_bottom(state: GameState, player: Player) -> Dict[str, Any]:
    """Apply Draw From the Bottom - the player's next draw takes the bottom card."""
    player.draw_source = DrawSource.BOTTOM
    state.log(f"{player.name} will draw from the bottom")
    return {"type": EFFECT_DRAW_BOTTOM, "player_id": player.id}


def apply_salvage(state: GameState, rng: SeededRandom, player: Player, salvage_card: Card) -> Dict[str, Any]:
    """
    Apply Salvage - take a random card back from the discard pile.

    A bomb or imploding card picked this way goes back into the draw pile at
    a random position instead of the hand.
    """
    pool = [c for c in state.discard_pile if c.id != salvage_card.id]
    if not pool:
        return {"type": EFFECT_NOTHING_TO_SALVAGE}

    card = rng.choice(pool)
    state.discard_pile.remove(card)
    if card.type in (CardType.BOMB, CardType.IMPLODING):
        state.draw_pile.insert(rng.insert_position(len(state.draw_pile)), card)
        state.log(f"{player.name} salvaged a {card.type.value.lower()} back into the deck")
        return {"type": EFFECT_SALVAGE_REBURIED, "card_type": card.type.value}

    player.hand.append(card)
    state.log(f"{player.name} salvaged a card")
    return {"type": EFFECT_SALVAGE, "card_id": card.id}


def apply_no_effect(state: GameState, player: Player, card: Card) -> Dict[str, Any]:
    """Cat cards do nothing on their own."""
    state.log(f"{player.name} discarded a {card.name.value if card.name else card.type.value}")
    return {"type": EFFECT_NO_EFFECT, "card_id": card.id}
