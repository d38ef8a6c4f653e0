"""
Counterable window for reactive card plays.

A reactive play is discarded immediately but its effect waits in a
``PendingAction``. Other plays can stack nope cards on it; when the action is
resolved an odd number of nopes cancels it, an even number lets it through.
"""

import logging
from typing import Any, Dict

from .constants import EFFECT_CANCELED, EFFECT_ORIGINATOR_GONE
from .effects import apply_reactive_effect
from .errors import InvariantViolation
from .models import Card, CounterPlay, GameState, PendingAction, Player
from .rng import SeededRandom

logger = logging.getLogger(__name__)


def open_pending_action(state: GameState, player: Player, card: Card, params) -> PendingAction:
    """
    Open the window for a reactive card that has already been discarded.

    Args:
        state: Current game state (must have no pending action)
        player: Player who played the card
        card: The played card
        params: Parsed parameters captured for resolution

    Returns:
        The new pending action
    """
    pending = PendingAction(
        action_id=state.next_action_id(),
        player_id=player.id,
        card_type=card.type,
        card_id=card.id,
        params=params
    )
    state.pending_action = pending
    state.log(f"{player.name} played {card.type.value}")
    logger.debug(f"Game {state.id}: pending {pending.action_id} {card.type.value} by {player.id}")
    return pending


def add_counter(state: GameState, player: Player, nope: Card, timestamp: float) -> CounterPlay:
    """Discard a nope card against the pending action and log it."""
    player.hand.remove(nope)
    state.discard_pile.append(nope)
    entry = CounterPlay(player_id=player.id, card_id=nope.id, timestamp=timestamp)
    state.pending_action.counters.append(entry)
    state.log(f"{player.name} played NOPE")
    return entry


def resolve_pending(state: GameState, rng: SeededRandom) -> Dict[str, Any]:
    """
    Consume the pending action.

    Returns:
        Outcome with ``canceled``, ``counter_count`` and the effect that ran
    """
    pending = state.pending_action
    state.pending_action = None

    originator = state.get_player(pending.player_id)
    if originator is None:
        raise InvariantViolation(f"Pending action {pending.action_id} refers to unknown player {pending.player_id}")

    outcome = {
        "action_id": pending.action_id,
        "card_type": pending.card_type.value,
        "player_id": pending.player_id,
        "counter_count": len(pending.counters),
        "canceled": True
    }

    if pending.will_cancel:
        state.log(f"{pending.card_type.value} by {originator.name} was canceled")
        outcome["effect"] = {"type": EFFECT_CANCELED}
        return outcome

    if not originator.alive:
        outcome["effect"] = {"type": EFFECT_ORIGINATOR_GONE}
        return outcome

    outcome["canceled"] = False
    outcome["effect"] = apply_reactive_effect(state, rng, pending, originator)
    return outcome
