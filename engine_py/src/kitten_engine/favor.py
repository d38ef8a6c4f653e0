"""
Favor hand-off between two players.
"""

import logging
from typing import Any, Dict, Optional

from .constants import (
    EFFECT_FAVOR_GIVEN, EFFECT_FAVOR_NOTHING_MOVED, EFFECT_FAVOR_REQUESTED,
    EFFECT_NO_TARGET, FAVOR_PROTECTED_TYPES
)
from .errors import InvariantViolation
from .models import Card, GameState, PendingFavor, Player
from .rng import SeededRandom

logger = logging.getLogger(__name__)


def is_favor_candidate(requester: Player, player: Optional[Player]) -> bool:
    return (
        player is not None
        and player.alive
        and player.id != requester.id
        and len(player.hand) > 0
    )


def start_favor(state: GameState, rng: SeededRandom, requester: Player, target_id: Optional[str]) -> Dict[str, Any]:
    """
    Open a pending favor against the requested target, or a random eligible
    player when the request names nobody usable. No card moves yet.

    Returns:
        Effect description
    """
    target = state.get_player(target_id) if target_id else None
    if not is_favor_candidate(requester, target):
        candidates = [p for p in state.players if is_favor_candidate(requester, p)]
        if not candidates:
            state.log(f"{requester.name} asked for a favor but nobody has cards")
            return {"type": EFFECT_NO_TARGET}
        target = rng.choice(candidates)

    state.pending_favor = PendingFavor(requester_id=requester.id, target_id=target.id)
    state.log(f"{requester.name} asks {target.name} for a favor")
    logger.debug(f"Game {state.id}: favor {requester.id} <- {target.id}")
    return {"type": EFFECT_FAVOR_REQUESTED, "requester_id": requester.id, "target_id": target.id}


def choose_favor_card(rng: SeededRandom, target: Player) -> Card:
    """First card that is not a defuse, bomb or imploding card, else a random card."""
    for card in target.hand:
        if card.type not in FAVOR_PROTECTED_TYPES:
            return card
    return rng.choice(target.hand)


def transfer_favor_card(state: GameState, rng: SeededRandom, card_id: Optional[str] = None) -> Dict[str, Any]:
    """
    Complete the pending favor: move one card from the target to the
    requester. The pending favor is cleared whatever happens.

    Args:
        state: Game with a pending favor
        rng: The game's random stream
        card_id: Card the target chose; picked automatically if absent or not held

    Returns:
        Effect description
    """
    pending = state.pending_favor
    state.pending_favor = None

    requester = state.get_player(pending.requester_id)
    target = state.get_player(pending.target_id)
    if requester is None or target is None:
        raise InvariantViolation(
            f"Pending favor refers to unknown players {pending.requester_id}/{pending.target_id}"
        )

    if not requester.alive or not target.alive or not target.hand:
        state.log(f"Favor from {target.name} to {requester.name} fizzled")
        return {"type": EFFECT_FAVOR_NOTHING_MOVED, "requester_id": requester.id, "target_id": target.id}

    card = target.find_card(card_id) if card_id else None
    if card is None:
        card = choose_favor_card(rng, target)

    target.hand.remove(card)
    requester.hand.append(card)
    state.log(f"{target.name} gave {requester.name} a card")
    return {
        "type": EFFECT_FAVOR_GIVEN,
        "requester_id": requester.id,
        "target_id": target.id,
        "card_id": card.id
    }
