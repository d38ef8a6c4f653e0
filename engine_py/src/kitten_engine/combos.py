"""
Multi-card combo validation and resolution.
"""

import logging
from collections import Counter
from typing import Any, Dict, List, Optional

from .constants import (
    COMBO_FIVE_DISTINCT, COMBO_FOUR, COMBO_THREE, COMBO_TWO, EFFECT_FORCE_DISCARD,
    EFFECT_MISS_DECLARED, EFFECT_NO_TARGET, EFFECT_RETRIEVE, EFFECT_RETRIEVE_MISS,
    EFFECT_STEAL_DECLARED, EFFECT_STEAL_RANDOM
)
from .models import Card, CardType, GameState, Player
from .params import RetrieveParams, StealDeclaredParams
from .rng import SeededRandom

logger = logging.getLogger(__name__)


def detect_combo(cards: List[Card]) -> Optional[str]:
    """
    Detect the combo formed by a set of cards.

    Args:
        cards: Cards selected from one hand

    Returns:
        Combo kind, or None if the cards form no combo
    """
    if not 2 <= len(cards) <= 5:
        return None
    if not all(c.type == CardType.NORMAL for c in cards):
        return None

    names = Counter(c.name for c in cards)
    size = len(cards)
    if len(names) == 1:
        return {2: COMBO_TWO, 3: COMBO_THREE, 4: COMBO_FOUR}.get(size)
    if size == 5 and len(names) == 5:
        return COMBO_FIVE_DISTINCT
    return None


def _remove_random_card(rng: SeededRandom, player: Player) -> Card:
    card = rng.choice(player.hand)
    player.hand.remove(card)
    return card


def steal_random(state: GameState, rng: SeededRandom, player: Player) -> Dict[str, Any]:
    """Two of a kind: take a random card from a random other player."""
    others = [p for p in state.players if p.alive and p.id != player.id and p.hand]
    if not others:
        return {"type": EFFECT_NO_TARGET}
    target = rng.choice(others)
    card = _remove_random_card(rng, target)
    player.hand.append(card)
    state.log(f"{player.name} stole a card from {target.name}")
    return {"type": EFFECT_STEAL_RANDOM, "target_id": target.id, "card_id": card.id}


def steal_declared(state: GameState, player: Player, params: StealDeclaredParams) -> Dict[str, Any]:
    """Three of a kind: take the named card from the target if they hold one."""
    target = state.get_player(params.target_id)
    taken = next(
        (c for c in target.hand if c.type == CardType.NORMAL and c.name == params.declared_name),
        None
    )
    if taken is None:
        state.log(f"{player.name} asked {target.name} for {params.declared_name.value} and missed")
        return {"type": EFFECT_MISS_DECLARED, "target_id": target.id, "declared_name": params.declared_name.value}

    target.hand.remove(taken)
    player.hand.append(taken)
    state.log(f"{player.name} took {params.declared_name.value} from {target.name}")
    return {"type": EFFECT_STEAL_DECLARED, "target_id": target.id, "card_id": taken.id}


def force_discard(state: GameState, rng: SeededRandom, player: Player) -> Dict[str, Any]:
    """Four of a kind: every other alive player with cards discards one at random."""
    affected = []
    for other in state.players:
        if not other.alive or other.id == player.id or not other.hand:
            continue
        card = _remove_random_card(rng, other)
        state.discard_pile.append(card)
        affected.append({"player_id": other.id, "discarded_card_id": card.id})
    state.log(f"{player.name} made {len(affected)} players discard")
    return {"type": EFFECT_FORCE_DISCARD, "affected": affected}


def retrieve_from_discard(state: GameState, player: Player, params: RetrieveParams, combo_cards: List[Card]) -> Dict[str, Any]:
    """Five distinct cats: take a matching card back from the discard pile."""
    excluded = {c.id for c in combo_cards}
    found = None
    # Most recent discard first
    for card in reversed(state.discard_pile):
        if card.id in excluded:
            continue
        if params.card_id is not None:
            if card.id == params.card_id:
                found = card
                break
        elif card.matches(params.card_type, params.card_name):
            found = card
            break

    if found is None:
        state.log(f"{player.name} found nothing to retrieve")
        return {
            "type": EFFECT_RETRIEVE_MISS,
            "card_id": params.card_id,
            "card_type": params.card_type.value if params.card_type else None
        }

    state.discard_pile.remove(found)
    player.hand.append(found)
    state.log(f"{player.name} retrieved a card from the discard pile")
    return {"type": EFFECT_RETRIEVE, "card_id": found.id}


def resolve_combo(state: GameState, rng: SeededRandom, player: Player, cards: List[Card], kind: str, params) -> Dict[str, Any]:
    """
    Discard the combo cards and apply the combo's effect.

    The combo has already been validated; this never fails.
    """
    for card in cards:
        player.hand.remove(card)
        state.discard_pile.append(card)
    logger.debug(f"Game {state.id}: {player.id} plays combo {kind}")

    if kind == COMBO_TWO:
        return steal_random(state, rng, player)
    if kind == COMBO_THREE:
        return steal_declared(state, player, params)
    if kind == COMBO_FOUR:
        return force_discard(state, rng, player)
    return retrieve_from_discard(state, player, params, cards)
