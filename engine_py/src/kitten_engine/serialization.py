"""
State serialization and hand privacy utilities.
"""

import copy
from typing import Any, Dict, List, Optional

import orjson

from .models import Card, GameState, PendingAction, Player
from .params import BaseParams

LOG_TAIL = 10


def card_to_dict(card: Card) -> Dict[str, Any]:
    """Serialize a card."""
    data = {"id": card.id, "type": card.type.value}
    if card.name is not None:
        data["name"] = card.name.value
    if card.exposed:
        data["exposed"] = True
    return data


def cards_to_list(cards: List[Card]) -> List[Dict[str, Any]]:
    return [card_to_dict(c) for c in cards]


def player_to_dict(player: Player, include_hand: bool = True) -> Dict[str, Any]:
    """Serialize a player's public fields, optionally with the hand."""
    data = {
        "id": player.id,
        "name": player.name,
        "seat": player.seat,
        "alive": player.alive,
        "remaining_turns": player.remaining_turns,
        "draw_source": player.draw_source.value,
        "hand_count": len(player.hand)
    }
    if include_hand:
        data["hand"] = cards_to_list(player.hand)
    return data


def _pending_action_summary(pending: PendingAction) -> Dict[str, Any]:
    summary = {
        "action_id": pending.action_id,
        "type": pending.card_type.value,
        "player_id": pending.player_id,
        "counters": [
            {"player_id": c.player_id, "timestamp": c.timestamp}
            for c in pending.counters
        ],
        "will_cancel": pending.will_cancel
    }
    # Only the target is public; an alter-future order names hidden cards
    target_id = getattr(pending.params, "target_id", None)
    if target_id is not None:
        summary["target_id"] = target_id
    return summary


def build_snapshot(state: GameState) -> Dict[str, Any]:
    """
    Build the broadcastable snapshot of a game.

    Hands are included in full; apply ``redact_for_viewer`` per viewer
    before sending. Draw pile contents never appear, only the count.
    """
    current = state.current_player if state.started else None
    return {
        "id": state.id,
        "started": state.started,
        "finished": state.finished,
        "winner_id": state.winner_id,
        "direction": state.direction,
        "current_player_index": state.current_player_index,
        "current_player_id": current.id if current else None,
        "players": [player_to_dict(p) for p in state.players],
        "draw_pile_count": len(state.draw_pile),
        "discard_count": len(state.discard_pile),
        "discard_top": card_to_dict(state.discard_pile[-1]) if state.discard_pile else None,
        "pending_action": _pending_action_summary(state.pending_action) if state.pending_action else None,
        "pending_favor": {
            "requester_id": state.pending_favor.requester_id,
            "target_id": state.pending_favor.target_id
        } if state.pending_favor else None,
        "elimination_order": list(state.elimination_order),
        "options": state.options.model_dump(exclude={"seed"}),
        "log": state.game_log[-LOG_TAIL:]
    }


def redact_for_viewer(snapshot: Dict[str, Any], viewer_id: Optional[str]) -> Dict[str, Any]:
    """
    Apply the hand privacy rule for one viewer.

    Every hand except the viewer's own is replaced by opaque placeholders of
    the same count. The input snapshot is left untouched.

    Args:
        snapshot: Output of ``build_snapshot``
        viewer_id: Player receiving the snapshot (None for spectators)

    Returns:
        Redacted copy of the snapshot
    """
    redacted = copy.deepcopy(snapshot)
    for player in redacted["players"]:
        if player["id"] != viewer_id and "hand" in player:
            player["hand"] = [{} for _ in player["hand"]]
    return redacted


def _params_to_dict(params: Any) -> Optional[Dict[str, Any]]:
    if isinstance(params, BaseParams):
        return params.model_dump(mode="json")
    return None


def build_debug_state(state: GameState, seed: Optional[str] = None) -> Dict[str, Any]:
    """Full internal state, pile contents included. Never broadcast this."""
    pending = state.pending_action
    return {
        "id": state.id,
        "seed": seed,
        "options": state.options.model_dump(),
        "started": state.started,
        "finished": state.finished,
        "halted": state.halted,
        "winner_id": state.winner_id,
        "direction": state.direction,
        "current_player_index": state.current_player_index,
        "players": [player_to_dict(p) for p in state.players],
        "draw_pile": cards_to_list(state.draw_pile),
        "discard_pile": cards_to_list(state.discard_pile),
        "pending_action": {
            **_pending_action_summary(pending),
            "card_id": pending.card_id,
            "params": _params_to_dict(pending.params)
        } if pending else None,
        "pending_favor": {
            "requester_id": state.pending_favor.requester_id,
            "target_id": state.pending_favor.target_id
        } if state.pending_favor else None,
        "total_cards": state.total_cards,
        "elimination_order": list(state.elimination_order),
        "game_log": list(state.game_log)
    }


def dumps(payload: Dict[str, Any]) -> bytes:
    """Encode a snapshot (or any engine payload) for transmission."""
    return orjson.dumps(payload)
