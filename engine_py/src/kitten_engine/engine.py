"""Main game engine: lifecycle, turn actions and state views"""

import functools
import logging
import time
import uuid
from typing import Any, Callable, Dict, List, Optional

from .combos import detect_combo, resolve_combo
from .constants import (
    COMBO_THREE, EFFECT_COUNTERED, EFFECT_DECK_EMPTY, EFFECT_DEFUSED, EFFECT_DREW,
    EFFECT_EXPLODED, EFFECT_IMPLODED, EFFECT_IMPLODING_EXPOSED, MIN_PLAYERS, REACTIVE_TYPES,
    UNPLAYABLE_TYPES
)
from .effects import apply_draw_bottom, apply_no_effect, apply_salvage
from .errors import (
    ALREADY_STARTED, CARD_NOT_IN_HAND, CARD_NOT_PLAYABLE, DUPLICATE_PLAYER,
    EFFECT_PENDING, FAVOR_PENDING, GAME_FINISHED, GAME_HALTED, INVALID_COMBO,
    INVALID_PARAMS, INVALID_SEAT, InvariantViolation, NO_COUNTER_CARD,
    NO_PENDING_ACTION, NO_PENDING_FAVOR, NOT_ENOUGH_PLAYERS, NOT_FAVOR_TARGET,
    NOT_STARTED, NOT_YOUR_TURN, PLAYER_ELIMINATED, PLAYER_NOT_FOUND, ROOM_FULL
)
from .favor import transfer_favor_card
from .models import ActionResult, Card, CardType, DrawSource, GameState, Player
from .params import parse_combo_params, parse_play_params
from .resolution import add_counter, open_pending_action, resolve_pending
from .rng import SeededRandom
from .rules import GameOptions, default_options
from .serialization import build_debug_state, build_snapshot, card_to_dict
from .shuffle import build_initial_pool, deal_hands, finish_deck, validate_deck_integrity
from .turns import advance_turn, check_victory, eliminate_player

logger = logging.getLogger(__name__)


def mutating(method: Callable) -> Callable:
    """
    Guard a state transition: refuse to run on a halted game, and halt the
    game when the transition hits an invariant violation.
    """
    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        if self.state.halted:
            return ActionResult.fail(GAME_HALTED, "Game halted after an internal error")
        try:
            result = method(self, *args, **kwargs)
            if result.success and self.state.started:
                self._check_conservation()
            return result
        except InvariantViolation as e:
            self.state.halted = True
            logger.error(f"Game {self.state.id} halted: {e.message}")
            raise
    return wrapper


class GameEngine:
    """
    One game instance.

    Calls are synchronous and must be serialized per instance by the caller;
    separate instances share nothing.
    """

    def __init__(
        self,
        options: Optional[GameOptions] = None,
        game_id: Optional[str] = None,
        clock: Callable[[], float] = time.time
    ):
        options = options or default_options
        self.rng = SeededRandom(options.seed)
        self.clock = clock
        self.state = GameState(id=game_id or str(uuid.uuid4())[:8], options=options)

    @property
    def options(self) -> GameOptions:
        return self.state.options

    @property
    def current_player(self) -> Optional[Player]:
        return self.state.current_player if self.state.started else None

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @mutating
    def add_player(self, player_id: str, name: str) -> ActionResult:
        state = self.state
        if state.started:
            return ActionResult.fail(ALREADY_STARTED, "Game already started")
        if state.get_player(player_id):
            return ActionResult.fail(DUPLICATE_PLAYER, f"Player {player_id} already joined")
        if len(state.players) >= state.options.player_count:
            return ActionResult.fail(ROOM_FULL, "Game is full")

        state.players.append(Player(id=player_id, name=name, seat=len(state.players)))
        state.log(f"{name} joined")
        logger.info(f"Game {state.id}: {player_id} joined seat {len(state.players) - 1}")
        return ActionResult.ok("Player added")

    @mutating
    def move_seat(self, player_id: str, to_seat: int) -> ActionResult:
        """Move a player to another seat before the game starts."""
        state = self.state
        if state.started:
            return ActionResult.fail(ALREADY_STARTED, "Seats are fixed once the game starts")
        player = state.get_player(player_id)
        if not player:
            return ActionResult.fail(PLAYER_NOT_FOUND, "Player not found")
        if not 0 <= to_seat < len(state.players):
            return ActionResult.fail(INVALID_SEAT, f"Seat {to_seat} does not exist")

        state.players.remove(player)
        state.players.insert(to_seat, player)
        for seat, p in enumerate(state.players):
            p.seat = seat
        state.log(f"{player.name} moved to seat {to_seat}")
        return ActionResult.ok("Seat changed")

    @mutating
    def start(self) -> ActionResult:
        state = self.state
        if state.started:
            return ActionResult.fail(ALREADY_STARTED, "Game already started")
        if len(state.players) < MIN_PLAYERS:
            return ActionResult.fail(NOT_ENOUGH_PLAYERS, f"Need at least {MIN_PLAYERS} players")

        # Lock the configured count to the players actually seated
        player_count = len(state.players)
        state.options = state.options.locked_to(player_count)

        pool = build_initial_pool(
            state,
            player_count,
            state.options.expansion_enabled,
            state.options.imploding_enabled,
            self.rng
        )
        remaining = deal_hands(state, state.players, pool)
        state.draw_pile = finish_deck(state, player_count, remaining, self.rng)
        state.total_cards = state.card_count()

        for player in state.players:
            player.remaining_turns = 1
            player.alive = True
        state.current_player_index = 0
        state.started = True
        state.log(f"Game started with {player_count} players, {state.players[0].name} goes first")
        logger.info(f"Game {state.id} started: {player_count} players, {len(state.draw_pile)} cards in the deck")
        return ActionResult.ok("Game started")

    # ------------------------------------------------------------------
    # Turn actions
    # ------------------------------------------------------------------

    def _check_in_play(self) -> Optional[ActionResult]:
        if not self.state.started:
            return ActionResult.fail(NOT_STARTED, "Game not started")
        if self.state.finished:
            return ActionResult.fail(GAME_FINISHED, "Game finished")
        return None

    def _check_turn(self, player_id: str) -> Optional[ActionResult]:
        error = self._check_in_play()
        if error:
            return error
        player = self.state.get_player(player_id)
        if not player:
            return ActionResult.fail(PLAYER_NOT_FOUND, "Player not found")
        if not player.alive:
            return ActionResult.fail(PLAYER_ELIMINATED, "Player is out of the game")
        if self.state.current_player.id != player_id:
            return ActionResult.fail(NOT_YOUR_TURN, "Not your turn")
        return None

    def _check_no_pending(self) -> Optional[ActionResult]:
        if self.state.pending_action:
            return ActionResult.fail(EFFECT_PENDING, "Pending action exists")
        if self.state.pending_favor:
            return ActionResult.fail(FAVOR_PENDING, "Waiting for a favor card")
        return None

    @mutating
    def play_card(self, player_id: str, card_id: str, params: Optional[Dict[str, Any]] = None) -> ActionResult:
        """
        Play a single card.

        Reactive cards open a pending action (``result.pending``) that only
        takes effect through ``force_resolve``; the rest apply at once.
        """
        error = self._check_turn(player_id)
        if error:
            return error
        state = self.state
        player = state.get_player(player_id)
        card = player.find_card(card_id)
        if not card:
            return ActionResult.fail(CARD_NOT_IN_HAND, f"You don't own {card_id}")
        if card.type == CardType.NOPE:
            return ActionResult.fail(CARD_NOT_PLAYABLE, "Nope can only be played against a pending action")
        if card.type in UNPLAYABLE_TYPES:
            return ActionResult.fail(CARD_NOT_PLAYABLE, f"{card.type.value} cannot be played directly")
        error = self._check_no_pending()
        if error:
            return error
        try:
            parsed = parse_play_params(card.type, params)
        except ValueError as e:
            return ActionResult.fail(INVALID_PARAMS, str(e))

        player.hand.remove(card)
        state.discard_pile.append(card)

        if card.type in REACTIVE_TYPES:
            pending = open_pending_action(state, player, card, parsed)
            return ActionResult.ok(
                "Action pending",
                effect={"type": "PENDING", "action_id": pending.action_id, "card_type": card.type.value},
                pending=True
            )
        if card.type == CardType.DRAW_BOTTOM:
            return ActionResult.ok("Card played", effect=apply_draw_bottom(state, player))
        if card.type == CardType.SALVAGE:
            return ActionResult.ok("Card played", effect=apply_salvage(state, self.rng, player, card))
        return ActionResult.ok("Card played", effect=apply_no_effect(state, player, card))

    @mutating
    def counter_play(self, player_id: str, card_id: Optional[str] = None) -> ActionResult:
        """Stack a nope card on the pending action."""
        error = self._check_in_play()
        if error:
            return error
        state = self.state
        if not state.pending_action:
            return ActionResult.fail(NO_PENDING_ACTION, "Nothing to counter")
        player = state.get_player(player_id)
        if not player:
            return ActionResult.fail(PLAYER_NOT_FOUND, "Player not found")
        if not player.alive:
            return ActionResult.fail(PLAYER_ELIMINATED, "Player is out of the game")

        if card_id:
            nope = player.find_card(card_id)
            if nope is None or nope.type != CardType.NOPE:
                return ActionResult.fail(NO_COUNTER_CARD, f"{card_id} is not a nope card in your hand")
        else:
            nope = player.find_type(CardType.NOPE)
            if nope is None:
                return ActionResult.fail(NO_COUNTER_CARD, "You have no nope card")

        entry = add_counter(state, player, nope, self.clock())
        return ActionResult.ok(
            "Countered",
            effect={
                "type": EFFECT_COUNTERED,
                "action_id": state.pending_action.action_id,
                "counter_count": len(state.pending_action.counters),
                "card_id": entry.card_id
            }
        )

    @mutating
    def force_resolve(self) -> ActionResult:
        """Resolve the pending action now. When to call this is the caller's decision."""
        error = self._check_in_play()
        if error:
            return error
        if not self.state.pending_action:
            return ActionResult.fail(NO_PENDING_ACTION, "No pending action")
        outcome = resolve_pending(self.state, self.rng)
        logger.debug(f"Game {self.state.id}: resolved {outcome['action_id']} canceled={outcome['canceled']}")
        return ActionResult.ok("Canceled" if outcome["canceled"] else "Resolved", effect=outcome)

    @mutating
    def play_combo(self, player_id: str, card_ids: List[str], params: Optional[Dict[str, Any]] = None) -> ActionResult:
        """Play 2-5 cat cards together. Combos cannot be countered."""
        error = self._check_turn(player_id)
        if error:
            return error
        error = self._check_no_pending()
        if error:
            return error
        state = self.state
        player = state.get_player(player_id)

        if len(set(card_ids)) != len(card_ids):
            return ActionResult.fail(INVALID_COMBO, "A card can only be used once in a combo")
        cards = []
        for card_id in card_ids:
            card = player.find_card(card_id)
            if not card:
                return ActionResult.fail(CARD_NOT_IN_HAND, f"You don't own {card_id}")
            cards.append(card)

        kind = detect_combo(cards)
        if not kind:
            return ActionResult.fail(INVALID_COMBO, "Invalid combo structure")
        try:
            parsed = parse_combo_params(kind, params)
        except ValueError as e:
            return ActionResult.fail(INVALID_PARAMS, str(e))
        if kind == COMBO_THREE:
            target = state.get_player(parsed.target_id)
            if not target or not target.alive or target.id == player_id:
                return ActionResult.fail(INVALID_PARAMS, "Invalid combo target")

        effect = resolve_combo(state, self.rng, player, cards, kind, parsed)
        return ActionResult.ok("Combo played", effect={"combo": kind, **effect})

    @mutating
    def draw(self, player_id: str) -> ActionResult:
        """Draw the card that ends (one of) the player's turns."""
        error = self._check_turn(player_id)
        if error:
            return error
        error = self._check_no_pending()
        if error:
            return error
        state = self.state
        player = state.get_player(player_id)

        if not state.draw_pile:
            check_victory(state)
            state.log("The deck is empty")
            return ActionResult.ok("Deck empty", effect={"type": EFFECT_DECK_EMPTY})

        from_bottom = player.draw_source == DrawSource.BOTTOM
        player.draw_source = DrawSource.TOP
        card = state.draw_pile.pop() if from_bottom else state.draw_pile.pop(0)
        logger.debug(f"Game {state.id}: {player_id} draws {card.type.value} from the {'bottom' if from_bottom else 'top'}")

        if card.type == CardType.BOMB:
            defuse = player.find_type(CardType.DEFUSE)
            if defuse is None:
                eliminate_player(state, player, card)
                return ActionResult.ok("Exploded", effect={"type": EFFECT_EXPLODED, "card": card_to_dict(card)})
            player.hand.remove(defuse)
            state.discard_pile.append(defuse)
            state.draw_pile.insert(self.rng.insert_position(len(state.draw_pile)), card)
            state.log(f"{player.name} defused a bomb")
            effect = {"type": EFFECT_DEFUSED, "card": card_to_dict(card), "defuse_id": defuse.id}
        elif card.type == CardType.IMPLODING:
            if card.exposed:
                eliminate_player(state, player, card)
                return ActionResult.ok("Imploded", effect={"type": EFFECT_IMPLODED, "card": card_to_dict(card)})
            card.exposed = True
            state.draw_pile.insert(self.rng.insert_position(len(state.draw_pile)), card)
            state.log(f"{player.name} exposed the imploding card")
            effect = {"type": EFFECT_IMPLODING_EXPOSED, "card": card_to_dict(card)}
        else:
            player.hand.append(card)
            state.log(f"{player.name} drew a card")
            effect = {"type": EFFECT_DREW, "card": card_to_dict(card)}

        player.remaining_turns -= 1
        if player.remaining_turns <= 0:
            # Baseline for the player's next turn
            player.remaining_turns = 1
            advance_turn(state)
        return ActionResult.ok("Card drawn", effect=effect)

    @mutating
    def provide_favor_card(self, target_id: str, card_id: Optional[str] = None) -> ActionResult:
        """The favor target hands over a card (chosen automatically if not given)."""
        error = self._check_in_play()
        if error:
            return error
        pending = self.state.pending_favor
        if not pending:
            return ActionResult.fail(NO_PENDING_FAVOR, "No favor pending")
        if pending.target_id != target_id:
            return ActionResult.fail(NOT_FAVOR_TARGET, "Not your favor to give")
        effect = transfer_favor_card(self.state, self.rng, card_id)
        return ActionResult.ok("Favor resolved", effect=effect)

    def auto_resolve_favor(self) -> ActionResult:
        """Timeout fallback: the target gives an automatically chosen card."""
        pending = self.state.pending_favor
        if not pending:
            return ActionResult.fail(NO_PENDING_FAVOR, "No favor pending")
        return self.provide_favor_card(pending.target_id)

    @mutating
    def advance_turn(self) -> ActionResult:
        """Pass the turn to the next alive player without drawing."""
        error = self._check_in_play()
        if error:
            return error
        error = self._check_no_pending()
        if error:
            return error
        advance_turn(self.state)
        return ActionResult.ok("Turn advanced")

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------

    def get_state_snapshot(self) -> Dict[str, Any]:
        return build_snapshot(self.state)

    def get_debug_state(self) -> Dict[str, Any]:
        """Complete internal state for verification only."""
        return build_debug_state(self.state, self.rng.seed)

    def _check_conservation(self):
        if not validate_deck_integrity(self.state):
            raise InvariantViolation(
                f"Card accounting broken: {self.state.card_count()} cards held, {self.state.total_cards} dealt"
            )

    # ------------------------------------------------------------------
    # Test helpers (not for gameplay)
    # ------------------------------------------------------------------

    def debug_give_card(self, player_id: str, card_type: CardType, name=None) -> Card:
        """Create a card in a player's hand, keeping the card total consistent."""
        card = Card(id=self.state.next_card_id(), type=card_type, name=name)
        self.state.get_player(player_id).hand.append(card)
        self.state.total_cards += 1
        return card

    def debug_put_on_top(self, card_type: CardType, name=None) -> Card:
        """Create a card on top of the draw pile, keeping the card total consistent."""
        card = Card(id=self.state.next_card_id(), type=card_type, name=name)
        self.state.draw_pile.insert(0, card)
        self.state.total_cards += 1
        return card


def create_game(options: Optional[GameOptions] = None, **kwargs) -> GameEngine:
    """Create a game engine."""
    return GameEngine(options, **kwargs)
