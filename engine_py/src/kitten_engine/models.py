"""Game models and data structures"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from .rules import GameOptions


class CardType(str, Enum):
    DEFUSE = "DEFUSE"
    BOMB = "BOMB"
    SKIP = "SKIP"
    ATTACK = "ATTACK"
    TARGETED_ATTACK = "TARGETED_ATTACK"
    SEE_FUTURE = "SEE_FUTURE"
    ALTER_FUTURE = "ALTER_FUTURE"
    FAVOR = "FAVOR"
    SHUFFLE = "SHUFFLE"
    NOPE = "NOPE"
    DRAW_BOTTOM = "DRAW_BOTTOM"
    REVERSE = "REVERSE"
    SALVAGE = "SALVAGE"
    IMPLODING = "IMPLODING"
    NORMAL = "NORMAL"


class CatName(str, Enum):
    BOSS_KITTEN = "BOSS_KITTEN"
    SLIPPER_KITTEN = "SLIPPER_KITTEN"
    BUG_KITTEN = "BUG_KITTEN"
    NEZHA_KITTEN = "NEZHA_KITTEN"
    LIGHTNING_KITTEN = "LIGHTNING_KITTEN"
    POTATO_KITTEN = "POTATO_KITTEN"  # expansion only


class DrawSource(str, Enum):
    TOP = "top"
    BOTTOM = "bottom"


@dataclass
class Card:
    id: str
    type: CardType
    name: Optional[CatName] = None  # only for NORMAL cards
    exposed: bool = False  # imploding only, flips on first draw

    def matches(self, card_type: CardType, name: Optional[CatName] = None) -> bool:
        if self.type != card_type:
            return False
        return name is None or self.name == name


@dataclass
class Player:
    id: str
    name: str
    seat: int
    hand: List[Card] = field(default_factory=list)
    alive: bool = True
    remaining_turns: int = 1  # turns still owed before play passes on
    draw_source: DrawSource = DrawSource.TOP

    def find_card(self, card_id: str) -> Optional[Card]:
        return next((c for c in self.hand if c.id == card_id), None)

    def find_type(self, card_type: CardType) -> Optional[Card]:
        return next((c for c in self.hand if c.type == card_type), None)


@dataclass
class CounterPlay:
    player_id: str
    card_id: str
    timestamp: float


@dataclass
class PendingAction:
    action_id: str
    player_id: str
    card_type: CardType
    card_id: str
    params: Any  # one of the params.py models
    counters: List[CounterPlay] = field(default_factory=list)

    @property
    def will_cancel(self) -> bool:
        return len(self.counters) % 2 == 1


@dataclass
class PendingFavor:
    requester_id: str
    target_id: str


@dataclass
class GameState:
    id: str
    options: GameOptions
    players: List[Player] = field(default_factory=list)  # seat order
    draw_pile: List[Card] = field(default_factory=list)  # index 0 is the top
    discard_pile: List[Card] = field(default_factory=list)  # last element is the top
    direction: int = 1
    current_player_index: int = 0
    started: bool = False
    finished: bool = False
    winner_id: Optional[str] = None
    pending_action: Optional[PendingAction] = None
    pending_favor: Optional[PendingFavor] = None
    halted: bool = False
    total_cards: int = 0
    elimination_order: List[str] = field(default_factory=list)
    game_log: List[str] = field(default_factory=list)
    action_counter: int = 0
    card_counter: int = 0

    def get_player(self, player_id: Optional[str]) -> Optional[Player]:
        return next((p for p in self.players if p.id == player_id), None)

    def alive_players(self) -> List[Player]:
        return [p for p in self.players if p.alive]

    @property
    def current_player(self) -> Optional[Player]:
        if not self.players:
            return None
        return self.players[self.current_player_index]

    def card_count(self) -> int:
        """Cards in hands, draw pile and discard pile."""
        in_hands = sum(len(p.hand) for p in self.players)
        return in_hands + len(self.draw_pile) + len(self.discard_pile)

    def next_card_id(self) -> str:
        self.card_counter += 1
        return f"c_{self.card_counter}"

    def next_action_id(self) -> str:
        self.action_counter += 1
        return f"a_{self.action_counter}"

    def log(self, message: str):
        self.game_log.append(message)


class ActionResult:
    """Outcome of an engine call."""

    def __init__(
        self,
        success: bool,
        message: str = "",
        code: Optional[str] = None,
        effect: Optional[Dict[str, Any]] = None,
        pending: bool = False
    ):
        self.success = success
        self.message = message
        self.code = code
        self.effect = effect
        self.pending = pending

    @classmethod
    def ok(cls, message: str = "OK", effect: Optional[Dict[str, Any]] = None, pending: bool = False) -> 'ActionResult':
        """Create a successful result."""
        return cls(success=True, message=message, effect=effect, pending=pending)

    @classmethod
    def fail(cls, code: str, message: str) -> 'ActionResult':
        """Create a failed result (nothing was mutated)."""
        return cls(success=False, message=message, code=code)

    @property
    def effect_type(self) -> Optional[str]:
        return self.effect.get("type") if self.effect else None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": self.success,
            "message": self.message,
            "code": self.code,
            "effect": self.effect,
            "pending": self.pending
        }

    def __repr__(self):
        return f"ActionResult(success={self.success}, code={self.code}, effect={self.effect_type})"
