"""
Deck construction and dealing utilities.
"""

import logging
from typing import List

from .constants import (
    BASE_ACTION_COUNTS, BASE_CATS, CAT_BASE_COUNT, EXPANSION_ACTION_COUNTS,
    EXPANSION_CATS, HAND_SIZE
)
from .errors import InvariantViolation
from .models import Card, CardType, GameState, Player
from .rng import SeededRandom
from .rules import extra_copies

logger = logging.getLogger(__name__)


def build_initial_pool(
    state: GameState,
    player_count: int,
    expansion_enabled: bool,
    imploding_enabled: bool,
    rng: SeededRandom
) -> List[Card]:
    """
    Build the shuffled pool cards are dealt from.

    Bombs and defuses are never part of the pool; they are added after
    dealing by ``finish_deck``.

    Args:
        state: Game whose card id counter names the new cards
        player_count: Number of players the deck must support
        expansion_enabled: Include expansion action cards and cat
        imploding_enabled: Include the single imploding card
        rng: The game's random stream

    Returns:
        Shuffled list of cards
    """
    extra = extra_copies(player_count, expansion_enabled)
    pool = []

    def add_copies(card_type: CardType, count: int, name=None):
        for _ in range(count + extra):
            pool.append(Card(id=state.next_card_id(), type=card_type, name=name))

    for card_type, count in BASE_ACTION_COUNTS.items():
        add_copies(card_type, count)
    for name in BASE_CATS:
        add_copies(CardType.NORMAL, CAT_BASE_COUNT, name)

    if expansion_enabled:
        for card_type, count in EXPANSION_ACTION_COUNTS.items():
            add_copies(card_type, count)
        for name in EXPANSION_CATS:
            add_copies(CardType.NORMAL, CAT_BASE_COUNT, name)

    if imploding_enabled:
        pool.append(Card(id=state.next_card_id(), type=CardType.IMPLODING))

    rng.shuffle(pool)
    logger.debug(f"Built pool of {len(pool)} cards for {player_count} players (extra={extra})")
    return pool


def deal_hands(state: GameState, players: List[Player], pool: List[Card], hand_size: int = HAND_SIZE) -> List[Card]:
    """
    Deal ``hand_size`` cards from the front of the pool to each player, plus
    one fresh defuse.

    Returns:
        The remaining pool
    """
    remaining = list(pool)
    for player in players:
        if len(remaining) < hand_size:
            raise InvariantViolation(
                f"Pool exhausted while dealing to {player.id}: {len(remaining)} cards left"
            )
        player.hand.extend(remaining[:hand_size])
        remaining = remaining[hand_size:]
        player.hand.append(Card(id=state.next_card_id(), type=CardType.DEFUSE))
    return remaining


def finish_deck(state: GameState, player_count: int, remaining_pool: List[Card], rng: SeededRandom) -> List[Card]:
    """
    Turn the leftover pool into the draw pile by inserting bombs and the
    leftover defuses, each at an independently drawn position.
    """
    pile = list(remaining_pool)

    for _ in range(player_count - 1):
        pile.insert(rng.insert_position(len(pile)), Card(id=state.next_card_id(), type=CardType.BOMB))

    # One defuse per player was dealt; the deck holds player_count + 2 in total
    leftover_defuses = (player_count + 2) - player_count
    for _ in range(leftover_defuses):
        pile.insert(rng.insert_position(len(pile)), Card(id=state.next_card_id(), type=CardType.DEFUSE))

    return pile


def count_cards(cards: List[Card], card_type: CardType) -> int:
    """Count cards of one type."""
    return sum(1 for c in cards if c.type == card_type)


def all_cards(state: GameState) -> List[Card]:
    """Every card of the game, wherever it is."""
    cards = []
    for player in state.players:
        cards.extend(player.hand)
    cards.extend(state.draw_pile)
    cards.extend(state.discard_pile)
    return cards


def validate_deck_integrity(state: GameState) -> bool:
    """
    Validate that all cards are accounted for and no duplicates exist.

    Args:
        state: Game state to validate

    Returns:
        True if the card total matches the deal and every id is unique
    """
    cards = all_cards(state)
    ids = {c.id for c in cards}
    return len(cards) == len(ids) and len(cards) == state.total_cards
