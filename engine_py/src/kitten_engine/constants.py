"""Game constants"""

from .models import CardType, CatName

HAND_SIZE = 5
SEE_FUTURE_COUNT = 3
MIN_PLAYERS = 2

BASE_ACTION_COUNTS = {
    CardType.SKIP: 4,
    CardType.ATTACK: 4,
    CardType.SEE_FUTURE: 5,
    CardType.FAVOR: 4,
    CardType.SHUFFLE: 4,
    CardType.NOPE: 5,
}

EXPANSION_ACTION_COUNTS = {
    CardType.DRAW_BOTTOM: 4,
    CardType.REVERSE: 4,
    CardType.TARGETED_ATTACK: 4,
    CardType.ALTER_FUTURE: 5,
    CardType.SALVAGE: 5,
}

BASE_CATS = [
    CatName.BOSS_KITTEN,
    CatName.SLIPPER_KITTEN,
    CatName.BUG_KITTEN,
    CatName.NEZHA_KITTEN,
    CatName.LIGHTNING_KITTEN,
]
EXPANSION_CATS = [CatName.POTATO_KITTEN]
CAT_BASE_COUNT = 4

# Cards whose play opens a counterable window
REACTIVE_TYPES = frozenset({
    CardType.SKIP,
    CardType.ATTACK,
    CardType.TARGETED_ATTACK,
    CardType.FAVOR,
    CardType.SHUFFLE,
    CardType.REVERSE,
    CardType.SEE_FUTURE,
    CardType.ALTER_FUTURE,
})

# Cards that never leave a hand through play_card
UNPLAYABLE_TYPES = frozenset({CardType.DEFUSE, CardType.BOMB, CardType.IMPLODING})

# Cards a favor target hands over last
FAVOR_PROTECTED_TYPES = frozenset({CardType.DEFUSE, CardType.BOMB, CardType.IMPLODING})

# Combo kinds
COMBO_TWO = "TWO"
COMBO_THREE = "THREE"
COMBO_FOUR = "FOUR"
COMBO_FIVE_DISTINCT = "FIVE_DISTINCT"

# Effect tags
EFFECT_DREW = "DREW"
EFFECT_DEFUSED = "DEFUSED"
EFFECT_EXPLODED = "EXPLODED"
EFFECT_IMPLODING_EXPOSED = "IMPLODING_EXPOSED"
EFFECT_IMPLODED = "IMPLODED"
EFFECT_DECK_EMPTY = "DECK_EMPTY"
EFFECT_SKIP = "SKIP"
EFFECT_ATTACK = "ATTACK"
EFFECT_REVERSE = "REVERSE"
EFFECT_SHUFFLE = "SHUFFLE"
EFFECT_SEE_FUTURE = "SEE_FUTURE"
EFFECT_ALTER_FUTURE = "ALTER_FUTURE"
EFFECT_ALTER_MISMATCH = "ALTER_MISMATCH"
EFFECT_FAVOR_REQUESTED = "FAVOR_REQUESTED"
EFFECT_FAVOR_GIVEN = "FAVOR_GIVEN"
EFFECT_FAVOR_NOTHING_MOVED = "FAVOR_NOTHING_MOVED"
EFFECT_DRAW_BOTTOM = "DRAW_BOTTOM"
EFFECT_SALVAGE = "SALVAGE"
EFFECT_SALVAGE_REBURIED = "SALVAGE_REBURIED"
EFFECT_NOTHING_TO_SALVAGE = "NOTHING_TO_SALVAGE"
EFFECT_NO_EFFECT = "NO_EFFECT"
EFFECT_COUNTERED = "COUNTERED"
EFFECT_CANCELED = "CANCELED"
EFFECT_ORIGINATOR_GONE = "ORIGINATOR_GONE"
EFFECT_STEAL_RANDOM = "STEAL_RANDOM"
EFFECT_STEAL_DECLARED = "STEAL_DECLARED"
EFFECT_MISS_DECLARED = "MISS_DECLARED"
EFFECT_FORCE_DISCARD = "FORCE_DISCARD"
EFFECT_RETRIEVE = "RETRIEVE"
EFFECT_RETRIEVE_MISS = "RETRIEVE_MISS"
EFFECT_NO_TARGET = "NO_TARGET"
