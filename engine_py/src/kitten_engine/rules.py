"""
Game option configuration and validation.
"""

from typing import Optional

from pydantic import BaseModel, Field, field_validator

BASE_ONLY_THRESHOLD = 5
BASE_PLUS_EXPANSION_THRESHOLD = 8


class GameOptions(BaseModel):
    """Configuration supplied when a game is constructed."""

    player_count: int = Field(
        default=5,
        ge=2,
        le=10,
        description="Seats available; locks to the joined count at start"
    )
    expansion_enabled: bool = Field(
        default=False,
        description="Whether the expansion action cards and cat are in the pool"
    )
    imploding_enabled: bool = Field(
        default=False,
        description="Whether a single imploding card is added to the pool"
    )
    seed: Optional[str] = Field(
        default=None,
        max_length=128,
        description="Seed for the game's random stream (random label if omitted)"
    )

    model_config = {"frozen": True}

    @field_validator('seed')
    @classmethod
    def normalize_seed(cls, v):
        """Blank seeds mean no seed."""
        if v is not None and not v.strip():
            return None
        return v

    def locked_to(self, player_count: int) -> 'GameOptions':
        """Copy of these options with the player count fixed."""
        return self.model_copy(update={"player_count": player_count})


def extra_copies(player_count: int, expansion_enabled: bool) -> int:
    """Copies added to every scalable card for players over the deck threshold."""
    threshold = BASE_PLUS_EXPANSION_THRESHOLD if expansion_enabled else BASE_ONLY_THRESHOLD
    return max(0, player_count - threshold)


# Default configuration instance
default_options = GameOptions()


def create_options(**overrides) -> GameOptions:
    """Create GameOptions with optional overrides."""
    config_dict = default_options.model_dump()
    config_dict.update(overrides)
    return GameOptions(**config_dict)
