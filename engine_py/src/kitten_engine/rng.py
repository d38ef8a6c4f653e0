"""
Seeded random stream shared by everything in one game.
"""

import math
import random
import uuid
from typing import List, Optional, Sequence, TypeVar

T = TypeVar("T")


class SeededRandom:
    """
    Reproducible stream of floats in [0, 1).

    Every random decision of a game (shuffles, random targets, insertion
    positions, random card picks) is derived from ``random()`` in call
    order, so two streams built from the same seed replay identically.
    """

    def __init__(self, seed: Optional[str] = None):
        self.seed = seed if seed is not None else uuid.uuid4().hex
        self._random = random.Random(self.seed)

    def random(self) -> float:
        return self._random.random()

    def randindex(self, n: int) -> int:
        """Uniform index in range(n)."""
        if n <= 0:
            raise ValueError(f"randindex needs a positive bound, got {n}")
        return math.floor(self.random() * n)

    def choice(self, seq: Sequence[T]) -> T:
        return seq[self.randindex(len(seq))]

    def insert_position(self, length: int) -> int:
        """Uniform insertion slot for a list of ``length`` items (0..length)."""
        return self.randindex(length + 1)

    def shuffle(self, items: List[T]) -> List[T]:
        """Fisher-Yates shuffle in place."""
        for i in range(len(items) - 1, 0, -1):
            j = self.randindex(i + 1)
            items[i], items[j] = items[j], items[i]
        return items
