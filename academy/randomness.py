"""
Seedable source of uniform randomness.

Every probabilistic formula in the simulation draws from one injected
RandomValueProvider, so a fixed seed replays a whole game.
"""

import random
from typing import Sequence, TypeVar

T = TypeVar("T")


class RandomValueProvider:
    """Thin wrapper over a private random.Random instance."""

    def __init__(self, seed: int | None = None):
        self.seed = seed
        self._rng = random.Random(seed)

    def random(self) -> float:
        """Uniform float in [0, 1)."""
        return self._rng.random()

    def uniform(self, low: float, high: float) -> float:
        """Uniform float in [low, high). Built from random() so scripted providers stay in control."""
        return low + self.random() * (high - low)

    def randint(self, low: int, high: int) -> int:
        """Uniform integer in [low, high], both inclusive."""
        return low + int(self.random() * (high - low + 1))

    def choice(self, seq: Sequence[T]) -> T:
        if not seq:
            raise IndexError("Cannot choose from an empty sequence")
        return seq[int(self.random() * len(seq))]

    def reseed(self, seed: int | None) -> None:
        self.seed = seed
        self._rng = random.Random(seed)
