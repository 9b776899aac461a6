"""Random number generation utilities for the Q-learning trainer."""

import random
from typing import Optional


class SeededRNG:
    """Seeded random number generator for reproducible results.

    Each instance owns its own generator, so two agents seeded alike make
    identical decisions regardless of what else draws random numbers.
    """

    def __init__(self, seed: Optional[int] = None):
        self.seed = seed
        self._random = random.Random(seed)

    def random(self) -> float:
        """Generate random float in [0, 1)."""
        return self._random.random()

    def randint(self, a: int, b: int) -> int:
        """Generate random integer in [a, b]."""
        return self._random.randint(a, b)

    def choice(self, seq):
        """Choose random element from sequence."""
        return self._random.choice(seq)

    def sample(self, population, k: int):
        """Sample k elements from population without replacement."""
        return self._random.sample(population, k)

    def shuffle(self, seq):
        """Shuffle sequence in place."""
        self._random.shuffle(seq)


# Default RNG instance
default_rng = SeededRNG()
