import random
from typing import Optional, Protocol


class RandomSource(Protocol):
    def random(self) -> float:
        """Return a float uniformly distributed in [0, 1)."""
        ...


def get_rng(seed: Optional[int] = None) -> random.Random:
    """
    Same seed always produces the same draw order.
    No seed gives a fresh, OS-seeded generator.
    """
    if seed is None:
        return random.Random()
    return random.Random(seed)
