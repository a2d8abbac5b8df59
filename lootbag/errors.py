class LootbagError(Exception):
    """Base class for every error raised by the loot engine."""


class InvalidWeight(LootbagError, ValueError):
    def __init__(self, weight):
        super().__init__(f"Weight must be a positive, finite number within range, got {weight!r}")
        self.weight = weight


class EmptyPool(LootbagError, ValueError):
    def __init__(self, message: str = "Loot pool is empty"):
        super().__init__(message)


class InternalInvariantViolation(LootbagError, RuntimeError):
    """A draw target fell outside every cumulative band."""
