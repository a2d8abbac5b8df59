"""
Lootbag: weighted loot tables with a retry-based luck bias.

    pool = WeightedPool()
    pool.insert("sword", 50)
    pool.insert("crown", 1)
    item, weight, index = pool.draw(luck=2, retries=3)
"""

from lootbag.drop_engine import SampleResult, draw
from lootbag.errors import EmptyPool, InternalInvariantViolation, InvalidWeight, LootbagError
from lootbag.pool import Entry, WeightedPool
from lootbag.rng import RandomSource, get_rng
from lootbag.services.loot_service import DrawTally, ItemCount, SampleRow, draw_many, sample

__version__ = "1.0.0"

__all__ = [
    "DrawTally",
    "EmptyPool",
    "Entry",
    "InternalInvariantViolation",
    "InvalidWeight",
    "ItemCount",
    "LootbagError",
    "RandomSource",
    "SampleResult",
    "SampleRow",
    "WeightedPool",
    "draw",
    "draw_many",
    "get_rng",
    "sample",
]
