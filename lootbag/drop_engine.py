import math
from typing import TYPE_CHECKING, Any, NamedTuple, Optional, Sequence

from lootbag.errors import EmptyPool, InternalInvariantViolation
from lootbag.rng import RandomSource
from lootbag.rules import DEFAULT_LUCK, DEFAULT_RETRIES, MIN_LUCK, MIN_TARGET, WEIGHT_SCALE

if TYPE_CHECKING:
    from lootbag.pool import Entry, WeightedPool


class SampleResult(NamedTuple):
    item: Any
    weight: float
    index: int


def clamp_luck(luck: Optional[float]) -> float:
    if luck is None:
        return DEFAULT_LUCK
    return max(MIN_LUCK, luck)


def clamp_retries(retries: Optional[int]) -> int:
    if retries is None:
        return DEFAULT_RETRIES
    return max(1, int(retries))


def roll_target(total: int, factor: float, luck: float, rng: RandomSource) -> float:
    """
    Biased target inside (0, total].

    The exponent factor / luck shrinks as luck grows, pulling the target
    toward small values, which resolve to rare entries in find_band.
    luck == factor gives a plain weight-proportional roll.
    """
    u = rng.random()
    return max(MIN_TARGET, total - math.floor(total * u ** (factor / luck)))


def find_band(entries: Sequence["Entry"], target: float) -> int:
    """Index of the entry whose cumulative band, counted from the rare end, holds target."""
    upper_bound = 0
    for index in range(len(entries) - 1, -1, -1):
        upper_bound += entries[index].units
        if target <= upper_bound:
            return index

    raise InternalInvariantViolation(
        f"Target {target} exceeds cumulative weight {upper_bound}"
    )


def draw(
    pool: "WeightedPool",
    luck: Optional[float] = None,
    retries: Optional[int] = None,
    rng: Optional[RandomSource] = None,
) -> SampleResult:
    """
    Roll the pool ``retries`` times and keep the rarest hit.

    The first attempt seeds the best candidate; later attempts replace it
    only with a strictly lower weight, so ties favour the earlier roll.
    """
    luck = clamp_luck(luck)
    retries = clamp_retries(retries)
    rng = rng if rng is not None else pool.rng

    entries = pool.entries
    total = pool.total_units
    if total <= 0 or not entries:
        raise EmptyPool()

    best = None
    for _ in range(retries):
        target = roll_target(total, pool.luck_factor, luck, rng)
        index = find_band(entries, target)
        if best is None or entries[index].units < entries[best].units:
            best = index

    loot = entries[best]
    return SampleResult(loot.item, loot.units / WEIGHT_SCALE, best)
