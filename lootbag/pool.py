import logging
import math
from dataclasses import dataclass
from numbers import Real
from typing import TYPE_CHECKING, Any, Callable, Iterator, List, Optional, Tuple

from lootbag.errors import InvalidWeight
from lootbag.rng import RandomSource, get_rng
from lootbag.rules import DEFAULT_LUCK_FACTOR, WEIGHT_SCALE

if TYPE_CHECKING:
    from lootbag.drop_engine import SampleResult
    from lootbag.services.loot_service import DrawTally, SampleRow

logger = logging.getLogger(__name__)


def to_units(weight) -> int:
    """Validate a caller weight and convert it to integer units."""
    if isinstance(weight, bool) or not isinstance(weight, Real):
        raise InvalidWeight(weight)
    try:
        if not math.isfinite(weight) or weight <= 0:
            raise InvalidWeight(weight)
        scaled = weight * WEIGHT_SCALE
        # units must stay convertible to float for the draw arithmetic
        if not math.isfinite(scaled):
            raise InvalidWeight(weight)
        units = round(scaled)
    except OverflowError:
        raise InvalidWeight(weight) from None

    if units <= 0:
        raise InvalidWeight(weight)
    return units


def valid_luck_factor(factor) -> bool:
    if isinstance(factor, bool) or not isinstance(factor, Real):
        return False
    try:
        return math.isfinite(factor) and factor > 0
    except OverflowError:
        return False


@dataclass
class Entry:
    item: Any
    units: int

    @property
    def weight(self) -> float:
        return self.units / WEIGHT_SCALE


class WeightedPool:
    """
    Loot table holding (item, weight) entries sorted by descending weight.

    Items are opaque and only compared with ``==``. Mutations keep the
    ordering and the running total in step; nothing outside the pool
    touches the entry list directly.
    """

    def __init__(
        self,
        luck_factor: float = DEFAULT_LUCK_FACTOR,
        rng: Optional[RandomSource] = None,
    ):
        if not valid_luck_factor(luck_factor):
            raise ValueError(f"luck_factor must be a positive finite number, got {luck_factor!r}")
        self.luck_factor = luck_factor
        self.rng = rng if rng is not None else get_rng()
        self._entries: List[Entry] = []
        self._total_units = 0

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[Entry]:
        return iter(tuple(self._entries))

    def __repr__(self) -> str:
        return (
            f"WeightedPool(entries={len(self._entries)}, "
            f"total_weight={self.total_weight}, luck_factor={self.luck_factor})"
        )

    @property
    def entries(self) -> Tuple[Entry, ...]:
        return tuple(self._entries)

    @property
    def total_units(self) -> int:
        return self._total_units

    @property
    def total_weight(self) -> float:
        return self._total_units / WEIGHT_SCALE

    # ------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------

    def insert(self, item: Any, weight: float) -> None:
        units = to_units(weight)
        position = len(self._entries)

        # walk up from the rare end; equal weights land ahead of older entries
        for index in range(len(self._entries) - 1, -1, -1):
            if self._entries[index].units <= units:
                position = index
            else:
                break

        self._entries.insert(position, Entry(item=item, units=units))
        self._total_units += units
        logger.debug("Inserted %r (weight=%s) at %d", item, weight, position)

    def set(self, item: Any, weight: float) -> bool:
        """
        Overwrite the weight of every entry matching ``item``.

        Never creates an entry: a missing item leaves the pool untouched
        and returns False.
        """
        units = to_units(weight)
        updated = False

        for entry in self._entries:
            if entry.item == item:
                self._total_units += units - entry.units
                entry.units = units
                updated = True

        if updated:
            self._entries.sort(key=lambda e: e.units, reverse=True)
            logger.debug("Set %r to weight=%s", item, weight)
        return updated

    def remove(self, item: Any) -> Optional[Entry]:
        for index, entry in enumerate(self._entries):
            if entry.item == item:
                del self._entries[index]
                self._total_units -= entry.units
                logger.debug("Removed %r (weight=%s)", item, entry.weight)
                return entry
        return None

    def remove_if(self, predicate: Callable[[Any], bool]) -> List[Entry]:
        kept = []
        removed = []
        for entry in self._entries:
            if predicate(entry.item):
                removed.append(entry)
            else:
                kept.append(entry)

        self._entries = kept
        self._total_units -= sum(e.units for e in removed)
        if removed:
            logger.debug("Removed %d entries by predicate", len(removed))
        return removed

    # ------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------

    def list_items(self, use_percentage: bool = False) -> List[Tuple[Any, float]]:
        if use_percentage:
            return [
                (e.item, e.units / self._total_units * 100)
                for e in self._entries
            ]
        return [(e.item, e.weight) for e in self._entries]

    # ------------------------------------------------------------
    # Sampling
    # ------------------------------------------------------------

    def draw(self, luck=None, retries=None, rng=None) -> "SampleResult":
        from lootbag.drop_engine import draw

        return draw(self, luck=luck, retries=retries, rng=rng)

    def draw_many(self, count=1, luck=None, retries=None, rng=None) -> "DrawTally":
        from lootbag.services.loot_service import draw_many

        return draw_many(self, count=count, luck=luck, retries=retries, rng=rng)

    def sample(
        self,
        count,
        luck=None,
        retries=None,
        formatter=None,
        sink=None,
        rng=None,
    ) -> List["SampleRow"]:
        from lootbag.services.loot_service import sample

        return sample(
            self,
            count,
            luck=luck,
            retries=retries,
            formatter=formatter,
            sink=sink,
            rng=rng,
        )
