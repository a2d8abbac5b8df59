import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Iterator, List, Optional

from lootbag.drop_engine import clamp_luck, clamp_retries, draw
from lootbag.rng import RandomSource
from lootbag.rules import REPORT_PREFIX, WEIGHT_SCALE

if TYPE_CHECKING:
    from lootbag.pool import WeightedPool

logger = logging.getLogger(__name__)


@dataclass
class ItemCount:
    weight: float
    count: int


@dataclass
class SampleRow:
    item: Any
    weight: float
    count: int = 0
    estimated_rarity: float = 0.0
    sampled_rarity: float = 0.0


class DrawTally(Mapping):
    """
    Item -> ItemCount mapping keyed by equality, so unhashable items work.
    Keys keep first-seen order.
    """

    def __init__(self):
        self._items: List[Any] = []
        self._counts: List[ItemCount] = []

    def _find(self, item) -> int:
        for index, known in enumerate(self._items):
            if known == item:
                return index
        return -1

    def record(self, item, weight: float) -> None:
        index = self._find(item)
        if index < 0:
            self._items.append(item)
            self._counts.append(ItemCount(weight=weight, count=1))
            return
        slot = self._counts[index]
        slot.weight = weight
        slot.count += 1

    def __getitem__(self, item) -> ItemCount:
        index = self._find(item)
        if index < 0:
            raise KeyError(item)
        return self._counts[index]

    def __contains__(self, item) -> bool:
        return self._find(item) >= 0

    def __iter__(self) -> Iterator[Any]:
        return iter(list(self._items))

    def __len__(self) -> int:
        return len(self._items)

    def total(self) -> int:
        return sum(c.count for c in self._counts)


def draw_many(
    pool: "WeightedPool",
    count: int = 1,
    luck: Optional[float] = None,
    retries: Optional[int] = None,
    rng: Optional[RandomSource] = None,
) -> DrawTally:
    """Run ``count`` draws and tally them per distinct item."""
    if count is None:
        count = 1
    if count < 0:
        raise ValueError(f"count cannot be negative, got {count}")

    results = DrawTally()
    for _ in range(count):
        item, weight, _index = draw(pool, luck=luck, retries=retries, rng=rng)
        results.record(item, weight)
    return results


def format_report(
    rows: List[SampleRow],
    count: int,
    luck: float,
    retries: int,
    formatter: Callable[[Any], str] = str,
) -> str:
    # retries shown as extra rolls beyond the first
    lines = [f"{REPORT_PREFIX}: {count} Samples (Luck:{luck}, Retries:{retries - 1}) "]
    for row in rows:
        lines.append(
            f"\t{formatter(row.item)}: {row.count} "
            f"[{row.estimated_rarity:.2f}% : {row.sampled_rarity:.2f}%]"
        )
    return "\n".join(lines)


def sample(
    pool: "WeightedPool",
    count: int,
    luck: Optional[float] = None,
    retries: Optional[int] = None,
    formatter: Optional[Callable[[Any], str]] = None,
    sink: Optional[Callable[[str], Any]] = None,
    rng: Optional[RandomSource] = None,
) -> List[SampleRow]:
    """
    Diagnostic run: draw ``count`` times and compare observed rarity
    against the rarity implied by the weights.

    The rendered report goes to ``sink`` (logger.info by default); the
    rows are returned for programmatic checks.
    """
    if count < 0:
        raise ValueError(f"count cannot be negative, got {count}")

    luck = clamp_luck(luck)
    retries = clamp_retries(retries)
    formatter = formatter or str
    sink = sink or logger.info

    entries = pool.entries
    total = pool.total_units
    rows = [SampleRow(item=e.item, weight=e.units / WEIGHT_SCALE) for e in entries]

    for _ in range(count):
        _item, _weight, index = draw(pool, luck=luck, retries=retries, rng=rng)
        rows[index].count += 1

    for row, entry in zip(rows, entries):
        row.estimated_rarity = entry.units / total * 100
        row.sampled_rarity = row.count / count * 100 if count else 0.0

    rows.sort(key=lambda r: r.weight, reverse=True)

    sink(format_report(rows, count, luck, retries, formatter))
    return rows
