from pydantic import BaseModel, Field, field_validator
from typing import Optional, List

from lootbag.rules import DEFAULT_LUCK_FACTOR, RETRY_LIMIT, SIMULATION_LIMIT


# -----------------------------
# LOOT TABLE ENTRY
# -----------------------------

class PoolEntry(BaseModel):
    item: str = Field(description="Item name as it should come back from a draw")
    weight: float = Field(gt=0, description="Relative drop weight. Higher = more common")


# -----------------------------
# BASE POOL REQUEST
# -----------------------------

class PoolRequest(BaseModel):
    entries: List[PoolEntry] = Field(
        default_factory=list,
        description="Loot table entries. Inserted in order, duplicates allowed."
    )
    luck_factor: float = Field(
        default=DEFAULT_LUCK_FACTOR,
        gt=0,
        description="Curve exponent of the pool. Luck equal to this value gives plain weighted rolls."
    )


class ListItemsRequest(PoolRequest):
    use_percentage: bool = Field(
        default=False,
        description="Return share of total weight (%) instead of raw weight"
    )


# -----------------------------
# DROP REQUEST
# -----------------------------

class DrawRequest(PoolRequest):
    luck: Optional[float] = Field(
        default=None,
        description="Luck bias. Clamped to a minimum of 0.01, defaults to 1."
    )
    retries: Optional[int] = Field(
        default=None,
        le=RETRY_LIMIT,
        description="Rolls per draw; the rarest result is kept. Defaults to 1."
    )
    seed: Optional[int] = Field(
        default=None,
        description="Optional RNG seed for deterministic results. "
                    "Same seed always produces same drop order."
    )


class DrawManyRequest(DrawRequest):
    count: int = Field(
        default=1,
        ge=0,
        le=SIMULATION_LIMIT,
        description="Number of draws to tally. Max: 100,000"
    )


# -----------------------------
# SIMULATION REQUEST
# -----------------------------

class SampleRequest(DrawRequest):
    count: int = Field(
        default=1000,
        ge=1,
        le=SIMULATION_LIMIT,
        description="Number of simulated rolls. Max: 100,000"
    )


class CompareRequest(SampleRequest):
    baseline_luck: Optional[float] = Field(
        default=None,
        description="Luck for the reference run. Defaults to 1."
    )

    @field_validator("entries")
    @classmethod
    def non_empty(cls, v):
        if len(v) == 0:
            raise ValueError("entries list cannot be empty")
        return v
