import logging
from typing import List

from fastapi import FastAPI, HTTPException

import lootbag
from lootbag.drop_engine import clamp_luck, clamp_retries
from lootbag.errors import LootbagError
from lootbag.pool import WeightedPool
from lootbag.rng import get_rng
from lootbag.rules import DEFAULT_LUCK, DEFAULT_LUCK_FACTOR, DEFAULT_RETRIES, RETRY_LIMIT, SIMULATION_LIMIT

from lootbag.schemas import (
    PoolEntry,
    PoolRequest,
    ListItemsRequest,
    DrawRequest,
    DrawManyRequest,
    SampleRequest,
    CompareRequest,
)

logger = logging.getLogger(__name__)


app = FastAPI(
    title="Lootbag API",
    description="Weighted loot tables with luck and retry biasing. Build a table, roll it, simulate it.",
    version=lootbag.__version__,
)


def build_pool(entries: List[PoolEntry], luck_factor: float, seed=None) -> WeightedPool:
    pool = WeightedPool(luck_factor=luck_factor, rng=get_rng(seed))
    try:
        for entry in entries:
            pool.insert(entry.item, entry.weight)
    except LootbagError as e:
        raise HTTPException(400, str(e))
    return pool


def pool_from_request(req: PoolRequest) -> WeightedPool:
    return build_pool(req.entries, req.luck_factor, getattr(req, "seed", None))


def row_to_dict(row):
    return {
        "item": row.item,
        "weight": row.weight,
        "count": row.count,
        "estimated_rarity": round(row.estimated_rarity, 2),
        "sampled_rarity": round(row.sampled_rarity, 2),
    }


# ============================================================
# HEALTH CHECK
# ============================================================

@app.get("/health", tags=["Health"], response_model=dict)
def health_check():
    return {"status": "ok"}


# ============================================================
# METADATA ENDPOINTS
# ============================================================

@app.get(
    "/info",
    tags=["Metadata"],
    summary="API info + engine defaults",
    description="Returns build version and the defaults every roll falls back to.",
    response_model=dict
)
def info():
    return {
        "name": "Lootbag API",
        "version": lootbag.__version__,
        "defaults": {
            "luck": DEFAULT_LUCK,
            "retries": DEFAULT_RETRIES,
            "luck_factor": DEFAULT_LUCK_FACTOR,
        },
        "limits": {
            "simulations": SIMULATION_LIMIT,
            "retries": RETRY_LIMIT,
        },
    }


@app.post(
    "/items/list",
    tags=["Metadata"],
    summary="List table entries in drop order",
    description="Entries come back sorted by descending weight, as raw weight or % of total.",
    response_model=dict
)
def list_items(req: ListItemsRequest):
    pool = pool_from_request(req)
    return {
        "total_weight": pool.total_weight,
        "items": [
            {"item": item, "value": value}
            for item, value in pool.list_items(req.use_percentage)
        ],
    }


# ============================================================
# SINGLE DROPS
# ============================================================

@app.post(
    "/drop",
    tags=["Drops"],
    summary="Single drop with luck + retries",
    description="Higher luck and more retries push the result toward rarer entries.",
    response_model=dict
)
def drop(req: DrawRequest):
    pool = pool_from_request(req)

    try:
        item, weight, index = pool.draw(luck=req.luck, retries=req.retries)
    except LootbagError as e:
        raise HTTPException(400, str(e))

    return {
        "luck": clamp_luck(req.luck),
        "retries": clamp_retries(req.retries),
        "item": item,
        "weight": weight,
        "index": index,
    }


@app.post(
    "/drop/many",
    tags=["Drops"],
    summary="Batch drops tallied per item",
    description="Runs count drops and returns how often each item came up.",
    response_model=dict
)
def drop_many(req: DrawManyRequest):
    pool = pool_from_request(req)

    try:
        tally = pool.draw_many(count=req.count, luck=req.luck, retries=req.retries)
    except LootbagError as e:
        raise HTTPException(400, str(e))

    return {
        "count": req.count,
        "results": {
            item: {"weight": slot.weight, "count": slot.count}
            for item, slot in tally.items()
        },
    }


# ============================================================
# SIMULATION ENGINE
# ============================================================

@app.post(
    "/simulate",
    tags=["Simulation"],
    summary="Run sampling report",
    description="Estimated (weight share) vs sampled rarity for every entry.",
    response_model=dict
)
def simulate(req: SampleRequest):
    pool = pool_from_request(req)
    reports = []

    try:
        rows = pool.sample(req.count, luck=req.luck, retries=req.retries, sink=reports.append)
    except LootbagError as e:
        raise HTTPException(400, str(e))

    return {
        "count": req.count,
        "luck": clamp_luck(req.luck),
        "retries": clamp_retries(req.retries),
        "rows": [row_to_dict(r) for r in rows],
        "report": reports[0],
    }


# ============================================================
# SIMULATION COMPARISON
# ============================================================

@app.post(
    "/simulate/compare",
    tags=["Simulation"],
    summary="Compare baseline vs lucky simulation",
    description="Same seed, same table; only luck differs. Used to check balance before shipping a change.",
    response_model=dict
)
def simulate_compare(req: CompareRequest):
    pool = pool_from_request(req)
    discard = []

    try:
        base_rows = pool.sample(
            req.count,
            luck=req.baseline_luck,
            retries=req.retries,
            sink=discard.append,
            rng=get_rng(req.seed),
        )
        luck_rows = pool.sample(
            req.count,
            luck=req.luck,
            retries=req.retries,
            sink=discard.append,
            rng=get_rng(req.seed),
        )
    except LootbagError as e:
        raise HTTPException(400, str(e))

    comparison = []
    for base, lucky in zip(base_rows, luck_rows):
        comparison.append({
            "item": base.item,
            "weight": base.weight,
            "baseline": round(base.sampled_rarity, 2),
            "lucky": round(lucky.sampled_rarity, 2),
            "delta": round(lucky.sampled_rarity - base.sampled_rarity, 2),
        })

    logger.info(
        "Compared %d samples: baseline luck=%s vs luck=%s",
        req.count, clamp_luck(req.baseline_luck), clamp_luck(req.luck),
    )

    return {
        "count": req.count,
        "baseline_luck": clamp_luck(req.baseline_luck),
        "luck": clamp_luck(req.luck),
        "retries": clamp_retries(req.retries),
        "comparison": comparison,
    }
