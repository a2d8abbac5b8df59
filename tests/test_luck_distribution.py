import pytest

from lootbag.pool import WeightedPool
from lootbag.rng import get_rng

# chi-square critical value, 2 degrees of freedom, p = 0.001
CHI2_CRITICAL_DF2 = 13.816


def chi_square(observed, expected):
    return sum((o - e) ** 2 / e for o, e in zip(observed, expected))


def rare_pool():
    pool = WeightedPool()
    pool.insert("common", 100)
    pool.insert("rare", 10)
    pool.insert("legendary", 1)
    return pool


def legendary_hits(pool, n, luck, retries, seed):
    tally = pool.draw_many(count=n, luck=luck, retries=retries, rng=get_rng(seed))
    return tally["legendary"].count if "legendary" in tally else 0


@pytest.mark.stats
def test_luck_equal_to_factor_is_weight_proportional(abc_pool):
    n = 20_000
    tally = abc_pool.draw_many(count=n, luck=abc_pool.luck_factor, rng=get_rng(2024))

    observed = [tally[name].count for name in ["A", "B", "C"]]
    expected = [n * 0.5, n * 0.3, n * 0.2]

    assert sum(observed) == n
    assert chi_square(observed, expected) < CHI2_CRITICAL_DF2


@pytest.mark.stats
def test_default_luck_follows_curve(abc_pool):
    # P(target <= t) = 1 - (1 - t/T) ** (luck / factor)
    n = 20_000
    power = 1 / abc_pool.luck_factor
    p_c = 1 - 0.8 ** power
    p_bc = 1 - 0.5 ** power
    expected = [n * (1 - p_bc), n * (p_bc - p_c), n * p_c]

    tally = abc_pool.draw_many(count=n, rng=get_rng(77))
    observed = [tally[name].count for name in ["A", "B", "C"]]

    assert chi_square(observed, expected) < CHI2_CRITICAL_DF2


@pytest.mark.stats
def test_more_retries_favour_rarest_entry():
    pool = rare_pool()
    n = 3000

    hits = [legendary_hits(pool, n, luck=1, retries=r, seed=5) for r in (1, 5, 50)]

    assert hits[0] < hits[1] < hits[2]


@pytest.mark.stats
def test_more_luck_favours_rarest_entry():
    pool = rare_pool()
    n = 20_000

    hits = [legendary_hits(pool, n, luck=luck, retries=1, seed=11) for luck in (0.5, 1, 4)]

    assert hits[0] < hits[1] < hits[2]


@pytest.mark.stats
def test_luck_never_makes_a_draw_more_common(fixed_source):
    # same u, higher luck: index can only move toward the rare end
    pool = rare_pool()
    values = [i / 97 for i in range(97)]

    base = [pool.draw(luck=1, rng=fixed_source([u])).index for u in values]
    lucky = [pool.draw(luck=3, rng=fixed_source([u])).index for u in values]

    assert all(l >= b for b, l in zip(base, lucky))
    assert sum(lucky) > sum(base)
