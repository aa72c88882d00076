"""
Aggregation

Derives the encrypted average from the encrypted sum and the public count.

Only runs when asked: avg_handle stays at its previous value while new
ratings arrive. Read grants made on an earlier average are not carried over;
only the ledger and the owner can read a freshly computed one.
"""

from __future__ import annotations

from ratings.pools.context import LedgerContext
from ratings.pools.errors import StateError
from ratings.pools.events import AverageRecomputed


def recompute_average(ctx: LedgerContext, pool_id: bytes) -> AverageRecomputed:
    """
    Set avg_handle to an encryption of floor(sum / count).

    Raises:
        StateError: pool not found, or no ratings yet
    """
    pool = ctx.store.load(pool_id)
    if pool is None or not pool.exists:
        raise StateError("pool not found")
    if pool.count == 0:
        raise StateError("no scores")

    average = ctx.coprocessor.load(pool.sum_handle) // pool.count
    average.allow_this()
    average.allow(pool.owner)

    pool.avg_handle = average.handle
    ctx.store.save(pool)

    return AverageRecomputed(pool_id=pool.pool_id)
