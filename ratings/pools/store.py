"""
Pool Store - keyed storage for Pool records

A store only loads and saves whole records. Loaded records are copies:
changes reach the store only through save().
"""

from __future__ import annotations
from dataclasses import replace
from typing import Optional, Protocol

from ratings.pools.pool_state import Pool


class PoolStore(Protocol):
    def load(self, pool_id: bytes) -> Optional[Pool]:
        ...

    def save(self, pool: Pool) -> None:
        ...

    def pool_ids(self) -> list[bytes]:
        ...


class InMemoryPoolStore:
    """Dictionary-backed store for tests and single-process use."""

    def __init__(self):
        self._pools: dict[bytes, Pool] = {}

    def load(self, pool_id: bytes) -> Optional[Pool]:
        pool = self._pools.get(pool_id)
        return replace(pool) if pool is not None else None

    def save(self, pool: Pool) -> None:
        self._pools[pool.pool_id] = replace(pool)

    def pool_ids(self) -> list[bytes]:
        return list(self._pools)

    def __len__(self) -> int:
        return len(self._pools)
