"""
Shared references every pool operation works against.
"""

from __future__ import annotations
from dataclasses import dataclass

from ratings.fhe.coprocessor import Coprocessor
from ratings.pools.store import PoolStore


@dataclass(frozen=True)
class LedgerContext:
    """
    Explicit store and collaborator handed to each operation.

    principal is the identity the ledger acts as toward the coprocessor.
    """
    store: PoolStore
    coprocessor: Coprocessor
    principal: str
