"""
Ratings Ledger - serialized execution of pool operations

Applies one operation at a time against the shared pool store. Each
operation runs inside a single coprocessor transaction: either every
effect lands (record saved, grants kept, event published) or none does.
"""

from __future__ import annotations
import logging
import threading
from typing import Callable, Optional

from ratings.config import get_ledger_principal
from ratings.fhe.coprocessor import Coprocessor
from ratings.fhe.errors import CoprocessorError
from ratings.fhe.local import LocalCoprocessor
from ratings.fhe.types import ExternalCiphertext, Handle
from ratings.pools import access, aggregation, ingestion, registry
from ratings.pools.constants import VERSION
from ratings.pools.context import LedgerContext
from ratings.pools.errors import RatingsError
from ratings.pools.events import (
    AccessGranted,
    AverageRecomputed,
    EventBus,
    MadePublic,
    OwnerSet,
    PoolEvent,
    ScoreSubmitted,
)
from ratings.pools.pool_state import Pool, format_pool_id, normalize_pool_id
from ratings.pools.store import InMemoryPoolStore, PoolStore

logger = logging.getLogger(__name__)


class RatingsLedger:
    """
    Entry point for all pool operations and lookups.

    Args:
        store: Pool storage (in-memory if omitted)
        coprocessor: FHE collaborator (LocalCoprocessor if omitted)
        principal: Identity the ledger acts as (RATINGS_LEDGER_PRINCIPAL if omitted)
        events: Notification bus (fresh EventBus if omitted)
    """

    def __init__(
        self,
        store: Optional[PoolStore] = None,
        coprocessor: Optional[Coprocessor] = None,
        *,
        principal: Optional[str] = None,
        events: Optional[EventBus] = None
    ):
        self.store = store if store is not None else InMemoryPoolStore()
        self.coprocessor = coprocessor if coprocessor is not None else LocalCoprocessor()
        self.principal = principal or get_ledger_principal()
        self.events = events if events is not None else EventBus()
        self._lock = threading.RLock()
        self._context = LedgerContext(
            store=self.store,
            coprocessor=self.coprocessor,
            principal=self.principal
        )

    def _apply(self, name: str, pool_id: bytes, operation: Callable[..., PoolEvent], *args) -> PoolEvent:
        with self._lock:
            pool_id = normalize_pool_id(pool_id)
            try:
                with self.coprocessor.transaction(self.principal):
                    event = operation(self._context, pool_id, *args)
            except (RatingsError, CoprocessorError) as exc:
                logger.warning(f"{name} rejected for pool {format_pool_id(pool_id)}: {exc}")
                raise
            logger.info(f"{name} applied to pool {format_pool_id(pool_id)}")
            self.events.publish(event)
            return event

    # ---- Operations ----

    def set_owner(self, pool_id: bytes, new_owner: str, *, caller: str) -> OwnerSet:
        return self._apply("set_owner", pool_id, registry.set_owner, new_owner, caller)

    def submit_score(
        self,
        pool_id: bytes,
        external: ExternalCiphertext,
        attestation: bytes,
        *,
        caller: str
    ) -> ScoreSubmitted:
        return self._apply("submit_score", pool_id, ingestion.submit_score, external, attestation, caller)

    def recompute_average(self, pool_id: bytes) -> AverageRecomputed:
        return self._apply("recompute_average", pool_id, aggregation.recompute_average)

    def grant_access(self, pool_id: bytes, to: str, *, caller: str) -> AccessGranted:
        return self._apply("grant_access", pool_id, access.grant_access, to, caller)

    def make_public(self, pool_id: bytes, *, caller: str) -> MadePublic:
        return self._apply("make_public", pool_id, access.make_public, caller)

    # ---- Read-only accessors ----
    # Unknown pools read as defaults, never as errors.

    def _pool(self, pool_id: bytes) -> Pool:
        pool_id = normalize_pool_id(pool_id)
        with self._lock:
            pool = self.store.load(pool_id)
        return pool if pool is not None else Pool(pool_id=pool_id)

    def avg_handle(self, pool_id: bytes) -> Optional[Handle]:
        return self._pool(pool_id).avg_handle

    def sum_handle(self, pool_id: bytes) -> Optional[Handle]:
        return self._pool(pool_id).sum_handle

    def ratings_count(self, pool_id: bytes) -> int:
        return self._pool(pool_id).count

    def owner(self, pool_id: bytes) -> Optional[str]:
        return self._pool(pool_id).owner

    def pool_exists(self, pool_id: bytes) -> bool:
        return self._pool(pool_id).exists

    def pool_ids(self) -> list[bytes]:
        with self._lock:
            return self.store.pool_ids()

    @staticmethod
    def version() -> str:
        return VERSION
