"""
Rating Pools

Main API for the encrypted ratings ledger.

Each pool collects encrypted ratings, keeps an encrypted running sum and a
public count, and publishes an encrypted average to readers its owner
chooses.

Quick start:
    from ratings import pools

    ledger = pools.RatingsLedger()

    # Create a pool (first caller becomes owner)
    ledger.set_owner(pool_id, "alice", caller="alice")

    # Ingest, aggregate, publish
    ledger.submit_score(pool_id, external, attestation, caller="bob")
    ledger.recompute_average(pool_id)
    ledger.make_public(pool_id, caller="alice")
"""

# Ledger (serialized operations + lookups)
from ratings.pools.ledger import RatingsLedger

# Storage
from ratings.pools.store import PoolStore, InMemoryPoolStore
from ratings.pools.database import (
    SqlPoolStore,
    get_database_url,
    get_engine,
    init_db,
    reset_db
)

# State
from ratings.pools.pool_state import Pool, format_pool_id

# Notifications
from ratings.pools.events import (
    EventBus,
    PoolEvent,
    OwnerSet,
    ScoreSubmitted,
    AverageRecomputed,
    AccessGranted,
    MadePublic
)

# Errors
from ratings.pools.errors import (
    RatingsError,
    AuthorizationError,
    ValidationError,
    StateError
)

# Constants
from ratings.pools.constants import (
    MIN_SCORE,
    MAX_SCORE,
    SCORE_TYPE,
    SUM_TYPE,
    POOL_ID_SIZE,
    NULL_PRINCIPAL,
    VERSION
)


__all__ = [
    # Ledger
    "RatingsLedger",

    # Storage
    "PoolStore",
    "InMemoryPoolStore",
    "SqlPoolStore",
    "get_database_url",
    "get_engine",
    "init_db",
    "reset_db",

    # State
    "Pool",
    "format_pool_id",

    # Notifications
    "EventBus",
    "PoolEvent",
    "OwnerSet",
    "ScoreSubmitted",
    "AverageRecomputed",
    "AccessGranted",
    "MadePublic",

    # Errors
    "RatingsError",
    "AuthorizationError",
    "ValidationError",
    "StateError",

    # Constants
    "MIN_SCORE",
    "MAX_SCORE",
    "SCORE_TYPE",
    "SUM_TYPE",
    "POOL_ID_SIZE",
    "NULL_PRINCIPAL",
    "VERSION",
]
