"""
Access Control

Owner-only publication of the current average handle.

Both operations are one-way: there is no revoke and no way back from public.
They apply to the handle current at call time, so a later recompute needs
its own grants.
"""

from __future__ import annotations

from ratings.pools.context import LedgerContext
from ratings.pools.errors import AuthorizationError
from ratings.pools.events import AccessGranted, MadePublic
from ratings.pools.pool_state import Pool, validate_principal


def _owned_pool(ctx: LedgerContext, pool_id: bytes, caller: str) -> Pool:
    pool = ctx.store.load(pool_id)
    if pool is None or not pool.is_owned_by(caller):
        raise AuthorizationError("caller is not the pool owner")
    return pool


def grant_access(ctx: LedgerContext, pool_id: bytes, to: str, caller: str) -> AccessGranted:
    """
    Let `to` decrypt the current average.

    Raises:
        AuthorizationError: caller is not the owner
        ValidationError: malformed reader
    """
    pool = _owned_pool(ctx, pool_id, caller)
    validate_principal(to, "reader")
    ctx.coprocessor.load(pool.avg_handle).allow(to)
    return AccessGranted(pool_id=pool.pool_id, to=to)


def make_public(ctx: LedgerContext, pool_id: bytes, caller: str) -> MadePublic:
    """
    Let anyone holding the current average handle decrypt it.

    Raises:
        AuthorizationError: caller is not the owner
    """
    pool = _owned_pool(ctx, pool_id, caller)
    ctx.coprocessor.load(pool.avg_handle).make_public()
    return MadePublic(pool_id=pool.pool_id)
