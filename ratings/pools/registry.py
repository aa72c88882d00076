"""
Pool Registry

Creates pools on first reference and transfers ownership.

Any caller may bootstrap a pool that does not exist yet. When two callers
race to bootstrap the same id, the first transition applied wins; the other
then finds an existing pool it does not own and fails.
"""

from __future__ import annotations

from ratings.pools.constants import SUM_TYPE
from ratings.pools.context import LedgerContext
from ratings.pools.errors import AuthorizationError
from ratings.pools.events import OwnerSet
from ratings.pools.pool_state import Pool, validate_pool_id, validate_principal


def set_owner(ctx: LedgerContext, pool_id: bytes, new_owner: str, caller: str) -> OwnerSet:
    """
    Create the pool with new_owner, or transfer it if caller owns it.

    Raises:
        ValidationError: malformed pool id or owner
        AuthorizationError: pool exists and caller is not its owner
    """
    pool_id = validate_pool_id(pool_id)
    validate_principal(new_owner, "owner")

    pool = ctx.store.load(pool_id)
    if pool is None or not pool.exists:
        pool = _bootstrap(ctx, pool_id, new_owner)
    elif not pool.is_owned_by(caller):
        raise AuthorizationError("caller is not the pool owner")
    else:
        pool.owner = new_owner

    ctx.store.save(pool)
    return OwnerSet(pool_id=pool_id, owner=new_owner)


def _bootstrap(ctx: LedgerContext, pool_id: bytes, owner: str) -> Pool:
    # Zero sum and average the ledger can keep operating on
    zero_sum = ctx.coprocessor.trivial_encrypt(0, SUM_TYPE).allow_this()
    zero_avg = ctx.coprocessor.trivial_encrypt(0, SUM_TYPE).allow_this()

    return Pool(
        pool_id=pool_id,
        owner=owner,
        exists=True,
        sum_handle=zero_sum.handle,
        avg_handle=zero_avg.handle,
        count=0
    )
