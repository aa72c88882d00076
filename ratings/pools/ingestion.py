"""
Score Ingestion

Imports an encrypted rating, clamps it into [MIN_SCORE, MAX_SCORE] without
decrypting, and folds it into the pool's encrypted sum.

Out-of-range ratings are projected into range, never rejected. The caller
is only used to check the attestation; it is not stored anywhere.
"""

from __future__ import annotations

from ratings.fhe.errors import InvalidProofError
from ratings.fhe.types import ExternalCiphertext
from ratings.pools.constants import MAX_SCORE, MIN_SCORE, SCORE_TYPE, SUM_TYPE
from ratings.pools.context import LedgerContext
from ratings.pools.errors import StateError, ValidationError
from ratings.pools.events import ScoreSubmitted


def submit_score(
    ctx: LedgerContext,
    pool_id: bytes,
    external: ExternalCiphertext,
    attestation: bytes,
    caller: str
) -> ScoreSubmitted:
    """
    Accept one encrypted rating into a pool.

    Steps:
    1. Import the external ciphertext against its attestation
    2. Clamp into [MIN_SCORE, MAX_SCORE]
    3. Widen to SUM_TYPE and add to the running sum
    4. Keep ledger access to the new sum handle
    5. Increment the public count

    Raises:
        StateError: pool not configured
        ValidationError: wrong input type or attestation does not verify
    """
    pool = ctx.store.load(pool_id)
    if pool is None or not pool.is_configured():
        raise StateError("pool not configured")

    if external.etype != SCORE_TYPE:
        raise ValidationError(f"ratings must be encrypted as {SCORE_TYPE.name}, got {external.etype.name}")
    try:
        score = ctx.coprocessor.import_ciphertext(external, attestation, user=caller)
    except InvalidProofError as exc:
        raise ValidationError(f"invalid attestation: {exc}") from exc

    widened = score.clamp(MIN_SCORE, MAX_SCORE).widen(SUM_TYPE)

    if pool.count == 0:
        total = widened
    else:
        total = ctx.coprocessor.load(pool.sum_handle) + widened
    total.allow_this()

    pool.sum_handle = total.handle
    pool.count += 1
    ctx.store.save(pool)

    return ScoreSubmitted(pool_id=pool.pool_id, count=pool.count)
