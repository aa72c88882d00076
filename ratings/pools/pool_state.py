"""
Pool State - Record of a single rating pool

Key concepts:
- owner: principal allowed to transfer the pool and publish its average
- sum_handle: ciphertext handle of the running encrypted sum
- avg_handle: ciphertext handle of the last recomputed average (cached, may be stale)
- count: public number of accepted ratings

Nothing here ever holds a cleartext rating or a submitter identity.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional

from ratings.pools.constants import NULL_PRINCIPAL, POOL_ID_SIZE
from ratings.pools.errors import ValidationError


@dataclass
class Pool:
    """
    Persistent state for one pool, keyed by pool_id.
    """
    pool_id: bytes
    owner: Optional[str] = None
    exists: bool = False
    sum_handle: Optional[bytes] = None
    avg_handle: Optional[bytes] = None
    count: int = 0

    def is_configured(self) -> bool:
        return self.exists and self.owner is not None

    def is_owned_by(self, principal: Optional[str]) -> bool:
        return self.exists and principal is not None and self.owner == principal


def format_pool_id(pool_id: bytes) -> str:
    """Short hex form for log lines."""
    return pool_id.hex()[:12] if isinstance(pool_id, (bytes, bytearray)) else repr(pool_id)


def normalize_pool_id(pool_id: bytes) -> bytes:
    """Turn bytearray and memoryview ids into hashable bytes; leave anything else alone."""
    if isinstance(pool_id, (bytearray, memoryview)):
        return bytes(pool_id)
    return pool_id


def validate_pool_id(pool_id: bytes) -> bytes:
    if not isinstance(pool_id, (bytes, bytearray)) or len(pool_id) != POOL_ID_SIZE:
        raise ValidationError(f"pool id must be {POOL_ID_SIZE} bytes")
    return bytes(pool_id)


def validate_principal(principal: Optional[str], role: str = "owner") -> str:
    """
    Reject empty principals and the null principal.

    Args:
        principal: Candidate owner or reader
        role: Used in the error message ("owner", "reader")
    """
    if not isinstance(principal, str) or not principal.strip() or principal == NULL_PRINCIPAL:
        raise ValidationError(f"bad {role} address: {principal!r}")
    return principal
