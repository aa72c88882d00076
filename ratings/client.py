"""
Client-side helpers for contributors and readers.

These run outside the ledger: deriving pool ids and encrypting ratings is
the caller's job, never the core's.
"""

from __future__ import annotations
import hashlib

from ratings.fhe.coprocessor import FrontEnd
from ratings.fhe.types import ExternalCiphertext
from ratings.pools.constants import SCORE_TYPE


def pool_id_from_name(name: str) -> bytes:
    """
    Derive a 32-byte pool id from a human-readable name (SHA-256).
    """
    if not name:
        raise ValueError("pool name must not be empty")
    return hashlib.sha256(name.encode("utf-8")).digest()


def encrypt_score(front_end: FrontEnd, value: int, *, ledger: str, user: str) -> tuple[ExternalCiphertext, bytes]:
    """
    Encrypt a rating for submission by user to the ledger principal.

    Values outside 0-100 are allowed; the ledger clamps them.

    Returns:
        Tuple of (external_ciphertext, attestation)
    """
    return front_end.encrypt_input(value, contract=ledger, user=user, etype=SCORE_TYPE)
