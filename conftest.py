"""
Shared fixtures for ledger tests.
"""

import pytest

from ratings import pools
from ratings.client import encrypt_score, pool_id_from_name
from ratings.fhe import LocalCoprocessor


LEDGER = "ratings-ledger-test"


@pytest.fixture
def coprocessor():
    return LocalCoprocessor(secret=b"test-secret")


@pytest.fixture
def ledger(coprocessor):
    return pools.RatingsLedger(coprocessor=coprocessor, principal=LEDGER)


@pytest.fixture
def pool_id():
    return pool_id_from_name("espresso-bar")


@pytest.fixture
def owned_pool(ledger, pool_id):
    """Pool owned by alice, no ratings yet."""
    ledger.set_owner(pool_id, "alice", caller="alice")
    return pool_id


def submit(ledger, pool_id, value, user="bob"):
    """Encrypt value as user and submit it."""
    external, proof = encrypt_score(ledger.coprocessor, value, ledger=ledger.principal, user=user)
    return ledger.submit_score(pool_id, external, proof, caller=user)


def owner_view(ledger, pool_id):
    """Decrypt the current average as the owner."""
    owner = ledger.owner(pool_id)
    return ledger.coprocessor.user_decrypt(ledger.avg_handle(pool_id), owner, contract=ledger.principal)
