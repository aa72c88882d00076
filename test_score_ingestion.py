"""
Tests for encrypted score submission.
"""

from dataclasses import asdict

import pytest

from conftest import owner_view, submit
from ratings import pools
from ratings.client import encrypt_score, pool_id_from_name
from ratings.fhe import AccessDeniedError, EncryptedType


def test_submit_to_unconfigured_pool_fails(ledger):
    unknown = pool_id_from_name("nobody-owns-this")
    external, proof = encrypt_score(ledger.coprocessor, 50, ledger=ledger.principal, user="bob")

    with pytest.raises(pools.StateError, match="not configured"):
        ledger.submit_score(unknown, external, proof, caller="bob")

    assert ledger.ratings_count(unknown) == 0
    assert not ledger.pool_exists(unknown)
    assert ledger.events.history == []


def test_each_submission_advances_count(ledger, owned_pool):
    events = [submit(ledger, owned_pool, value, user=f"user-{value}") for value in (10, 20, 30)]

    assert [e.count for e in events] == [1, 2, 3]
    assert ledger.ratings_count(owned_pool) == 3
    assert events[-1] == pools.ScoreSubmitted(pool_id=owned_pool, count=3)


def test_sum_handle_changes_and_stays_usable(ledger, owned_pool):
    bootstrap_sum = ledger.sum_handle(owned_pool)

    submit(ledger, owned_pool, 40)
    first_sum = ledger.sum_handle(owned_pool)
    submit(ledger, owned_pool, 60)
    second_sum = ledger.sum_handle(owned_pool)

    assert len({bootstrap_sum, first_sum, second_sum}) == 3
    assert ledger.coprocessor.is_allowed(second_sum, ledger.principal)


def test_attestation_for_another_user_is_rejected(ledger, owned_pool):
    submit(ledger, owned_pool, 70)
    sum_before = ledger.sum_handle(owned_pool)
    external, proof = encrypt_score(ledger.coprocessor, 90, ledger=ledger.principal, user="bob")

    with pytest.raises(pools.ValidationError, match="attestation"):
        ledger.submit_score(owned_pool, external, proof, caller="mallory")

    assert ledger.ratings_count(owned_pool) == 1
    assert ledger.sum_handle(owned_pool) == sum_before


def test_attestation_for_another_ledger_is_rejected(ledger, owned_pool):
    external, proof = encrypt_score(ledger.coprocessor, 90, ledger="some-other-ledger", user="bob")

    with pytest.raises(pools.ValidationError):
        ledger.submit_score(owned_pool, external, proof, caller="bob")

    assert ledger.ratings_count(owned_pool) == 0


def test_wrong_input_type_is_rejected(ledger, owned_pool):
    external, proof = ledger.coprocessor.encrypt_input(
        50, contract=ledger.principal, user="bob", etype=EncryptedType.UINT32
    )

    with pytest.raises(pools.ValidationError):
        ledger.submit_score(owned_pool, external, proof, caller="bob")

    assert ledger.ratings_count(owned_pool) == 0


def test_out_of_range_scores_are_clamped(ledger, owned_pool):
    submit(ledger, owned_pool, -5, user="bob")
    submit(ledger, owned_pool, 150, user="carol")
    ledger.recompute_average(owned_pool)

    assert owner_view(ledger, owned_pool) == 50


@pytest.mark.parametrize("value, contribution", [(-32768, 0), (-1, 0), (101, 100), (32767, 100)])
def test_clamped_contribution(ledger, owned_pool, value, contribution):
    submit(ledger, owned_pool, value)
    ledger.recompute_average(owned_pool)

    assert owner_view(ledger, owned_pool) == contribution


def test_no_submitter_identity_is_stored(ledger, owned_pool):
    submit(ledger, owned_pool, 80, user="very-identifiable-bob")

    record = asdict(ledger.store.load(owned_pool))
    assert "very-identifiable-bob" not in [str(v) for v in record.values()]
    assert all("very-identifiable-bob" not in str(e.model_dump()) for e in ledger.events.history)


def test_failed_save_leaves_no_trace(coprocessor, pool_id):
    class FlakyStore(pools.InMemoryPoolStore):
        fail = False

        def save(self, pool):
            if self.fail:
                raise RuntimeError("disk full")
            super().save(pool)

    store = FlakyStore()
    ledger = pools.RatingsLedger(store=store, coprocessor=coprocessor, principal="ledger")
    ledger.set_owner(pool_id, "alice", caller="alice")
    sum_before = ledger.sum_handle(pool_id)

    store.fail = True
    with pytest.raises(RuntimeError):
        submit(ledger, pool_id, 60)
    store.fail = False

    assert ledger.ratings_count(pool_id) == 0
    assert ledger.sum_handle(pool_id) == sum_before
    assert len(ledger.events.history) == 1

    # The pool keeps working afterwards
    submit(ledger, pool_id, 60)
    ledger.recompute_average(pool_id)
    assert owner_view(ledger, pool_id) == 60


@pytest.mark.parametrize("attestation", [None, "not-bytes", 12345])
def test_malformed_attestation_is_rejected(ledger, owned_pool, attestation, caplog):
    external, _ = encrypt_score(ledger.coprocessor, 50, ledger=ledger.principal, user="bob")

    with caplog.at_level("WARNING", logger="ratings.pools.ledger"):
        with pytest.raises(pools.ValidationError, match="attestation"):
            ledger.submit_score(owned_pool, external, attestation, caller="bob")

    assert ledger.ratings_count(owned_pool) == 0
    assert "submit_score rejected" in caplog.text


def test_bytearray_pool_id_is_accepted(ledger, owned_pool):
    external, proof = encrypt_score(ledger.coprocessor, 70, ledger=ledger.principal, user="bob")

    event = ledger.submit_score(bytearray(owned_pool), external, proof, caller="bob")
    ledger.recompute_average(bytearray(owned_pool))

    assert event.pool_id == owned_pool
    assert ledger.ratings_count(owned_pool) == 1
    assert owner_view(ledger, owned_pool) == 70


def test_collaborator_denial_rolls_back_and_is_logged(ledger, owned_pool, caplog):
    submit(ledger, owned_pool, 60)
    sum_before = ledger.sum_handle(owned_pool)
    # A second ledger sharing store and coprocessor holds no grant on the sum
    intruder = pools.RatingsLedger(store=ledger.store, coprocessor=ledger.coprocessor, principal="other-ledger")
    external, proof = encrypt_score(ledger.coprocessor, 40, ledger="other-ledger", user="bob")

    with caplog.at_level("WARNING", logger="ratings.pools.ledger"):
        with pytest.raises(AccessDeniedError):
            intruder.submit_score(owned_pool, external, proof, caller="bob")

    assert "submit_score rejected" in caplog.text
    assert ledger.ratings_count(owned_pool) == 1
    assert ledger.sum_handle(owned_pool) == sum_before
    assert intruder.events.history == []
