"""
Tests for owner-gated publication of the average.
"""

import pytest

from conftest import submit
from ratings import pools
from ratings.client import pool_id_from_name
from ratings.fhe import AccessDeniedError


@pytest.fixture
def rated_pool(ledger, owned_pool):
    """alice's pool with ratings 40, 60, 100 and a fresh average."""
    for position, value in enumerate((40, 60, 100)):
        submit(ledger, owned_pool, value, user=f"rater-{position}")
    ledger.recompute_average(owned_pool)
    return owned_pool


def test_published_average_is_publicly_decryptable(ledger, rated_pool):
    handle = ledger.avg_handle(rated_pool)
    with pytest.raises(AccessDeniedError):
        ledger.coprocessor.public_decrypt(handle)

    event = ledger.make_public(rated_pool, caller="alice")

    assert event == pools.MadePublic(pool_id=rated_pool)
    assert ledger.coprocessor.public_decrypt(handle) == 66

    with pytest.raises(pools.AuthorizationError):
        ledger.grant_access(rated_pool, "mallory", caller="mallory")


def test_grant_lets_reader_decrypt(ledger, rated_pool):
    handle = ledger.avg_handle(rated_pool)
    with pytest.raises(AccessDeniedError):
        ledger.coprocessor.user_decrypt(handle, "carol", contract=ledger.principal)

    event = ledger.grant_access(rated_pool, "carol", caller="alice")

    assert event == pools.AccessGranted(pool_id=rated_pool, to="carol")
    assert ledger.coprocessor.user_decrypt(handle, "carol", contract=ledger.principal) == 66


def test_non_owner_cannot_publish(ledger, rated_pool):
    with pytest.raises(pools.AuthorizationError):
        ledger.make_public(rated_pool, caller="bob")

    assert not ledger.coprocessor.is_publicly_decryptable(ledger.avg_handle(rated_pool))


@pytest.mark.parametrize("reader", ["", None, pools.NULL_PRINCIPAL])
def test_bad_reader_is_rejected(ledger, rated_pool, reader):
    with pytest.raises(pools.ValidationError):
        ledger.grant_access(rated_pool, reader, caller="alice")


def test_access_on_unknown_pool_is_unauthorized(ledger):
    missing = pool_id_from_name("missing")

    with pytest.raises(pools.AuthorizationError):
        ledger.grant_access(missing, "carol", caller="alice")
    with pytest.raises(pools.AuthorizationError):
        ledger.make_public(missing, caller="alice")


def test_publication_applies_to_current_handle_only(ledger, rated_pool):
    ledger.make_public(rated_pool, caller="alice")
    published = ledger.avg_handle(rated_pool)

    submit(ledger, rated_pool, 0, user="late-rater")
    ledger.recompute_average(rated_pool)
    fresh = ledger.avg_handle(rated_pool)

    assert ledger.coprocessor.public_decrypt(published) == 66
    with pytest.raises(AccessDeniedError):
        ledger.coprocessor.public_decrypt(fresh)

    ledger.make_public(rated_pool, caller="alice")
    assert ledger.coprocessor.public_decrypt(fresh) == 50


def test_transferred_owner_takes_over_access_control(ledger, rated_pool):
    ledger.set_owner(rated_pool, "carol", caller="alice")

    with pytest.raises(pools.AuthorizationError):
        ledger.grant_access(rated_pool, "dave", caller="alice")
    ledger.grant_access(rated_pool, "dave", caller="carol")

    assert ledger.coprocessor.is_allowed(ledger.avg_handle(rated_pool), "dave")


def test_events_follow_operations(ledger, pool_id):
    received = []
    ledger.events.subscribe(received.append)

    ledger.set_owner(pool_id, "alice", caller="alice")
    submit(ledger, pool_id, 90)
    ledger.recompute_average(pool_id)
    ledger.grant_access(pool_id, "carol", caller="alice")
    ledger.make_public(pool_id, caller="alice")

    assert [type(e) for e in received] == [
        pools.OwnerSet,
        pools.ScoreSubmitted,
        pools.AverageRecomputed,
        pools.AccessGranted,
        pools.MadePublic,
    ]
    assert received == ledger.events.history


def test_rejected_operations_publish_nothing(ledger, rated_pool):
    published_before = len(ledger.events.history)

    with pytest.raises(pools.AuthorizationError):
        ledger.make_public(rated_pool, caller="bob")

    assert len(ledger.events.history) == published_before


def test_broken_subscriber_does_not_fail_operation(ledger, pool_id):
    def explode(event):
        raise RuntimeError("listener down")

    unsubscribe = ledger.events.subscribe(explode)
    ledger.set_owner(pool_id, "alice", caller="alice")
    unsubscribe()

    assert ledger.owner(pool_id) == "alice"
    assert len(ledger.events.history) == 1


@pytest.mark.parametrize("reader", ["", None, pools.NULL_PRINCIPAL])
def test_non_owner_with_bad_reader_is_unauthorized(ledger, rated_pool, reader):
    with pytest.raises(pools.AuthorizationError):
        ledger.grant_access(rated_pool, reader, caller="mallory")


def test_event_history_keeps_most_recent(pool_id):
    events = pools.EventBus(history_size=2)
    for owner in ("alice", "bob", "carol"):
        events.publish(pools.OwnerSet(pool_id=pool_id, owner=owner))

    assert [e.owner for e in events.history] == ["bob", "carol"]
