"""
Tests for public pool summaries.
"""

from conftest import submit
from ratings.analytics import PoolTotals, count_totals, pool_summary_df
from ratings.client import pool_id_from_name


def test_empty_ledger_summary(ledger):
    df = pool_summary_df(ledger)

    assert df.empty
    assert list(df.columns) == ["pool_id", "owner", "ratings_count", "avg_published"]
    assert count_totals(df) == PoolTotals(pools=0, ratings=0, published=0, empty_pools=0)


def test_summary_lists_public_data_only(ledger):
    busy = pool_id_from_name("busy")
    quiet = pool_id_from_name("quiet")
    ledger.set_owner(busy, "alice", caller="alice")
    ledger.set_owner(quiet, "bob", caller="bob")
    for value in (10, 20, 30):
        submit(ledger, busy, value)
    ledger.recompute_average(busy)
    ledger.make_public(busy, caller="alice")

    df = pool_summary_df(ledger)

    assert df["pool_id"].tolist() == [busy.hex(), quiet.hex()]
    assert df["owner"].tolist() == ["alice", "bob"]
    assert df["ratings_count"].tolist() == [3, 0]
    assert df["avg_published"].tolist() == [True, False]
    assert count_totals(df) == PoolTotals(pools=2, ratings=3, published=1, empty_pools=1)
