"""
Public pool summaries.

Only data the ledger already exposes in the clear: owners, counts and
whether the current average has been published. Ratings and averages
stay encrypted.
"""

from __future__ import annotations

from dataclasses import dataclass

import pandas as pd

from ratings.pools.ledger import RatingsLedger


SUMMARY_COLUMNS = ["pool_id", "owner", "ratings_count", "avg_published"]


@dataclass(frozen=True)
class PoolTotals:
    """
    Aggregate counters across all pools.
    """
    pools: int
    ratings: int
    published: int
    empty_pools: int


def pool_summary_df(ledger: RatingsLedger) -> pd.DataFrame:
    """
    One row per pool, sorted by ratings_count (largest first).
    """
    rows = []
    for pool_id in ledger.pool_ids():
        avg_handle = ledger.avg_handle(pool_id)
        rows.append({
            "pool_id": pool_id.hex(),
            "owner": ledger.owner(pool_id),
            "ratings_count": ledger.ratings_count(pool_id),
            "avg_published": (
                avg_handle is not None
                and ledger.coprocessor.is_publicly_decryptable(avg_handle)
            ),
        })

    if not rows:
        return pd.DataFrame(columns=SUMMARY_COLUMNS)

    df = pd.DataFrame(rows, columns=SUMMARY_COLUMNS)
    df["ratings_count"] = df["ratings_count"].astype("int64")
    df["avg_published"] = df["avg_published"].astype(bool)
    return df.sort_values(
        ["ratings_count", "pool_id"], ascending=[False, True]
    ).reset_index(drop=True)


def count_totals(summary_df: pd.DataFrame) -> PoolTotals:
    """
    Collapse a pool summary into totals.
    """
    if summary_df.empty:
        return PoolTotals(pools=0, ratings=0, published=0, empty_pools=0)

    return PoolTotals(
        pools=int(len(summary_df)),
        ratings=int(summary_df["ratings_count"].sum()),
        published=int(summary_df["avg_published"].sum()),
        empty_pools=int((summary_df["ratings_count"] == 0).sum()),
    )
