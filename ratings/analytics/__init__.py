"""
Analytics package exports.
"""

from ratings.analytics.summary import PoolTotals, count_totals, pool_summary_df

__all__ = [
    "PoolTotals",
    "count_totals",
    "pool_summary_df",
]
