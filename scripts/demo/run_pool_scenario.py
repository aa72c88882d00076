"""
Run a pool end to end against the local coprocessor.

Creates a pool, submits encrypted ratings from distinct contributors,
recomputes the average, publishes it and decrypts it on the public path.

Usage:
    python -m scripts.demo.run_pool_scenario --pool espresso-bar 40 60 100
    python -m scripts.demo.run_pool_scenario -- -5 150
"""

import argparse

from ratings import pools
from ratings.analytics import count_totals, pool_summary_df
from ratings.client import encrypt_score, pool_id_from_name
from ratings.config import configure_logging
from ratings.fhe import LocalCoprocessor


def run_scenario(ledger: pools.RatingsLedger, pool_name: str, owner: str, scores: list[int]) -> int:
    """
    Drive one pool through bootstrap, ingestion, aggregation and publication.

    Returns:
        The publicly decrypted average
    """
    pool_id = pool_id_from_name(pool_name)
    ledger.set_owner(pool_id, owner, caller=owner)

    for position, score in enumerate(scores, 1):
        contributor = f"contributor-{position}"
        external, proof = encrypt_score(ledger.coprocessor, score, ledger=ledger.principal, user=contributor)
        event = ledger.submit_score(pool_id, external, proof, caller=contributor)
        print(f"  submitted rating #{event.count}")

    ledger.recompute_average(pool_id)
    ledger.make_public(pool_id, caller=ledger.owner(pool_id))
    return ledger.coprocessor.public_decrypt(ledger.avg_handle(pool_id))


def main():
    parser = argparse.ArgumentParser(description="Run an encrypted rating pool end to end")
    parser.add_argument("scores", nargs="+", type=int, help="Cleartext ratings to encrypt and submit")
    parser.add_argument("--pool", default="demo-pool", help="Human-readable pool name")
    parser.add_argument("--owner", default="alice", help="Owner principal for a new pool")

    args = parser.parse_args()
    configure_logging()

    ledger = pools.RatingsLedger(coprocessor=LocalCoprocessor())

    print("=" * 60)
    print(f"{ledger.version()} - pool '{args.pool}'")
    print("=" * 60)

    average = run_scenario(ledger, args.pool, args.owner, args.scores)

    print(f"\nPublished average: {average}")
    totals = count_totals(pool_summary_df(ledger))
    print(f"Pools: {totals.pools}, ratings: {totals.ratings}, published: {totals.published}")


if __name__ == "__main__":
    main()
