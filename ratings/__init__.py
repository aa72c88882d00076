"""
Encrypted Ratings Ledger

Pools collect bounded integer ratings (0-100) from anonymous contributors as
ciphertexts and publish an encrypted running average whose readers are chosen
by the pool owner.

Quick start:
    from ratings import pools
    from ratings.client import encrypt_score, pool_id_from_name

    ledger = pools.RatingsLedger()
    pool_id = pool_id_from_name("espresso-bar")
    ledger.set_owner(pool_id, "alice", caller="alice")

    external, proof = encrypt_score(ledger.coprocessor, 80, ledger=ledger.principal, user="bob")
    ledger.submit_score(pool_id, external, proof, caller="bob")
    ledger.recompute_average(pool_id)
"""
