"""
Reset the pool store.

DANGEROUS: This deletes every pool record!
Only use when you want to start fresh for testing.

Usage:
    python -m scripts.maintenance.reset_ratings_db
"""

from ratings import pools
from ratings.config import configure_logging


def main():
    configure_logging()
    print("=" * 60)
    print("WARNING: Reset Pool Store")
    print("=" * 60)
    print()
    print(f"Database: {pools.get_database_url()}")
    print()
    print("This will DELETE all pools:")
    print("  - Owners and public rating counts")
    print("  - Sum and average ciphertext handles")
    print()

    response = input("Are you sure you want to reset? (type 'yes' to confirm): ")

    if response.lower() == "yes":
        print("\nResetting database...")
        pools.reset_db()
        print("✓ Pool store reset complete!")
    else:
        print("\nCancelled. No changes made.")


if __name__ == "__main__":
    main()
