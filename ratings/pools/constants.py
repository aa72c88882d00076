"""
Pool Constants

Fixed parameters of the rating pools in one place.
"""

from ratings.fhe.types import EncryptedType


# ---- Rating Range ----

MIN_SCORE = 0
MAX_SCORE = 100


# ---- Encrypted Widths ----

SCORE_TYPE = EncryptedType.INT16  # Incoming ratings (signed, clamped on ingest)
SUM_TYPE = EncryptedType.UINT32   # Running sum and average


# ---- Identifiers ----

POOL_ID_SIZE = 32                   # Pool ids are opaque 32-byte keys
NULL_PRINCIPAL = "0x" + "0" * 40    # Never a valid owner or reader


VERSION = "EncryptedRatings v1.0.0"
