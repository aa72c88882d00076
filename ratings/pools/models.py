"""
SQLAlchemy ORM Models for the Pool Store

Defines the PoolRecord model for relational persistence of pool state.
"""

from sqlalchemy import Boolean, Column, Integer, LargeBinary, String
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class PoolRecord(Base):
    """
    Persistent state of a single rating pool.

    Handles are opaque ciphertext identifiers; no rating values and no
    submitter identities are stored.
    """
    __tablename__ = 'pools'

    # Primary key: opaque 32-byte pool identifier
    pool_id = Column(LargeBinary(32), primary_key=True, nullable=False)

    owner = Column(String(255), nullable=True)
    initialized = Column(Boolean, nullable=False, default=False)

    # Ciphertext handles
    sum_handle = Column(LargeBinary(32), nullable=True)
    avg_handle = Column(LargeBinary(32), nullable=True)  # Stale until recomputed

    # Public number of accepted ratings
    ratings_count = Column(Integer, nullable=False, default=0)

    def __repr__(self):
        return f"<PoolRecord({self.pool_id.hex()[:12]}, owner={self.owner}, count={self.ratings_count})>"
