"""
Pool operation failures.

Every failure aborts the operation with no effect on stored state.
"""


class RatingsError(Exception):
    """Base class for rejected pool operations."""


class AuthorizationError(RatingsError):
    """Caller is not the current pool owner."""


class ValidationError(RatingsError):
    """Malformed principal or pool id, or an attestation that does not verify."""


class StateError(RatingsError):
    """Pool missing or not configured, or no scores to average."""
