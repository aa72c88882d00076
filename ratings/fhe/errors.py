"""
Errors raised by a coprocessor.
"""


class CoprocessorError(Exception):
    """Base class for failures inside the FHE collaborator."""


class InvalidProofError(CoprocessorError):
    """An external ciphertext's attestation did not verify."""


class AccessDeniedError(CoprocessorError):
    """The acting principal has no permission on a handle."""


class UnknownHandleError(CoprocessorError):
    """A handle does not reference any ciphertext."""
