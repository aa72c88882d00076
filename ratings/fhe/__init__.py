"""
FHE collaborator boundary.

The pool core never touches cleartexts. Everything it does to a rating goes
through a Coprocessor, which hands out capability-restricted Ciphertext
values identified by opaque 32-byte handles.
"""

from ratings.fhe.coprocessor import Coprocessor, FrontEnd
from ratings.fhe.errors import (
    AccessDeniedError,
    CoprocessorError,
    InvalidProofError,
    UnknownHandleError,
)
from ratings.fhe.local import LocalCoprocessor
from ratings.fhe.types import (
    HANDLE_SIZE,
    Ciphertext,
    EncryptedType,
    ExternalCiphertext,
    Handle,
)


__all__ = [
    # Interfaces
    "Coprocessor",
    "FrontEnd",
    "LocalCoprocessor",

    # Values
    "Ciphertext",
    "EncryptedType",
    "ExternalCiphertext",
    "Handle",
    "HANDLE_SIZE",

    # Errors
    "CoprocessorError",
    "InvalidProofError",
    "AccessDeniedError",
    "UnknownHandleError",
]
