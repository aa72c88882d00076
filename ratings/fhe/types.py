"""
Ciphertext Types

Opaque encrypted values and the handles that identify them.

Key concepts:
- Handle: 32-byte identifier of a ciphertext, safe to store and hand out
- Ciphertext: capability-restricted value bound to the coprocessor that made it
- ExternalCiphertext: client-supplied input waiting to be imported with its attestation
"""

from __future__ import annotations
from enum import IntEnum
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, field_validator

if TYPE_CHECKING:
    from ratings.fhe.coprocessor import Coprocessor


Handle = bytes

HANDLE_SIZE = 32


class EncryptedType(IntEnum):
    """Encrypted integer types understood by the coprocessor."""
    INT16 = 1   # Signed rating input, so out-of-range encodings stay representable
    UINT32 = 2  # Running sum and average

    @property
    def bits(self) -> int:
        return 16 if self is EncryptedType.INT16 else 32

    @property
    def signed(self) -> bool:
        return self is EncryptedType.INT16

    @property
    def min_value(self) -> int:
        return -(1 << (self.bits - 1)) if self.signed else 0

    @property
    def max_value(self) -> int:
        return (1 << (self.bits - 1)) - 1 if self.signed else (1 << self.bits) - 1

    def contains(self, value: int) -> bool:
        return self.min_value <= value <= self.max_value

    def wrap(self, value: int) -> int:
        """
        Reduce an integer modulo the type width (two's complement for signed types).
        """
        value &= (1 << self.bits) - 1
        if self.signed and value > self.max_value:
            value -= 1 << self.bits
        return value


class ExternalCiphertext(BaseModel):
    """
    A ciphertext produced by a client-side front end, not yet trusted.

    Only becomes usable once imported together with its attestation.
    """
    model_config = ConfigDict(frozen=True)

    handle: bytes
    etype: EncryptedType

    @field_validator("handle")
    @classmethod
    def _check_handle_size(cls, value: bytes) -> bytes:
        if len(value) != HANDLE_SIZE:
            raise ValueError(f"handle must be {HANDLE_SIZE} bytes, got {len(value)}")
        return value


_BIND_TOKEN = object()


class Ciphertext:
    """
    Encrypted integer that can be combined but never read.

    Supported operations: bound (max/min/clamp), add, scalar integer
    division, widening cast, read grants, public marking and handle export.
    Instances are created by a coprocessor through bind_ciphertext().
    """

    __slots__ = ("_handle", "_etype", "_coprocessor")

    def __init__(self, handle: Handle, etype: EncryptedType, coprocessor: "Coprocessor", *, _token=None):
        if _token is not _BIND_TOKEN:
            raise TypeError("Ciphertext values can only be created by a coprocessor")
        self._handle = handle
        self._etype = etype
        self._coprocessor = coprocessor

    @property
    def handle(self) -> Handle:
        return self._handle

    @property
    def etype(self) -> EncryptedType:
        return self._etype

    # ---- Homomorphic operations ----

    def max(self, bound: int) -> "Ciphertext":
        return self._coprocessor.bound(self, bound, upper=False)

    def min(self, bound: int) -> "Ciphertext":
        return self._coprocessor.bound(self, bound, upper=True)

    def clamp(self, low: int, high: int) -> "Ciphertext":
        """Project the encrypted value into [low, high]."""
        if low > high:
            raise ValueError(f"empty clamp range [{low}, {high}]")
        return self.max(low).min(high)

    def widen(self, etype: EncryptedType) -> "Ciphertext":
        return self._coprocessor.cast(self, etype)

    def __add__(self, other: "Ciphertext") -> "Ciphertext":
        if not isinstance(other, Ciphertext):
            return NotImplemented
        return self._coprocessor.add(self, other)

    def __floordiv__(self, divisor: int) -> "Ciphertext":
        if not isinstance(divisor, int):
            return NotImplemented
        return self._coprocessor.div(self, divisor)

    # ---- Access control ----

    def allow(self, principal: str) -> "Ciphertext":
        self._coprocessor.allow(self._handle, principal)
        return self

    def allow_this(self) -> "Ciphertext":
        """Grant the acting principal persistent access to this value."""
        self._coprocessor.allow(self._handle, self._coprocessor.actor)
        return self

    def make_public(self) -> "Ciphertext":
        self._coprocessor.make_publicly_decryptable(self._handle)
        return self

    def __repr__(self) -> str:
        return f"<Ciphertext({self._etype.name}, {self._handle.hex()[:12]}...)>"


def bind_ciphertext(coprocessor: "Coprocessor", handle: Handle, etype: EncryptedType) -> Ciphertext:
    """
    Wrap a handle as a Ciphertext owned by coprocessor.

    For coprocessor implementations only.
    """
    return Ciphertext(handle, etype, coprocessor, _token=_BIND_TOKEN)
