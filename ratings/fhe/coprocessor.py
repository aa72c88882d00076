"""
Coprocessor Interface

The operation set the pool core consumes, plus the client-side front end
used to produce inputs and read published results.

The core only ever talks to a Coprocessor. A FrontEnd is what contributors
and readers hold; the core never calls it.
"""

from __future__ import annotations
from typing import ContextManager, Optional, Protocol

from ratings.fhe.types import Ciphertext, EncryptedType, ExternalCiphertext, Handle


class Coprocessor(Protocol):
    """
    Homomorphic operations and access lists over opaque handles.

    Every operation runs inside transaction(actor). The actor must hold
    access (persistent or transient) to every input handle, and receives
    transient access to every result. Transient access ends with the
    transaction; a failing transaction rolls back all of its effects.
    """

    @property
    def actor(self) -> Optional[str]:
        ...

    def transaction(self, actor: str) -> ContextManager["Coprocessor"]:
        ...

    def import_ciphertext(self, external: ExternalCiphertext, attestation: bytes, *, user: str) -> Ciphertext:
        ...

    def trivial_encrypt(self, value: int, etype: EncryptedType) -> Ciphertext:
        ...

    def load(self, handle: Handle) -> Ciphertext:
        ...

    def bound(self, value: Ciphertext, scalar: int, *, upper: bool) -> Ciphertext:
        ...

    def add(self, left: Ciphertext, right: Ciphertext) -> Ciphertext:
        ...

    def div(self, value: Ciphertext, divisor: int) -> Ciphertext:
        ...

    def cast(self, value: Ciphertext, etype: EncryptedType) -> Ciphertext:
        ...

    def allow(self, handle: Handle, principal: str) -> None:
        ...

    def make_publicly_decryptable(self, handle: Handle) -> None:
        ...

    def is_allowed(self, handle: Handle, principal: str) -> bool:
        ...

    def is_publicly_decryptable(self, handle: Handle) -> bool:
        ...


class FrontEnd(Protocol):
    """Client-side encryption and decryption."""

    def encrypt_input(
        self,
        value: int,
        *,
        contract: str,
        user: str,
        etype: EncryptedType = EncryptedType.INT16
    ) -> tuple[ExternalCiphertext, bytes]:
        ...

    def public_decrypt(self, handle: Handle) -> int:
        ...

    def user_decrypt(self, handle: Handle, principal: str, *, contract: str) -> int:
        ...
