"""
Local Coprocessor - In-process FHE stand-in

Implements both the Coprocessor and FrontEnd interfaces in memory so the
pool core can run end to end without a real FHE backend.

Cleartexts live in a private table keyed by handle. Nothing here is
cryptographically hiding: the point is to enforce the same rules a real
coprocessor enforces.
- Attestations are HMAC-SHA256 tags binding an input handle to the
  contract that imports it and the user who submits it
- Every operation requires the actor to hold access on its inputs
- Results get transient access for the actor only
- Failing transactions roll back values, grants and public flags
"""

from __future__ import annotations
import hashlib
import hmac
import logging
import secrets
import threading
from contextlib import contextmanager
from typing import Iterator, Optional

from ratings.fhe.errors import (
    AccessDeniedError,
    CoprocessorError,
    InvalidProofError,
    UnknownHandleError,
)
from ratings.fhe.types import (
    HANDLE_SIZE,
    Ciphertext,
    EncryptedType,
    ExternalCiphertext,
    Handle,
    bind_ciphertext,
)

logger = logging.getLogger(__name__)


class LocalCoprocessor:
    """
    Reference coprocessor keeping every ciphertext in memory.

    Args:
        secret: Key for attestation tags and handle derivation (random if omitted)
    """

    def __init__(self, secret: Optional[bytes] = None):
        self._secret = secret if secret is not None else secrets.token_bytes(32)
        self._lock = threading.RLock()
        self._values: dict[Handle, tuple[EncryptedType, int]] = {}
        self._external: set[Handle] = set()
        self._acl: set[tuple[Handle, str]] = set()
        self._transient: set[tuple[Handle, str]] = set()
        self._public: set[Handle] = set()
        self._counter = 0
        self._actor: Optional[str] = None
        # Entries added by the open transaction, undone on failure
        self._journal: list[tuple[object, object]] = []

    # ---- Transactions ----

    @property
    def actor(self) -> Optional[str]:
        return self._actor

    @contextmanager
    def transaction(self, actor: str) -> Iterator["LocalCoprocessor"]:
        """
        Run a block of operations as actor, all-or-nothing.
        """
        with self._lock:
            if self._actor is not None:
                raise CoprocessorError(f"transaction already open for {self._actor}")
            counter = self._counter
            self._actor = actor
            try:
                yield self
            except BaseException:
                for table, key in reversed(self._journal):
                    if isinstance(table, dict):
                        del table[key]
                    else:
                        table.discard(key)
                self._counter = counter
                logger.debug(f"Rolled back {len(self._journal)} coprocessor entries for {actor}")
                raise
            finally:
                self._actor = None
                self._transient.clear()
                self._journal.clear()

    def _record(self, table, key, value=None) -> None:
        """Add key to table, remembering it for rollback if it is new."""
        if key in table:
            return
        if isinstance(table, dict):
            table[key] = value
        else:
            table.add(key)
        if self._actor is not None:
            self._journal.append((table, key))

    def _require_actor(self) -> str:
        if self._actor is None:
            raise CoprocessorError("operation requires an open transaction")
        return self._actor

    def _check_access(self, handle: Handle) -> None:
        actor = self._require_actor()
        if not self.is_allowed(handle, actor):
            raise AccessDeniedError(f"{actor} may not use handle {handle.hex()[:12]}")

    # ---- Handles ----

    def _new_handle(self, etype: EncryptedType, op: str, *inputs: bytes) -> Handle:
        self._counter += 1
        digest = hashlib.sha256()
        digest.update(self._secret)
        digest.update(op.encode("ascii"))
        for item in inputs:
            digest.update(item)
        digest.update(self._counter.to_bytes(8, "big"))
        # Last byte carries the encrypted type
        return digest.digest()[:HANDLE_SIZE - 1] + bytes([etype.value])

    def _emit(self, etype: EncryptedType, value: int, op: str, *inputs: bytes) -> Ciphertext:
        handle = self._new_handle(etype, op, *inputs)
        self._record(self._values, handle, (etype, etype.wrap(value)))
        self._transient.add((handle, self._require_actor()))
        return bind_ciphertext(self, handle, etype)

    def _cleartext(self, value: Ciphertext) -> int:
        self._check_access(value.handle)
        return self._entry(value.handle)[1]

    def _entry(self, handle: Handle) -> tuple[EncryptedType, int]:
        try:
            return self._values[handle]
        except KeyError:
            raise UnknownHandleError(f"unknown handle {handle.hex()[:12]}") from None

    def load(self, handle: Handle) -> Ciphertext:
        with self._lock:
            etype, _ = self._entry(handle)
            return bind_ciphertext(self, handle, etype)

    # ---- Inputs ----

    def _attest(self, handle: Handle, contract: str, user: str) -> bytes:
        message = handle + b"\x00" + contract.encode("utf-8") + b"\x00" + user.encode("utf-8")
        return hmac.new(self._secret, message, hashlib.sha256).digest()

    def encrypt_input(
        self,
        value: int,
        *,
        contract: str,
        user: str,
        etype: EncryptedType = EncryptedType.INT16
    ) -> tuple[ExternalCiphertext, bytes]:
        """
        Encrypt a client value for import by contract on behalf of user.

        Returns:
            Tuple of (external_ciphertext, attestation)
        """
        if not etype.contains(value):
            raise ValueError(f"{value} does not fit {etype.name}")
        with self._lock:
            self._counter += 1
            handle = hashlib.sha256(
                self._secret + b"input" + self._counter.to_bytes(8, "big")
            ).digest()[:HANDLE_SIZE - 1] + bytes([etype.value])
            self._record(self._values, handle, (etype, value))
            self._record(self._external, handle)
        return ExternalCiphertext(handle=handle, etype=etype), self._attest(handle, contract, user)

    def import_ciphertext(self, external: ExternalCiphertext, attestation: bytes, *, user: str) -> Ciphertext:
        with self._lock:
            actor = self._require_actor()
            if not isinstance(attestation, (bytes, bytearray)):
                raise InvalidProofError(f"attestation must be bytes, got {type(attestation).__name__}")
            if external.handle not in self._external:
                raise InvalidProofError("handle was not produced as an input")
            etype, _ = self._entry(external.handle)
            if etype != external.etype:
                raise InvalidProofError(f"input declared {external.etype.name}, encrypted as {etype.name}")
            expected = self._attest(external.handle, actor, user)
            if not hmac.compare_digest(expected, bytes(attestation)):
                raise InvalidProofError("attestation does not match input, contract and user")
            self._transient.add((external.handle, actor))
            return bind_ciphertext(self, external.handle, etype)

    def trivial_encrypt(self, value: int, etype: EncryptedType) -> Ciphertext:
        with self._lock:
            return self._emit(etype, value, "trivial", value.to_bytes(8, "big", signed=True))

    # ---- Arithmetic ----

    def bound(self, value: Ciphertext, scalar: int, *, upper: bool) -> Ciphertext:
        with self._lock:
            current = self._cleartext(value)
            result = min(current, scalar) if upper else max(current, scalar)
            logger.debug(f"{'min' if upper else 'max'}({value!r}, {scalar})")
            return self._emit(value.etype, result, "min" if upper else "max", value.handle)

    def add(self, left: Ciphertext, right: Ciphertext) -> Ciphertext:
        with self._lock:
            if left.etype != right.etype:
                raise CoprocessorError(f"cannot add {left.etype.name} and {right.etype.name}")
            result = self._cleartext(left) + self._cleartext(right)
            return self._emit(left.etype, result, "add", left.handle, right.handle)

    def div(self, value: Ciphertext, divisor: int) -> Ciphertext:
        with self._lock:
            if divisor <= 0:
                raise CoprocessorError(f"divisor must be positive, got {divisor}")
            current = self._cleartext(value)
            # Truncate toward zero
            quotient = abs(current) // divisor
            if current < 0:
                quotient = -quotient
            return self._emit(value.etype, quotient, "div", value.handle, divisor.to_bytes(8, "big"))

    def cast(self, value: Ciphertext, etype: EncryptedType) -> Ciphertext:
        with self._lock:
            return self._emit(etype, self._cleartext(value), "cast", value.handle)

    # ---- Access lists ----

    def allow(self, handle: Handle, principal: str) -> None:
        with self._lock:
            self._check_access(handle)
            self._record(self._acl, (handle, principal))

    def make_publicly_decryptable(self, handle: Handle) -> None:
        with self._lock:
            self._check_access(handle)
            self._record(self._public, handle)

    def is_allowed(self, handle: Handle, principal: Optional[str]) -> bool:
        return (handle, principal) in self._acl or (handle, principal) in self._transient

    def is_publicly_decryptable(self, handle: Handle) -> bool:
        return handle in self._public

    # ---- Decryption ----

    def public_decrypt(self, handle: Handle) -> int:
        with self._lock:
            if handle not in self._public:
                raise AccessDeniedError(f"handle {handle.hex()[:12]} is not publicly decryptable")
            return self._entry(handle)[1]

    def user_decrypt(self, handle: Handle, principal: str, *, contract: str) -> int:
        """
        Decrypt for principal; both principal and the owning contract need a grant.
        """
        with self._lock:
            if (handle, principal) not in self._acl:
                raise AccessDeniedError(f"{principal} has no read grant on {handle.hex()[:12]}")
            if (handle, contract) not in self._acl:
                raise AccessDeniedError(f"{contract} has no grant on {handle.hex()[:12]}")
            return self._entry(handle)[1]
