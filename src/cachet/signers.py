from __future__ import annotations

from typing import Protocol

from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PrivateKey

from .constants import SEED_BYTES
from .keys import PublicKey, Signature
from .utils import b64u_decode


class BaseSigner(Protocol):
    """Anything that can produce detached Ed25519 signatures for one key."""

    @property
    def kid(self) -> str: ...

    @property
    def public_key(self) -> PublicKey: ...

    def public_jwk(self) -> dict[str, str]: ...

    def sign(self, msg: bytes) -> Signature: ...


class FileSigner:
    """Ed25519 signer built from a base64url-encoded 32-byte seed."""

    def __init__(self, seed_b64u: str) -> None:
        seed = b64u_decode(seed_b64u)
        if len(seed) != SEED_BYTES:
            raise ValueError(f"seed must decode to {SEED_BYTES} bytes")
        self._sk = Ed25519PrivateKey.from_private_bytes(seed)
        self._public_key = PublicKey(self._sk.public_key().public_bytes_raw())
        self._kid = self._public_key.kid

    @property
    def kid(self) -> str:
        if not isinstance(self._kid, str):
            raise ValueError("signer kid must be str")
        return self._kid

    @property
    def public_key(self) -> PublicKey:
        return self._public_key

    def public_jwk(self) -> dict[str, str]:
        return self._public_key.to_jwk()

    def sign(self, msg: bytes) -> Signature:
        if not isinstance(msg, (bytes, bytearray)):
            raise ValueError("message must be bytes")
        return Signature(self._sk.sign(bytes(msg)))
