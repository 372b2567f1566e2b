"""Fixed-size Ed25519 value types and the detached signature primitive."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PublicKey

from .constants import PUBLIC_KEY_BYTES, SIGNATURE_BYTES
from .utils import b64u_decode, b64u_encode, sha256_hex


def _coerce_raw(raw: Any, size: int, what: str) -> bytes:
    if not isinstance(raw, (bytes, bytearray, memoryview)):
        raise ValueError(f"{what} must be bytes")
    raw = bytes(raw)
    if len(raw) != size:
        raise ValueError(f"{what} must be {size} bytes, got {len(raw)}")
    return raw


@dataclass(frozen=True)
class Signature:
    raw: bytes

    def __post_init__(self) -> None:
        object.__setattr__(self, "raw", _coerce_raw(self.raw, SIGNATURE_BYTES, "signature"))

    def __bytes__(self) -> bytes:
        return self.raw

    def __repr__(self) -> str:
        return f"Signature({self.raw.hex()[:16]}...)"


@dataclass(frozen=True)
class PublicKey:
    raw: bytes

    def __post_init__(self) -> None:
        object.__setattr__(self, "raw", _coerce_raw(self.raw, PUBLIC_KEY_BYTES, "public key"))

    def __bytes__(self) -> bytes:
        return self.raw

    def __repr__(self) -> str:
        return f"PublicKey({self.kid})"

    @property
    def kid(self) -> str:
        """Short key identifier derived from the raw key bytes."""
        return f"ed25519:{sha256_hex(self.raw)[:16]}"

    @classmethod
    def from_jwk(cls, jwk: dict[str, Any]) -> PublicKey:
        if jwk.get("kty") != "OKP" or jwk.get("crv") != "Ed25519":
            raise ValueError("jwk is not an Ed25519 OKP key")
        x = jwk.get("x")
        if not isinstance(x, str):
            raise ValueError("jwk missing x")
        return cls(b64u_decode(x))

    def to_jwk(self) -> dict[str, str]:
        return {"kty": "OKP", "crv": "Ed25519", "x": b64u_encode(self.raw), "kid": self.kid}

    def verify(self, signature: Signature, message: bytes | memoryview) -> bool:
        """Check a detached signature. Never raises on a bad signature."""
        try:
            pub = Ed25519PublicKey.from_public_bytes(self.raw)
        except ValueError:
            return False
        try:
            pub.verify(signature.raw, bytes(message))
        except InvalidSignature:
            return False
        return True
