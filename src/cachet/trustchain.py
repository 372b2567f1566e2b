"""Cross-signed key chains and the root key store they are authorized against.

A chain is a root public key followed by zero or more links. Each link holds
the next public key and the previous key's signature over that key's raw
bytes. The last key in the chain is the leaf that signs cachets.

Wire format (big-endian)::

    b"TC" | u16 version (2) | u8 key count | root key (32) | count-1 x (key (32) | sig (64))

The encoding is self-delimiting: the key count fixes the total length.
"""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Iterator
from dataclasses import dataclass
from typing import Any

from .constants import (
    MAX_CHAIN_KEYS,
    PUBLIC_KEY_BYTES,
    SIGNATURE_BYTES,
    TRUST_CHAIN_FORMAT_VERSION,
    TRUST_CHAIN_TAG,
)
from .exceptions import MalformedChain, UntrustedRoot
from .keys import PublicKey, Signature
from .signers import BaseSigner
from .utils import be16, read_be16

logger = logging.getLogger(__name__)

_CHAIN_HEADER_BYTES = len(TRUST_CHAIN_TAG) + 2 + 1
_LINK_BYTES = PUBLIC_KEY_BYTES + SIGNATURE_BYTES


@dataclass(frozen=True)
class RootKeyStore:
    """Immutable set of public keys trusted as chain roots."""

    keys: frozenset[PublicKey] = frozenset()

    @classmethod
    def of(cls, *keys: PublicKey) -> RootKeyStore:
        return cls(frozenset(keys))

    @classmethod
    def from_jwks(cls, jwks: dict[str, Any]) -> RootKeyStore:
        keys_obj = jwks.get("keys")
        if not isinstance(keys_obj, list):
            raise ValueError("jwks keys must be list")
        keys = set()
        for jwk in keys_obj:
            if not isinstance(jwk, dict):
                continue
            if jwk.get("kty") != "OKP" or jwk.get("crv") != "Ed25519":
                continue
            keys.add(PublicKey.from_jwk(jwk))
        return cls(frozenset(keys))

    @classmethod
    def load(cls, path: str | os.PathLike[str]) -> RootKeyStore:
        with open(path, encoding="utf-8") as handle:
            return cls.from_jwks(json.load(handle))

    def to_jwks(self) -> dict[str, Any]:
        return {"keys": [k.to_jwk() for k in sorted(self.keys, key=lambda k: k.raw)]}

    def __contains__(self, key: object) -> bool:
        return key in self.keys

    def __iter__(self) -> Iterator[PublicKey]:
        return iter(self.keys)

    def __len__(self) -> int:
        return len(self.keys)


@dataclass(frozen=True)
class ChainLink:
    public_key: PublicKey
    signature: Signature


@dataclass(frozen=True)
class TrustChain:
    root_key: PublicKey
    links: tuple[ChainLink, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "links", tuple(self.links))
        if len(self.links) + 1 > MAX_CHAIN_KEYS:
            raise ValueError(f"trust chain holds at most {MAX_CHAIN_KEYS} keys")

    @classmethod
    def issue(cls, root: BaseSigner, *issued: BaseSigner | PublicKey) -> TrustChain:
        """Build a chain where each signer vouches for the key after it.

        Only the last element of ``issued`` may be a bare :class:`PublicKey`,
        since every other key has to sign its successor.
        """
        links: list[ChainLink] = []
        voucher: BaseSigner = root
        for idx, item in enumerate(issued):
            key = item if isinstance(item, PublicKey) else item.public_key
            links.append(ChainLink(key, voucher.sign(key.raw)))
            if isinstance(item, PublicKey):
                if idx != len(issued) - 1:
                    raise ValueError("only the leaf of a chain may be a bare public key")
                break
            voucher = item
        return cls(root.public_key, tuple(links))

    @classmethod
    def two_link_chain(
        cls,
        root_key: PublicKey,
        end_key: PublicKey,
        key_sig: Signature,
        root_keys: RootKeyStore,
    ) -> TrustChain:
        chain = cls(root_key, (ChainLink(end_key, key_sig),))
        chain.validate(root_keys)
        return chain

    def leaf_public_key(self) -> PublicKey:
        if self.links:
            return self.links[-1].public_key
        return self.root_key

    def keys(self) -> list[PublicKey]:
        return [self.root_key, *(link.public_key for link in self.links)]

    def to_bytes(self) -> bytes:
        parts = [
            TRUST_CHAIN_TAG,
            be16(TRUST_CHAIN_FORMAT_VERSION),
            bytes([len(self.links) + 1]),
            self.root_key.raw,
        ]
        for link in self.links:
            parts.append(link.public_key.raw)
            parts.append(link.signature.raw)
        return b"".join(parts)

    def validate(self, root_keys: RootKeyStore) -> None:
        """Authorize the chain: trusted root first, then every cross-signature."""
        if self.root_key not in root_keys:
            raise UntrustedRoot(f"root key not trusted: {self.root_key.kid}")
        voucher = self.root_key
        for idx, link in enumerate(self.links):
            if not voucher.verify(link.signature, link.public_key.raw):
                raise MalformedChain(f"cross-signature invalid at link {idx + 1}")
            voucher = link.public_key


def _decode_chain(buf: bytes | memoryview) -> tuple[TrustChain, int]:
    view = memoryview(buf)
    if len(view) < _CHAIN_HEADER_BYTES:
        raise MalformedChain("trust chain header truncated")
    if bytes(view[: len(TRUST_CHAIN_TAG)]) != TRUST_CHAIN_TAG:
        raise MalformedChain("bad trust chain tag")
    version = read_be16(view, len(TRUST_CHAIN_TAG))
    if version != TRUST_CHAIN_FORMAT_VERSION:
        raise MalformedChain(f"unsupported trust chain version {version}")
    count = view[_CHAIN_HEADER_BYTES - 1]
    if not 1 <= count <= MAX_CHAIN_KEYS:
        raise MalformedChain(f"trust chain key count out of range: {count}")
    consumed = _CHAIN_HEADER_BYTES + PUBLIC_KEY_BYTES + (count - 1) * _LINK_BYTES
    if len(view) < consumed:
        raise MalformedChain("trust chain truncated")
    off = _CHAIN_HEADER_BYTES
    root_key = PublicKey(view[off : off + PUBLIC_KEY_BYTES])
    off += PUBLIC_KEY_BYTES
    links = []
    for _ in range(count - 1):
        key = PublicKey(view[off : off + PUBLIC_KEY_BYTES])
        off += PUBLIC_KEY_BYTES
        sig = Signature(view[off : off + SIGNATURE_BYTES])
        off += SIGNATURE_BYTES
        links.append(ChainLink(key, sig))
    return TrustChain(root_key, tuple(links)), consumed


def parse_trusted(
    buf: bytes | memoryview, root_keys: RootKeyStore
) -> tuple[TrustChain, int]:
    """Decode a chain from the front of ``buf`` and authorize it against ``root_keys``.

    Returns the chain together with the number of bytes it occupied. Raises
    :class:`MalformedChain` or :class:`UntrustedRoot`; an unauthorized chain is
    never returned.
    """
    chain, consumed = _decode_chain(buf)
    chain.validate(root_keys)
    logger.debug(
        "trust chain authorized: root=%s keys=%d", chain.root_key.kid, len(chain.links) + 1
    )
    return chain, consumed
