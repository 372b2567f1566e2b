from __future__ import annotations

from dataclasses import dataclass

from .constants import CACHET_FORMAT_VERSION, CACHET_TAG, MAX_DATA_LEN
from .exceptions import SigningFailed
from .keys import Signature
from .signers import BaseSigner
from .trustchain import TrustChain
from .utils import be16, be32


@dataclass(frozen=True)
class Cachet:
    """A payload signed by the leaf key of a trust chain.

    ``signature`` covers ``trust_chain.to_bytes() || BE32(len(data)) || data``.
    Instances returned by :func:`cachet.verify.parse_cachet` have had that
    checked against a trusted root; instances from :func:`sign_cachet` are
    trusted because the caller holds the leaf key.
    """

    signature: Signature
    trust_chain: TrustChain
    data: bytes

    def __post_init__(self) -> None:
        object.__setattr__(self, "data", bytes(self.data))

    def signed_bytes(self) -> bytes:
        return signed_region(self.trust_chain, self.data)

    def to_bytes(self) -> bytes:
        return b"".join(
            [
                CACHET_TAG,
                be16(CACHET_FORMAT_VERSION),
                self.signature.raw,
                self.signed_bytes(),
            ]
        )


def signed_region(chain: TrustChain, data: bytes) -> bytes:
    return chain.to_bytes() + be32(len(data)) + data


def sign_cachet(data: bytes, chain: TrustChain, signer: BaseSigner) -> Cachet:
    """Sign ``data`` with the chain's leaf key.

    The signer is not checked against the chain's leaf; a mismatched pair
    produces a cachet that no verifier will accept.
    """
    if not isinstance(data, (bytes, bytearray)):
        raise ValueError("data must be bytes")
    if len(data) > MAX_DATA_LEN:
        raise SigningFailed(f"data too large to sign: {len(data)} bytes")
    data = bytes(data)
    signature = signer.sign(signed_region(chain, data))
    return Cachet(signature=signature, trust_chain=chain, data=data)


def serialize_cachet(cachet: Cachet) -> bytes:
    return cachet.to_bytes()
