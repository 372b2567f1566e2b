from __future__ import annotations

import logging
import os
from collections.abc import Iterable
from typing import Any

from .constants import (
    CACHET_FORMAT_VERSION,
    CACHET_TAG,
    DATA_LENGTH_BYTES,
    MAX_DATA_LEN,
    MAX_DATA_LEN_ENV,
    SIGNATURE_BYTES,
)
from .envelope import Cachet
from .exceptions import (
    BadTag,
    DataLengthMismatch,
    ParseError,
    SignatureInvalid,
    Truncated,
    UnsupportedVersion,
    reason_code_for_exception,
)
from .keys import Signature
from .trustchain import RootKeyStore, TrustChain, parse_trusted
from .utils import read_be16, read_be32

logger = logging.getLogger(__name__)


def _resolve_max_data_len(max_data_len: int | None) -> int:
    if max_data_len is not None:
        return max_data_len
    raw = os.getenv(MAX_DATA_LEN_ENV)
    if not raw:
        return MAX_DATA_LEN
    try:
        return int(raw)
    except ValueError as e:
        raise ValueError(f"{MAX_DATA_LEN_ENV} must be an integer, got {raw!r}") from e


def _take(view: memoryview, off: int, size: int, what: str) -> memoryview:
    if len(view) - off < size:
        raise Truncated(f"{what} truncated: need {size} bytes at offset {off}")
    return view[off : off + size]


def _check_tag(view: memoryview) -> int:
    tag = _take(view, 0, len(CACHET_TAG), "tag")
    if bytes(tag) != CACHET_TAG:
        raise BadTag(f"bad tag {bytes(tag)!r}")
    return len(CACHET_TAG)


def _check_version(view: memoryview, off: int) -> int:
    version = read_be16(_take(view, off, 2, "version"))
    if version != CACHET_FORMAT_VERSION:
        raise UnsupportedVersion(f"unsupported version {version}")
    return off + 2


def _verify_signature(chain: TrustChain, sig: Signature, signed_region: memoryview) -> None:
    if not chain.leaf_public_key().verify(sig, signed_region):
        raise SignatureInvalid("signature invalid")


def _extract_data(signed_region: memoryview, chain_len: int, max_data_len: int) -> bytes:
    declared = read_be32(_take(signed_region, chain_len, DATA_LENGTH_BYTES, "data length"))
    off = chain_len + DATA_LENGTH_BYTES
    remaining = len(signed_region) - off
    if declared > max_data_len:
        raise DataLengthMismatch(f"data length {declared} exceeds limit {max_data_len}")
    if declared > remaining:
        raise Truncated(f"data truncated: declared {declared} bytes, {remaining} present")
    if declared < remaining:
        raise DataLengthMismatch(f"{remaining - declared} trailing bytes after data")
    return bytes(signed_region[off:])


def parse_cachet(
    blob: bytes | bytearray | memoryview,
    root_keys: RootKeyStore,
    *,
    max_data_len: int | None = None,
) -> Cachet:
    """Parse and verify a serialized cachet or raise a :class:`ParseError`.

    Checks run in a fixed order and the first failure aborts the parse:
    tag, version, signature field, trust chain authorization against
    ``root_keys``, signature over the raw signed region, then payload length.
    The signature is checked against the bytes exactly as received, never
    against a re-encoding of the parsed chain.
    """
    limit = _resolve_max_data_len(max_data_len)
    view = memoryview(blob).toreadonly()
    off = _check_tag(view)
    off = _check_version(view, off)
    sig = Signature(_take(view, off, SIGNATURE_BYTES, "signature"))
    off += SIGNATURE_BYTES
    signed_region = view[off:]
    chain, chain_len = parse_trusted(signed_region, root_keys)
    _verify_signature(chain, sig, signed_region)
    data = _extract_data(signed_region, chain_len, limit)
    logger.debug("cachet verified: root=%s data=%d bytes", chain.root_key.kid, len(data))
    return Cachet(signature=sig, trust_chain=chain, data=data)


def verify_cachet(
    blob: bytes | bytearray | memoryview,
    root_keys: RootKeyStore,
    *,
    max_data_len: int | None = None,
) -> tuple[Cachet | None, str | None]:
    """Boolean-style API.

    For richer error handling prefer :func:`parse_cachet`.
    Returns (cachet, None) on success or (None, reason) where reason is a
    short reason code.
    """
    try:
        return parse_cachet(blob, root_keys, max_data_len=max_data_len), None
    except ParseError as e:
        reason = reason_code_for_exception(e)
        logger.debug("cachet rejected: %s (%s)", reason, e)
        return None, reason


def build_jwks_for_signers(signers: Iterable) -> dict[str, Any]:
    return {"keys": [s.public_jwk() for s in signers]}
