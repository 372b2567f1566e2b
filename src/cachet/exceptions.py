from __future__ import annotations

from enum import Enum


class CachetError(Exception):
    """Base class for every error raised by this package."""


class ParseError(CachetError):
    """A serialized cachet was rejected. Terminal for that parse call."""


class BadTag(ParseError):
    pass


class UnsupportedVersion(ParseError):
    pass


class Truncated(ParseError):
    pass


class SignatureInvalid(ParseError):
    pass


class DataLengthMismatch(ParseError):
    pass


class TrustError(ParseError):
    """The embedded trust chain could not be authorized."""


class MalformedChain(TrustError):
    pass


class UntrustedRoot(TrustError):
    pass


class SigningFailed(CachetError):
    """Construction failed. Not expected with a correctly configured signer."""


class ReasonCode(str, Enum):
    BAD_TAG = "bad_tag"
    UNSUPPORTED_VERSION = "unsupported_version"
    TRUNCATED = "truncated"
    MALFORMED_CHAIN = "malformed_chain"
    UNTRUSTED_ROOT = "untrusted_root"
    SIGNATURE_INVALID = "signature_invalid"
    DATA_LENGTH_MISMATCH = "data_length_mismatch"
    SIGNING_FAILED = "signing_failed"
    INTERNAL_ERROR = "internal_error"


_REASONS: dict[type[CachetError], ReasonCode] = {
    BadTag: ReasonCode.BAD_TAG,
    UnsupportedVersion: ReasonCode.UNSUPPORTED_VERSION,
    Truncated: ReasonCode.TRUNCATED,
    MalformedChain: ReasonCode.MALFORMED_CHAIN,
    UntrustedRoot: ReasonCode.UNTRUSTED_ROOT,
    SignatureInvalid: ReasonCode.SIGNATURE_INVALID,
    DataLengthMismatch: ReasonCode.DATA_LENGTH_MISMATCH,
    SigningFailed: ReasonCode.SIGNING_FAILED,
}


def reason_code_for_exception(exc: BaseException) -> str:
    """Map an exception to its short, stable reason string."""
    for cls, code in _REASONS.items():
        if isinstance(exc, cls):
            return code.value
    return ReasonCode.INTERNAL_ERROR.value
