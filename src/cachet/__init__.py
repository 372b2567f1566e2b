from .constants import CACHET_FORMAT_VERSION, CACHET_TAG, SIGNATURE_BYTES
from .envelope import Cachet, serialize_cachet, sign_cachet
from .exceptions import (
    BadTag,
    CachetError,
    DataLengthMismatch,
    MalformedChain,
    ParseError,
    ReasonCode,
    SignatureInvalid,
    SigningFailed,
    Truncated,
    TrustError,
    UnsupportedVersion,
    UntrustedRoot,
    reason_code_for_exception,
)
from .keys import PublicKey, Signature
from .signers import BaseSigner, FileSigner
from .trustchain import ChainLink, RootKeyStore, TrustChain, parse_trusted
from .verify import build_jwks_for_signers, parse_cachet, verify_cachet

__all__ = [
    "Cachet",
    "sign_cachet",
    "serialize_cachet",
    "parse_cachet",
    "verify_cachet",
    "build_jwks_for_signers",
    "TrustChain",
    "ChainLink",
    "RootKeyStore",
    "parse_trusted",
    "PublicKey",
    "Signature",
    "FileSigner",
    "BaseSigner",
    # exceptions
    "CachetError",
    "ParseError",
    "BadTag",
    "UnsupportedVersion",
    "Truncated",
    "TrustError",
    "MalformedChain",
    "UntrustedRoot",
    "SignatureInvalid",
    "DataLengthMismatch",
    "SigningFailed",
    "ReasonCode",
    "reason_code_for_exception",
    "CACHET_TAG",
    "CACHET_FORMAT_VERSION",
    "SIGNATURE_BYTES",
    "__version__",
]
try:  # prefer single source of truth from installed metadata
    from importlib.metadata import version as _pkg_version

    __version__ = _pkg_version("cachet")
except Exception:  # pragma: no cover
    __version__ = "0.0.0"
