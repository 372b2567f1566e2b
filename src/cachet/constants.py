from __future__ import annotations

CACHET_TAG = b"CT"
CACHET_FORMAT_VERSION = 1

TRUST_CHAIN_TAG = b"TC"
TRUST_CHAIN_FORMAT_VERSION = 2
MAX_CHAIN_KEYS = 8

PUBLIC_KEY_BYTES = 32
SIGNATURE_BYTES = 64
SEED_BYTES = 32

# tag(2) + version(2)
HEADER_BYTES = 4
DATA_LENGTH_BYTES = 4
MAX_DATA_LEN = 0xFFFFFFFF

MAX_DATA_LEN_ENV = "CACHET_MAX_DATA_LEN"
