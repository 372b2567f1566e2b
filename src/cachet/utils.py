from __future__ import annotations

import base64
import hashlib
import struct

_BE32 = struct.Struct(">I")
_BE16 = struct.Struct(">H")


def b64u_encode(raw: bytes) -> str:
    return base64.urlsafe_b64encode(raw).decode("ascii").rstrip("=")


def b64u_decode(text: str) -> bytes:
    pad = "=" * (-len(text) % 4)
    return base64.urlsafe_b64decode(text + pad)


def sha256_hex(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest()


def be32(value: int) -> bytes:
    return _BE32.pack(value)


def be16(value: int) -> bytes:
    return _BE16.pack(value)


def read_be32(buf: bytes | memoryview, offset: int = 0) -> int:
    return _BE32.unpack_from(buf, offset)[0]


def read_be16(buf: bytes | memoryview, offset: int = 0) -> int:
    return _BE16.unpack_from(buf, offset)[0]
