"""Checksums used by the protocol: Adler-32 and hexadecimal SHA-1."""

from __future__ import annotations

import hashlib
import zlib

SHA1_HASH_SIZE = 20
SHA1_HEX_SIZE = 40


def adler32(data: bytes, value: int = 1) -> int:
    """Update a running Adler-32 checksum with ``data``.

    The initial value of a fresh checksum is 1.
    """
    return zlib.adler32(data, value) & 0xFFFFFFFF


def sha1_hex(data: bytes) -> str:
    """SHA-1 digest of ``data`` as 40 lowercase hexadecimal characters."""
    return hashlib.sha1(data).hexdigest()