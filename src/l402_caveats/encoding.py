"""Byte-level helpers for macaroon decoding.

Base64 (standard or URL-safe, padded or not) to bytes, unsigned LEB128
varints, and one-byte-per-character text extraction.
"""

from __future__ import annotations

import base64
import binascii

from l402_caveats.exceptions import MacaroonDecodeError

_URLSAFE_TO_STD = str.maketrans("-_", "+/")


def base64_to_bytes(value: str) -> bytes:
    """Decode a standard or URL-safe base64 string.

    Padding is optional. Whitespace and characters outside the base64
    alphabet are rejected rather than skipped.

    Raises:
        MacaroonDecodeError: If the input is not valid base64.
    """
    b64 = value.translate(_URLSAFE_TO_STD)
    b64 += "=" * (-len(b64) % 4)
    try:
        return base64.b64decode(b64, validate=True)
    except (binascii.Error, ValueError) as e:
        raise MacaroonDecodeError(str(e)) from e


def read_varint(data: bytes, offset: int) -> tuple[int, int]:
    """Read an unsigned LEB128 varint starting at ``offset``.

    Stops silently at the end of ``data``. Use ``varint_complete`` on the
    returned offset to tell a full read from a truncated one.

    Returns:
        Tuple of (decoded value, offset after the last consumed byte).
    """
    value = 0
    shift = 0
    while offset < len(data):
        byte = data[offset]
        offset += 1
        value |= (byte & 0x7F) << shift
        if not byte & 0x80:
            break
        shift += 7
    return value, offset


def varint_complete(data: bytes, start: int, end: int) -> bool:
    """True if ``read_varint`` consumed ``data[start:end]`` as a whole varint."""
    return end > start and not data[end - 1] & 0x80


def bytes_to_str(data: bytes, start: int, length: int) -> str:
    """Map ``length`` bytes at ``start`` to characters one-to-one (no UTF-8)."""
    return data[start:start + length].decode("latin-1")
