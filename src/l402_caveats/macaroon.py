"""Extract first-party caveat identifiers from serialized macaroons.

Two wire formats are supported:

V2 (binary, produced by js-macaroon / l402-js / pymacaroons):
    version(0x02) | header section | caveat sections... | EOS | signature
    Each section is a run of fields ``type(varint) length(varint) data``
    closed by an EOS field (type 0, no length).

V1 (legacy packet format):
    packets of ``HHHH key value\\n`` where ``HHHH`` is the packet length in
    hex including the 4-byte prefix. Caveat identifiers use key ``cid``.

Nothing here verifies signatures. Decoding is best-effort: corrupt or
truncated input yields the caveats read so far, never an exception.
"""

from __future__ import annotations

import logging
import re

from l402_caveats.encoding import base64_to_bytes, bytes_to_str, read_varint, varint_complete

logger = logging.getLogger(__name__)

MACAROON_V2 = 0x02

# V2 field types
FIELD_EOS = 0
FIELD_IDENTIFIER = 2
FIELD_SIGNATURE = 6

# V1: 4-byte length + one key char + space + newline
_V1_MIN_PACKET = 9
_V1_CAVEAT_KEY = "cid"
_HEX_LENGTH_RE = re.compile(r"[0-9a-fA-F]{4}")


def extract_caveats_from_macaroon(macaroon: str) -> list[str]:
    """Extract caveat identifier strings from a base64-encoded macaroon.

    Dispatches on the leading byte: ``0x02`` is the V2 binary format,
    anything else is treated as V1 packets.

    Returns:
        Caveat identifiers in serialization order. Empty if the macaroon
        cannot be decoded or carries no caveats.
    """
    try:
        data = base64_to_bytes(macaroon)
        if len(data) < 2:
            return []
        if data[0] == MACAROON_V2:
            return extract_caveats_v2(data)
        return extract_caveats_v1(data)
    except Exception as e:
        logger.debug("Ignoring undecodable macaroon: %s", e)
        return []


def extract_caveats_v2(data: bytes) -> list[str]:
    """Walk a V2 binary macaroon and collect caveat identifiers.

    The first section is the macaroon's own header; identifier fields are
    only caveats once the first EOS has been seen. A signature field ends
    the document.
    """
    caveats: list[str] = []
    pos = 1  # skip version byte
    in_header = True

    while pos < len(data):
        start = pos
        field_type, pos = read_varint(data, pos)
        if not varint_complete(data, start, pos):
            break

        if field_type == FIELD_EOS:
            in_header = False
            continue

        start = pos
        field_len, pos = read_varint(data, pos)
        if not varint_complete(data, start, pos):
            break

        if pos + field_len > len(data):
            break

        if field_type == FIELD_IDENTIFIER and not in_header:
            caveats.append(bytes_to_str(data, pos, field_len))

        if field_type == FIELD_SIGNATURE:
            break

        pos += field_len

    return caveats


def extract_caveats_v1(data: bytes) -> list[str]:
    """Walk V1 packets and collect ``cid`` values.

    Stops at the first packet whose length prefix is not four hex digits,
    is shorter than the minimum packet, or runs past the buffer.
    """
    caveats: list[str] = []
    pos = 0

    while pos + _V1_MIN_PACKET - 1 < len(data):
        len_hex = bytes_to_str(data, pos, 4)
        if not _HEX_LENGTH_RE.fullmatch(len_hex):
            break
        packet_len = int(len_hex, 16)
        if packet_len < _V1_MIN_PACKET or pos + packet_len > len(data):
            break

        packet = bytes_to_str(data, pos + 4, packet_len - 4)
        key, sep, value = packet.partition(" ")
        if sep and key == _V1_CAVEAT_KEY:
            if value.endswith("\n"):
                value = value[:-1]
            caveats.append(value)

        pos += packet_len

    return caveats
