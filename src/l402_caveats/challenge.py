"""Parse L402 challenges from HTTP 402 responses."""

from __future__ import annotations

import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any, Union

from l402_caveats.caveats import get_constraints_from_macaroon
from l402_caveats.exceptions import ChallengeParseError

WWW_AUTHENTICATE = "WWW-Authenticate"


@dataclass(frozen=True)
class L402Challenge:
    """Parsed L402 challenge from a WWW-Authenticate header.

    ``max_bandwidth`` and ``expiry`` come from the macaroon's caveats and
    are 0 when the corresponding caveat is absent.
    """

    macaroon: str
    invoice: str
    max_bandwidth: int | float = 0
    expiry: int | float = 0

    @property
    def token_type(self) -> str:
        return "L402"


# Optional scheme token; LSAT is kept for backwards compatibility
_SCHEME_RE = re.compile(r"^(?:L402|LSAT)\s+", re.IGNORECASE)

# key="value" pairs in any order, comma or space separated
_PAIR_RE = re.compile(r'(\w+)="([^"]*)"')


def parse_challenge(header: str) -> L402Challenge:
    """Parse a WWW-Authenticate header containing an L402 challenge.

    Supports formats:
        L402 macaroon="<mac>", invoice="<bolt11>"
        L402 invoice="<bolt11>" macaroon="<mac>"
        LSAT macaroon="<mac>", invoice="<bolt11>"  (legacy)

    Args:
        header: The WWW-Authenticate header value.

    Returns:
        Parsed L402Challenge with macaroon, invoice and caveat constraints.

    Raises:
        ChallengeParseError: If the header has no macaroon or no invoice.
    """
    if not header:
        raise ChallengeParseError(header, "empty header")

    params = _SCHEME_RE.sub("", header, count=1)

    macaroon = ""
    invoice = ""
    for key, value in _PAIR_RE.findall(params):
        key = key.lower()
        if key == "macaroon":
            macaroon = value
        elif key == "invoice":
            invoice = value

    if not macaroon:
        raise ChallengeParseError(header, "missing macaroon")
    if not invoice:
        raise ChallengeParseError(header, "missing invoice")

    constraints = get_constraints_from_macaroon(macaroon)
    return L402Challenge(
        macaroon=macaroon,
        invoice=invoice,
        max_bandwidth=constraints.max_bandwidth,
        expiry=constraints.expiry,
    )


def parse_l402_challenge(header: str) -> L402Challenge | None:
    """Like ``parse_challenge`` but returns None instead of raising."""
    try:
        return parse_challenge(header)
    except ChallengeParseError:
        return None


def find_l402_challenge(headers: Mapping[str, str]) -> L402Challenge | None:
    """Search response headers for an L402 challenge.

    Returns:
        Parsed challenge, or None if no L402 challenge found.
    """
    # Normalize header names to lowercase for case-insensitive lookup
    lower_headers = {k.lower(): v for k, v in headers.items()}

    www_auth = lower_headers.get(WWW_AUTHENTICATE.lower(), "")
    if not www_auth:
        return None
    return parse_l402_challenge(www_auth)


@dataclass(frozen=True)
class HeaderByAccessor:
    """A response that exposes a named-header lookup method.

    Usage:
        HeaderByAccessor(http_client_response.getheader)
    """

    get_response_header: Callable[[str], str | None]


@dataclass(frozen=True)
class HeaderByMap:
    """A response whose headers support ``get(name)``, e.g. ``httpx.Headers``."""

    headers: Any


HeaderSource = Union[HeaderByAccessor, HeaderByMap]


def get_l402_challenge_from_response(source: HeaderSource | None) -> L402Challenge | None:
    """Read and parse the WWW-Authenticate header of a 402 response.

    Returns:
        Parsed challenge, or None if there is no source, no header, or the
        header is not an L402 challenge.
    """
    if source is None:
        return None
    if isinstance(source, HeaderByAccessor):
        header = source.get_response_header(WWW_AUTHENTICATE)
    elif isinstance(source, HeaderByMap):
        header = source.headers.get(WWW_AUTHENTICATE)
    else:
        raise TypeError(f"Unsupported header source: {type(source).__name__}")
    if not header:
        return None
    return parse_l402_challenge(header)
