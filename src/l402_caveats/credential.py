"""L402 credentials: constraint extraction and Authorization header injection."""

from __future__ import annotations

import logging
import time
from collections.abc import Generator, MutableMapping
from dataclasses import dataclass

import httpx

from l402_caveats.caveats import MacaroonConstraints, get_constraints_from_macaroon
from l402_caveats.challenge import HeaderByMap, L402Challenge, get_l402_challenge_from_response

logger = logging.getLogger(__name__)

AUTHORIZATION = "Authorization"


def _now_ms() -> int:
    return int(time.time() * 1000)


def parse_l402_credential(credential: str) -> MacaroonConstraints:
    """Extract max_bandwidth and expiry from a ``macaroon:preimage`` credential.

    Everything before the first colon is the macaroon. The preimage is not
    inspected; a credential without a colon is a bare macaroon.
    """
    macaroon, _, _ = credential.partition(":")
    return get_constraints_from_macaroon(macaroon)


@dataclass(frozen=True)
class L402Token:
    """A paid L402 credential (``macaroon:preimage``) and its limits.

    ``expiry`` is a Unix timestamp in milliseconds. None means the token
    never expires; 0 is a real timestamp and is always in the past.
    """

    credential: str
    max_bandwidth: int | float = 0
    expiry: int | float | None = None

    @classmethod
    def from_credential(cls, credential: str) -> L402Token:
        """Build a token, reading its limits from the macaroon's caveats."""
        constraints = parse_l402_credential(credential)
        return cls(
            credential=credential,
            max_bandwidth=constraints.max_bandwidth,
            expiry=constraints.expiry or None,
        )

    def is_expired(self, now_ms: int | float | None = None) -> bool:
        if self.expiry is None:
            return False
        if now_ms is None:
            now_ms = _now_ms()
        return now_ms > self.expiry

    @property
    def authorization_header(self) -> str:
        return f"L402 {self.credential}"


def apply_l402_header(
    headers: MutableMapping[str, str],
    token: L402Token | None,
    now_ms: int | float | None = None,
) -> None:
    """Set ``Authorization: L402 <credential>`` if the token is usable.

    The headers are left untouched when there is no token, the credential
    is empty, or the token has expired.
    """
    if token is None or not token.credential:
        return
    if token.is_expired(now_ms):
        logger.debug("Not applying expired L402 token (expiry=%s)", token.expiry)
        return
    headers[AUTHORIZATION] = token.authorization_header


class L402Auth(httpx.Auth):
    """httpx auth that sends a stored L402 token on every request.

    Does not pay invoices. When the server answers 402 with an L402
    challenge, the parsed challenge is kept on ``last_challenge`` so the
    caller can settle it and build a new token.

    Usage:
        auth = L402Auth(L402Token.from_credential(credential))
        response = httpx.get("https://api.example.com/paid-resource", auth=auth)
        if response.status_code == 402:
            challenge = auth.last_challenge
    """

    def __init__(self, token: L402Token | None = None):
        self.token = token
        self.last_challenge: L402Challenge | None = None

    def auth_flow(self, request: httpx.Request) -> Generator[httpx.Request, httpx.Response, None]:
        apply_l402_header(request.headers, self.token)
        response = yield request
        if response.status_code == 402:
            self.last_challenge = get_l402_challenge_from_response(HeaderByMap(response.headers))
