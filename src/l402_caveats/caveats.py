"""Caveat condition grammar and constraint extraction.

A first-party caveat identifier reads ``condition<op>value`` where ``op``
is one of ``=``, ``<`` or ``>``. Only two conditions carry meaning here:
``max_bandwidth`` and ``expiration``. When a condition appears more than
once the last occurrence wins, since later caveats are restrictions
appended further down the delegation chain.
"""

from __future__ import annotations

import math
from collections.abc import Iterable
from dataclasses import dataclass

from l402_caveats.macaroon import extract_caveats_from_macaroon

# Condition names (matching l402-js)
MAX_BANDWIDTH_CONDITION = "max_bandwidth"
EXPIRATION_CONDITION = "expiration"

COMPARATORS = frozenset("=<>")


@dataclass(frozen=True)
class Caveat:
    """A decoded ``condition<op>value`` caveat."""

    condition: str
    comparator: str
    value: str


@dataclass(frozen=True)
class MacaroonConstraints:
    """Limits derived from a macaroon's caveats. 0 means no caveat found."""

    max_bandwidth: int | float = 0
    expiry: int | float = 0


def decode_caveat(text: str) -> Caveat | None:
    """Split a caveat identifier on its first comparator character.

    Returns:
        The decoded Caveat, or None if the string has no comparator.
    """
    for i, ch in enumerate(text):
        if ch in COMPARATORS:
            return Caveat(
                condition=text[:i].strip(),
                comparator=ch,
                value=text[i + 1:].strip(),
            )
    return None


def _to_number(value: str) -> int | float:
    """Parse a caveat value as a base-10 number; anything else is 0."""
    if "_" in value:
        return 0
    try:
        return int(value, 10)
    except ValueError:
        pass
    try:
        number = float(value)
    except ValueError:
        return 0
    if not math.isfinite(number):
        return 0
    return int(number) if number.is_integer() else number


def last_caveat_value(caveats: Iterable[str], condition: str) -> int | float:
    """Numeric value of the last caveat matching ``condition``, or 0."""
    result: int | float = 0
    for text in caveats:
        caveat = decode_caveat(text)
        if caveat is not None and caveat.condition == condition:
            result = _to_number(caveat.value)
    return result


def get_max_bandwidth_from_macaroon(macaroon: str) -> int | float:
    """Extract the ``max_bandwidth`` caveat from a base64 macaroon (0 if absent)."""
    return last_caveat_value(extract_caveats_from_macaroon(macaroon), MAX_BANDWIDTH_CONDITION)


def get_expiration_from_macaroon(macaroon: str) -> int | float:
    """Extract the ``expiration`` caveat from a base64 macaroon (0 if absent)."""
    return last_caveat_value(extract_caveats_from_macaroon(macaroon), EXPIRATION_CONDITION)


def get_constraints_from_macaroon(macaroon: str) -> MacaroonConstraints:
    """Decode a macaroon once and reduce its caveats to both constraints."""
    caveats = extract_caveats_from_macaroon(macaroon)
    return MacaroonConstraints(
        max_bandwidth=last_caveat_value(caveats, MAX_BANDWIDTH_CONDITION),
        expiry=last_caveat_value(caveats, EXPIRATION_CONDITION),
    )
