"""l402-caveats — decode L402 challenges and macaroon caveats.

Parses WWW-Authenticate L402/LSAT challenges, reads the first-party
caveats out of V1 and V2 serialized macaroons, and derives the
``max_bandwidth`` and ``expiration`` limits a credential carries. No
signature verification and no payments.

Usage:
    import l402_caveats

    challenge = l402_caveats.parse_l402_challenge(
        response.headers["WWW-Authenticate"]
    )
    if challenge is not None:
        print(challenge.invoice, challenge.max_bandwidth, challenge.expiry)

    # Later, with the paid credential
    token = l402_caveats.L402Token.from_credential(f"{challenge.macaroon}:{preimage}")
    l402_caveats.apply_l402_header(headers, token)
"""

from l402_caveats.caveats import (
    Caveat,
    MacaroonConstraints,
    decode_caveat,
    get_constraints_from_macaroon,
    get_expiration_from_macaroon,
    get_max_bandwidth_from_macaroon,
)
from l402_caveats.challenge import (
    HeaderByAccessor,
    HeaderByMap,
    L402Challenge,
    find_l402_challenge,
    get_l402_challenge_from_response,
    parse_challenge,
    parse_l402_challenge,
)
from l402_caveats.credential import (
    L402Auth,
    L402Token,
    apply_l402_header,
    parse_l402_credential,
)
from l402_caveats.exceptions import ChallengeParseError, L402Error, MacaroonDecodeError
from l402_caveats.macaroon import extract_caveats_from_macaroon

__version__ = "0.1.0"

__all__ = [
    # Challenges
    "L402Challenge",
    "parse_challenge",
    "parse_l402_challenge",
    "find_l402_challenge",
    "get_l402_challenge_from_response",
    "HeaderByAccessor",
    "HeaderByMap",
    # Credentials
    "L402Token",
    "L402Auth",
    "parse_l402_credential",
    "apply_l402_header",
    # Caveats
    "Caveat",
    "MacaroonConstraints",
    "decode_caveat",
    "extract_caveats_from_macaroon",
    "get_max_bandwidth_from_macaroon",
    "get_expiration_from_macaroon",
    "get_constraints_from_macaroon",
    # Exceptions
    "L402Error",
    "ChallengeParseError",
    "MacaroonDecodeError",
]
