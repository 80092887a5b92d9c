"""L402 exceptions."""


class L402Error(Exception):
    """Base exception for l402-caveats."""


class MacaroonDecodeError(L402Error):
    """A macaroon string could not be decoded into bytes."""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Failed to decode macaroon: {reason}")


class ChallengeParseError(L402Error):
    """Failed to parse L402 challenge from WWW-Authenticate header."""

    def __init__(self, header: str, reason: str):
        self.header = header
        self.reason = reason
        super().__init__(f"Failed to parse L402 challenge: {reason}")
