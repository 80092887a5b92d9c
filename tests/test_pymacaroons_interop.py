"""Caveat extraction from macaroons serialized by pymacaroons."""

import pytest

pymacaroons = pytest.importorskip("pymacaroons")

from l402_caveats.caveats import get_constraints_from_macaroon, MacaroonConstraints
from l402_caveats.challenge import parse_l402_challenge
from l402_caveats.macaroon import extract_caveats_from_macaroon


def _mint(version: int, caveats: list[str]) -> str:
    mac = pymacaroons.Macaroon(
        location="https://api.example.com",
        identifier="0" * 64,
        key="server-root-key",
        version=version,
    )
    for caveat in caveats:
        mac.add_first_party_caveat(caveat)
    serialized = mac.serialize()
    if isinstance(serialized, bytes):
        serialized = serialized.decode("ascii")
    return serialized


@pytest.mark.parametrize("version", [pymacaroons.MACAROON_V1, pymacaroons.MACAROON_V2])
class TestPymacaroonsInterop:
    def test_caveats_in_order(self, version):
        caveats = ["max_bandwidth=1000", "expiration=42", "services=video:0"]
        assert extract_caveats_from_macaroon(_mint(version, caveats)) == caveats

    def test_no_caveats(self, version):
        assert extract_caveats_from_macaroon(_mint(version, [])) == []

    def test_constraints_last_wins(self, version):
        mac = _mint(version, ["max_bandwidth=500", "expiration=10", "max_bandwidth=250"])
        assert get_constraints_from_macaroon(mac) == MacaroonConstraints(250, 10)

    def test_challenge(self, version):
        mac = _mint(version, ["max_bandwidth=2048"])
        challenge = parse_l402_challenge(f'L402 macaroon="{mac}", invoice="lnbc10u1ptest"')
        assert challenge is not None
        assert challenge.max_bandwidth == 2048
        assert challenge.expiry == 0
