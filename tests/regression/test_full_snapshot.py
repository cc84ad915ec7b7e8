from __future__ import annotations

from pathlib import Path

import pytest

from ipintel.common.config_loader import load_all_configs
from ipintel.common.fs import read_json
from ipintel.service import IntelService

FIXTURES = Path(__file__).resolve().parents[1] / "fixtures"

EXPECTED_FULL = {
    "ip": "8.8.8.8",
    "location": {
        "country": "United States",
        "countryCode": "US",
        "region": "Virginia",
        "city": "Ashburn",
        "postalCode": "20149",
        "lat": 39.03,
        "lon": -77.5,
        "timezone": "America/New_York",
    },
    "network": {
        "isp": "Google LLC",
        "org": "Google Public DNS",
        "asn": "AS15169 Google LLC",
        "hostname": "dns.google",
        "domain": "google.com",
    },
    "threat": {
        "isProxy": False,
        "isVPN": False,
        "isHosting": True,
        "isMobile": False,
        "isAnycast": True,
    },
    "confidence": {"sourcesQueried": 3, "sourcesResponded": 3},
    "sources": ["ip-api.com", "ipinfo.io", "ipwho.is"],
    "respondedSources": ["ip-api.com", "ipinfo.io", "ipwho.is"],
}


class FixtureHttpClient:
    routes = {
        "http://ip-api.com/json/8.8.8.8": "ip_api_8.8.8.8.json",
        "https://ipinfo.io/8.8.8.8/json": "ipinfo_8.8.8.8.json",
        "https://ipwho.is/8.8.8.8": "ipwho_8.8.8.8.json",
    }

    def get_json(self, url: str, **_kwargs):
        return read_json(FIXTURES / self.routes[url])

    def close(self):
        return None


def _full_output() -> dict:
    service = IntelService(load_all_configs(Path("config")), client=FixtureHttpClient())
    output = service.full("8.8.8.8")["output"]
    output.pop("fetchedAt")
    return output


@pytest.mark.regression
def test_full_fixture_snapshot_is_stable():
    assert _full_output() == EXPECTED_FULL


@pytest.mark.regression
def test_full_output_is_identical_across_runs():
    assert _full_output() == _full_output()
