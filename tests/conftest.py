from __future__ import annotations

import sys
from pathlib import Path

import pytest

REPO_ROOT = Path(__file__).resolve().parents[1]
SRC_PATH = REPO_ROOT / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

from revgeocode import HttpClient, QuotaGovernor, ReverseGeocoder, set_default_governor  # noqa: E402


WACO = (-97.1161, 31.5498)

GOOGLE_OK = {
    "status": "OK",
    "results": [
        {
            "formatted_address": "1311 S 5th St, Waco, TX 76706, USA",
            "address_components": [
                {"long_name": "1311", "short_name": "1311", "types": ["street_number"]},
                {"long_name": "South 5th Street", "short_name": "S 5th St", "types": ["route"]},
                {"long_name": "Waco", "short_name": "Waco", "types": ["locality", "political"]},
                {"long_name": "McLennan County", "short_name": "McLennan County",
                 "types": ["administrative_area_level_2", "political"]},
                {"long_name": "Texas", "short_name": "TX", "types": ["administrative_area_level_1", "political"]},
                {"long_name": "United States", "short_name": "US", "types": ["country", "political"]},
                {"long_name": "76706", "short_name": "76706", "types": ["postal_code"]},
            ],
        },
        {"formatted_address": "Waco, TX, USA", "address_components": []},
    ],
}

GOOGLE_ZERO_RESULTS = {"status": "ZERO_RESULTS", "results": []}

OSM_OK = {
    "place_id": 1234,
    "display_name": "Baylor University, South 5th Street, Waco, McLennan County, Texas, 76706, United States",
    "address": {
        "university": "Baylor University",
        "road": "South 5th Street",
        "city": "Waco",
        "county": "McLennan County",
        "state": "Texas",
        "postcode": "76706",
        "country": "United States",
        "country_code": "us",
    },
}

OSM_ERROR = {"error": "Unable to geocode"}


class DummyResponse:
    def __init__(self, payload=None, status_code=200, error=None):
        self.status_code = status_code
        self._payload = payload
        self._error = error
        self.closed = False

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.closed = True
        return False

    def json(self):
        if self._error is not None:
            raise self._error
        return self._payload


class DummySession:
    def __init__(self, *payloads):
        self.calls = []
        self.responses = [p if isinstance(p, DummyResponse) else DummyResponse(p) for p in payloads]
        self.error = None

    def get(self, url, headers=None, timeout=None):
        self.calls.append((url, headers, timeout))
        if self.error is not None:
            raise self.error
        return self.responses.pop(0)


@pytest.fixture
def make_geocoder():
    """Build a ReverseGeocoder with its own governor and a fake session."""
    def _make(*payloads, daily_limit=2500, **governor_kwargs):
        session = DummySession(*payloads)
        governor = QuotaGovernor(daily_limit=daily_limit, **governor_kwargs)
        geocoder = ReverseGeocoder(governor=governor, http_client=HttpClient(session=session))
        return geocoder, session, governor
    return _make


@pytest.fixture(autouse=True)
def reset_default_governor():
    yield
    set_default_governor(None)
