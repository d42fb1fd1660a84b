import pytest

from revgeocode import (
    BusinessCredentials, ConfigError, Coordinate, GoogleProvider, NominatimProvider, Provider,
)

COORD = Coordinate(lon=-97.1161, lat=31.5498)


def test_google_url_puts_latitude_first():
    url = GoogleProvider(base_url="https://maps.example/json").build_url(COORD)

    assert url == "https://maps.example/json?latlng=31.5498,-97.1161&sensor=false"
    assert url.count("31.5498") == 1
    assert url.count("-97.1161") == 1


def test_google_url_sensor_flag():
    url = GoogleProvider().build_url(COORD, sensor=True)
    assert "&sensor=true" in url


def test_google_url_appends_business_credentials():
    creds = BusinessCredentials(client="abc", signature="vNIXE0xscrmjlyV-12Nj_BvUPaw=")
    url = GoogleProvider(base_url="https://maps.example/json").build_url(COORD, credentials=creds)

    assert url.endswith("&client=gme-abc&signature=vNIXE0xscrmjlyV-12Nj_BvUPaw=")


def test_google_url_encodes_once():
    creds = BusinessCredentials(client="my client", signature="abc%3D")
    url = GoogleProvider().build_url(COORD, credentials=creds)

    assert "client=gme-my%20client" in url
    # already escaped sequences are not escaped again
    assert "signature=abc%3D" in url
    assert "%253D" not in url


def test_nominatim_url_uses_separate_lat_lon_params():
    url = NominatimProvider(base_url="https://osm.example/reverse").build_url(
        COORD, sensor=True, credentials=BusinessCredentials("abc", "sig"),
    )

    assert url == "https://osm.example/reverse?lat=31.5498&lon=-97.1161&format=json"
    assert url.index("lat=") < url.index("lon=")


@pytest.mark.parametrize("provider", [GoogleProvider(), NominatimProvider()])
def test_unpaired_credentials_fail_for_every_backend(provider):
    with pytest.raises(ConfigError):
        provider.build_url(COORD, credentials=BusinessCredentials(client="abc"))


def test_from_source_dispatches_registered_provider():
    assert isinstance(Provider.from_source("google"), GoogleProvider)
    assert isinstance(Provider.from_source("OSM"), NominatimProvider)


def test_from_source_unknown_is_config_error():
    with pytest.raises(ConfigError, match="Unknown source"):
        Provider.from_source("bing")
