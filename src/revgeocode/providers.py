"""
Reverse geocoding backends implementing the Provider interface.

GoogleProvider wraps the Google Maps geocoding API:
https://developers.google.com/maps/documentation/geocoding/

NominatimProvider wraps the OpenStreetMap Nominatim reverse endpoint:
https://nominatim.org/release-docs/latest/api/Reverse/
"""

from typing import Optional

from requests.utils import requote_uri

from .base import Provider
from .models import BusinessCredentials, Coordinate, Source
from .schemas import GoogleResponse, NominatimResponse
from .settings import settings


class GoogleProvider(Provider):
    """
    Google Maps geocoding API.

    Takes the coordinate as `latlng=lat,lon`, supports the sensor flag and
    Google Maps for Business client/signature authentication. May return
    several candidate results for one coordinate.
    """

    SOURCE = Source.GOOGLE
    SCHEMA = GoogleResponse

    def __init__(self, base_url: Optional[str] = None):
        self.base_url = base_url or settings.google_base_url

    def build_url(
        self,
        coordinate: Coordinate,
        sensor: bool = False,
        credentials: Optional[BusinessCredentials] = None,
    ) -> str:
        credentials = credentials or BusinessCredentials()
        credentials = credentials.normalized()

        url = (
            f"{self.base_url}?latlng={coordinate.lat},{coordinate.lon}"
            f"&sensor={'true' if sensor else 'false'}"
        )
        if credentials.is_business:
            url += f"&client={credentials.client}&signature={credentials.signature}"

        # Encode once, after assembly, so separators already in place survive
        return requote_uri(url)

    def failure_reason(self, response: GoogleResponse) -> Optional[str]:
        if response.status != "OK":
            return response.error_message or response.status
        if not response.results:
            return "no results"
        return None

    def candidate_count(self, response: GoogleResponse) -> int:
        return len(response.results)

    def extract_address(self, response: GoogleResponse) -> str:
        return response.results[0].formatted_address

    def extract_components(self, response: GoogleResponse) -> list[tuple[str, str]]:
        return [
            (component.label, component.long_name)
            for component in response.results[0].address_components
        ]


class NominatimProvider(Provider):
    """
    OpenStreetMap Nominatim reverse endpoint.

    Takes the coordinate as separate `lat=` and `lon=` parameters and always
    asks for JSON. Sensor flag and business credentials do not apply and are
    dropped. Returns a single result by construction.
    """

    SOURCE = Source.OSM
    SCHEMA = NominatimResponse

    def __init__(self, base_url: Optional[str] = None):
        self.base_url = base_url or settings.nominatim_base_url

    def build_url(
        self,
        coordinate: Coordinate,
        sensor: bool = False,
        credentials: Optional[BusinessCredentials] = None,
    ) -> str:
        # Pairing is still a configuration error even though nothing is sent
        if credentials is not None:
            credentials.validate()

        url = f"{self.base_url}?lat={coordinate.lat}&lon={coordinate.lon}&format=json"
        return requote_uri(url)

    def failure_reason(self, response: NominatimResponse) -> Optional[str]:
        if response.error is not None:
            return str(response.error)
        return None

    def extract_address(self, response: NominatimResponse) -> str:
        return response.display_name or ""

    def extract_components(self, response: NominatimResponse) -> list[tuple[str, str]]:
        return list(response.address.items())
