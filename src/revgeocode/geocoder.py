"""
Reverse geocoding pipeline.

    request builder -> quota governor -> HTTP client -> normalizer -> output shaper

Note that in most cases by using the Google backend you are agreeing to the
Google Maps API Terms of Service (https://developers.google.com/maps/terms),
and by using the OSM backend to the Nominatim usage policy
(https://operations.osmfoundation.org/policies/nominatim/).
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Iterable, Optional

import pandas as pd
from tqdm import tqdm

from .base import Provider, QuotaGate
from .client import HttpClient
from .models import (
    BusinessCredentials, Coordinate, OutputShape, QuotaDecision, QuotaStatus, Source,
)
from .normalizers import ResponseNormalizer
from .providers import GoogleProvider, NominatimProvider  # noqa: F401  (registers providers)
from .quota import QuotaGovernor
from .shaping import OutputShaper
from .utils.errors import ConfigError

logger = logging.getLogger(__name__)

# Process-wide quota state, created on first use from settings
_default_governor: Optional[QuotaGate] = None
_default_geocoder: Optional['ReverseGeocoder'] = None
_default_lock = threading.Lock()


def get_default_governor() -> QuotaGate:
    global _default_governor
    with _default_lock:
        if _default_governor is None:
            _default_governor = QuotaGovernor.from_settings()
        return _default_governor


def set_default_governor(governor: Optional[QuotaGate]) -> None:
    """Replace the process-wide governor (None rebuilds it from settings on next use)."""
    global _default_governor, _default_geocoder
    with _default_lock:
        _default_governor = governor
        _default_geocoder = None


def _parse_output(output: str | OutputShape) -> OutputShape:
    try:
        return OutputShape(output)
    except ValueError as e:
        raise ConfigError(
            f"Unknown output '{output}'. Known outputs: {[o.value for o in OutputShape]}"
        ) from e


class ReverseGeocoder:
    """
    Resolves coordinates into addresses through Google Maps or Nominatim.

    Every collaborator is injectable; by default the process-wide quota
    governor is shared, so all geocoders in a process count against the
    same daily limit.

    Example:
        geocoder = ReverseGeocoder()
        geocoder.reverse_geocode((-97.1161, 31.5498))
        geocoder.reverse_geocode((-97.1161, 31.5498), output='more', source='osm')
    """

    def __init__(
        self,
        governor: Optional[QuotaGate] = None,
        http_client: Optional[HttpClient] = None,
        normalizer: Optional[ResponseNormalizer] = None,
        shaper: Optional[OutputShaper] = None,
        providers: Iterable[Provider] = (),
    ):
        """
        Args:
            governor: Quota gate (defaults to the process-wide governor)
            http_client: Transport (defaults to a new HttpClient)
            normalizer: Response normalizer
            shaper: Output shaper
            providers: Provider instances overriding the registered defaults,
                e.g. GoogleProvider(base_url=...) for a proxy
        """
        self.governor = governor or get_default_governor()
        self.http_client = http_client or HttpClient()
        self.normalizer = normalizer or ResponseNormalizer()
        self.shaper = shaper or OutputShaper()
        self._providers: dict[str, Provider] = {str(p.SOURCE): p for p in providers}

    def provider(self, source: str | Source | Provider) -> Provider:
        if isinstance(source, Provider):
            return source
        key = str(source).lower()
        if key not in self._providers:
            self._providers[key] = Provider.from_source(key)
        return self._providers[key]

    def reverse_geocode(
        self,
        location: Any,
        output: str | OutputShape = OutputShape.ADDRESS,
        verbose: bool = False,
        sensor: bool = False,
        override_limit: bool = False,
        client: str = "",
        signature: str = "",
        source: str | Source | Provider = Source.GOOGLE,
    ) -> Any:
        """
        Reverse geocode a longitude/latitude location.

        Args:
            location: (lon, lat) pair or Coordinate
            output: 'address' for the address string, 'more' for a one-row
                DataFrame of address components, 'all' for the raw payload
            verbose: Log quota checks and disambiguation notices at INFO level
            sensor: Whether the request comes from a device with a location sensor
            override_limit: Issue the request even if the daily limit is reached
            client: Google Maps for Business client ID
            signature: Google Maps for Business URL signature
            source: 'google' or 'osm'

        Returns:
            Depends on `output`; missing values (None, or a frame of pd.NA)
            when the quota is exhausted or no address exists at the location

        Raises:
            ConfigError for bad arguments, before any request is made
            NetworkError if the request or its decoding fails
        """
        coordinate = Coordinate.from_value(location)
        output = _parse_output(output)
        credentials = BusinessCredentials(client or "", signature or "")
        provider = self.provider(source)

        url = provider.build_url(coordinate, sensor=sensor, credentials=credentials)
        business = credentials.is_business and provider.SOURCE is Source.GOOGLE

        decision = self.governor.authorize(
            cost=1, override=override_limit, url=url, verbose=verbose, business=business,
        )
        if decision is QuotaDecision.DENIED:
            return self.shaper.missing(output)

        raw = self.http_client.fetch(url)
        log_level = logging.INFO if verbose else logging.DEBUG
        logger.log(log_level, f"Information from URL : {url}")

        if output is OutputShape.ALL:
            return self.shaper.shape(raw, output)

        result = self.normalizer.normalize(
            raw, provider, coordinate=coordinate, verbose=verbose, url=url,
        )
        return self.shaper.shape(result, output)

    def reverse_geocode_batch(
        self,
        locations: Iterable[Any],
        output: str | OutputShape = OutputShape.MORE,
        progress: bool = False,
        **kwargs: Any,
    ) -> pd.DataFrame | list[Any]:
        """
        Reverse geocode many locations one after another.

        Failed lookups and quota denials produce missing-value rows instead of
        stopping the batch; configuration and network errors still raise.

        Args:
            locations: Iterable of (lon, lat) pairs or Coordinates
            output: Output shape for every location
            progress: Show a tqdm progress bar
            **kwargs: Passed on to reverse_geocode()

        Returns:
            For 'more', one DataFrame with `lon` and `lat` columns followed by
            the union of component columns; otherwise a list in input order
        """
        output = _parse_output(output)
        coordinates = [Coordinate.from_value(loc) for loc in locations]

        results = [
            self.reverse_geocode(coord, output=output, **kwargs)
            for coord in tqdm(coordinates, desc="Reverse geocoding", disable=not progress)
        ]
        if output is not OutputShape.MORE:
            return results

        frames = []
        for coord, frame in zip(coordinates, results):
            # Repeated component labels keep their first value
            frame = frame.loc[:, ~frame.columns.duplicated()].copy()
            frame.insert(0, "lat", coord.lat)
            frame.insert(0, "lon", coord.lon)
            frames.append(frame)
        if not frames:
            return pd.DataFrame(columns=["lon", "lat"])
        return pd.concat(frames, ignore_index=True)

    def quota_status(self, business: bool = False) -> QuotaStatus:
        return self.governor.status(business=business)


def _default() -> ReverseGeocoder:
    global _default_geocoder
    governor = get_default_governor()
    with _default_lock:
        if _default_geocoder is None:
            _default_geocoder = ReverseGeocoder(governor=governor)
        return _default_geocoder


def revgeocode(
    location: Any,
    output: str | OutputShape = OutputShape.ADDRESS,
    verbose: bool = False,
    sensor: bool = False,
    override_limit: bool = False,
    client: str = "",
    signature: str = "",
    source: str | Source = Source.GOOGLE,
) -> Any:
    """Reverse geocode with the process-wide geocoder. See ReverseGeocoder.reverse_geocode()."""
    return _default().reverse_geocode(
        location,
        output=output,
        verbose=verbose,
        sensor=sensor,
        override_limit=override_limit,
        client=client,
        signature=signature,
        source=source,
    )


def geocode_query_check(business: bool = False) -> QuotaStatus:
    """Report how many requests remain under the process-wide daily limit."""
    status = get_default_governor().status(business=business)
    logger.info(f"{status.remaining} geocoding queries remaining.")
    return status
