"""
Core data models for reverse geocoding.

These immutable, frozen dataclasses serve as the contract between
the request builder, quota governor, normalizer and output shaper.
"""

from dataclasses import dataclass
from enum import StrEnum
from math import isfinite
from typing import Any

from .utils.errors import ConfigError


# Client IDs issued to Google Maps business users always carry this prefix
BUSINESS_CLIENT_PREFIX = "gme-"

# Columns of the "more" output when no address could be resolved
STANDARD_FIELDS: tuple[str, ...] = (
    "address",
    "street_number",
    "route",
    "locality",
    "administrative_area_level_2",
    "administrative_area_level_1",
    "country",
    "postal_code",
)


class Source(StrEnum):
    """Backend used for reverse geocoding."""
    GOOGLE = "google"
    OSM = "osm"


class OutputShape(StrEnum):
    """Amount of output returned to the caller."""
    ADDRESS = "address"
    MORE = "more"
    ALL = "all"


class QuotaDecision(StrEnum):
    ALLOWED = "allowed"
    DENIED = "denied"


class QuotaResetPolicy(StrEnum):
    """When the daily request counter starts over."""
    PROCESS = "process"   # never within a process; restart to reset
    ROLLING = "rolling"   # only requests from the trailing 24 hours count


@dataclass(frozen=True)
class Coordinate:
    """A (longitude, latitude) pair, in that order."""
    lon: float
    lat: float

    @classmethod
    def from_value(cls, location: Any) -> "Coordinate":
        """
        Coerce a caller supplied location into a Coordinate.

        Args:
            location: A Coordinate or a two element (lon, lat) sequence

        Returns:
            Coordinate

        Raises:
            ConfigError if the location is not two finite numbers
        """
        if isinstance(location, cls):
            return location
        if isinstance(location, (str, bytes)):
            raise ConfigError(f"location must be a (lon, lat) pair, got {location!r}")
        try:
            lon, lat = location
            lon, lat = float(lon), float(lat)
        except (TypeError, ValueError) as e:
            raise ConfigError(f"location must be a numeric (lon, lat) pair, got {location!r}") from e
        if not (isfinite(lon) and isfinite(lat)):
            raise ConfigError(f"location must be finite, got {location!r}")
        return cls(lon=lon, lat=lat)

    def __str__(self) -> str:
        return f"{self.lon},{self.lat}"


@dataclass(frozen=True)
class BusinessCredentials:
    """
    Google Maps for Business client ID and URL signature.

    Both are set or both are empty; anything else is a configuration error.
    """
    client: str = ""
    signature: str = ""

    def validate(self) -> None:
        if self.client and not self.signature:
            raise ConfigError("client without signature")
        if self.signature and not self.client:
            raise ConfigError("signature without client")

    @property
    def is_business(self) -> bool:
        self.validate()
        return bool(self.client and self.signature)

    def normalized(self) -> "BusinessCredentials":
        """Return credentials whose client ID carries the business prefix."""
        self.validate()
        if not self.client or self.client.startswith(BUSINESS_CLIENT_PREFIX):
            return self
        return BusinessCredentials(BUSINESS_CLIENT_PREFIX + self.client, self.signature)


@dataclass(frozen=True)
class QuotaStatus:
    """Read-only snapshot of a quota governor."""
    requests_issued: int
    daily_limit: int

    @property
    def remaining(self) -> int:
        return max(0, self.daily_limit - self.requests_issued)


@dataclass(frozen=True)
class CanonicalRecord:
    """
    Backend-agnostic reverse geocoding result.

    `components` is an ordered tuple of (label, value) pairs whose
    first entry is always ("address", formatted_address).
    """
    formatted_address: str
    components: tuple[tuple[str, str], ...]

    def labels(self) -> list[str]:
        return [label for label, _ in self.components]

    def values(self) -> list[str]:
        return [value for _, value in self.components]


@dataclass(frozen=True)
class GeocodeFailure:
    """The backend answered, but found no address at the coordinate."""
    coordinate: Coordinate | None
    source: Source
    reason: str = ""
