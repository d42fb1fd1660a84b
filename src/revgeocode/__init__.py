"""
Reverse geocoding against Google Maps or OpenStreetMap Nominatim.

- Models: Data structures (Coordinate, CanonicalRecord, ...)
- Base classes: Abstract interfaces (Provider, QuotaGate)
- Providers: URL building and schema reading per backend
- Quota: Daily request ceiling and burst pacing
- Client: HTTP transport
- Normalizers: Backend responses into one record shape
- Shaping: Records into the requested output
- Geocoder: The pipeline tying them together
"""

from .models import (
    Coordinate,
    Source,
    OutputShape,
    QuotaDecision,
    QuotaResetPolicy,
    QuotaStatus,
    BusinessCredentials,
    CanonicalRecord,
    GeocodeFailure,
    STANDARD_FIELDS,
)

from .base import (
    Provider,
    QuotaGate,
)

from .providers import (
    GoogleProvider,
    NominatimProvider,
)

from .quota import (
    TokenBucket,
    QuotaGovernor,
    UnlimitedQuota,
)

from .client import HttpClient
from .normalizers import ResponseNormalizer
from .shaping import OutputShaper

from .geocoder import (
    ReverseGeocoder,
    revgeocode,
    geocode_query_check,
    get_default_governor,
    set_default_governor,
)

from .utils.errors import (
    ReverseGeocodeError,
    ConfigError,
    NetworkError,
    ResponseSchemaError,
)

__all__ = [
    # Models
    "Coordinate",
    "Source",
    "OutputShape",
    "QuotaDecision",
    "QuotaResetPolicy",
    "QuotaStatus",
    "BusinessCredentials",
    "CanonicalRecord",
    "GeocodeFailure",
    "STANDARD_FIELDS",
    # Base classes
    "Provider",
    "QuotaGate",
    # Providers
    "GoogleProvider",
    "NominatimProvider",
    # Quota
    "TokenBucket",
    "QuotaGovernor",
    "UnlimitedQuota",
    # Pipeline
    "HttpClient",
    "ResponseNormalizer",
    "OutputShaper",
    "ReverseGeocoder",
    "revgeocode",
    "geocode_query_check",
    "get_default_governor",
    "set_default_governor",
    # Errors
    "ReverseGeocodeError",
    "ConfigError",
    "NetworkError",
    "ResponseSchemaError",
]
