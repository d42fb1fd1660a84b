"""
Response normalization.

Maps each backend's response schema into one CanonicalRecord, or a
GeocodeFailure when the backend found nothing at the coordinate.
"""

import logging
from typing import Any, Optional

from .base import Provider
from .models import CanonicalRecord, Coordinate, GeocodeFailure, Source

logger = logging.getLogger(__name__)


class ResponseNormalizer:
    """
    Turns raw backend payloads into CanonicalRecords.

    Holds no state between calls: normalizing the same payload twice gives
    equal records. Backend differences live in the Provider classes; this
    class only sequences them.
    """

    def normalize(
        self,
        raw: Any,
        source: str | Source | Provider,
        coordinate: Optional[Coordinate] = None,
        verbose: bool = False,
        url: str = "",
    ) -> CanonicalRecord | GeocodeFailure:
        """
        Normalize one raw response.

        Args:
            raw: Decoded JSON payload from the backend
            source: Source name or Provider that produced the payload
            coordinate: Requested location, used in log messages
            verbose: If True, log disambiguation notices at INFO level
            url: Request URL, attached to schema errors

        Returns:
            CanonicalRecord, or GeocodeFailure if the backend found no address

        Raises:
            ResponseSchemaError if the payload does not match the backend's schema
        """
        provider = source if isinstance(source, Provider) else Provider.from_source(source)
        response = provider.parse(raw, url=url)

        reason = provider.failure_reason(response)
        if reason is not None:
            logger.warning(f'Reverse geocode failed - bad location? location = "{coordinate}" ({reason})')
            return GeocodeFailure(coordinate=coordinate, source=provider.SOURCE, reason=reason)

        if provider.candidate_count(response) > 1:
            log_level = logging.INFO if verbose else logging.DEBUG
            logger.log(log_level, f'More than one location found for "{coordinate}", reverse geocoding first')

        address = provider.extract_address(response)
        components = [("address", address)] + provider.extract_components(response)
        return CanonicalRecord(formatted_address=address, components=tuple(components))
