"""
Abstract base classes for the reverse geocoding system.

These define the interfaces that all concrete implementations must follow.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, ClassVar, Type, Optional

from pydantic import BaseModel, ValidationError

from .models import (
    BusinessCredentials, Coordinate, QuotaDecision, QuotaStatus, Source,
)
from .utils.errors import ConfigError, ResponseSchemaError

logger = logging.getLogger(__name__)


class Provider(ABC):
    """
    Abstract base for reverse geocoding backends.

    A provider knows how to build a request URL for its backend and how to
    read that backend's response schema. Subclasses set a SOURCE and are
    registered automatically, so the pipeline dispatches on the provider
    instead of branching on the source name.
    """

    # Unique key for each subclass (e.g., 'google', 'osm')
    SOURCE: ClassVar[Source]

    # Pydantic model the raw payload is validated into
    SCHEMA: ClassVar[Type[BaseModel]]

    # Global registry of providers
    _REGISTRY: ClassVar[dict[str, Type['Provider']]] = {}

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)

        # Only register classes that define SOURCE themselves
        if "SOURCE" in cls.__dict__:
            key = str(cls.SOURCE).lower()
            if key in Provider._REGISTRY and Provider._REGISTRY[key] is not cls:
                raise RuntimeError(f"Duplicate provider SOURCE '{key}' for {cls.__name__}")
            Provider._REGISTRY[key] = cls
            logger.debug(f"Registered Provider: {cls.__name__} as '{key}'")

    @classmethod
    def from_source(cls, source: str | Source, **kwargs: Any) -> 'Provider':
        """
        Factory returning the provider registered for `source`.

        Args:
            source: The source identifier (e.g., 'google', 'osm')
            **kwargs: Arguments passed to the provider constructor

        Raises:
            ConfigError if no provider is registered under that name
        """
        key = str(source).lower()
        try:
            provider_cls = cls._REGISTRY[key]
        except KeyError as e:
            raise ConfigError(
                f"Unknown source '{source}'. "
                f"Known sources: {sorted(cls._REGISTRY.keys())}"
            ) from e
        return provider_cls(**kwargs)

    @abstractmethod
    def build_url(
        self,
        coordinate: Coordinate,
        sensor: bool = False,
        credentials: Optional[BusinessCredentials] = None,
    ) -> str:
        """
        Build the fully encoded request URL for a coordinate.

        Args:
            coordinate: Location to reverse geocode
            sensor: Whether the request comes from a device with a location sensor
            credentials: Optional business client ID and signature

        Returns:
            Percent-encoded URL

        Raises:
            ConfigError if the credentials are not paired
        """
        pass

    def parse(self, raw: Any, url: str = "") -> BaseModel:
        """Validate a raw payload into this provider's schema."""
        try:
            return self.SCHEMA.model_validate(raw)
        except ValidationError as e:
            raise ResponseSchemaError(url, str(self.SOURCE), e.errors(), original=e) from e

    @abstractmethod
    def failure_reason(self, response: BaseModel) -> Optional[str]:
        """Return why the backend found no address, or None if it did."""
        pass

    def candidate_count(self, response: BaseModel) -> int:
        """Number of candidate results; backends returning one result keep the default."""
        return 1

    @abstractmethod
    def extract_address(self, response: BaseModel) -> str:
        """Formatted address of the first candidate."""
        pass

    @abstractmethod
    def extract_components(self, response: BaseModel) -> list[tuple[str, str]]:
        """Ordered (label, value) address components of the first candidate."""
        pass


class QuotaGate(ABC):
    """
    Abstract base for request quota governors.

    A gate authorizes or denies each outbound request and counts the
    requests it let through.
    """

    @abstractmethod
    def authorize(
        self,
        cost: int = 1,
        override: bool = False,
        url: Optional[str] = None,
        verbose: bool = False,
        business: bool = False,
    ) -> QuotaDecision:
        """
        Authorize a request worth `cost` units.

        Args:
            cost: Number of units the request consumes
            override: If True, always allow (the request is still counted)
            url: Request that triggered the check, for logging
            verbose: If True, log every check at INFO level
            business: If True, check against the business user limit

        Returns:
            QuotaDecision.ALLOWED or QuotaDecision.DENIED
        """
        pass

    @abstractmethod
    def status(self, business: bool = False) -> QuotaStatus:
        """Current count and limit."""
        pass
