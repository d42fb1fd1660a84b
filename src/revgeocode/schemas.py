"""
Typed views of the two backends' JSON responses.

Raw payloads are validated into these models before any field is read,
so a malformed upstream response fails at parse time.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator, model_validator


class GoogleAddressComponent(BaseModel):
    model_config = ConfigDict(extra="allow")

    long_name: str
    short_name: str | None = None
    types: list[str] = []

    @property
    def label(self) -> str:
        # Google lists the most specific type first
        return self.types[0] if self.types else "unknown"


class GoogleResult(BaseModel):
    model_config = ConfigDict(extra="allow")

    formatted_address: str
    address_components: list[GoogleAddressComponent] = []


class GoogleResponse(BaseModel):
    model_config = ConfigDict(extra="allow")

    status: str
    results: list[GoogleResult] = []
    error_message: str | None = None


class NominatimResponse(BaseModel):
    model_config = ConfigDict(extra="allow")

    display_name: str | None = None
    address: dict[str, str] = {}
    error: Any = None

    @field_validator("address", mode="before")
    @classmethod
    def _stringify_address(cls, value: Any) -> Any:
        # Nominatim occasionally sends numbers (e.g. house numbers) unquoted
        if isinstance(value, dict):
            return {str(k): str(v) for k, v in value.items()}
        return value

    @model_validator(mode="after")
    def _require_display_name(self) -> "NominatimResponse":
        if self.error is None and self.display_name is None:
            raise ValueError("display_name is required unless error is set")
        return self
