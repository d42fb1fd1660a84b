from typing import Any
from pydantic import ValidationError

class ReverseGeocodeError(Exception):
    """Base class for everything this package raises."""


class ConfigError(ReverseGeocodeError, ValueError):
    """Bad arguments or configuration, raised before any network I/O."""


class NetworkError(ReverseGeocodeError):
    def __init__(self, url: str, message: str):
        self.url = url
        super().__init__(f"{message} (url: {url})")


class ResponseSchemaError(NetworkError):
    def __init__(self, url: str, source: str, errors: list[dict[str, Any]], original: ValidationError | None = None):
        self.source = source
        self.errors = errors
        self.original = original
        super().__init__(url, f"Response from '{source}' failed validation with {len(errors)} errors")

    def summary(self, limit: int=5) -> str:
        """Human-readable summary of the first few validation issues."""
        lines = []
        for err in self.errors[:limit]:
            loc = ".".join(str(p) for p in err.get("loc", []))
            lines.append(f"- {loc}: {err.get('msg')} ({err.get('type')})")
        if len(self.errors) > limit:
            lines.append(f"... ({len(self.errors) - limit} more)")
        return "\n".join(lines)
