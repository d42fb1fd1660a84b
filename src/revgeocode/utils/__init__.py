from .errors import ReverseGeocodeError, ConfigError, NetworkError, ResponseSchemaError

__all__ = ["ReverseGeocodeError", "ConfigError", "NetworkError", "ResponseSchemaError"]
