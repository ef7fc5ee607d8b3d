"""Application exception classes."""


class ConfigError(Exception):
    """Raised when configuration is invalid or incomplete."""


class JournalError(Exception):
    """Raised when writing to journal files fails."""


class WeatherLookupError(Exception):
    """Base class for failures that terminate a single weather query."""

    category = "lookup"


class LocationNotFoundError(WeatherLookupError):
    """Raised when geocoding yields no point or no display address."""

    category = "location_not_found"


class RangeError(WeatherLookupError):
    """Raised when explicit coordinates fall outside valid bounds."""

    category = "coordinate_range"


class ResolverTransportError(WeatherLookupError):
    """Raised when the geocoding service cannot be reached or answers garbage."""

    category = "geocoder_transport"


class DateParseError(WeatherLookupError):
    """Raised when the requested date text cannot be parsed."""

    category = "date_parse"


class UnsupportedCapabilityError(WeatherLookupError):
    """Raised when a provider cannot serve the requested query shape."""

    category = "unsupported_capability"

    def __init__(self, provider: str, operation: str) -> None:
        super().__init__(f"Provider '{provider}' does not support {operation}.")
        self.provider = provider
        self.operation = operation


class WeatherTransportError(WeatherLookupError):
    """Raised when the weather provider request fails at the HTTP layer."""

    category = "provider_transport"


class UpstreamProviderError(WeatherLookupError):
    """Raised when a provider payload self-reports an error."""

    category = "upstream_provider"

    def __init__(self, provider: str, reason: str) -> None:
        super().__init__(f"Provider '{provider}' reported an error: {reason}")
        self.provider = provider
        self.reason = reason


class MalformedResponseError(WeatherLookupError):
    """Raised when a required payload field is missing or has the wrong type."""

    category = "malformed_response"

    def __init__(self, provider: str, field: str, detail: str = "missing or invalid") -> None:
        super().__init__(f"{provider} response {detail}: {field}")
        self.provider = provider
        self.field = field


class CrossFieldMismatchError(WeatherLookupError):
    """Raised when parallel series extracted from a payload differ in length."""

    category = "cross_field_mismatch"
