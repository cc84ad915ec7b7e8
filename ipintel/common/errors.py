"""Domain errors and failure typing."""


class IntelError(Exception):
    """Base class for lookup failures."""

    error_code = "INTEL_ERROR"


class ConfigError(IntelError):
    """Raised for invalid or missing configuration."""

    error_code = "CONFIG_ERROR"


class InvalidInputError(IntelError):
    """Raised for malformed IPs or out-of-range batches, before any fetch."""

    error_code = "INVALID_INPUT"


class SourceUnavailableError(IntelError):
    """Raised when a provider fetch fails, times out, or returns garbage."""

    error_code = "SOURCE_UNAVAILABLE"


class LookupFailedError(IntelError):
    """Raised when the only source of an operation reports a failure status."""

    error_code = "LOOKUP_FAILED"
