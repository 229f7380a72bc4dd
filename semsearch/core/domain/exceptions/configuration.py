"""Configuration-related exceptions."""

from .base import ErrorKind, SemSearchError


class ConfigurationError(SemSearchError):
    """Configuration errors.

    Raised when required configuration is missing or invalid. Always raised
    before any embedding work starts.
    """

    error_code = "SEM_CFG_001"
    kind = ErrorKind.INVALID_INPUT


class InvalidConfigurationError(ConfigurationError):
    """Configuration value is invalid."""

    error_code = "SEM_CFG_002"
