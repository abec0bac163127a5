"""Custom exceptions for github-retrospect."""


class RetrospectError(Exception):
    """Base exception for all retrospect errors."""


class ConfigError(RetrospectError):
    """Raised when a required setting is missing or invalid.

    This is the only error class that aborts a whole run.
    """


class ServiceError(RetrospectError):
    """Raised when the text-generation service fails or returns nothing."""

    def __init__(self, message: str, model: str | None = None):
        self.model = model
        super().__init__(message if model is None else f"{model}: {message}")
