"""
Exception hierarchy for apigen.

Parsers raise on unusable input (empty text, unreadable documents); recoverable
statement-level problems are collected on the schema instead.
"""


class ApiGenError(Exception):
    """Base class for all apigen errors."""


class SqlParseError(ApiGenError):
    """Raised when SQL input cannot be parsed at all."""


class OpenApiParseError(ApiGenError):
    """Raised when an OpenAPI document is empty, malformed or unsupported."""


class ConfigError(ApiGenError):
    """Raised when the project configuration is invalid."""


class GenerationError(ApiGenError):
    """Raised when a project cannot be generated from the given schema."""


class UnknownTargetError(ApiGenError):
    """Raised when no generator is registered for a language/framework pair."""

    def __init__(self, key: str, available=None):
        self.key = key
        self.available = list(available or [])
        msg = f"No generator registered for '{key}'"
        if self.available:
            msg += f" (available: {', '.join(self.available)})"
        super().__init__(msg)
