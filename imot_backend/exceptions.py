"""
Excepciones del dominio de avalúos
"""
from typing import Any, Optional


class ImotError(Exception):
    """Base exception for all imot_backend errors."""

    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(message)
        self.message = message
        self.details = details


class ValidationError(ImotError):
    """Input is malformed or a required value is missing."""


class EntityNotFoundError(ImotError):
    """A referenced row does not exist."""


class ProviderError(ImotError):
    """The maps provider failed or answered with a non-OK status."""


class AreaAnalysisError(ImotError):
    """The origin of an area analysis could not be resolved."""


class ConfigurationError(ImotError):
    """Required configuration is missing."""
