"""
Exception hierarchy for lightbnb-storage.

Input problems are raised by the query builder before any SQL is produced.
Database problems are raised by the execution layer with the driver error
attached as ``__cause__``.
"""

from typing import Optional


class LightbnbStorageError(Exception):
    """Base class for every error raised by lightbnb-storage."""


class ValidationError(LightbnbStorageError):
    """Caller input cannot be turned into a valid statement."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


class SQLInjectionAttempt(ValidationError):
    """An identifier (table or column name) failed validation."""

    def __init__(self, identifier: str, reason: str = "invalid identifier"):
        super().__init__(f"Rejected SQL identifier {identifier!r}: {reason}", field=identifier)
        self.identifier = identifier


class ConfigurationError(LightbnbStorageError):
    """Settings are invalid or a component was used before being configured."""


class ConnectionFailure(LightbnbStorageError):
    """The database could not be reached or the connection was lost."""


class QueryError(LightbnbStorageError):
    """The database rejected a statement."""

    def __init__(self, message: str, query: Optional[str] = None):
        super().__init__(message)
        # Statement text only, never the bound arguments.
        self.query = query
