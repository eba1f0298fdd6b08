"""
lightbnb-storage: PostgreSQL data access for the LightBnB booking application.

Features:
- Parameterized, injection-safe query building with positional placeholders
- Filtered, rated and paginated property search
- Generic INSERT from a validated record
- Async asyncpg connection pool with typed errors
- Pydantic records for users, reservations and properties
"""

# Version is read from package metadata (pyproject.toml is the single source of truth)
try:
    from importlib.metadata import version

    __version__ = version("lightbnb-storage")
except Exception:
    __version__ = "1.0.0"

from .config import DatabaseSettings, get_settings
from .db import GeneratedQuery, PostgresPool, PostgresQueryBuilder, QueryBuilder
from .exceptions import (
    ConfigurationError,
    ConnectionFailure,
    LightbnbStorageError,
    QueryError,
    SQLInjectionAttempt,
    ValidationError,
)
from .models import (
    NewProperty,
    NewUser,
    Pagination,
    Property,
    PropertyFilter,
    PropertySearchOptions,
    Reservation,
    User,
    normalize_email,
)
from .repository import LightbnbRepository
from .utils import cents_to_dollars, dollars_to_cents, escape_like, validate_identifier

__all__ = [
    # Version
    "__version__",
    # Configuration
    "DatabaseSettings",
    "get_settings",
    # Query building
    "GeneratedQuery",
    "QueryBuilder",
    "PostgresQueryBuilder",
    # Execution
    "PostgresPool",
    "LightbnbRepository",
    # Models
    "PropertyFilter",
    "PropertySearchOptions",
    "Pagination",
    "User",
    "NewUser",
    "Property",
    "NewProperty",
    "Reservation",
    "normalize_email",
    # Exceptions
    "LightbnbStorageError",
    "ValidationError",
    "SQLInjectionAttempt",
    "ConfigurationError",
    "ConnectionFailure",
    "QueryError",
    # Utilities
    "dollars_to_cents",
    "cents_to_dollars",
    "escape_like",
    "validate_identifier",
]
