"""
PostgreSQL execution layer using asyncpg.

Runs ``GeneratedQuery`` statements against a connection pool and returns
rows as plain dicts. Driver errors are logged and re-raised as
lightbnb-storage exceptions.
"""

import asyncio
import logging
from typing import Any, Dict, List, Optional

import asyncpg

from ..config import DatabaseSettings, get_settings
from ..exceptions import ConfigurationError, ConnectionFailure, QueryError
from .query_builder import GeneratedQuery

# Checked before PostgresError (several subclass it) and after TimeoutError (an OSError
# on 3.11+). Other InterfaceErrors, such as argument encoding failures, are query errors.
_CONNECTION_ERRORS = (
    OSError,
    asyncpg.exceptions.ConnectionDoesNotExistError,
    asyncpg.exceptions.PostgresConnectionError,
    asyncpg.exceptions.CannotConnectNowError,
    asyncpg.exceptions.TooManyConnectionsError,
)


class PostgresPool:
    """
    Async PostgreSQL connection pool.

    Each query acquires its own connection, so any number of queries may run
    concurrently up to ``max_pool_size``.

    Usage:
        async with PostgresPool(settings) as pool:
            rows = await pool.fetch_all(builder.build_property_search(filter))
    """

    def __init__(
        self,
        settings: Optional[DatabaseSettings] = None,
        logger=None,
        pool: Optional[asyncpg.Pool] = None,
    ):
        """
        Initialize pool wrapper.

        Args:
            settings: Connection settings (default: environment settings)
            logger: Optional logger instance
            pool: Existing asyncpg pool to wrap instead of creating one
        """
        self.settings = settings or get_settings()
        self.logger = logger or logging.getLogger(__name__)
        self.pool = pool

    async def connect(self) -> "PostgresPool":
        """Create the underlying pool. Calling it again is a no-op."""
        if self.pool is not None:
            return self

        try:
            self.pool = await asyncpg.create_pool(
                dsn=self.settings.dsn,
                min_size=self.settings.min_pool_size,
                max_size=self.settings.max_pool_size,
                command_timeout=self.settings.command_timeout,
            )
        except _CONNECTION_ERRORS + (
            asyncio.TimeoutError,
            asyncpg.PostgresError,
            asyncpg.InterfaceError,
        ) as e:
            self.logger.error(
                "Failed to connect to PostgreSQL",
                extra={"host": self.settings.host, "database": self.settings.database},
                exc_info=True,
            )
            raise ConnectionFailure(
                f"Cannot connect to {self.settings.host}:{self.settings.port}/{self.settings.database}: {e}"
            ) from e

        self.logger.info(
            "PostgreSQL pool ready",
            extra={
                "host": self.settings.host,
                "database": self.settings.database,
                "max_size": self.settings.max_pool_size,
            },
        )
        return self

    async def close(self) -> None:
        """Close the underlying pool, if open."""
        if self.pool is None:
            return
        await self.pool.close()
        self.pool = None
        self.logger.info("PostgreSQL pool closed")

    async def __aenter__(self) -> "PostgresPool":
        return await self.connect()

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    def acquire(self):
        """Acquire a raw connection, preserving asyncpg's ``acquire()`` interface."""
        return self._require_pool().acquire()

    async def fetch_all(self, query: GeneratedQuery) -> List[Dict[str, Any]]:
        """
        Fetch all rows for a statement.

        Args:
            query: Statement and bound arguments

        Returns:
            List of row dicts (empty when nothing matches)
        """
        pool = self._require_pool()
        try:
            async with pool.acquire() as conn:
                rows = await conn.fetch(query.text, *query.args)
        except asyncio.TimeoutError as e:
            raise self._query_error(query, e) from e
        except _CONNECTION_ERRORS as e:
            raise self._connection_error(query, e) from e
        except (asyncpg.PostgresError, asyncpg.InterfaceError) as e:
            raise self._query_error(query, e) from e
        return [dict(row) for row in rows]

    async def fetch_one(self, query: GeneratedQuery) -> Optional[Dict[str, Any]]:
        """
        Fetch the first row for a statement.

        Args:
            query: Statement and bound arguments

        Returns:
            Row dict or None
        """
        pool = self._require_pool()
        try:
            async with pool.acquire() as conn:
                row = await conn.fetchrow(query.text, *query.args)
        except asyncio.TimeoutError as e:
            raise self._query_error(query, e) from e
        except _CONNECTION_ERRORS as e:
            raise self._connection_error(query, e) from e
        except (asyncpg.PostgresError, asyncpg.InterfaceError) as e:
            raise self._query_error(query, e) from e
        return dict(row) if row is not None else None

    # ==================== Helpers ====================

    def _require_pool(self) -> asyncpg.Pool:
        if self.pool is None:
            raise ConfigurationError("PostgresPool is not connected; call connect() first")
        return self.pool

    def _query_error(self, query: GeneratedQuery, error: Exception) -> QueryError:
        self.logger.error(
            "Query failed",
            extra={"query": query.text, "error": str(error)},
            exc_info=True,
        )
        return QueryError(f"Query failed: {error}", query=query.text)

    def _connection_error(self, query: GeneratedQuery, error: Exception) -> ConnectionFailure:
        self.logger.error(
            "Database connection lost",
            extra={"query": query.text, "error": str(error)},
            exc_info=True,
        )
        return ConnectionFailure(f"Database connection lost: {error}")
