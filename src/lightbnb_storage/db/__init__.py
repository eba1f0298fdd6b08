"""
Database query building and execution modules.
"""

from .postgres import PostgresPool
from .query_builder import GeneratedQuery, PostgresQueryBuilder, QueryBuilder

__all__ = [
    "GeneratedQuery",
    "QueryBuilder",
    "PostgresQueryBuilder",
    "PostgresPool",
]
