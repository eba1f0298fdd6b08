"""
PostgreSQL query builder for LightBnB queries.

Produces parameterized statements:
- Positional placeholders ($1, $2, ...) numbered in the order values are bound
- Caller values only ever travel as bound arguments
- Identifiers (table and column names) are validated, never bound
"""

import re
from dataclasses import dataclass
from typing import Any, List, Mapping, Optional, Tuple, Union

from pydantic import ValidationError as PydanticValidationError

from ..exceptions import ValidationError
from ..models import Pagination, PropertyFilter
from ..utils.validation import escape_like, validate_identifier

PROPERTY_SEARCH_BASE = """SELECT properties.*, AVG(property_reviews.rating) AS average_rating
FROM properties
LEFT JOIN property_reviews ON properties.id = property_reviews.property_id"""

GUEST_RESERVATIONS_BASE = """SELECT reservations.id, reservations.start_date, reservations.end_date,
    reservations.guest_id, reservations.property_id,
    properties.title, properties.cost_per_night, properties.thumbnail_photo_url,
    properties.number_of_bedrooms, properties.number_of_bathrooms,
    properties.parking_spaces, properties.city,
    AVG(property_reviews.rating) AS average_rating
FROM reservations
JOIN properties ON properties.id = reservations.property_id
JOIN property_reviews ON reservations.id = property_reviews.reservation_id"""

_PLACEHOLDER = re.compile(r"\$(\d+)")


@dataclass(frozen=True)
class GeneratedQuery:
    """
    A statement and its bound arguments.

    ``args[i]`` is bound to placeholder ``$(i + 1)``.
    """

    text: str
    args: Tuple[Any, ...] = ()

    @property
    def placeholder_count(self) -> int:
        """Number of distinct $n markers in the statement text."""
        return len(set(_PLACEHOLDER.findall(self.text)))

    def __iter__(self):
        # Allows ``text, args = query``
        yield self.text
        yield self.args


class _Params:
    """Per-statement argument list that hands out the next placeholder."""

    def __init__(self):
        self.values: List[Any] = []

    def add(self, value: Any) -> str:
        self.values.append(value)
        return f"${len(self.values)}"


class PostgresQueryBuilder:
    """
    Stateless PostgreSQL statement builder.

    One instance can be shared freely between threads and tasks; every
    method keeps its placeholder bookkeeping in locals.
    """

    def build_property_search(
        self,
        filter: Union[PropertyFilter, Mapping[str, Any], None] = None,
        pagination: Union[Pagination, int, None] = None,
    ) -> GeneratedQuery:
        """
        Build the filtered, rated and paginated property listing query.

        Predicates are added in a fixed order (city, owner, minimum price,
        maximum price) and joined with AND. A minimum rating becomes a HAVING
        clause after the GROUP BY. The limit is always the last argument.

        Args:
            filter: PropertyFilter, or a mapping of its fields. Prices are cents.
            pagination: Pagination or a bare limit (default 10)

        Returns:
            GeneratedQuery with placeholders numbered in append order

        Raises:
            ValidationError: If a filter value or the limit is malformed
        """
        search = self._coerce_filter(filter)
        limit = self._coerce_pagination(pagination).limit

        params = _Params()
        predicates = []

        if search.city is not None:
            pattern = f"%{escape_like(search.city)}%"
            predicates.append(f"properties.city ILIKE {params.add(pattern)}")
        if search.owner_id is not None:
            predicates.append(f"properties.owner_id = {params.add(search.owner_id)}")
        if search.minimum_price_per_night is not None:
            predicates.append(
                f"properties.cost_per_night >= {params.add(search.minimum_price_per_night)}"
            )
        if search.maximum_price_per_night is not None:
            predicates.append(
                f"properties.cost_per_night <= {params.add(search.maximum_price_per_night)}"
            )

        query_parts = [PROPERTY_SEARCH_BASE]
        if predicates:
            query_parts.append(f"WHERE {' AND '.join(predicates)}")

        # HAVING must follow GROUP BY whether or not there is a WHERE
        query_parts.append("GROUP BY properties.id")
        if search.minimum_rating is not None:
            query_parts.append(
                f"HAVING AVG(property_reviews.rating) > {params.add(search.minimum_rating)}"
            )

        query_parts.append("ORDER BY properties.cost_per_night")
        query_parts.append(f"LIMIT {params.add(limit)}")

        return GeneratedQuery("\n".join(query_parts), tuple(params.values))

    def build_insert(
        self,
        table: str,
        record: Mapping[str, Any],
        returning: Optional[str] = "*",
    ) -> GeneratedQuery:
        """
        Build an INSERT for one row.

        Columns follow the record's own key order, so column i is bound to
        placeholder $i and argument i.

        Args:
            table: Table name (can be schema.table)
            record: Mapping of column -> value. Keys must already be whitelisted.
            returning: RETURNING target, or None for no RETURNING clause

        Returns:
            GeneratedQuery for ``INSERT INTO table (...) VALUES (...) RETURNING *``

        Raises:
            ValidationError: If the record is empty
            SQLInjectionAttempt: If the table or a column name is not a plain identifier
        """
        validate_identifier(table)
        if not isinstance(record, Mapping):
            raise ValidationError(
                f"Insert record must be a mapping, got {type(record).__name__}", field="record"
            )
        if not record:
            raise ValidationError(f"Nothing to insert into {table}: record has no fields")

        params = _Params()
        columns = []
        placeholders = []
        for column, value in record.items():
            columns.append(validate_identifier(column))
            placeholders.append(params.add(value))

        query = f"INSERT INTO {table} ({', '.join(columns)}) VALUES ({', '.join(placeholders)})"
        if returning is not None:
            if returning != "*":
                for column in returning.split(","):
                    validate_identifier(column.strip())
            query += f" RETURNING {returning}"

        return GeneratedQuery(query, tuple(params.values))

    def build_select_by(self, table: str, column: str, value: Any) -> GeneratedQuery:
        """
        Build ``SELECT * FROM table WHERE column = $1``.

        Args:
            table: Table name
            column: Column to match
            value: Value bound to $1

        Returns:
            GeneratedQuery with a single argument
        """
        validate_identifier(table)
        validate_identifier(column)
        return GeneratedQuery(f"SELECT *\nFROM {table}\nWHERE {column} = $1", (value,))

    def build_guest_reservations(
        self, guest_id: int, pagination: Union[Pagination, int, None] = None
    ) -> GeneratedQuery:
        """
        Build the reservation listing for one guest, oldest stay first.

        Only reservations that have at least one review are returned, each
        with its average rating.
        """
        if isinstance(guest_id, bool) or not isinstance(guest_id, int):
            raise ValidationError(f"guest_id must be an integer, got {guest_id!r}", field="guest_id")
        limit = self._coerce_pagination(pagination).limit

        params = _Params()
        query_parts = [
            GUEST_RESERVATIONS_BASE,
            f"WHERE reservations.guest_id = {params.add(guest_id)}",
            "GROUP BY properties.id, reservations.id",
            "ORDER BY reservations.start_date",
            f"LIMIT {params.add(limit)}",
        ]
        return GeneratedQuery("\n".join(query_parts), tuple(params.values))

    # ==================== Input coercion ====================

    @staticmethod
    def _coerce_filter(filter: Union[PropertyFilter, Mapping[str, Any], None]) -> PropertyFilter:
        if filter is None:
            return PropertyFilter()
        if isinstance(filter, PropertyFilter):
            return filter
        if not isinstance(filter, Mapping):
            raise ValidationError(
                f"Property filter must be a PropertyFilter or mapping, got {type(filter).__name__}",
                field="filter",
            )
        try:
            return PropertyFilter.model_validate(dict(filter))
        except PydanticValidationError as e:
            raise ValidationError(f"Invalid property filter: {e}", field="filter") from e

    @staticmethod
    def _coerce_pagination(pagination: Union[Pagination, int, None]) -> Pagination:
        if pagination is None:
            return Pagination()
        if isinstance(pagination, Pagination):
            return pagination
        if isinstance(pagination, bool):
            raise ValidationError("limit must be a positive integer, got bool", field="limit")
        try:
            return Pagination(limit=pagination)
        except PydanticValidationError as e:
            raise ValidationError(
                f"limit must be a positive integer, got {pagination!r}", field="limit"
            ) from e


QueryBuilder = PostgresQueryBuilder
