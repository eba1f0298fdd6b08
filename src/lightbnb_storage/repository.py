"""
LightBnB repository.

Async data access for users, reservations and properties. Statements come
from ``PostgresQueryBuilder``; rows come back as pydantic models.
"""

import logging
from typing import Any, List, Mapping, Optional, Type, TypeVar, Union

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from .db.postgres import PostgresPool
from .db.query_builder import PostgresQueryBuilder
from .exceptions import ValidationError
from .models import (
    NewProperty,
    NewUser,
    Property,
    PropertyFilter,
    PropertySearchOptions,
    Reservation,
    User,
    normalize_email,
)

T = TypeVar("T", bound=BaseModel)

PropertyOptions = Union[PropertyFilter, PropertySearchOptions, Mapping[str, Any], None]


class LightbnbRepository:
    """
    Repository for the LightBnB tables.

    A missing row is ``None`` (or an empty list); every failure raises a
    ``LightbnbStorageError`` subclass.

    Usage:
        async with PostgresPool(settings) as pool:
            repo = LightbnbRepository(pool)
            user = await repo.get_user_with_email("tristan@example.com")
            homes = await repo.get_all_properties({"city": "Vancouver"}, limit=20)
    """

    def __init__(
        self,
        pool: PostgresPool,
        builder: Optional[PostgresQueryBuilder] = None,
        logger=None,
    ):
        """
        Initialize repository.

        Args:
            pool: Connected PostgresPool
            builder: Query builder (default: PostgresQueryBuilder)
            logger: Optional logger instance
        """
        self.pool = pool
        self.builder = builder or PostgresQueryBuilder()
        self.logger = logger or logging.getLogger(__name__)

    # ==================== Users ====================

    async def get_user_with_email(self, email: str) -> Optional[User]:
        """
        Get a single user by email, or None.

        The address is normalized the same way ``add_user`` stores it, so the
        domain part matches case-insensitively. An invalid address matches
        no user.
        """
        try:
            lookup = normalize_email(email)
        except PydanticValidationError:
            return None

        try:
            row = await self.pool.fetch_one(self.builder.build_select_by("users", "email", lookup))
            return User.model_validate(row) if row else None
        except Exception as e:
            self.logger.error(
                "Failed to get user by email",
                extra={"email": lookup, "error": str(e)},
                exc_info=True,
            )
            raise

    async def get_user_with_id(self, user_id: int) -> Optional[User]:
        """Get a single user by id, or None."""
        try:
            row = await self.pool.fetch_one(self.builder.build_select_by("users", "id", user_id))
            return User.model_validate(row) if row else None
        except Exception as e:
            self.logger.error(
                "Failed to get user by id",
                extra={"user_id": str(user_id), "error": str(e)},
                exc_info=True,
            )
            raise

    async def add_user(self, user: Union[NewUser, Mapping[str, Any]]) -> User:
        """
        Add a new user.

        Args:
            user: NewUser or a mapping with name, email and password

        Returns:
            The stored user, including its generated id
        """
        try:
            new_user = self._validate(NewUser, user)
            query = self.builder.build_insert("users", new_user.model_dump())
            row = await self.pool.fetch_one(query)
            created = User.model_validate(row)
        except Exception as e:
            # Never log the input mapping: it carries the password
            self.logger.error(
                "Failed to create user",
                extra={"table": "users", "error": str(e)},
                exc_info=True,
            )
            raise

        self.logger.info("Created user", extra={"user_id": created.id})
        return created

    # ==================== Reservations ====================

    async def get_all_reservations(self, guest_id: int, limit: int = 10) -> List[Reservation]:
        """
        Get reservations for a guest, oldest stay first.

        Args:
            guest_id: Id of the guest (user)
            limit: Maximum number of reservations

        Returns:
            Reservations with property summary and average rating
        """
        try:
            query = self.builder.build_guest_reservations(guest_id, limit)
            rows = await self.pool.fetch_all(query)
            return [Reservation.model_validate(row) for row in rows]
        except Exception as e:
            self.logger.error(
                "Failed to get reservations",
                extra={"guest_id": str(guest_id), "limit": str(limit), "error": str(e)},
                exc_info=True,
            )
            raise

    # ==================== Properties ====================

    async def get_all_properties(
        self, options: PropertyOptions = None, limit: int = 10
    ) -> List[Property]:
        """
        Search properties, cheapest first.

        Args:
            options: PropertySearchOptions or a mapping of them (prices in dollars),
                or a PropertyFilter (prices already in cents)
            limit: Maximum number of properties

        Returns:
            Matching properties with their average rating
        """
        try:
            query = self.builder.build_property_search(self._to_filter(options), limit)
            rows = await self.pool.fetch_all(query)
            return [Property.model_validate(row) for row in rows]
        except Exception as e:
            self.logger.error(
                "Failed to search properties",
                extra={"options": repr(options), "limit": str(limit), "error": str(e)},
                exc_info=True,
            )
            raise

    async def add_property(self, property: Union[NewProperty, Mapping[str, Any]]) -> Property:
        """
        Add a property listing.

        Only fields declared on NewProperty are accepted; unset optional
        fields are left to column defaults.

        Args:
            property: NewProperty or a mapping of its fields (cost_per_night in cents)

        Returns:
            The stored property
        """
        try:
            new_property = self._validate(NewProperty, property)
            record = new_property.model_dump(exclude_none=True)
            row = await self.pool.fetch_one(self.builder.build_insert("properties", record))
            created = Property.model_validate(row)
        except Exception as e:
            self.logger.error(
                "Failed to create property",
                extra={"table": "properties", "error": str(e)},
                exc_info=True,
            )
            raise

        self.logger.info(
            "Created property", extra={"property_id": created.id, "owner_id": created.owner_id}
        )
        return created

    # ==================== Helpers ====================

    def _to_filter(self, options: PropertyOptions) -> PropertyFilter:
        if options is None:
            return PropertyFilter()
        if isinstance(options, PropertyFilter):
            return options
        return self._validate(PropertySearchOptions, options).to_filter()

    @staticmethod
    def _validate(model_class: Type[T], data: Union[T, Mapping[str, Any]]) -> T:
        if isinstance(data, model_class):
            return data
        if not isinstance(data, Mapping):
            raise ValidationError(
                f"Expected {model_class.__name__} or mapping, got {type(data).__name__}"
            )
        try:
            return model_class.model_validate(dict(data))
        except PydanticValidationError as e:
            # Field locations and messages only, and no chained cause: input values
            # may hold a password
            problems = "; ".join(
                f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
                for error in e.errors()
            )
            raise ValidationError(f"Invalid {model_class.__name__}: {problems}") from None
