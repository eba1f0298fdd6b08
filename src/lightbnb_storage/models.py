"""
Pydantic models for LightBnB records and query options.

Money is carried in cents everywhere except ``PropertySearchOptions``, which
holds the dollar amounts a route handler receives and converts them with
``to_filter()``.
"""

from datetime import date
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, EmailStr, Field, TypeAdapter, field_validator

from .utils.money import dollars_to_cents

# ==================== QUERY OPTIONS ====================


class PropertyFilter(BaseModel):
    """
    Property search constraints in minor currency units.

    Every field is optional; ``None`` means the constraint is not applied.
    ``minimum_price_per_night <= maximum_price_per_night`` is not checked.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    city: str | None = Field(None, description="Case-insensitive substring of the city")
    owner_id: int | None = Field(None, description="Exact owner (user) id")
    minimum_price_per_night: int | None = Field(None, ge=0, description="Cents, inclusive")
    maximum_price_per_night: int | None = Field(None, ge=0, description="Cents, inclusive")
    minimum_rating: Decimal | None = Field(
        None, ge=0, description="Average rating must be strictly greater"
    )

    @property
    def is_empty(self) -> bool:
        """True when no constraint is set."""
        return all(value is None for value in self.model_dump().values())


class PropertySearchOptions(BaseModel):
    """
    Search options as submitted by the search form, prices in dollars.

    Blank form fields arrive as empty strings and are treated as absent.
    """

    model_config = ConfigDict(extra="ignore")

    city: str | None = None
    owner_id: int | None = None
    minimum_price_per_night: Decimal | None = Field(None, ge=0)
    maximum_price_per_night: Decimal | None = Field(None, ge=0)
    minimum_rating: Decimal | None = Field(None, ge=0)

    @field_validator("*", mode="before")
    @classmethod
    def _blank_is_absent(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    def to_filter(self) -> PropertyFilter:
        """Convert dollar prices to cents and return the builder filter."""
        return PropertyFilter(
            city=self.city.strip() if self.city else None,
            owner_id=self.owner_id,
            minimum_price_per_night=(
                dollars_to_cents(self.minimum_price_per_night, "minimum_price_per_night")
                if self.minimum_price_per_night is not None
                else None
            ),
            maximum_price_per_night=(
                dollars_to_cents(self.maximum_price_per_night, "maximum_price_per_night")
                if self.maximum_price_per_night is not None
                else None
            ),
            minimum_rating=self.minimum_rating,
        )


class Pagination(BaseModel):
    """Result window for list queries."""

    model_config = ConfigDict(frozen=True)

    limit: int = Field(10, gt=0)


# ==================== USERS ====================

_EMAIL = TypeAdapter(EmailStr)


def normalize_email(email: str) -> str:
    """
    Normalize an address the way NewUser stores it (domain lowercased).

    Raises:
        pydantic.ValidationError: If the address is not a valid email
    """
    return _EMAIL.validate_python(email)



class NewUser(BaseModel):
    """Fields accepted when registering a user."""

    model_config = ConfigDict(extra="forbid")

    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    password: str = Field(..., min_length=1, max_length=255)


class User(BaseModel):
    """A row from ``users``."""

    model_config = ConfigDict(extra="ignore")

    id: int
    name: str
    email: str
    password: str = Field(..., repr=False)


# ==================== PROPERTIES ====================


class NewProperty(BaseModel):
    """
    Fields accepted when listing a property.

    Unknown keys are rejected, so a validated ``NewProperty`` is safe to hand
    to ``build_insert`` as a column list.
    """

    model_config = ConfigDict(extra="forbid")

    owner_id: int
    title: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    thumbnail_photo_url: str | None = Field(None, max_length=255)
    cover_photo_url: str | None = Field(None, max_length=255)
    cost_per_night: int = Field(..., ge=0, description="Cents")
    parking_spaces: int | None = Field(None, ge=0)
    number_of_bathrooms: int | None = Field(None, ge=0)
    number_of_bedrooms: int | None = Field(None, ge=0)
    country: str | None = Field(None, max_length=255)
    street: str | None = Field(None, max_length=255)
    city: str = Field(..., min_length=1, max_length=255)
    province: str | None = Field(None, max_length=255)
    post_code: str | None = Field(None, max_length=255)


class Property(BaseModel):
    """A row from ``properties``, optionally with its average review rating."""

    model_config = ConfigDict(extra="ignore")

    id: int
    owner_id: int
    title: str
    description: str | None = None
    thumbnail_photo_url: str | None = None
    cover_photo_url: str | None = None
    cost_per_night: int
    parking_spaces: int | None = None
    number_of_bathrooms: int | None = None
    number_of_bedrooms: int | None = None
    country: str | None = None
    street: str | None = None
    city: str | None = None
    province: str | None = None
    post_code: str | None = None
    active: bool | None = None
    average_rating: Decimal | None = None


# ==================== RESERVATIONS ====================


class Reservation(BaseModel):
    """A guest's reservation joined with a summary of the reserved property."""

    model_config = ConfigDict(extra="ignore")

    id: int
    start_date: date
    end_date: date
    guest_id: int
    property_id: int

    title: str | None = None
    cost_per_night: int | None = None
    thumbnail_photo_url: str | None = None
    number_of_bedrooms: int | None = None
    number_of_bathrooms: int | None = None
    parking_spaces: int | None = None
    city: str | None = None
    average_rating: Decimal | None = None
