"""
Pytest configuration for integration tests.

Connects to the PostgreSQL server described by the LIGHTBNB_DB_* environment
variables and creates the LightBnB tables as temporary tables. The pool is
pinned to a single connection so the temporary tables stay visible.
"""

import pytest
import pytest_asyncio

from lightbnb_storage import ConnectionFailure, DatabaseSettings, PostgresPool

SCHEMA = """
CREATE TEMPORARY TABLE users (
    id SERIAL PRIMARY KEY,
    name VARCHAR(255) NOT NULL,
    email VARCHAR(255) NOT NULL UNIQUE,
    password VARCHAR(255) NOT NULL
);

CREATE TEMPORARY TABLE properties (
    id SERIAL PRIMARY KEY,
    owner_id INTEGER NOT NULL REFERENCES users(id) ON DELETE CASCADE,
    title VARCHAR(255) NOT NULL,
    description TEXT,
    thumbnail_photo_url VARCHAR(255),
    cover_photo_url VARCHAR(255),
    cost_per_night INTEGER NOT NULL DEFAULT 0,
    parking_spaces INTEGER NOT NULL DEFAULT 0,
    number_of_bathrooms INTEGER NOT NULL DEFAULT 0,
    number_of_bedrooms INTEGER NOT NULL DEFAULT 0,
    country VARCHAR(255),
    street VARCHAR(255),
    city VARCHAR(255) NOT NULL,
    province VARCHAR(255),
    post_code VARCHAR(255),
    active BOOLEAN NOT NULL DEFAULT TRUE
);

CREATE TEMPORARY TABLE reservations (
    id SERIAL PRIMARY KEY,
    start_date DATE NOT NULL,
    end_date DATE NOT NULL,
    property_id INTEGER NOT NULL REFERENCES properties(id) ON DELETE CASCADE,
    guest_id INTEGER NOT NULL REFERENCES users(id) ON DELETE CASCADE
);

CREATE TEMPORARY TABLE property_reviews (
    id SERIAL PRIMARY KEY,
    guest_id INTEGER NOT NULL REFERENCES users(id) ON DELETE CASCADE,
    property_id INTEGER NOT NULL REFERENCES properties(id) ON DELETE CASCADE,
    reservation_id INTEGER NOT NULL REFERENCES reservations(id) ON DELETE CASCADE,
    rating SMALLINT NOT NULL DEFAULT 0,
    message TEXT
);
"""


@pytest_asyncio.fixture
async def pool():
    """A connected single-connection pool with the LightBnB tables in place."""
    settings = DatabaseSettings(min_pool_size=1, max_pool_size=1)
    db = PostgresPool(settings)
    try:
        await db.connect()
    except ConnectionFailure as e:
        pytest.skip(f"PostgreSQL not available: {e}")

    async with db.acquire() as conn:
        await conn.execute(SCHEMA)

    try:
        yield db
    finally:
        await db.close()
