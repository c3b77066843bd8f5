# src/goodsdb/conftest.py
"""
Pytest configuration and shared fixtures.

Tests are co-located with implementation files using the *_test.py suffix.
Integration tests need a PostgreSQL database (DATABASE_URL, DATABASE_USER,
DATABASE_PASSWORD, usually from .env.test) and are skipped when it cannot be
reached. Unit tests use mocked pools and run anywhere.
"""

import os

# Set environment BEFORE importing any app modules
os.environ["GOODSDB_ENV"] = "test"

from unittest.mock import MagicMock

import pytest

from goodsdb.config import config
from goodsdb.db import ConnectionPool
from goodsdb.exceptions import StorageError
from goodsdb.product import Product, ProductRepository
from goodsdb.schema import create_table

# =============================================================================
# Database Fixtures
# =============================================================================


@pytest.fixture(scope="session")
def db_pool():
    """
    Open one pool for the whole test session and make sure the schema exists.

    Skips every test that depends on it when the database is unreachable.
    """
    pool = ConnectionPool(
        config.database_url,
        config.database_user,
        config.database_password,
        max_size=config.pool_max_size,
        timeout=5.0,
    )
    try:
        pool.open(wait=True, timeout=5.0)
    except StorageError as e:
        pytest.skip(f"PostgreSQL not available: {e.full_message()}")

    # Clean slate: recreate the table so the current DDL applies
    pool.execute("DROP TABLE IF EXISTS products")
    create_table(pool)

    yield pool

    pool.close()


@pytest.fixture
def product_repo(db_pool):
    """
    Provide a ProductRepository over an empty products table.

    The table is truncated before and after each test.
    """
    repo = ProductRepository(db_pool)
    repo.truncate()

    yield repo

    repo.truncate()


@pytest.fixture
def fill_products(product_repo):
    """
    Return a helper that batch-inserts ``amount`` products.

    Product i (1-based) has id=i, good=str(i), price=i * 10.0, category "all".
    """

    def _fill(amount: int) -> list[Product]:
        products = [Product(i, str(i), i * 10.0, "all") for i in range(1, amount + 1)]
        product_repo.create_batch(products)
        return products

    return _fill


# =============================================================================
# Unit Test Fixtures
# =============================================================================


@pytest.fixture
def mock_pool():
    """A ConnectionPool stand-in whose helpers can be scripted per test."""
    pool = MagicMock(spec=ConnectionPool)
    pool.fetch_all.return_value = []
    pool.fetch_one.return_value = None
    pool.execute.return_value = 0
    return pool
