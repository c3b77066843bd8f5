"""Schema bootstrap for the products table."""

from goodsdb.db import ConnectionPool
from goodsdb.exceptions import translate_errors

CREATE_PRODUCTS_TABLE = """
    CREATE TABLE IF NOT EXISTS products (
        id int PRIMARY KEY,
        good text NOT NULL,
        price real NOT NULL CHECK (price >= 0),
        category_name text NOT NULL
    )
"""


def create_table(pool: ConnectionPool) -> None:
    """Create the products table if it does not exist yet."""
    with translate_errors("create_table()"):
        pool.execute(CREATE_PRODUCTS_TABLE)
