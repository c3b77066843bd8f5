from typing import Iterable, List, Optional

from goodsdb.db import ConnectionPool
from goodsdb.exceptions import translate_errors
from goodsdb.product.entity import Product, row_to_product

INSERT_PRODUCT = """
    INSERT INTO products (id, good, price, category_name)
    VALUES (%s, %s, %s, %s)
"""


class ProductRepository:
    """
    Repository for product data access.
    Encapsulates all SQL and queries for the products table.

    Every method raises StorageError (or OperationCancelled) instead of the
    underlying psycopg exception. A lookup that finds nothing is not an error.
    """

    def __init__(self, pool: ConnectionPool):
        self._pool = pool

    def get_all(self) -> List[Product]:
        """
        Get all products. Order is not guaranteed.
        Note: this loads the whole table.
        """
        with translate_errors("ProductRepository.get_all()"):
            rows = self._pool.fetch_all("SELECT * FROM products")
            return [row_to_product(row) for row in rows]

    def get_by_id(self, product_id: int) -> Optional[Product]:
        """Get product by ID, or None if it does not exist."""
        with translate_errors("ProductRepository.get_by_id()"):
            row = self._pool.fetch_one(
                "SELECT * FROM products WHERE id = %s",
                (product_id,)
            )
            return row_to_product(row) if row else None

    def get_most_expensive(self) -> List[Product]:
        """Get every product whose price equals the highest price in the table."""
        with translate_errors("ProductRepository.get_most_expensive()"):
            rows = self._pool.fetch_all(
                """
                SELECT * FROM products
                WHERE price = (SELECT MAX(price) FROM products)
                """
            )
            return [row_to_product(row) for row in rows]

    def get_products_with_price_range(self, from_: float, to: float) -> List[Product]:
        """
        Get products priced between from_ and to, both inclusive.
        Bounds are cast to real, the column type.
        """
        with translate_errors("ProductRepository.get_products_with_price_range()"):
            rows = self._pool.fetch_all(
                "SELECT * FROM products WHERE price BETWEEN %s::real AND %s::real",
                (from_, to)
            )
            return [row_to_product(row) for row in rows]

    def create(self, product: Product) -> None:
        """Create a new product. A duplicate id raises StorageError."""
        with translate_errors("ProductRepository.create()"):
            self._pool.execute(INSERT_PRODUCT, product.as_params())

    def create_batch(self, products: Iterable[Product]) -> None:
        """
        Create multiple products in a single transaction.
        If any insert fails, none of the products is stored.
        """
        params_list = [p.as_params() for p in products]
        if not params_list:
            return

        with translate_errors("ProductRepository.create_batch()"):
            self._pool.execute_many(INSERT_PRODUCT, params_list)

    def update(self, product_id: int, product: Product) -> None:
        """
        Replace the row with the given id by the product's fields.
        The product's own id becomes the row's new id. Missing rows are ignored.
        """
        with translate_errors("ProductRepository.update()"):
            self._pool.execute(
                """
                UPDATE products
                SET id = %s, good = %s, price = %s, category_name = %s
                WHERE id = %s
                """,
                (*product.as_params(), product_id)
            )

    def increase_category_price(self, category_name: str, percent: float) -> None:
        """
        Raise every price in the category by price * percent (0.5 means +50%).
        A percent below -1 would make prices negative; the price check rejects
        it with StorageError and no row changes.
        """
        with translate_errors("ProductRepository.increase_category_price()"):
            self._pool.execute(
                "UPDATE products SET price = price + price * %s WHERE category_name = %s",
                (percent, category_name)
            )

    def delete(self, product_id: int) -> None:
        """Delete product by ID."""
        with translate_errors("ProductRepository.delete()"):
            self._pool.execute(
                "DELETE FROM products WHERE id = %s",
                (product_id,)
            )

    def delete_all_category_products(self, category_name: str) -> None:
        """Delete all products of a category."""
        with translate_errors("ProductRepository.delete_all_category_products()"):
            self._pool.execute(
                "DELETE FROM products WHERE category_name = %s",
                (category_name,)
            )

    def truncate(self) -> None:
        """Remove every product."""
        with translate_errors("ProductRepository.truncate()"):
            self._pool.execute("TRUNCATE products")
