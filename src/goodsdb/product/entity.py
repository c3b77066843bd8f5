from dataclasses import dataclass
from typing import Any, Mapping

from goodsdb.exceptions import RowReadError


@dataclass(frozen=True)
class Product:
    """A single row of the products table."""

    id: int
    good: str
    price: float
    category_name: str

    def __post_init__(self):
        if not self.good:
            raise ValueError("Product good must not be empty")
        if self.price < 0:
            raise ValueError(f"Product price must not be negative, got {self.price}")
        if not self.category_name:
            raise ValueError("Product category_name must not be empty")

    def __str__(self) -> str:
        return (
            f"ID: {self.id} | Good: {self.good} | "
            f"Price: {self.price} | Category: {self.category_name}"
        )

    def as_params(self) -> tuple:
        """Values in column order, ready to bind to a parameterized statement."""
        return (self.id, self.good, self.price, self.category_name)


def row_to_product(row: Mapping[str, Any]) -> Product:
    """
    Map a result row keyed by column name to a Product.

    Raises:
        RowReadError: If a column is missing or a value cannot be converted;
            the KeyError, TypeError or ValueError is chained as __cause__
    """
    try:
        return Product(
            id=int(row["id"]),
            good=row["good"],
            price=float(row["price"]),
            category_name=row["category_name"],
        )
    except (LookupError, TypeError, ValueError) as e:
        raise RowReadError(f"Cannot read product row: {e}") from e
