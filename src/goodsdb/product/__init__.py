"""
Product

This module provides the product entity and its repository.
"""

from goodsdb.product.entity import Product, row_to_product
from goodsdb.product.repository import ProductRepository

__all__ = ["Product", "ProductRepository", "row_to_product"]
