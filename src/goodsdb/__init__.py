"""goodsdb: pooled PostgreSQL data access for product records."""

__version__ = "0.1.0"
