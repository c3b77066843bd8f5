#!/usr/bin/env python3
"""goodsdb CLI: bootstrap the products schema and list products."""

import argparse
import sys

from rich.console import Console
from rich.table import Table

from goodsdb.config import Config
from goodsdb.db import ConnectionPool
from goodsdb.exceptions import ClassifiedError
from goodsdb.logging_setup import DEFAULT_LOG_LEVEL, setup_logging
from goodsdb.product import Product, ProductRepository
from goodsdb.schema import create_table

console = Console()


def build_table(products: list[Product]) -> Table:
    """Render products as a table, sorted by id."""
    table = Table(title="Products")
    table.add_column("ID", justify="right")
    table.add_column("Good")
    table.add_column("Price", justify="right")
    table.add_column("Category")
    for p in sorted(products, key=lambda p: p.id):
        table.add_row(str(p.id), p.good, f"{p.price:.2f}", p.category_name)
    return table


def run(cfg: Config, list_products: bool = False) -> None:
    """Open the pool, create the schema and optionally print all products."""
    with ConnectionPool.from_config(cfg) as pool:
        create_table(pool)
        console.print("[green]Products table is ready.[/]")

        if list_products:
            repo = ProductRepository(pool)
            products = repo.get_all()
            if not products:
                console.print("[dim]No products found.[/]")
                return
            console.print(build_table(products))


def main(argv: list[str] = None) -> int:
    parser = argparse.ArgumentParser(
        prog="goodsdb",
        description="goodsdb CLI",
        usage="goodsdb <dbUrl> <dbUser> <dbPass> [--list] [--log-level LEVEL]",
    )
    parser.add_argument("params", nargs="*", help="<dbUrl> <dbUser> <dbPass>")
    parser.add_argument("--list", action="store_true", help="Print all products")
    parser.add_argument("--log-level", default=DEFAULT_LOG_LEVEL, help="Logging level")

    args = parser.parse_args(argv)
    setup_logging(args.log_level)

    try:
        cfg = Config.parse(args.params)
        run(cfg, list_products=args.list)
    except ClassifiedError as e:
        console.print(e.full_message(), style="red", markup=False, highlight=False)
        return e.code
    return 0


if __name__ == "__main__":
    sys.exit(main())
