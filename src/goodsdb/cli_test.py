"""
Unit tests for the goodsdb CLI.

Run with: pytest src/goodsdb/cli_test.py -v
"""

from unittest.mock import MagicMock, patch

import pytest

from goodsdb import cli
from goodsdb.exceptions import StorageError
from goodsdb.product import Product


@pytest.fixture
def pool_cls():
    """Patch ConnectionPool as seen by the CLI."""
    with patch("goodsdb.cli.ConnectionPool") as pool_cls:
        pool = MagicMock()
        pool_cls.from_config.return_value.__enter__.return_value = pool
        yield pool_cls


class TestMain:
    """Tests for cli.main()"""

    @pytest.mark.parametrize("argv", [[], ["url"], ["url", "user"]])
    def test_missing_arguments_exit_with_code_1(self, argv, capsys):
        assert cli.main(argv) == 1

        out = capsys.readouterr().out
        assert "[1] Incorrect CLI arguments" in out
        assert "Usage: goodsdb" in out

    def test_bootstraps_schema(self, pool_cls):
        with patch("goodsdb.cli.create_table") as create_table:
            assert cli.main(["url", "user", "pass"]) == 0

        pool = pool_cls.from_config.return_value.__enter__.return_value
        create_table.assert_called_once_with(pool)
        cfg = pool_cls.from_config.call_args.args[0]
        assert cfg.database_url == "url"

    def test_storage_error_exit_with_code_2(self, pool_cls, capsys):
        error = StorageError("ConnectionPool.open()", details="Cannot connect to the data store")
        pool_cls.from_config.return_value.__enter__.side_effect = error

        assert cli.main(["url", "user", "pass"]) == 2

        assert "[2] Data storage error: Cannot connect to the data store" in capsys.readouterr().out

    def test_list_products(self, pool_cls, capsys):
        products = [Product(2, "radio", 5.0, "audio"), Product(1, "tv", 10.0, "video")]
        with patch("goodsdb.cli.create_table"), patch("goodsdb.cli.ProductRepository") as repo_cls:
            repo_cls.return_value.get_all.return_value = products

            assert cli.main(["url", "user", "pass", "--list"]) == 0

        out = capsys.readouterr().out
        assert "radio" in out
        assert out.index("tv") < out.index("radio")


class TestBuildTable:
    """Tests for cli.build_table()"""

    def test_rows_sorted_by_id(self):
        table = cli.build_table([Product(2, "b", 2.0, "x"), Product(1, "a", 1.0, "x")])

        assert table.row_count == 2
        assert list(table.columns[0].cells) == ["1", "2"]


class TestUsage:
    """argparse errors show a single usage line"""

    def test_unknown_option(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            cli.main(["url", "user", "pass", "--bogus"])

        assert exc_info.value.code == 2
        err = capsys.readouterr().err
        assert "usage: goodsdb <dbUrl> <dbUser> <dbPass> [--list]" in err
        assert "Usage:" not in err
