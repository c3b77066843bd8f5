import os
from dataclasses import dataclass
from typing import Sequence

from dotenv import load_dotenv

from goodsdb.exceptions import ArgumentError

USAGE = "Usage: goodsdb <dbUrl> <dbUser> <dbPass>"

DEFAULT_DATABASE_URL = "postgresql://127.0.0.1:5432/postgres"
DEFAULT_POOL_MAX_SIZE = 20
DEFAULT_POOL_TIMEOUT = 30.0

# Load the appropriate .env file on module import
env = os.environ.get("GOODSDB_ENV", "development").lower()
env_file = f".env.{env}"
if os.path.exists(env_file):
    load_dotenv(env_file)
else:
    # Fall back to the default .env file
    load_dotenv()


@dataclass
class Config:
    database_url: str
    database_user: str
    database_password: str
    pool_max_size: int = DEFAULT_POOL_MAX_SIZE
    pool_timeout: float = DEFAULT_POOL_TIMEOUT
    statement_timeout_ms: int = 0
    environment: str = env

    @classmethod
    def from_env(cls) -> "Config":
        return cls(
            database_url=os.environ.get("DATABASE_URL", DEFAULT_DATABASE_URL),
            database_user=os.environ.get("DATABASE_USER", "postgres"),
            database_password=os.environ.get("DATABASE_PASSWORD", ""),
            pool_max_size=int(os.environ.get("POOL_MAX_SIZE", DEFAULT_POOL_MAX_SIZE)),
            pool_timeout=float(os.environ.get("POOL_TIMEOUT", DEFAULT_POOL_TIMEOUT)),
            statement_timeout_ms=int(os.environ.get("DB_STATEMENT_TIMEOUT_MS", 0)),
            environment=env,
        )

    @classmethod
    def parse(cls, args: Sequence[str]) -> "Config":
        """
        Build a config from positional ``<dbUrl> <dbUser> <dbPass>`` arguments.

        Pool tuning still comes from the environment.

        Raises:
            ArgumentError: If fewer than three arguments are given
        """
        if len(args) < 3:
            raise ArgumentError(USAGE)
        defaults = cls.from_env()
        return cls(
            database_url=args[0],
            database_user=args[1],
            database_password=args[2],
            pool_max_size=defaults.pool_max_size,
            pool_timeout=defaults.pool_timeout,
            statement_timeout_ms=defaults.statement_timeout_ms,
            environment=defaults.environment,
        )


config = Config.from_env()
