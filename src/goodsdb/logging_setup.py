import logging

from rich.logging import RichHandler

DEFAULT_LOG_LEVEL = "WARNING"


def setup_logging(level: str = DEFAULT_LOG_LEVEL) -> None:
    """
    Route all log records to a RichHandler on the root logger.

    Calling it again replaces the previous handlers instead of stacking them.
    """
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.WARNING))

    handler = RichHandler(
        rich_tracebacks=False,
        show_time=True,
        show_level=True,
        show_path=False,
        markup=False,
    )
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))

    for h in list(root.handlers):
        root.removeHandler(h)
    root.addHandler(handler)

    # psycopg_pool reports every reconnect attempt at INFO
    logging.getLogger("psycopg.pool").setLevel(max(root.level, logging.WARNING))
