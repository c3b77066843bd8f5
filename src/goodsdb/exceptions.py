"""
Classified failures raised by goodsdb.

Every failure carries a stable numeric code, a fixed category message,
optional details and the optional low-level cause. Callers branch on
``error.kind`` (or catch the concrete class) and display
``error.full_message()``.

Low-level psycopg faults never leave the repository layer: wrap the
statement block in ``translate_errors(operation)`` and they come out as
``StorageError`` (or ``OperationCancelled`` for timeouts and cancelled
statements).
"""

from contextlib import contextmanager
from enum import IntEnum
from typing import Optional

import psycopg
from psycopg import errors as pg_errors
from psycopg_pool import PoolTimeout

# =============================================================================
# Error Kinds
# =============================================================================


class ErrorKind(IntEnum):
    ARGUMENT = 1
    STORAGE = 2
    CANCELLED = 3


# =============================================================================
# Exceptions
# =============================================================================


class ClassifiedError(Exception):
    """Base class for all goodsdb failures."""

    kind: ErrorKind
    message: str

    def __init__(
        self,
        details: Optional[str] = None,
        cause: Optional[BaseException] = None,
    ):
        super().__init__(self.message)
        self.details = details
        self.cause = cause
        if cause is not None:
            self.__cause__ = cause

    @property
    def code(self) -> int:
        return int(self.kind)

    def has_details(self) -> bool:
        return bool(self.details)

    def has_cause(self) -> bool:
        return self.cause is not None

    def full_message(self) -> str:
        """
        Compose the display message.

        Format: ``[<code>] <message>: <details>`` followed by the cause on
        its own line. The details segment is left out when details are
        empty, the cause line when there is no cause.
        """
        parts = [f"[{self.code}] {self.message}"]
        if self.has_details():
            parts.append(f": {self.details}")
        if self.has_cause():
            parts.append(f"\n{describe_cause(self.cause)}")
        return "".join(parts)

    def __str__(self) -> str:
        return self.full_message()


class ArgumentError(ClassifiedError):
    """Invalid startup configuration supplied by the caller."""

    kind = ErrorKind.ARGUMENT
    message = "Incorrect CLI arguments"


class StorageError(ClassifiedError):
    """Any failure while talking to the store."""

    kind = ErrorKind.STORAGE
    message = "Data storage error"

    def __init__(
        self,
        operation: str,
        cause: Optional[BaseException] = None,
        details: Optional[str] = None,
    ):
        super().__init__(details if details else operation, cause)
        self.operation = operation


class OperationCancelled(ClassifiedError):
    """An operation gave up waiting for a connection or for its statement."""

    kind = ErrorKind.CANCELLED
    message = "Operation cancelled"

    AWAITING_CONNECTION = "awaiting a pooled connection"
    AWAITING_STATEMENT = "awaiting statement completion"

    def __init__(self, operation: str, stage: str, cause: Optional[BaseException] = None):
        super().__init__(f"{operation} while {stage}", cause)
        self.operation = operation
        self.stage = stage


def describe_cause(cause: BaseException) -> str:
    """Render a cause as ``<ClassName>: <message>``."""
    text = str(cause).strip()
    name = type(cause).__name__
    return f"{name}: {text}" if text else name


# =============================================================================
# Translation
# =============================================================================


class RowReadError(Exception):
    """A result row could not be mapped to an entity. The original fault is __cause__."""


@contextmanager
def translate_errors(operation: str):
    """
    Re-raise store faults from the wrapped block as classified failures.

    Usage:
        with translate_errors("ProductRepository.get_all()"):
            rows = pool.fetch_all("SELECT * FROM products")
    """
    try:
        yield
    except ClassifiedError:
        raise
    except PoolTimeout as e:
        raise OperationCancelled(operation, OperationCancelled.AWAITING_CONNECTION, e) from e
    except pg_errors.QueryCanceled as e:
        raise OperationCancelled(operation, OperationCancelled.AWAITING_STATEMENT, e) from e
    except psycopg.Error as e:
        raise StorageError(operation, e) from e
    except RowReadError as e:
        cause = e.__cause__ or e
        raise StorageError(operation, cause, details=f"{operation}: unreadable result row") from cause
