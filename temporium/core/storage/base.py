"""Shared helpers for the storage classes."""

from __future__ import annotations

import sqlite3
from collections.abc import Callable, Iterator
from contextlib import contextmanager

from temporium.core.exceptions import ConnectivityError, ConstraintError, TemporiumError

ConnectionFactory = Callable[[], sqlite3.Connection]


@contextmanager
def sqlite_errors(
    action: str, overflow: type[TemporiumError] = ConstraintError
) -> Iterator[None]:
    """Re-raise sqlite3 errors as Temporium errors, prefixed with action.

    An integer parameter too large for SQLite raises ``overflow``: lookups
    pass NotFoundError since no row can carry such an id.
    """
    try:
        yield
    except sqlite3.IntegrityError as e:
        raise ConstraintError(f"{action}: {e}") from e
    except sqlite3.Error as e:
        raise ConnectivityError(f"{action}: {e}") from e
    except OverflowError as e:
        raise overflow(f"{action}: {e}") from e


@contextmanager
def write_transaction(conn: sqlite3.Connection) -> Iterator[sqlite3.Connection]:
    """Take the database write lock before the first statement.

    Checks made inside the block cannot go stale before the write that
    depends on them. Commits on success, rolls back on any exception.
    """
    with conn:
        conn.execute("BEGIN IMMEDIATE")
        yield conn
