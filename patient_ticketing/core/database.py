from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass

import structlog
from psycopg import Connection, connect
from psycopg.rows import dict_row

from patient_ticketing.core.config import get_settings

log = structlog.get_logger(__name__)


def get_database_url() -> str:
    return get_settings().database_url


@contextmanager
def get_connection(database_url: str | None = None) -> Iterator[Connection]:
    url = database_url or get_database_url()
    with connect(url, row_factory=dict_row) as connection:
        yield connection


@dataclass(frozen=True, slots=True)
class TransactionScope:
    """Handle to an open transaction.

    A scope that owns its transaction commits or rolls it back when the
    ``transaction`` block exits. A joined scope shares the connection of an
    outer scope and leaves commit and rollback to the owner.
    """

    connection: Connection
    owns_transaction: bool

    def join(self) -> "TransactionScope":
        return TransactionScope(connection=self.connection, owns_transaction=False)


@contextmanager
def transaction(
    database_url: str | None = None,
    scope: TransactionScope | None = None,
) -> Iterator[TransactionScope]:
    if scope is not None:
        yield scope.join()
        return

    with get_connection(database_url) as connection:
        owned = TransactionScope(connection=connection, owns_transaction=True)
        try:
            yield owned
        except Exception as exc:
            connection.rollback()
            log.warning("transaction_rolled_back", error=type(exc).__name__)
            raise
        connection.commit()
