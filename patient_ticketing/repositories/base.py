from collections.abc import Iterator
from contextlib import contextmanager

from psycopg import Connection

from patient_ticketing.core.database import get_connection


class ConnectionScopedRepository:
    """Runs queries on the caller's connection when given one, else on a fresh one."""

    def __init__(self, database_url: str | None = None) -> None:
        self.database_url = database_url

    @contextmanager
    def _use_connection(self, connection: Connection | None) -> Iterator[Connection]:
        if connection is not None:
            yield connection
            return
        with get_connection(self.database_url) as managed:
            yield managed
