from psycopg import Connection

from patient_ticketing.models.entities import PriorityEntity
from patient_ticketing.repositories.base import ConnectionScopedRepository


class PriorityRepository(ConnectionScopedRepository):
    def list(self, connection: Connection | None = None) -> list[PriorityEntity]:
        query = """
            SELECT id, name, display_order
            FROM priorities
            ORDER BY display_order ASC, id ASC
        """
        with self._use_connection(connection) as active_connection:
            with active_connection.cursor() as cursor:
                cursor.execute(query)
                rows = cursor.fetchall()
        return [
            PriorityEntity(id=row["id"], name=row["name"], display_order=row["display_order"])
            for row in rows
        ]
