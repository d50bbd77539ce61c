from typing import Any

from psycopg import Connection

from patient_ticketing.models.entities import QueueSetCategoryEntity
from patient_ticketing.repositories.base import ConnectionScopedRepository


def _to_category_entity(row: dict[str, Any]) -> QueueSetCategoryEntity:
    return QueueSetCategoryEntity(
        id=row["id"],
        name=row["name"],
        active=row["active"],
        display_order=row["display_order"],
    )


class QueueSetCategoryRepository(ConnectionScopedRepository):
    def create(
        self,
        *,
        name: str,
        active: bool = True,
        display_order: int = 1,
        connection: Connection | None = None,
    ) -> QueueSetCategoryEntity:
        query = """
            INSERT INTO queue_set_categories (name, active, display_order)
            VALUES (%s, %s, %s)
            RETURNING id, name, active, display_order
        """
        with self._use_connection(connection) as active_connection:
            with active_connection.cursor() as cursor:
                cursor.execute(query, (name, active, display_order))
                row = cursor.fetchone()
        if row is None:
            raise RuntimeError("Failed to create queue set category.")
        return _to_category_entity(row)

    def get_by_id(
        self,
        category_id: int,
        connection: Connection | None = None,
    ) -> QueueSetCategoryEntity | None:
        query = """
            SELECT id, name, active, display_order
            FROM queue_set_categories
            WHERE id = %s
        """
        with self._use_connection(connection) as active_connection:
            with active_connection.cursor() as cursor:
                cursor.execute(query, (category_id,))
                row = cursor.fetchone()
        if row is None:
            return None
        return _to_category_entity(row)

    def list_active(self, connection: Connection | None = None) -> list[QueueSetCategoryEntity]:
        query = """
            SELECT id, name, active, display_order
            FROM queue_set_categories
            WHERE active = TRUE
            ORDER BY display_order ASC, id ASC
        """
        with self._use_connection(connection) as active_connection:
            with active_connection.cursor() as cursor:
                cursor.execute(query)
                rows = cursor.fetchall()
        return [_to_category_entity(row) for row in rows]
