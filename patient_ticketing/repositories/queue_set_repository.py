from typing import Any

from psycopg import Connection

from patient_ticketing.models.entities import QueueSetEntity
from patient_ticketing.repositories.base import ConnectionScopedRepository


def _to_queue_set_entity(row: dict[str, Any]) -> QueueSetEntity:
    return QueueSetEntity(
        id=row["id"],
        name=row["name"],
        description=row["description"],
        active=row["active"],
        category_id=row["category_id"],
        initial_queue_id=row["initial_queue_id"],
        permissioned_user_ids=list(row["permissioned_user_ids"] or []),
    )


def _select_queue_sets(where_sql: str) -> str:
    return f"""
        SELECT
            qs.id,
            qs.name,
            qs.description,
            qs.active,
            qs.category_id,
            qs.initial_queue_id,
            COALESCE(
                array_agg(qsu.user_id ORDER BY qsu.user_id)
                    FILTER (WHERE qsu.user_id IS NOT NULL),
                '{{}}'
            ) AS permissioned_user_ids
        FROM queue_sets qs
        LEFT JOIN queue_set_users qsu ON qsu.queue_set_id = qs.id
        {where_sql}
        GROUP BY qs.id
        ORDER BY qs.id ASC
    """


class QueueSetRepository(ConnectionScopedRepository):
    def create(
        self,
        *,
        name: str,
        description: str | None = None,
        active: bool = True,
        category_id: int | None = None,
        initial_queue_id: int | None = None,
        connection: Connection | None = None,
    ) -> QueueSetEntity:
        query = """
            INSERT INTO queue_sets (name, description, active, category_id, initial_queue_id)
            VALUES (%s, %s, %s, %s, %s)
            RETURNING id
        """
        with self._use_connection(connection) as active_connection:
            with active_connection.cursor() as cursor:
                cursor.execute(query, (name, description, active, category_id, initial_queue_id))
                row = cursor.fetchone()
            if row is None:
                raise RuntimeError("Failed to create queue set.")
            created = self.get_by_id(row["id"], connection=active_connection)
        if created is None:
            raise RuntimeError("Failed to create queue set.")
        return created

    def get_by_id(
        self,
        queue_set_id: int,
        connection: Connection | None = None,
    ) -> QueueSetEntity | None:
        matches = self._fetch("WHERE qs.id = %s", [queue_set_id], connection=connection)
        return matches[0] if matches else None

    def get_by_initial_queue_id(
        self,
        queue_id: int,
        connection: Connection | None = None,
    ) -> QueueSetEntity | None:
        matches = self._fetch("WHERE qs.initial_queue_id = %s", [queue_id], connection=connection)
        return matches[0] if matches else None

    def search(
        self,
        *,
        queue_set_id: int | None = None,
        name: str | None = None,
        connection: Connection | None = None,
    ) -> list[QueueSetEntity]:
        where_clauses: list[str] = []
        params: list[Any] = []

        if queue_set_id is not None:
            where_clauses.append("qs.id = %s")
            params.append(queue_set_id)

        if name:
            where_clauses.append("qs.name ILIKE %s")
            params.append(f"%{name}%")

        where_sql = ""
        if where_clauses:
            where_sql = "WHERE " + " AND ".join(where_clauses)
        return self._fetch(where_sql, params, connection=connection)

    def list_active(
        self,
        *,
        category_id: int | None = None,
        connection: Connection | None = None,
    ) -> list[QueueSetEntity]:
        if category_id is None:
            return self._fetch("WHERE qs.active = TRUE", [], connection=connection)
        return self._fetch(
            "WHERE qs.active = TRUE AND qs.category_id = %s",
            [category_id],
            connection=connection,
        )

    def replace_permissioned_users(
        self,
        *,
        queue_set_id: int,
        user_ids: list[int],
        connection: Connection | None = None,
    ) -> None:
        deduped_user_ids = list(dict.fromkeys(user_ids))

        with self._use_connection(connection) as active_connection:
            with active_connection.cursor() as cursor:
                cursor.execute(
                    "DELETE FROM queue_set_users WHERE queue_set_id = %s",
                    (queue_set_id,),
                )
                if deduped_user_ids:
                    cursor.executemany(
                        "INSERT INTO queue_set_users (queue_set_id, user_id) VALUES (%s, %s)",
                        [(queue_set_id, user_id) for user_id in deduped_user_ids],
                    )
                cursor.execute(
                    "UPDATE queue_sets SET updated_at = NOW() WHERE id = %s",
                    (queue_set_id,),
                )

    def _fetch(
        self,
        where_sql: str,
        params: list[Any],
        connection: Connection | None = None,
    ) -> list[QueueSetEntity]:
        with self._use_connection(connection) as active_connection:
            with active_connection.cursor() as cursor:
                cursor.execute(_select_queue_sets(where_sql), params)
                rows = cursor.fetchall()
        return [_to_queue_set_entity(row) for row in rows]
