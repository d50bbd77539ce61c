from typing import Any

from psycopg import Connection
from psycopg.types.json import Jsonb

from patient_ticketing.models.entities import QueueEntity
from patient_ticketing.repositories.base import ConnectionScopedRepository

QUEUE_COLUMNS = "q.id, q.name, q.description, q.is_initial, q.active, q.assignment_fields"


def _to_queue_entity(row: dict[str, Any]) -> QueueEntity:
    return QueueEntity(
        id=row["id"],
        name=row["name"],
        description=row["description"],
        is_initial=row["is_initial"],
        active=row["active"],
        assignment_fields=list(row["assignment_fields"] or []),
    )


class QueueRepository(ConnectionScopedRepository):
    def create(
        self,
        *,
        name: str,
        description: str | None = None,
        is_initial: bool = False,
        active: bool = True,
        assignment_fields: list[dict[str, Any]] | None = None,
        connection: Connection | None = None,
    ) -> QueueEntity:
        query = """
            INSERT INTO queues (name, description, is_initial, active, assignment_fields)
            VALUES (%s, %s, %s, %s, %s)
            RETURNING id, name, description, is_initial, active, assignment_fields
        """
        params = (name, description, is_initial, active, Jsonb(assignment_fields or []))
        with self._use_connection(connection) as active_connection:
            with active_connection.cursor() as cursor:
                cursor.execute(query, params)
                row = cursor.fetchone()
        if row is None:
            raise RuntimeError("Failed to create queue.")
        return _to_queue_entity(row)

    def get_by_id(
        self,
        queue_id: int,
        *,
        active_only: bool = False,
        connection: Connection | None = None,
    ) -> QueueEntity | None:
        query = f"""
            SELECT {QUEUE_COLUMNS}
            FROM queues q
            WHERE q.id = %s
        """
        if active_only:
            query += " AND q.active = TRUE"
        with self._use_connection(connection) as active_connection:
            with active_connection.cursor() as cursor:
                cursor.execute(query, (queue_id,))
                row = cursor.fetchone()
        if row is None:
            return None
        return _to_queue_entity(row)

    def list_initial(
        self,
        *,
        active_only: bool = True,
        connection: Connection | None = None,
    ) -> list[QueueEntity]:
        where_sql = "WHERE q.is_initial = TRUE"
        if active_only:
            where_sql += " AND q.active = TRUE"
        query = f"""
            SELECT {QUEUE_COLUMNS}
            FROM queues q
            {where_sql}
            ORDER BY q.id ASC
        """
        with self._use_connection(connection) as active_connection:
            with active_connection.cursor() as cursor:
                cursor.execute(query)
                rows = cursor.fetchall()
        return [_to_queue_entity(row) for row in rows]

    def list_outcomes(
        self,
        queue_id: int,
        connection: Connection | None = None,
    ) -> list[QueueEntity]:
        query = f"""
            SELECT {QUEUE_COLUMNS}
            FROM queue_outcomes qo
            JOIN queues q ON q.id = qo.outcome_queue_id
            WHERE qo.queue_id = %s
            ORDER BY q.id ASC
        """
        with self._use_connection(connection) as active_connection:
            with active_connection.cursor() as cursor:
                cursor.execute(query, (queue_id,))
                rows = cursor.fetchall()
        return [_to_queue_entity(row) for row in rows]

    def list_parents(
        self,
        queue_id: int,
        connection: Connection | None = None,
    ) -> list[QueueEntity]:
        query = f"""
            SELECT {QUEUE_COLUMNS}
            FROM queue_outcomes qo
            JOIN queues q ON q.id = qo.queue_id
            WHERE qo.outcome_queue_id = %s
            ORDER BY q.id ASC
        """
        with self._use_connection(connection) as active_connection:
            with active_connection.cursor() as cursor:
                cursor.execute(query, (queue_id,))
                rows = cursor.fetchall()
        return [_to_queue_entity(row) for row in rows]

    def add_outcome(
        self,
        *,
        queue_id: int,
        outcome_queue_id: int,
        connection: Connection | None = None,
    ) -> None:
        query = """
            INSERT INTO queue_outcomes (queue_id, outcome_queue_id)
            VALUES (%s, %s)
            ON CONFLICT (queue_id, outcome_queue_id) DO NOTHING
        """
        with self._use_connection(connection) as active_connection:
            with active_connection.cursor() as cursor:
                cursor.execute(query, (queue_id, outcome_queue_id))
