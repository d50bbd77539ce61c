from typing import Any

from psycopg import Connection

from patient_ticketing.models.entities import TicketEntity
from patient_ticketing.repositories.base import ConnectionScopedRepository

TICKET_SELECT = """
    SELECT
        t.id,
        t.patient_id,
        t.priority_id,
        t.event_id,
        t.created_user_id,
        t.last_modified_user_id,
        t.created_at,
        t.updated_at,
        (
            SELECT tqa.queue_id
            FROM ticket_queue_assignments tqa
            WHERE tqa.ticket_id = t.id
            ORDER BY tqa.assignment_date DESC, tqa.id DESC
            LIMIT 1
        ) AS current_queue_id,
        (
            SELECT tqa.queue_id
            FROM ticket_queue_assignments tqa
            WHERE tqa.ticket_id = t.id
            ORDER BY tqa.assignment_date ASC, tqa.id ASC
            LIMIT 1
        ) AS initial_queue_id
    FROM tickets t
"""


def _to_ticket_entity(row: dict[str, Any]) -> TicketEntity:
    return TicketEntity(
        id=row["id"],
        patient_id=row["patient_id"],
        priority_id=row["priority_id"],
        event_id=row["event_id"],
        created_user_id=row["created_user_id"],
        last_modified_user_id=row["last_modified_user_id"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
        current_queue_id=row.get("current_queue_id"),
        initial_queue_id=row.get("initial_queue_id"),
    )


class TicketRepository(ConnectionScopedRepository):
    def create(
        self,
        *,
        patient_id: int,
        priority_id: int | None,
        user_id: int,
        connection: Connection | None = None,
    ) -> TicketEntity:
        query = """
            INSERT INTO tickets (patient_id, priority_id, created_user_id, last_modified_user_id)
            VALUES (%s, %s, %s, %s)
            RETURNING id, patient_id, priority_id, event_id, created_user_id,
                      last_modified_user_id, created_at, updated_at
        """
        with self._use_connection(connection) as active_connection:
            with active_connection.cursor() as cursor:
                cursor.execute(query, (patient_id, priority_id, user_id, user_id))
                created = cursor.fetchone()
        if created is None:
            raise RuntimeError("Failed to create ticket.")
        return _to_ticket_entity(created)

    def get_by_id(
        self,
        ticket_id: int,
        connection: Connection | None = None,
    ) -> TicketEntity | None:
        return self._fetch_one("WHERE t.id = %s", (ticket_id,), connection=connection)

    def get_by_event_id(
        self,
        event_id: int,
        connection: Connection | None = None,
    ) -> TicketEntity | None:
        return self._fetch_one(
            "WHERE t.event_id = %s ORDER BY t.id ASC LIMIT 1",
            (event_id,),
            connection=connection,
        )

    def list_for_patient(
        self,
        patient_id: int,
        connection: Connection | None = None,
    ) -> list[TicketEntity]:
        query = TICKET_SELECT + " WHERE t.patient_id = %s ORDER BY t.id ASC"
        with self._use_connection(connection) as active_connection:
            with active_connection.cursor() as cursor:
                cursor.execute(query, (patient_id,))
                rows = cursor.fetchall()
        return [_to_ticket_entity(row) for row in rows]

    def set_event(
        self,
        *,
        ticket_id: int,
        event_id: int,
        user_id: int,
        connection: Connection | None = None,
    ) -> bool:
        query = """
            UPDATE tickets
            SET event_id = %s,
                last_modified_user_id = %s,
                updated_at = NOW()
            WHERE id = %s
        """
        with self._use_connection(connection) as active_connection:
            with active_connection.cursor() as cursor:
                cursor.execute(query, (event_id, user_id, ticket_id))
                return cursor.rowcount > 0

    def touch(self, *, ticket_id: int, user_id: int, connection: Connection | None = None) -> bool:
        query = """
            UPDATE tickets
            SET last_modified_user_id = %s,
                updated_at = NOW()
            WHERE id = %s
        """
        with self._use_connection(connection) as active_connection:
            with active_connection.cursor() as cursor:
                cursor.execute(query, (user_id, ticket_id))
                return cursor.rowcount > 0

    def _fetch_one(
        self,
        where_sql: str,
        params: tuple[Any, ...],
        connection: Connection | None = None,
    ) -> TicketEntity | None:
        with self._use_connection(connection) as active_connection:
            with active_connection.cursor() as cursor:
                cursor.execute(TICKET_SELECT + " " + where_sql, params)
                row = cursor.fetchone()
        if row is None:
            return None
        return _to_ticket_entity(row)
