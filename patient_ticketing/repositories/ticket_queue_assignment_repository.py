from typing import Any

from psycopg import Connection
from psycopg.types.json import Jsonb

from patient_ticketing.models.entities import TicketQueueAssignmentEntity
from patient_ticketing.repositories.base import ConnectionScopedRepository

ASSIGNMENT_COLUMNS = """
    id, ticket_id, queue_id, assignment_user_id, assignment_firm_id,
    assignment_date, notes, details
"""


def _to_assignment_entity(row: dict[str, Any]) -> TicketQueueAssignmentEntity:
    return TicketQueueAssignmentEntity(
        id=row["id"],
        ticket_id=row["ticket_id"],
        queue_id=row["queue_id"],
        assignment_user_id=row["assignment_user_id"],
        assignment_firm_id=row["assignment_firm_id"],
        assignment_date=row["assignment_date"],
        notes=row["notes"],
        details=list(row["details"] or []),
    )


class TicketQueueAssignmentRepository(ConnectionScopedRepository):
    def create(
        self,
        *,
        ticket_id: int,
        queue_id: int,
        user_id: int,
        firm_id: int | None,
        notes: str | None = None,
        details: list[dict[str, Any]] | None = None,
        connection: Connection | None = None,
    ) -> TicketQueueAssignmentEntity:
        query = f"""
            INSERT INTO ticket_queue_assignments
                (ticket_id, queue_id, assignment_user_id, assignment_firm_id, notes, details)
            VALUES (%s, %s, %s, %s, %s, %s)
            RETURNING {ASSIGNMENT_COLUMNS}
        """
        params = (ticket_id, queue_id, user_id, firm_id, notes, Jsonb(details or []))
        with self._use_connection(connection) as active_connection:
            with active_connection.cursor() as cursor:
                cursor.execute(query, params)
                row = cursor.fetchone()
        if row is None:
            raise RuntimeError("Failed to assign ticket to queue.")
        return _to_assignment_entity(row)

    def list_for_ticket(
        self,
        ticket_id: int,
        connection: Connection | None = None,
    ) -> list[TicketQueueAssignmentEntity]:
        query = f"""
            SELECT {ASSIGNMENT_COLUMNS}
            FROM ticket_queue_assignments
            WHERE ticket_id = %s
            ORDER BY assignment_date ASC, id ASC
        """
        with self._use_connection(connection) as active_connection:
            with active_connection.cursor() as cursor:
                cursor.execute(query, (ticket_id,))
                rows = cursor.fetchall()
        return [_to_assignment_entity(row) for row in rows]
