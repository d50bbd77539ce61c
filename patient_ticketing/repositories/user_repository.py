from typing import Any

from psycopg import Connection

from patient_ticketing.models.entities import UserEntity
from patient_ticketing.repositories.base import ConnectionScopedRepository


def _to_user_entity(row: dict[str, Any]) -> UserEntity:
    return UserEntity(
        id=row["id"],
        username=row["username"],
        first_name=row["first_name"],
        last_name=row["last_name"],
        active=row["active"],
    )


class UserRepository(ConnectionScopedRepository):
    def get_by_id(self, user_id: int, connection: Connection | None = None) -> UserEntity | None:
        query = """
            SELECT id, username, first_name, last_name, active
            FROM users
            WHERE id = %s
        """
        with self._use_connection(connection) as active_connection:
            with active_connection.cursor() as cursor:
                cursor.execute(query, (user_id,))
                row = cursor.fetchone()
        if row is None:
            return None
        return _to_user_entity(row)
