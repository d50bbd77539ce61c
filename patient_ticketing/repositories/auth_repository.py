from typing import Any

from psycopg import Connection

from patient_ticketing.models.entities import AuthItemEntity, AuthItemType
from patient_ticketing.repositories.base import ConnectionScopedRepository


def _to_auth_item_entity(row: dict[str, Any]) -> AuthItemEntity:
    return AuthItemEntity(
        name=row["name"],
        type=AuthItemType(row["type"]),
        description=row["description"],
        bizrule=row["bizrule"],
    )


class AuthRepository(ConnectionScopedRepository):
    def create_item(
        self,
        *,
        name: str,
        item_type: AuthItemType,
        description: str | None = None,
        bizrule: str | None = None,
        connection: Connection | None = None,
    ) -> AuthItemEntity:
        query = """
            INSERT INTO auth_items (name, type, description, bizrule)
            VALUES (%s, %s, %s, %s)
            RETURNING name, type, description, bizrule
        """
        with self._use_connection(connection) as active_connection:
            with active_connection.cursor() as cursor:
                cursor.execute(query, (name, int(item_type), description, bizrule))
                row = cursor.fetchone()
        if row is None:
            raise RuntimeError("Failed to create auth item.")
        return _to_auth_item_entity(row)

    def get_item(self, name: str, connection: Connection | None = None) -> AuthItemEntity | None:
        query = """
            SELECT name, type, description, bizrule
            FROM auth_items
            WHERE name = %s
        """
        with self._use_connection(connection) as active_connection:
            with active_connection.cursor() as cursor:
                cursor.execute(query, (name,))
                row = cursor.fetchone()
        if row is None:
            return None
        return _to_auth_item_entity(row)

    def list_items(
        self,
        item_type: AuthItemType | None = None,
        connection: Connection | None = None,
    ) -> list[AuthItemEntity]:
        query = "SELECT name, type, description, bizrule FROM auth_items"
        params: list[Any] = []
        if item_type is not None:
            query += " WHERE type = %s"
            params.append(int(item_type))
        query += " ORDER BY name ASC"
        with self._use_connection(connection) as active_connection:
            with active_connection.cursor() as cursor:
                cursor.execute(query, params)
                rows = cursor.fetchall()
        return [_to_auth_item_entity(row) for row in rows]

    def add_child(self, *, parent: str, child: str, connection: Connection | None = None) -> None:
        query = """
            INSERT INTO auth_item_children (parent, child)
            VALUES (%s, %s)
            ON CONFLICT (parent, child) DO NOTHING
        """
        with self._use_connection(connection) as active_connection:
            with active_connection.cursor() as cursor:
                cursor.execute(query, (parent, child))

    def list_child_names(self, parent: str, connection: Connection | None = None) -> list[str]:
        query = "SELECT child FROM auth_item_children WHERE parent = %s ORDER BY child ASC"
        with self._use_connection(connection) as active_connection:
            with active_connection.cursor() as cursor:
                cursor.execute(query, (parent,))
                rows = cursor.fetchall()
        return [row["child"] for row in rows]

    def list_parent_names(self, child: str, connection: Connection | None = None) -> list[str]:
        query = "SELECT parent FROM auth_item_children WHERE child = %s ORDER BY parent ASC"
        with self._use_connection(connection) as active_connection:
            with active_connection.cursor() as cursor:
                cursor.execute(query, (child,))
                rows = cursor.fetchall()
        return [row["parent"] for row in rows]

    def list_assigned_item_names(
        self,
        user_id: int,
        connection: Connection | None = None,
    ) -> set[str]:
        query = "SELECT item_name FROM auth_assignments WHERE user_id = %s"
        with self._use_connection(connection) as active_connection:
            with active_connection.cursor() as cursor:
                cursor.execute(query, (user_id,))
                rows = cursor.fetchall()
        return {row["item_name"] for row in rows}

    def assign(self, *, item_name: str, user_id: int, connection: Connection | None = None) -> None:
        query = """
            INSERT INTO auth_assignments (item_name, user_id)
            VALUES (%s, %s)
            ON CONFLICT (item_name, user_id) DO NOTHING
        """
        with self._use_connection(connection) as active_connection:
            with active_connection.cursor() as cursor:
                cursor.execute(query, (item_name, user_id))
