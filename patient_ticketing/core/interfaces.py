from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Protocol

from psycopg import Connection

from patient_ticketing.models.entities import UserEntity


class RoleItem(Protocol):
    name: str

    def has_child(self, name: str) -> bool:
        """Whether ``name`` is a direct child of this item."""

    def get_assignment(self, user_id: int, connection: Connection | None = None) -> bool:
        """Whether the user is already assigned to this item."""

    def assign(self, user_id: int, connection: Connection | None = None) -> None:
        """Assign this item to the user."""


class AccessChecker(Protocol):
    def check_access(
        self,
        item_name: str,
        user_id: int,
        params: Mapping[str, Any] | None = None,
    ) -> bool:
        """Whether the user may perform ``item_name`` in the given context."""

    def get_auth_items(self, item_type: int | None = None) -> list[Any]:
        """All auth items, optionally restricted to one item type."""

    def get_auth_item(self, name: str) -> RoleItem | None:
        """Look up a single auth item by name."""


class UserLookup(Protocol):
    def get_by_id(self, user_id: int, connection: Connection | None = None) -> UserEntity | None:
        """Resolve a user id."""


class HtmlPurifier(Protocol):
    def __call__(self, value: object) -> str:
        """Return an HTML-safe rendition of ``value``."""
