"""Hierarchical role-based access control.

Auth items form a graph of roles, tasks and operations linked by
parent/child edges. A user is granted an item when they are assigned to it
or to any ancestor of it, and every item on that path whose business rule is
set accepts the user for the given context.
"""

from collections.abc import Callable, Mapping
from typing import Any

import structlog
from psycopg import Connection

from patient_ticketing.models.entities import AuthItemEntity, AuthItemType
from patient_ticketing.repositories.auth_repository import AuthRepository

log = structlog.get_logger(__name__)

BusinessRule = Callable[[int, Mapping[str, Any]], bool]


def can_process_queue_set(user_id: int, params: Mapping[str, Any]) -> bool:
    queue_set = params.get("queue_set")
    if queue_set is None:
        return False
    return user_id in (getattr(queue_set, "permissioned_user_ids", None) or [])


DEFAULT_BUSINESS_RULES: dict[str, BusinessRule] = {
    "canProcessQueueSet": can_process_queue_set,
}


class AuthItem:
    def __init__(self, manager: "AuthManager", entity: AuthItemEntity) -> None:
        self._manager = manager
        self._entity = entity

    @property
    def name(self) -> str:
        return self._entity.name

    @property
    def type(self) -> AuthItemType:
        return self._entity.type

    @property
    def description(self) -> str | None:
        return self._entity.description

    @property
    def bizrule(self) -> str | None:
        return self._entity.bizrule

    def has_child(self, name: str) -> bool:
        return name in self._manager.auth_repository.list_child_names(self.name)

    def get_assignment(self, user_id: int, connection: Connection | None = None) -> bool:
        assigned = self._manager.auth_repository.list_assigned_item_names(
            user_id,
            connection=connection,
        )
        return self.name in assigned

    def assign(self, user_id: int, connection: Connection | None = None) -> None:
        self._manager.auth_repository.assign(
            item_name=self.name,
            user_id=user_id,
            connection=connection,
        )
        log.info("auth_item_assigned", item=self.name, user_id=user_id)


class AuthManager:
    def __init__(
        self,
        auth_repository: AuthRepository,
        business_rules: Mapping[str, BusinessRule] | None = None,
    ) -> None:
        self.auth_repository = auth_repository
        if business_rules is None:
            business_rules = DEFAULT_BUSINESS_RULES
        self.business_rules = dict(business_rules)

    def get_auth_items(self, item_type: AuthItemType | None = None) -> list[AuthItem]:
        return [AuthItem(self, entity) for entity in self.auth_repository.list_items(item_type)]

    def get_auth_item(self, name: str) -> AuthItem | None:
        entity = self.auth_repository.get_item(name)
        if entity is None:
            return None
        return AuthItem(self, entity)

    def check_access(
        self,
        item_name: str,
        user_id: int,
        params: Mapping[str, Any] | None = None,
    ) -> bool:
        assignments = self.auth_repository.list_assigned_item_names(user_id)
        if not assignments:
            return False
        return self._check_access_recursive(
            item_name,
            user_id,
            params or {},
            assignments,
            visited=set(),
        )

    def execute_business_rule(
        self,
        rule_name: str | None,
        user_id: int,
        params: Mapping[str, Any],
    ) -> bool:
        if not rule_name:
            return True
        rule = self.business_rules.get(rule_name)
        if rule is None:
            log.warning("business_rule_missing", rule=rule_name)
            return False
        return rule(user_id, params)

    def _check_access_recursive(
        self,
        item_name: str,
        user_id: int,
        params: Mapping[str, Any],
        assignments: set[str],
        visited: set[str],
    ) -> bool:
        if item_name in visited:
            return False
        visited.add(item_name)

        item = self.auth_repository.get_item(item_name)
        if item is None:
            return False
        if not self.execute_business_rule(item.bizrule, user_id, params):
            return False
        if item_name in assignments:
            return True

        return any(
            self._check_access_recursive(parent, user_id, params, assignments, visited)
            for parent in self.auth_repository.list_parent_names(item_name)
        )
