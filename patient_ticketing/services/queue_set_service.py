from collections.abc import Mapping
from typing import Any

import structlog

from patient_ticketing.core.config import Settings, get_settings
from patient_ticketing.core.database import TransactionScope, transaction
from patient_ticketing.core.errors import (
    QueueSetNotFoundError,
    RoleNotFoundError,
    TicketNotFoundError,
    UserNotFoundError,
)
from patient_ticketing.core.interfaces import AccessChecker, UserLookup
from patient_ticketing.models.entities import AuthItemType, QueueSetEntity, UserEntity
from patient_ticketing.models.schemas.queue import QueueRead
from patient_ticketing.models.schemas.queue_set import QueueSetRead
from patient_ticketing.repositories.queue_set_repository import QueueSetRepository
from patient_ticketing.repositories.ticket_repository import TicketRepository
from patient_ticketing.services.queue_service import QueueService

log = structlog.get_logger(__name__)


class QueueSetService:
    def __init__(
        self,
        queue_set_repository: QueueSetRepository,
        queue_service: QueueService,
        user_lookup: UserLookup,
        auth_manager: AccessChecker,
        ticket_repository: TicketRepository,
        settings: Settings | None = None,
        database_url: str | None = None,
    ) -> None:
        self.queue_set_repository = queue_set_repository
        self.queue_service = queue_service
        self.user_lookup = user_lookup
        self.auth_manager = auth_manager
        self.ticket_repository = ticket_repository
        self.settings = settings or get_settings()
        self.database_url = database_url

    def search(self, params: Mapping[str, Any]) -> list[QueueSetRead]:
        queue_sets = self.queue_set_repository.search(
            queue_set_id=params.get("id"),
            name=params.get("name"),
        )
        return [self.model_to_resource(queue_set) for queue_set in queue_sets]

    def read(self, queue_set_id: int) -> QueueSetRead:
        return self.model_to_resource(self._read_model(queue_set_id))

    def model_to_resource(self, queue_set: QueueSetEntity) -> QueueSetRead:
        initial_queue: QueueRead | None = None
        if queue_set.initial_queue_id:
            initial_queue = self.queue_service.read(queue_set.initial_queue_id)

        return QueueSetRead(
            id=queue_set.id,
            name=queue_set.name,
            description=queue_set.description,
            active=queue_set.active,
            category_id=queue_set.category_id,
            initial_queue=initial_queue,
            permissioned_user_ids=list(queue_set.permissioned_user_ids),
        )

    def get_queue_sets_for_category(self, category_id: int) -> list[QueueSetRead]:
        queue_sets = self.queue_set_repository.list_active(category_id=category_id)
        return [self.model_to_resource(queue_set) for queue_set in queue_sets]

    def get_queue_sets_for_firm(self, firm_id: int | None) -> list[QueueSetRead]:
        # Firm filtering is not implemented; every active queue set is offered.
        _ = firm_id
        queue_sets = self.queue_set_repository.list_active()
        return [self.model_to_resource(queue_set) for queue_set in queue_sets]

    def get_queue_set_queues(
        self,
        queue_set: QueueSetRead,
        user_id: int,
        include_closing: bool = True,
    ) -> list[QueueRead]:
        if not self.is_queue_set_permissioned_for_user(queue_set, user_id):
            return []
        if queue_set.initial_queue is None:
            return []

        initial_queue = self.queue_service.read_model(queue_set.initial_queue.id)
        if initial_queue is None:
            return []

        queues = [
            initial_queue,
            *self.queue_service.get_dependent_queues(initial_queue, include_closing),
        ]
        return [self.queue_service.to_resource(queue) for queue in queues]

    def get_queue_set_roles(self) -> list[str]:
        task = self.settings.process_queue_set_task
        return [
            role.name
            for role in self.auth_manager.get_auth_items(AuthItemType.ROLE)
            if role.has_child(task)
        ]

    def set_permissioned_users(
        self,
        queue_set_id: int,
        user_ids: list[int],
        role: str | None = None,
        scope: TransactionScope | None = None,
    ) -> None:
        self._read_model(queue_set_id)

        users: list[UserEntity] = []
        for user_id in user_ids:
            user = self.user_lookup.get_by_id(user_id)
            if user is None:
                raise UserNotFoundError(user_id)
            users.append(user)

        role_item = None
        if role:
            role_item = self.auth_manager.get_auth_item(role)
            if role_item is None:
                raise RoleNotFoundError(role)

        with transaction(self.database_url, scope) as active_scope:
            self.queue_set_repository.replace_permissioned_users(
                queue_set_id=queue_set_id,
                user_ids=[user.id for user in users],
                connection=active_scope.connection,
            )
            if role_item is not None:
                for user in users:
                    if not role_item.get_assignment(user.id, connection=active_scope.connection):
                        role_item.assign(user.id, connection=active_scope.connection)

        log.info(
            "queue_set_permissions_replaced",
            queue_set_id=queue_set_id,
            user_ids=[user.id for user in users],
            role=role,
        )

    def is_queue_set_permissioned_for_user(self, queue_set: QueueSetRead, user_id: int) -> bool:
        return self.auth_manager.check_access(
            self.settings.process_queue_set_operation,
            user_id,
            {"user_id": user_id, "queue_set": queue_set},
        )

    def get_queue_set_for_ticket(self, ticket_id: int) -> QueueSetRead:
        ticket = self.ticket_repository.get_by_id(ticket_id)
        if ticket is None:
            raise TicketNotFoundError(ticket_id)
        if ticket.initial_queue_id is None:
            raise QueueSetNotFoundError(ticket_id=ticket_id)

        queue_set = self.queue_set_repository.get_by_initial_queue_id(ticket.initial_queue_id)
        if queue_set is None:
            raise QueueSetNotFoundError(ticket_id=ticket_id)
        return self.model_to_resource(queue_set)

    def get_queue_set_for_queue(self, queue_id: int) -> QueueSetRead:
        root = self.queue_service.get_root_queue(queue_id)
        queue_set = self.queue_set_repository.get_by_initial_queue_id(root.id)
        if queue_set is None:
            raise QueueSetNotFoundError(queue_id=queue_id)
        return self.model_to_resource(queue_set)

    def can_add_patient_to_queue_set(self, patient_id: int, queue_set_id: int) -> bool:
        queue_set = self._read_model(queue_set_id)
        if queue_set.initial_queue_id is None:
            return False

        for ticket in self.ticket_repository.list_for_patient(patient_id):
            if ticket.initial_queue_id != queue_set.initial_queue_id:
                continue
            if ticket.current_queue_id is None:
                continue
            current_queue = self.queue_service.read_model(ticket.current_queue_id)
            if current_queue is not None and not self.queue_service.is_closing(current_queue):
                return False
        return True

    def _read_model(self, queue_set_id: int) -> QueueSetEntity:
        queue_set = self.queue_set_repository.get_by_id(queue_set_id)
        if queue_set is None:
            raise QueueSetNotFoundError(queue_set_id=queue_set_id)
        return queue_set
