from collections import deque
from collections.abc import Mapping
from typing import Any

import structlog

from patient_ticketing.core.database import TransactionScope, transaction
from patient_ticketing.core.errors import (
    QueueInactiveError,
    QueueNotFoundError,
    QueueRootNotFoundError,
)
from patient_ticketing.models.entities import (
    FormField,
    QueueEntity,
    TicketEntity,
    TicketQueueAssignmentEntity,
)
from patient_ticketing.models.schemas.queue import FormFieldRead, QueueRead
from patient_ticketing.repositories.priority_repository import PriorityRepository
from patient_ticketing.repositories.queue_repository import QueueRepository
from patient_ticketing.repositories.ticket_queue_assignment_repository import (
    TicketQueueAssignmentRepository,
)
from patient_ticketing.repositories.ticket_repository import TicketRepository

log = structlog.get_logger(__name__)

PRIORITY_FIELD = "patientticketing__priority"
NOTES_FIELD = "patientticketing__notes"


def _to_form_field(raw: Mapping[str, Any]) -> FormField:
    form_name = str(raw.get("form_name") or raw["id"])
    choices = raw.get("choices")
    return FormField(
        form_name=form_name,
        label=str(raw.get("label") or form_name),
        required=bool(raw.get("required")),
        choices={str(key): str(value) for key, value in choices.items()} if choices else None,
    )


class QueueService:
    def __init__(
        self,
        queue_repository: QueueRepository,
        priority_repository: PriorityRepository,
        ticket_repository: TicketRepository,
        assignment_repository: TicketQueueAssignmentRepository,
        database_url: str | None = None,
    ) -> None:
        self.queue_repository = queue_repository
        self.priority_repository = priority_repository
        self.ticket_repository = ticket_repository
        self.assignment_repository = assignment_repository
        self.database_url = database_url

    def read(self, queue_id: int) -> QueueRead:
        queue = self.read_model(queue_id)
        if queue is None:
            raise QueueNotFoundError(queue_id)
        return self.to_resource(queue)

    def read_model(self, queue_id: int, *, active_only: bool = False) -> QueueEntity | None:
        return self.queue_repository.get_by_id(queue_id, active_only=active_only)

    def to_resource(self, queue: QueueEntity) -> QueueRead:
        return QueueRead(
            id=queue.id,
            name=queue.name,
            description=queue.description,
            is_initial=queue.is_initial,
            active=queue.active,
            is_closing=self.is_closing(queue),
        )

    def get_initial_queues(self) -> list[QueueEntity]:
        return self.queue_repository.list_initial(active_only=True)

    def get_outcomes(self, queue: QueueEntity) -> list[QueueEntity]:
        return self.queue_repository.list_outcomes(queue.id)

    def is_closing(self, queue: QueueEntity) -> bool:
        return not self.get_outcomes(queue)

    def get_dependent_queues(
        self,
        queue: QueueEntity,
        include_closing: bool = True,
    ) -> list[QueueEntity]:
        """Queues reachable from ``queue`` through outcomes, breadth first.

        The starting queue is never part of the result, even when a cycle
        leads back to it.
        """
        dependents: list[QueueEntity] = []
        visited = {queue.id}
        pending = deque(self.get_outcomes(queue))

        while pending:
            current = pending.popleft()
            if current.id in visited:
                continue
            visited.add(current.id)

            outcomes = self.get_outcomes(current)
            if outcomes or include_closing:
                dependents.append(current)
            pending.extend(outcomes)

        return dependents

    def get_root_queue(self, queue_id: int) -> QueueEntity:
        queue = self.read_model(queue_id)
        if queue is None:
            raise QueueNotFoundError(queue_id)

        roots: dict[int, QueueEntity] = {}
        visited: set[int] = set()
        pending = deque([queue])
        while pending:
            current = pending.popleft()
            if current.id in visited:
                continue
            visited.add(current.id)
            if current.is_initial:
                roots[current.id] = current
                continue
            pending.extend(self.queue_repository.list_parents(current.id))

        if len(roots) != 1:
            raise QueueRootNotFoundError(queue_id, sorted(roots))
        return next(iter(roots.values()))

    def get_form_fields(self, queue: QueueEntity) -> list[FormField]:
        fields: list[FormField] = []
        if queue.is_initial:
            fields.append(
                FormField(
                    form_name=PRIORITY_FIELD,
                    label="Priority",
                    required=True,
                    choices={
                        str(priority.id): priority.name
                        for priority in self.priority_repository.list()
                    },
                )
            )
        fields.extend(_to_form_field(raw) for raw in queue.assignment_fields)
        fields.append(FormField(form_name=NOTES_FIELD, label="Notes"))
        return fields

    def get_form_field_resources(self, queue: QueueEntity) -> list[FormFieldRead]:
        return [
            FormFieldRead(
                form_name=field.form_name,
                label=field.label,
                required=field.required,
                choices=field.choices,
            )
            for field in self.get_form_fields(queue)
        ]

    def add_ticket(
        self,
        queue: QueueEntity,
        ticket: TicketEntity,
        user_id: int,
        firm_id: int | None,
        data: Mapping[str, Any],
        scope: TransactionScope | None = None,
    ) -> TicketQueueAssignmentEntity:
        if not queue.active:
            raise QueueInactiveError(queue.id)

        details = [
            {"id": field.form_name, "value": data.get(field.form_name)}
            for field in map(_to_form_field, queue.assignment_fields)
        ]
        notes = data.get(NOTES_FIELD) or None

        with transaction(self.database_url, scope) as active_scope:
            assignment = self.assignment_repository.create(
                ticket_id=ticket.id,
                queue_id=queue.id,
                user_id=user_id,
                firm_id=firm_id,
                notes=notes,
                details=details,
                connection=active_scope.connection,
            )
            self.ticket_repository.touch(
                ticket_id=ticket.id,
                user_id=user_id,
                connection=active_scope.connection,
            )

        log.info("ticket_queued", ticket_id=ticket.id, queue_id=queue.id, user_id=user_id)
        return assignment
