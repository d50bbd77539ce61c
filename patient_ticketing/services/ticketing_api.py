"""Entry points other parts of the hospital system use to raise and route tickets."""

from collections.abc import Mapping
from typing import Any, Literal, overload

import structlog
from fastapi import status

from patient_ticketing.core.database import TransactionScope, transaction
from patient_ticketing.core.errors import (
    AppError,
    QueueInactiveError,
    TicketCreationError,
)
from patient_ticketing.core.interfaces import HtmlPurifier
from patient_ticketing.core.purifier import purify
from patient_ticketing.models.entities import ClinicalEvent, QueueEntity, TicketEntity
from patient_ticketing.models.schemas.menu import MenuItem
from patient_ticketing.models.schemas.ticket import TicketRead
from patient_ticketing.repositories.ticket_repository import TicketRepository
from patient_ticketing.services.queue_service import PRIORITY_FIELD, QueueService
from patient_ticketing.services.queue_set_category_service import QueueSetCategoryService
from patient_ticketing.services.queue_set_service import QueueSetService

log = structlog.get_logger(__name__)

MENU_URI = "/PatientTicketing/default/?cat_id={category_id}"
QUEUE_ASSIGNMENT_FORM_URI = "/PatientTicketing/Default/GetQueueAssignmentForm/"

QueueData = dict[str, str]
QueueErrors = dict[str, str]


def _is_blank(value: object) -> bool:
    return value is None or str(value).strip() == ""


class TicketingApi:
    def __init__(
        self,
        queue_service: QueueService,
        queue_set_service: QueueSetService,
        category_service: QueueSetCategoryService,
        ticket_repository: TicketRepository,
        purifier: HtmlPurifier = purify,
        database_url: str | None = None,
    ) -> None:
        self.queue_service = queue_service
        self.queue_set_service = queue_set_service
        self.category_service = category_service
        self.ticket_repository = ticket_repository
        self.purifier = purifier
        self.database_url = database_url

    def get_menu_items(self, user_id: int, position: int = 1) -> list[MenuItem]:
        items: list[MenuItem] = []
        for category in self.category_service.get_categories_for_user(user_id):
            items.append(
                MenuItem(
                    uri=MENU_URI.format(category_id=category.id),
                    title=category.name,
                    position=position,
                )
            )
            position += 1
        return items

    def get_queue_assignment_form_uri(self) -> str:
        return QUEUE_ASSIGNMENT_FORM_URI

    def get_ticket_for_event(self, event_id: int | None) -> TicketEntity | None:
        if not event_id:
            return None
        return self.ticket_repository.get_by_event_id(event_id)

    @overload
    def extract_queue_data(
        self,
        queue: QueueEntity,
        data: Mapping[str, Any],
        validate: Literal[False] = False,
    ) -> QueueData: ...

    @overload
    def extract_queue_data(
        self,
        queue: QueueEntity,
        data: Mapping[str, Any],
        validate: Literal[True],
    ) -> tuple[QueueData, QueueErrors]: ...

    def extract_queue_data(
        self,
        queue: QueueEntity,
        data: Mapping[str, Any],
        validate: bool = False,
    ) -> QueueData | tuple[QueueData, QueueErrors]:
        """Sanitize the values submitted for a queue's form fields.

        With ``validate`` the per-field error messages are returned alongside
        the sanitized values instead of being raised, so a form can be shown
        again with every problem at once.
        """
        values: QueueData = {}
        errors: QueueErrors = {}

        for field in self.queue_service.get_form_fields(queue):
            raw = data.get(field.form_name)
            values[field.form_name] = self.purifier(raw)
            if not validate:
                continue

            if field.required and _is_blank(raw):
                errors[field.form_name] = f"{field.label} is required"
            elif field.choices and not _is_blank(raw) and str(raw) not in field.choices:
                errors[field.form_name] = f"{field.label}: invalid choice"

        if validate:
            return values, errors
        return values

    def create_ticket_for_event(
        self,
        event: ClinicalEvent,
        initial_queue: QueueEntity,
        user_id: int,
        firm_id: int | None,
        data: Mapping[str, Any],
        scope: TransactionScope | None = None,
    ) -> TicketEntity:
        with transaction(self.database_url, scope) as active_scope:
            ticket = self.create_ticket_for_patient(
                event.patient_id,
                initial_queue,
                user_id,
                firm_id,
                data,
                scope=active_scope,
            )
            if ticket is None:
                raise TicketCreationError()

            self.ticket_repository.set_event(
                ticket_id=ticket.id,
                event_id=event.id,
                user_id=user_id,
                connection=active_scope.connection,
            )
            updated = self.ticket_repository.get_by_id(
                ticket.id,
                connection=active_scope.connection,
            )
            if updated is None:
                raise TicketCreationError()

        return updated

    def create_ticket_for_patient(
        self,
        patient_id: int,
        initial_queue: QueueEntity,
        user_id: int,
        firm_id: int | None,
        data: Mapping[str, Any],
        scope: TransactionScope | None = None,
    ) -> TicketEntity | None:
        if not initial_queue.active:
            raise QueueInactiveError(initial_queue.id)
        priority_id = self._priority_id(data)

        with transaction(self.database_url, scope) as active_scope:
            ticket = self.ticket_repository.create(
                patient_id=patient_id,
                priority_id=priority_id,
                user_id=user_id,
                connection=active_scope.connection,
            )
            self.queue_service.add_ticket(
                initial_queue,
                ticket,
                user_id,
                firm_id,
                self.extract_queue_data(initial_queue, data),
                scope=active_scope,
            )
            created = self.ticket_repository.get_by_id(
                ticket.id,
                connection=active_scope.connection,
            )

        log.info(
            "ticket_created",
            ticket_id=ticket.id,
            patient_id=patient_id,
            queue_id=initial_queue.id,
            user_id=user_id,
            joined_transaction=scope is not None,
        )
        return created

    def get_queue_for_user_and_firm(
        self,
        user_id: int,
        firm_id: int | None,
        queue_id: int,
    ) -> QueueEntity | None:
        # Only validity and the active flag are checked for now.
        _ = (user_id, firm_id)
        return self.queue_service.read_model(queue_id, active_only=True)

    def get_initial_queues(self, firm_id: int | None) -> list[QueueEntity]:
        _ = firm_id
        return self.queue_service.get_initial_queues()

    def get_queue_set_list(
        self,
        firm_id: int | None,
        patient_id: int | None = None,
    ) -> dict[int, str]:
        options: dict[int, str] = {}
        for queue_set in self.queue_set_service.get_queue_sets_for_firm(firm_id):
            if queue_set.initial_queue is None:
                continue
            if patient_id is not None and self.queue_set_service.can_add_patient_to_queue_set(
                patient_id,
                queue_set.id,
            ):
                options[queue_set.initial_queue.id] = queue_set.name
        return options

    def can_add_patient_to_queue(self, patient_id: int, queue: QueueEntity) -> bool:
        queue_set = self.queue_set_service.get_queue_set_for_queue(queue.id)
        return self.queue_set_service.can_add_patient_to_queue_set(patient_id, queue_set.id)

    def to_resource(self, ticket: TicketEntity) -> TicketRead:
        return TicketRead(
            id=ticket.id,
            patient_id=ticket.patient_id,
            priority_id=ticket.priority_id,
            event_id=ticket.event_id,
            created_user_id=ticket.created_user_id,
            last_modified_user_id=ticket.last_modified_user_id,
            current_queue_id=ticket.current_queue_id,
            initial_queue_id=ticket.initial_queue_id,
            created_at=ticket.created_at,
            updated_at=ticket.updated_at,
        )

    def _priority_id(self, data: Mapping[str, Any]) -> int:
        raw = data.get(PRIORITY_FIELD)
        try:
            return int(str(raw).strip())
        except (TypeError, ValueError) as exc:
            raise AppError(
                status_code=status.HTTP_400_BAD_REQUEST,
                code="INVALID_TICKET_DATA",
                message="A valid ticket priority is required.",
                details={"field": PRIORITY_FIELD, "value": raw},
            ) from exc
