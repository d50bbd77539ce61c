from typing import Annotated

from fastapi import APIRouter, Depends, status

from patient_ticketing.api.dependencies import (
    get_current_user_id,
    get_queue_set_service,
    get_ticketing_api,
)
from patient_ticketing.core.errors import (
    AppError,
    PatientAlreadyQueuedError,
    QueueNotFoundError,
    QueueNotInitialError,
    QueueSetPermissionError,
    TicketCreationError,
)
from patient_ticketing.models.entities import ClinicalEvent
from patient_ticketing.models.schemas.queue_set import QueueSetDataResponse
from patient_ticketing.models.schemas.ticket import TicketCreateRequest, TicketDataResponse
from patient_ticketing.services.queue_set_service import QueueSetService
from patient_ticketing.services.ticketing_api import TicketingApi

router = APIRouter()


@router.post("/tickets", response_model=TicketDataResponse, status_code=status.HTTP_201_CREATED)
def create_ticket(
    payload: TicketCreateRequest,
    user_id: Annotated[int, Depends(get_current_user_id)],
    ticketing_api: Annotated[TicketingApi, Depends(get_ticketing_api)],
    queue_set_service: Annotated[QueueSetService, Depends(get_queue_set_service)],
) -> TicketDataResponse:
    queue = ticketing_api.get_queue_for_user_and_firm(user_id, payload.firm_id, payload.queue_id)
    if queue is None:
        raise QueueNotFoundError(payload.queue_id)
    if not queue.is_initial:
        raise QueueNotInitialError(queue.id)

    queue_set = queue_set_service.get_queue_set_for_queue(queue.id)
    if not queue_set_service.is_queue_set_permissioned_for_user(queue_set, user_id):
        raise QueueSetPermissionError(queue_set.id, user_id)
    if not ticketing_api.can_add_patient_to_queue(payload.patient_id, queue):
        raise PatientAlreadyQueuedError(payload.patient_id, queue_set.id)

    _, errors = ticketing_api.extract_queue_data(queue, payload.data, validate=True)
    if errors:
        raise AppError(
            status_code=status.HTTP_400_BAD_REQUEST,
            code="INVALID_QUEUE_DATA",
            message="Queue assignment data is invalid.",
            details={"errors": errors},
        )

    if payload.event_id is not None:
        ticket = ticketing_api.create_ticket_for_event(
            ClinicalEvent(id=payload.event_id, patient_id=payload.patient_id),
            queue,
            user_id,
            payload.firm_id,
            payload.data,
        )
    else:
        created = ticketing_api.create_ticket_for_patient(
            payload.patient_id,
            queue,
            user_id,
            payload.firm_id,
            payload.data,
        )
        if created is None:
            raise TicketCreationError()
        ticket = created
    return TicketDataResponse(data=ticketing_api.to_resource(ticket))


@router.get("/tickets/{ticket_id}/queue-set", response_model=QueueSetDataResponse)
def get_ticket_queue_set(
    ticket_id: int,
    queue_set_service: Annotated[QueueSetService, Depends(get_queue_set_service)],
) -> QueueSetDataResponse:
    return QueueSetDataResponse(data=queue_set_service.get_queue_set_for_ticket(ticket_id))


@router.get("/events/{event_id}/ticket", response_model=TicketDataResponse)
def get_event_ticket(
    event_id: int,
    ticketing_api: Annotated[TicketingApi, Depends(get_ticketing_api)],
) -> TicketDataResponse:
    ticket = ticketing_api.get_ticket_for_event(event_id)
    if ticket is None:
        raise AppError(
            status_code=status.HTTP_404_NOT_FOUND,
            code="TICKET_NOT_FOUND",
            message=f"No ticket recorded for event {event_id}",
            details={"event_id": event_id},
        )
    return TicketDataResponse(data=ticketing_api.to_resource(ticket))
