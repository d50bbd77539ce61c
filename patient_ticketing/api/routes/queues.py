from typing import Annotated

from fastapi import APIRouter, Depends, Query

from patient_ticketing.api.dependencies import (
    get_current_user_id,
    get_queue_service,
    get_ticketing_api,
)
from patient_ticketing.core.errors import QueueNotFoundError
from patient_ticketing.models.schemas.queue import (
    FormFieldListResponse,
    QueueAssignmentData,
    QueueAssignmentDataRequest,
    QueueAssignmentDataResponse,
    QueueListResponse,
)
from patient_ticketing.services.queue_service import QueueService
from patient_ticketing.services.ticketing_api import TicketingApi

router = APIRouter(prefix="/queues")


@router.get("/initial", response_model=QueueListResponse)
def list_initial_queues(
    ticketing_api: Annotated[TicketingApi, Depends(get_ticketing_api)],
    queue_service: Annotated[QueueService, Depends(get_queue_service)],
    firm_id: Annotated[int | None, Query()] = None,
) -> QueueListResponse:
    queues = ticketing_api.get_initial_queues(firm_id)
    return QueueListResponse(data=[queue_service.to_resource(queue) for queue in queues])


@router.get("/{queue_id}/form-fields", response_model=FormFieldListResponse)
def list_form_fields(
    queue_id: int,
    queue_service: Annotated[QueueService, Depends(get_queue_service)],
) -> FormFieldListResponse:
    queue = queue_service.read_model(queue_id)
    if queue is None:
        raise QueueNotFoundError(queue_id)
    return FormFieldListResponse(data=queue_service.get_form_field_resources(queue))


@router.post("/{queue_id}/assignment-data", response_model=QueueAssignmentDataResponse)
def validate_assignment_data(
    queue_id: int,
    payload: QueueAssignmentDataRequest,
    user_id: Annotated[int, Depends(get_current_user_id)],
    ticketing_api: Annotated[TicketingApi, Depends(get_ticketing_api)],
    firm_id: Annotated[int | None, Query()] = None,
) -> QueueAssignmentDataResponse:
    queue = ticketing_api.get_queue_for_user_and_firm(user_id, firm_id, queue_id)
    if queue is None:
        raise QueueNotFoundError(queue_id)
    values, errors = ticketing_api.extract_queue_data(queue, payload.data, validate=True)
    return QueueAssignmentDataResponse(data=QueueAssignmentData(data=values, errors=errors))
