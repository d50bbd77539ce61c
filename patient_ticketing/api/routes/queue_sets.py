from typing import Annotated

from fastapi import APIRouter, Depends, Query, Response, status

from patient_ticketing.api.dependencies import (
    get_category_service,
    get_current_user_id,
    get_queue_set_service,
    get_ticketing_api,
)
from patient_ticketing.models.schemas.queue import QueueListResponse
from patient_ticketing.models.schemas.queue_set import (
    PermissionedUsersWriteRequest,
    QueueSetDataResponse,
    QueueSetListResponse,
    QueueSetOptionsResponse,
    QueueSetRolesResponse,
)
from patient_ticketing.services.queue_set_category_service import QueueSetCategoryService
from patient_ticketing.services.queue_set_service import QueueSetService
from patient_ticketing.services.ticketing_api import TicketingApi

router = APIRouter()


@router.get("/queue-sets", response_model=QueueSetListResponse)
def search_queue_sets(
    queue_set_service: Annotated[QueueSetService, Depends(get_queue_set_service)],
    id: Annotated[int | None, Query()] = None,
    name: Annotated[str | None, Query()] = None,
) -> QueueSetListResponse:
    params = {"id": id, "name": name.strip() if name else None}
    return QueueSetListResponse(data=queue_set_service.search(params))


@router.get("/queue-sets/roles", response_model=QueueSetRolesResponse)
def list_queue_set_roles(
    queue_set_service: Annotated[QueueSetService, Depends(get_queue_set_service)],
) -> QueueSetRolesResponse:
    return QueueSetRolesResponse(data=queue_set_service.get_queue_set_roles())


@router.get("/queue-sets/{queue_set_id}", response_model=QueueSetDataResponse)
def get_queue_set(
    queue_set_id: int,
    queue_set_service: Annotated[QueueSetService, Depends(get_queue_set_service)],
) -> QueueSetDataResponse:
    return QueueSetDataResponse(data=queue_set_service.read(queue_set_id))


@router.get("/queue-sets/{queue_set_id}/queues", response_model=QueueListResponse)
def list_queue_set_queues(
    queue_set_id: int,
    user_id: Annotated[int, Depends(get_current_user_id)],
    queue_set_service: Annotated[QueueSetService, Depends(get_queue_set_service)],
    include_closing: Annotated[bool, Query()] = True,
) -> QueueListResponse:
    queue_set = queue_set_service.read(queue_set_id)
    queues = queue_set_service.get_queue_set_queues(
        queue_set,
        user_id,
        include_closing=include_closing,
    )
    return QueueListResponse(data=queues)


@router.put(
    "/queue-sets/{queue_set_id}/permissioned-users",
    status_code=status.HTTP_204_NO_CONTENT,
)
def replace_permissioned_users(
    queue_set_id: int,
    payload: PermissionedUsersWriteRequest,
    queue_set_service: Annotated[QueueSetService, Depends(get_queue_set_service)],
) -> Response:
    queue_set_service.set_permissioned_users(
        queue_set_id,
        payload.user_ids,
        role=payload.role,
    )
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/categories/{category_id}/queue-sets", response_model=QueueSetListResponse)
def list_category_queue_sets(
    category_id: int,
    category_service: Annotated[QueueSetCategoryService, Depends(get_category_service)],
    queue_set_service: Annotated[QueueSetService, Depends(get_queue_set_service)],
) -> QueueSetListResponse:
    category = category_service.read(category_id)
    return QueueSetListResponse(data=queue_set_service.get_queue_sets_for_category(category.id))


@router.get("/queue-set-list", response_model=QueueSetOptionsResponse)
def list_queue_set_options(
    ticketing_api: Annotated[TicketingApi, Depends(get_ticketing_api)],
    firm_id: Annotated[int | None, Query()] = None,
    patient_id: Annotated[int | None, Query()] = None,
) -> QueueSetOptionsResponse:
    return QueueSetOptionsResponse(
        data=ticketing_api.get_queue_set_list(firm_id, patient_id=patient_id),
    )
