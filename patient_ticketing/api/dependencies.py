from typing import Annotated

from fastapi import Depends, Header

from patient_ticketing.core.config import Settings, get_settings
from patient_ticketing.repositories.auth_repository import AuthRepository
from patient_ticketing.repositories.priority_repository import PriorityRepository
from patient_ticketing.repositories.queue_repository import QueueRepository
from patient_ticketing.repositories.queue_set_category_repository import (
    QueueSetCategoryRepository,
)
from patient_ticketing.repositories.queue_set_repository import QueueSetRepository
from patient_ticketing.repositories.ticket_queue_assignment_repository import (
    TicketQueueAssignmentRepository,
)
from patient_ticketing.repositories.ticket_repository import TicketRepository
from patient_ticketing.repositories.user_repository import UserRepository
from patient_ticketing.services.auth_manager import AuthManager
from patient_ticketing.services.queue_service import QueueService
from patient_ticketing.services.queue_set_category_service import QueueSetCategoryService
from patient_ticketing.services.queue_set_service import QueueSetService
from patient_ticketing.services.ticketing_api import TicketingApi


def get_current_user_id(x_user_id: Annotated[int, Header(gt=0)]) -> int:
    return x_user_id


def get_queue_service() -> QueueService:
    return QueueService(
        queue_repository=QueueRepository(),
        priority_repository=PriorityRepository(),
        ticket_repository=TicketRepository(),
        assignment_repository=TicketQueueAssignmentRepository(),
    )


def get_queue_set_service(
    queue_service: Annotated[QueueService, Depends(get_queue_service)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> QueueSetService:
    return QueueSetService(
        queue_set_repository=QueueSetRepository(),
        queue_service=queue_service,
        user_lookup=UserRepository(),
        auth_manager=AuthManager(AuthRepository()),
        ticket_repository=TicketRepository(),
        settings=settings,
    )


def get_category_service(
    queue_set_service: Annotated[QueueSetService, Depends(get_queue_set_service)],
) -> QueueSetCategoryService:
    return QueueSetCategoryService(
        category_repository=QueueSetCategoryRepository(),
        queue_set_service=queue_set_service,
    )


def get_ticketing_api(
    queue_service: Annotated[QueueService, Depends(get_queue_service)],
    queue_set_service: Annotated[QueueSetService, Depends(get_queue_set_service)],
    category_service: Annotated[QueueSetCategoryService, Depends(get_category_service)],
) -> TicketingApi:
    return TicketingApi(
        queue_service=queue_service,
        queue_set_service=queue_set_service,
        category_service=category_service,
        ticket_repository=TicketRepository(),
    )
