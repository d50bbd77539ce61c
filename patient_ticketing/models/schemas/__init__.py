"""Pydantic schema definitions."""

from patient_ticketing.models.schemas.menu import MenuItem, MenuItemListResponse
from patient_ticketing.models.schemas.queue import (
    FormFieldListResponse,
    FormFieldRead,
    QueueAssignmentData,
    QueueAssignmentDataRequest,
    QueueAssignmentDataResponse,
    QueueDataResponse,
    QueueListResponse,
    QueueRead,
)
from patient_ticketing.models.schemas.queue_set import (
    PermissionedUsersWriteRequest,
    QueueSetDataResponse,
    QueueSetListResponse,
    QueueSetOptionsResponse,
    QueueSetRead,
    QueueSetRolesResponse,
)
from patient_ticketing.models.schemas.ticket import (
    TicketCreateRequest,
    TicketDataResponse,
    TicketRead,
)

__all__ = [
    "FormFieldListResponse",
    "FormFieldRead",
    "MenuItem",
    "MenuItemListResponse",
    "PermissionedUsersWriteRequest",
    "QueueAssignmentData",
    "QueueAssignmentDataRequest",
    "QueueAssignmentDataResponse",
    "QueueDataResponse",
    "QueueListResponse",
    "QueueRead",
    "QueueSetDataResponse",
    "QueueSetListResponse",
    "QueueSetOptionsResponse",
    "QueueSetRead",
    "QueueSetRolesResponse",
    "TicketCreateRequest",
    "TicketDataResponse",
    "TicketRead",
]
