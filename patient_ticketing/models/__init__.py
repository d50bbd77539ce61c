"""Domain models and API schemas."""

from patient_ticketing.models.entities import (
    AuthItemEntity,
    AuthItemType,
    ClinicalEvent,
    FormField,
    PriorityEntity,
    QueueEntity,
    QueueSetCategoryEntity,
    QueueSetEntity,
    TicketEntity,
    TicketQueueAssignmentEntity,
    UserEntity,
)

__all__ = [
    "AuthItemEntity",
    "AuthItemType",
    "ClinicalEvent",
    "FormField",
    "PriorityEntity",
    "QueueEntity",
    "QueueSetCategoryEntity",
    "QueueSetEntity",
    "TicketEntity",
    "TicketQueueAssignmentEntity",
    "UserEntity",
]
