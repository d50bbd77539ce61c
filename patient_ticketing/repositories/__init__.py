"""Database repositories."""

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

__all__ = [
    "AuthRepository",
    "PriorityRepository",
    "QueueRepository",
    "QueueSetCategoryRepository",
    "QueueSetRepository",
    "TicketQueueAssignmentRepository",
    "TicketRepository",
    "UserRepository",
]
