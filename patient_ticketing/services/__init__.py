"""Business services."""

from patient_ticketing.services.auth_manager import AuthItem, AuthManager
from patient_ticketing.services.queue_service import QueueService
from patient_ticketing.services.queue_set_category_service import QueueSetCategoryService
from patient_ticketing.services.queue_set_service import QueueSetService
from patient_ticketing.services.ticketing_api import TicketingApi

__all__ = [
    "AuthItem",
    "AuthManager",
    "QueueService",
    "QueueSetCategoryService",
    "QueueSetService",
    "TicketingApi",
]
