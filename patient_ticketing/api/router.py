from fastapi import APIRouter

from patient_ticketing.api.routes.menu import router as menu_router
from patient_ticketing.api.routes.queue_sets import router as queue_set_router
from patient_ticketing.api.routes.queues import router as queue_router
from patient_ticketing.api.routes.tickets import router as ticket_router

api_router = APIRouter()
api_router.include_router(menu_router, tags=["menu"])
api_router.include_router(queue_set_router, tags=["queue-sets"])
api_router.include_router(queue_router, tags=["queues"])
api_router.include_router(ticket_router, tags=["tickets"])
