from datetime import datetime

from pydantic import BaseModel, Field

from patient_ticketing.models.schemas.queue import RawFormData


class TicketCreateRequest(BaseModel):
    patient_id: int = Field(gt=0)
    queue_id: int = Field(gt=0)
    firm_id: int | None = None
    event_id: int | None = None
    data: RawFormData


class TicketRead(BaseModel):
    id: int
    patient_id: int
    priority_id: int | None = None
    event_id: int | None = None
    created_user_id: int
    last_modified_user_id: int
    current_queue_id: int | None = None
    initial_queue_id: int | None = None
    created_at: datetime
    updated_at: datetime


class TicketDataResponse(BaseModel):
    data: TicketRead
