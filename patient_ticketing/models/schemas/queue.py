from typing import Annotated

from pydantic import BaseModel, Field

RawFormData = Annotated[dict[str, str | int | None], Field(default_factory=dict)]


class FormFieldRead(BaseModel):
    form_name: str
    label: str
    required: bool = False
    choices: dict[str, str] | None = None


class QueueRead(BaseModel):
    id: int
    name: str
    description: str | None = None
    is_initial: bool
    active: bool
    is_closing: bool


class QueueDataResponse(BaseModel):
    data: QueueRead


class QueueListResponse(BaseModel):
    data: list[QueueRead]


class FormFieldListResponse(BaseModel):
    data: list[FormFieldRead]


class QueueAssignmentDataRequest(BaseModel):
    data: RawFormData


class QueueAssignmentData(BaseModel):
    data: dict[str, str]
    errors: dict[str, str]


class QueueAssignmentDataResponse(BaseModel):
    data: QueueAssignmentData
