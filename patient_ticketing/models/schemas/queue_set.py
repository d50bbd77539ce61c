from typing import Annotated

from pydantic import BaseModel, Field

from patient_ticketing.models.schemas.queue import QueueRead

UserIdList = Annotated[list[int], Field(default_factory=list)]


class QueueSetRead(BaseModel):
    id: int
    name: str
    description: str | None = None
    active: bool
    category_id: int | None = None
    initial_queue: QueueRead | None = None
    permissioned_user_ids: UserIdList


class QueueSetDataResponse(BaseModel):
    data: QueueSetRead


class QueueSetListResponse(BaseModel):
    data: list[QueueSetRead]


class PermissionedUsersWriteRequest(BaseModel):
    user_ids: UserIdList
    role: str | None = None


class QueueSetRolesResponse(BaseModel):
    data: list[str]


class QueueSetOptionsResponse(BaseModel):
    data: dict[int, str]
