from dataclasses import dataclass, field
from datetime import datetime
from enum import IntEnum
from typing import Any


class AuthItemType(IntEnum):
    OPERATION = 0
    TASK = 1
    ROLE = 2


@dataclass(slots=True)
class UserEntity:
    id: int
    username: str
    first_name: str
    last_name: str
    active: bool


@dataclass(slots=True)
class PriorityEntity:
    id: int
    name: str
    display_order: int


@dataclass(slots=True)
class AuthItemEntity:
    name: str
    type: AuthItemType
    description: str | None = None
    bizrule: str | None = None


@dataclass(slots=True)
class FormField:
    form_name: str
    label: str
    required: bool = False
    choices: dict[str, str] | None = None


@dataclass(slots=True)
class QueueEntity:
    id: int
    name: str
    description: str | None
    is_initial: bool
    active: bool
    assignment_fields: list[dict[str, Any]] = field(default_factory=list)


@dataclass(slots=True)
class QueueSetCategoryEntity:
    id: int
    name: str
    active: bool
    display_order: int


@dataclass(slots=True)
class QueueSetEntity:
    id: int
    name: str
    description: str | None
    active: bool
    category_id: int | None
    initial_queue_id: int | None
    permissioned_user_ids: list[int] = field(default_factory=list)


@dataclass(slots=True)
class TicketEntity:
    id: int
    patient_id: int
    priority_id: int | None
    event_id: int | None
    created_user_id: int
    last_modified_user_id: int
    created_at: datetime
    updated_at: datetime
    current_queue_id: int | None = None
    initial_queue_id: int | None = None


@dataclass(slots=True)
class TicketQueueAssignmentEntity:
    id: int
    ticket_id: int
    queue_id: int
    assignment_user_id: int
    assignment_firm_id: int | None
    assignment_date: datetime
    notes: str | None
    details: list[dict[str, Any]] = field(default_factory=list)


@dataclass(slots=True)
class ClinicalEvent:
    id: int
    patient_id: int
