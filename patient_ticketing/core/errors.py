from typing import Any

import structlog
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

log = structlog.get_logger(__name__)


class AppError(Exception):
    def __init__(
        self,
        status_code: int,
        code: str,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.status_code = status_code
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)


class UserNotFoundError(AppError):
    def __init__(self, user_id: int) -> None:
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            code="USER_NOT_FOUND",
            message=f"User not found for id {user_id}",
            details={"user_id": user_id},
        )


class RoleNotFoundError(AppError):
    def __init__(self, role: str) -> None:
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            code="ROLE_NOT_FOUND",
            message=f"Unrecognised role {role} for permissioning",
            details={"role": role},
        )


class QueueNotFoundError(AppError):
    def __init__(self, queue_id: int) -> None:
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            code="QUEUE_NOT_FOUND",
            message=f"Queue not found for id {queue_id}",
            details={"queue_id": queue_id},
        )


class QueueSetNotFoundError(AppError):
    def __init__(self, **lookup: int) -> None:
        described = ", ".join(f"{key} {value}" for key, value in lookup.items())
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            code="QUEUE_SET_NOT_FOUND",
            message=f"Queue set not found for {described}",
            details=dict(lookup),
        )


class CategoryNotFoundError(AppError):
    def __init__(self, category_id: int) -> None:
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            code="CATEGORY_NOT_FOUND",
            message=f"Queue set category not found for id {category_id}",
            details={"category_id": category_id},
        )


class TicketNotFoundError(AppError):
    def __init__(self, ticket_id: int) -> None:
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            code="TICKET_NOT_FOUND",
            message=f"Ticket not found for id {ticket_id}",
            details={"ticket_id": ticket_id},
        )


class QueueRootNotFoundError(AppError):
    def __init__(self, queue_id: int, root_ids: list[int] | None = None) -> None:
        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            code="QUEUE_ROOT_UNRESOLVED",
            message=f"Could not resolve a single root queue for queue {queue_id}",
            details={"queue_id": queue_id, "root_ids": root_ids or []},
        )


class QueueInactiveError(AppError):
    def __init__(self, queue_id: int) -> None:
        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            code="QUEUE_INACTIVE",
            message=f"Queue {queue_id} is not active",
            details={"queue_id": queue_id},
        )


class QueueNotInitialError(AppError):
    def __init__(self, queue_id: int) -> None:
        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            code="QUEUE_NOT_INITIAL",
            message=f"Tickets can only be created in an initial queue, not queue {queue_id}",
            details={"queue_id": queue_id},
        )


class QueueSetPermissionError(AppError):
    def __init__(self, queue_set_id: int, user_id: int) -> None:
        super().__init__(
            status_code=status.HTTP_403_FORBIDDEN,
            code="QUEUE_SET_FORBIDDEN",
            message=f"User {user_id} may not process queue set {queue_set_id}",
            details={"queue_set_id": queue_set_id, "user_id": user_id},
        )


class PatientAlreadyQueuedError(AppError):
    def __init__(self, patient_id: int, queue_set_id: int) -> None:
        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            code="PATIENT_ALREADY_QUEUED",
            message=f"Patient {patient_id} already has an open ticket in queue set {queue_set_id}",
            details={"patient_id": patient_id, "queue_set_id": queue_set_id},
        )


class TicketCreationError(AppError):
    def __init__(self, message: str = "Ticket was not created for an unknown reason") -> None:
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            code="TICKET_CREATION_FAILED",
            message=message,
        )


def error_response(
    *,
    status_code: int,
    code: str,
    message: str,
    details: dict[str, Any] | None = None,
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "error": {
                "code": code,
                "message": message,
                "details": details or {},
            }
        },
    )


async def app_error_handler(_: Request, exc: AppError) -> JSONResponse:
    return error_response(
        status_code=exc.status_code,
        code=exc.code,
        message=exc.message,
        details=exc.details,
    )


async def validation_error_handler(_: Request, exc: RequestValidationError) -> JSONResponse:
    return error_response(
        status_code=status.HTTP_422_UNPROCESSABLE_CONTENT,
        code="VALIDATION_ERROR",
        message="Request validation failed.",
        details={"issues": exc.errors()},
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    log.exception("unhandled_error", path=request.url.path, method=request.method)
    return error_response(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        code="INTERNAL_SERVER_ERROR",
        message="Unexpected server error.",
        details={"reason": str(exc)},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
