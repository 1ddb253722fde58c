"""
Application error hierarchy.

Every error carries a machine-readable `code` so clients can branch on it
without parsing the human-readable message.
"""
from __future__ import annotations

from typing import Any

from fastapi import Request
from fastapi.responses import JSONResponse
from starlette import status


class HallPassError(Exception):
    """Base class for all application-level errors."""
    http_status: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    code: str = "INTERNAL_ERROR"

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict:
        payload: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.details:
            payload["details"] = self.details
        return payload


class AwardValidationError(HallPassError):
    http_status = status.HTTP_422_UNPROCESSABLE_ENTITY
    code = "VALIDATION_ERROR"


class NotFoundError(HallPassError):
    http_status = status.HTTP_404_NOT_FOUND
    code = "NOT_FOUND"

    def __init__(self, entity: str, entity_id: str):
        super().__init__(
            message=f"{entity} not found",
            details={"entity": entity.lower(), "id": entity_id},
        )


class PermissionDeniedError(HallPassError):
    http_status = status.HTTP_403_FORBIDDEN
    code = "FORBIDDEN"


class ConfirmationRequiredError(HallPassError):
    http_status = status.HTTP_400_BAD_REQUEST
    code = "CONFIRMATION_REQUIRED"


class StoreError(HallPassError):
    http_status = status.HTTP_503_SERVICE_UNAVAILABLE
    code = "STORE_ERROR"


class StudentNotInClassError(HallPassError):
    """Raised by the store layer when a student id is not scoped to the class."""
    http_status = status.HTTP_404_NOT_FOUND
    code = "STUDENT_NOT_IN_CLASS"

    def __init__(self, student_id: str, class_id: str):
        super().__init__(
            message=f"Student {student_id} does not belong to class {class_id}",
            details={"student_id": student_id, "class_id": class_id},
        )


async def hallpass_exception_handler(request: Request, exc: HallPassError) -> JSONResponse:
    return JSONResponse(status_code=exc.http_status, content=exc.to_dict())
