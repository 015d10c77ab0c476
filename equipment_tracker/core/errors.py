from __future__ import annotations

import logging
from enum import Enum
from http import HTTPStatus
from typing import Any

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette import status
from starlette.exceptions import HTTPException as StarletteHTTPException

from .validation import RuleResult

logger = logging.getLogger("equipment_tracker.errors")


class ErrorKind(str, Enum):
    UNAUTHORIZED = "UNAUTHORIZED"
    FORBIDDEN = "FORBIDDEN"
    VALIDATION_FAILED = "VALIDATION_FAILED"
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"


STATUS_BY_KIND: dict[ErrorKind, int] = {
    ErrorKind.UNAUTHORIZED: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.FORBIDDEN: status.HTTP_403_FORBIDDEN,
    ErrorKind.VALIDATION_FAILED: status.HTTP_422_UNPROCESSABLE_ENTITY,
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.CONFLICT: status.HTTP_409_CONFLICT,
}


class AppError(Exception):
    """A caller-visible failure with a stable kind and reason code."""

    def __init__(
        self,
        kind: ErrorKind,
        message: str,
        *,
        reason: str | None = None,
        field: str | None = None,
    ) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.reason = reason
        self.field = field

    @property
    def status_code(self) -> int:
        return STATUS_BY_KIND[self.kind]

    def details(self) -> dict[str, Any] | None:
        details: dict[str, Any] = {}
        if self.reason:
            details["reason"] = self.reason
        if self.field:
            details["field"] = self.field
        return details or None


class ConflictError(AppError):
    def __init__(self, message: str, *, field: str | None = None) -> None:
        super().__init__(ErrorKind.CONFLICT, message, reason="DUPLICATE_NAME", field=field)


def not_found(entity: str) -> AppError:
    return AppError(ErrorKind.NOT_FOUND, f"{entity} not found")


def forbidden(message: str = "Forbidden", *, reason: str | None = None) -> AppError:
    return AppError(ErrorKind.FORBIDDEN, message, reason=reason)


def rejection(result: RuleResult) -> AppError:
    """Turn a rejecting rule result into a VALIDATION_FAILED error."""

    reason = result.reason.value if result.reason else None
    return AppError(
        ErrorKind.VALIDATION_FAILED,
        "Validation failed",
        reason=reason,
        field=result.field,
    )


class ErrorEnvelope(JSONResponse):
    def __init__(
        self,
        *,
        status_code: int,
        code: str,
        message: str,
        details: Any | None = None,
        headers: dict[str, str] | None = None,
    ) -> None:
        payload: dict[str, Any] = {"code": code, "message": message}
        if details is not None:
            payload["details"] = details
        super().__init__(payload, status_code=status_code, headers=headers)


async def app_error_handler(request: Request, exc: AppError):
    logger.info(
        "request.rejected",
        extra={
            "extra_data": {
                "path": request.url.path,
                "kind": exc.kind.value,
                "reason": exc.reason,
                "field": exc.field,
            }
        },
    )
    headers = {"WWW-Authenticate": "Bearer"} if exc.kind == ErrorKind.UNAUTHORIZED else None
    return ErrorEnvelope(
        status_code=exc.status_code,
        code=exc.kind.value,
        message=exc.message,
        details=exc.details(),
        headers=headers,
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    detail = exc.detail
    if isinstance(detail, str):
        message = detail
    else:
        try:
            message = HTTPStatus(exc.status_code).phrase
        except ValueError:
            message = "Error"
    details = detail if isinstance(detail, dict) else None
    return ErrorEnvelope(status_code=exc.status_code, code="http_error", message=message, details=details)


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return ErrorEnvelope(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        code="validation_error",
        message="Validation failed",
        details={"errors": jsonable_errors(exc)},
    )


def jsonable_errors(exc: RequestValidationError) -> list[dict[str, Any]]:
    cleaned: list[dict[str, Any]] = []
    for error in exc.errors():
        cleaned.append(
            {
                "loc": list(error.get("loc", ())),
                "msg": str(error.get("msg", "")),
                "type": str(error.get("type", "")),
            }
        )
    return cleaned
