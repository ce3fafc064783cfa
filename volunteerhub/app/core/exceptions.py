"""
Domain exceptions and global exception handlers for VolunteerHub.
Every error the service layer raises is defined here so routes stay thin.
"""
from __future__ import annotations

import logging
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from app.core.config import settings

logger = logging.getLogger(__name__)


# ── Base ──────────────────────────────────────────────────────────────────────

class VolunteerHubException(Exception):
    """Base exception for all VolunteerHub domain errors."""

    def __init__(
        self,
        status_code: int,
        detail: str,
        error_code: str | None = None,
    ) -> None:
        self.status_code = status_code
        self.detail = detail
        self.error_code = error_code or "VOLUNTEERHUB_ERROR"
        super().__init__(detail)


# ── Generic HTTP-flavoured errors ─────────────────────────────────────────────

class NotFoundError(VolunteerHubException):
    def __init__(self, resource: str, resource_id: str | None = None) -> None:
        detail = f"{resource} not found"
        if resource_id:
            detail = f"{resource} with id '{resource_id}' not found"
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=detail,
            error_code="NOT_FOUND",
        )


class UnauthorizedError(VolunteerHubException):
    def __init__(self, detail: str = "Authentication required") -> None:
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            error_code="UNAUTHORIZED",
        )


class InvalidTokenError(VolunteerHubException):
    def __init__(self, detail: str = "Invalid or expired token") -> None:
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            error_code="INVALID_TOKEN",
        )


class ForbiddenError(VolunteerHubException):
    def __init__(self, detail: str = "You do not have permission to perform this action") -> None:
        super().__init__(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=detail,
            error_code="FORBIDDEN",
        )


class ConflictError(VolunteerHubException):
    def __init__(self, detail: str) -> None:
        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            detail=detail,
            error_code="CONFLICT",
        )


class BadRequestError(VolunteerHubException):
    def __init__(self, detail: str, error_code: str = "BAD_REQUEST") -> None:
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=detail,
            error_code=error_code,
        )


# ── Activity / application errors ─────────────────────────────────────────────

class ValidationError(BadRequestError):
    """Field-level validation failure carrying one message per offending field."""

    def __init__(self, errors: list[dict[str, str]], detail: str = "Validation failed") -> None:
        self.errors = errors
        super().__init__(detail, error_code="VALIDATION_ERROR")


class DateInPastError(BadRequestError):
    def __init__(self, detail: str = "Date cannot be in the past") -> None:
        super().__init__(detail, error_code="DATE_IN_PAST")


class NotApprovedError(BadRequestError):
    def __init__(self, detail: str = "Activity is not open for applications") -> None:
        super().__init__(detail, error_code="NOT_APPROVED")


class CapacityExceededError(BadRequestError):
    def __init__(self, detail: str = "Activity has no remaining spots") -> None:
        super().__init__(detail, error_code="CAPACITY_EXCEEDED")


class DuplicateApplicationError(BadRequestError):
    def __init__(self, detail: str = "You have already applied to this activity") -> None:
        super().__init__(detail, error_code="DUPLICATE_APPLICATION")


class OrganizerCannotApplyError(BadRequestError):
    def __init__(self, detail: str = "Organizers cannot apply to their own activity") -> None:
        super().__init__(detail, error_code="ORGANIZER_CANNOT_APPLY")


class IncompleteProfileError(BadRequestError):
    def __init__(self, detail: str = "Please add your name to your profile first") -> None:
        super().__init__(detail, error_code="INCOMPLETE_PROFILE")


class ProfileNotFoundError(VolunteerHubException):
    def __init__(self, user_id: str | None = None) -> None:
        detail = "Profile not found"
        if user_id:
            detail = f"Profile for user '{user_id}' not found"
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=detail,
            error_code="PROFILE_NOT_FOUND",
        )


# ── Exception handlers ────────────────────────────────────────────────────────

def _error_response(
    status_code: int,
    detail: str,
    error_code: str,
    **extra: Any,
) -> JSONResponse:
    content: dict[str, Any] = {"error": error_code, "detail": detail}
    content.update(extra)
    return JSONResponse(status_code=status_code, content=content)


async def volunteerhub_exception_handler(
    request: Request, exc: VolunteerHubException
) -> JSONResponse:
    if isinstance(exc, ValidationError):
        return _error_response(exc.status_code, exc.detail, exc.error_code, errors=exc.errors)
    return _error_response(exc.status_code, exc.detail, exc.error_code)


def _field_name(loc: tuple[Any, ...]) -> str:
    # Drop the "body"/"query"/"path" prefix FastAPI adds
    parts = [str(part) for part in loc]
    if parts and parts[0] in {"body", "query", "path", "header", "cookie"}:
        parts = parts[1:]
    return ".".join(parts) or "request"


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    errors = [
        {"field": _field_name(error["loc"]), "message": error["msg"]}
        for error in exc.errors()
    ]
    return _error_response(
        status.HTTP_400_BAD_REQUEST,
        "Request validation failed",
        "VALIDATION_ERROR",
        errors=errors,
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    extra: dict[str, Any] = {}
    if settings.expose_error_details:
        extra["diagnostic"] = f"{type(exc).__name__}: {exc}"
    return _error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "An unexpected internal server error occurred",
        "INTERNAL_SERVER_ERROR",
        **extra,
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register all custom exception handlers on the FastAPI application."""
    app.add_exception_handler(VolunteerHubException, volunteerhub_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, validation_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, generic_exception_handler)
