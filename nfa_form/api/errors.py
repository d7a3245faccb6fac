"""Shared API error types and helpers."""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from fastapi import HTTPException

TEMPLATE_UNAVAILABLE_MESSAGE = (
    "The questionnaire template is currently unavailable. Please try again later."
)
INTERNAL_SERVER_ERROR_MESSAGE = "Internal server error"


class ApiErrorCode(StrEnum):
    """Machine-readable API error codes."""

    VALIDATION_ERROR = "VALIDATION_ERROR"
    TEMPLATE_UNAVAILABLE = "TEMPLATE_UNAVAILABLE"
    REQUEST_TOO_LARGE = "REQUEST_TOO_LARGE"
    INTERNAL_SERVER_ERROR = "INTERNAL_SERVER_ERROR"


class ApiError(HTTPException):
    """HTTP exception carrying stable API error envelope."""

    def __init__(
        self,
        *,
        status_code: int,
        error_code: ApiErrorCode,
        message: str,
        field: str | None = None,
    ) -> None:
        """Build an HTTP exception with standard detail structure."""
        detail: dict[str, str] = {"error_code": str(error_code), "message": message}
        if field:
            detail["field"] = field
        super().__init__(status_code=status_code, detail=detail)


def to_error_payload(detail: Any, status_code: int) -> dict[str, str]:
    """Normalize HTTP exception detail into stable error payload."""
    if isinstance(detail, dict):
        error_code = str(detail.get("error_code") or f"HTTP_{status_code}")
        message = str(detail.get("message") or detail.get("detail") or "HTTP error")
        payload = {"error_code": error_code, "message": message}
        if detail.get("field"):
            payload["field"] = str(detail["field"])
        return payload
    return {
        "error_code": f"HTTP_{status_code}",
        "message": str(detail or "HTTP error"),
    }
