"""HTTP middleware and exception handler wiring for the questionnaire app."""

from __future__ import annotations

import uuid
from typing import Any

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from nfa_form.api.contracts import ApiErrorResponse
from nfa_form.api.errors import (
    INTERNAL_SERVER_ERROR_MESSAGE,
    TEMPLATE_UNAVAILABLE_MESSAGE,
    ApiErrorCode,
    to_error_payload,
)
from nfa_form.core.config import AppConfig
from nfa_form.core.logging import set_correlation_id
from nfa_form.documents.generation_service import RecordValidationError
from nfa_form.pdf.template import TemplateLoadError

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "no-referrer",
    "Content-Security-Policy": (
        "default-src 'none'; frame-ancestors 'none'; base-uri 'none'"
    ),
    "Permissions-Policy": "geolocation=(), microphone=(), camera=()",
}


def _error_response(
    status_code: int, error_code: ApiErrorCode, message: str, field: str | None = None
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ApiErrorResponse(
            error_code=error_code, message=message, field=field
        ).model_dump(exclude_none=True),
    )


def _request_extra(request: Request, status_code: int) -> dict[str, Any]:
    return {
        "path": request.url.path,
        "method": request.method,
        "status_code": status_code,
    }


def _first_error_field(exc: RequestValidationError) -> str | None:
    for error in exc.errors():
        # loc is ("body", <model field>, <nested...>); report the record key.
        loc = [str(part) for part in error.get("loc", ()) if not isinstance(part, int)]
        names = [part for part in loc if part not in {"body", "record", "values"}]
        if names:
            return names[0]
    return None


def register_http_middleware(app: FastAPI, *, config: AppConfig, logger: Any) -> None:
    """Attach request size limit, correlation id and security headers."""

    @app.middleware("http")
    async def request_size_limit_middleware(request: Request, call_next):
        content_length = request.headers.get("content-length")
        if content_length:
            try:
                parsed_length = int(content_length)
            except ValueError:
                parsed_length = 0
            if parsed_length > config.security.request_max_bytes:
                return _error_response(
                    413,
                    ApiErrorCode.REQUEST_TOO_LARGE,
                    "Request size exceeds configured limit "
                    f"({config.security.request_max_bytes} bytes).",
                )
        return await call_next(request)

    @app.middleware("http")
    async def request_logging_middleware(request: Request, call_next):
        correlation_id = (
            request.headers.get("x-request-id")
            or request.headers.get("x-correlation-id")
            or uuid.uuid4().hex
        )
        set_correlation_id(correlation_id)
        response = await call_next(request)
        response.headers["X-Request-ID"] = correlation_id
        for header, value in SECURITY_HEADERS.items():
            response.headers[header] = value
        logger.info(
            "request_completed", extra=_request_extra(request, response.status_code)
        )
        return response


def register_exception_handlers(app: FastAPI, *, logger: Any) -> None:
    """Map domain and HTTP errors onto the stable error envelope."""

    @app.exception_handler(HTTPException)
    async def handle_http_exception(
        request: Request, exc: HTTPException
    ) -> JSONResponse:
        payload = to_error_payload(exc.detail, exc.status_code)
        logger.warning("http_exception", extra=_request_extra(request, exc.status_code))
        return JSONResponse(
            status_code=exc.status_code,
            content=ApiErrorResponse(**payload).model_dump(exclude_none=True),
        )

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(
        request: Request,
        exc: RequestValidationError,
    ) -> JSONResponse:
        field = _first_error_field(exc)
        logger.warning(
            "request_validation_failed",
            extra={**_request_extra(request, 422), "field_name": field},
        )
        return _error_response(
            422,
            ApiErrorCode.VALIDATION_ERROR,
            "The submitted answers are not valid.",
            field,
        )

    @app.exception_handler(RecordValidationError)
    async def handle_record_validation(
        request: Request,
        exc: RecordValidationError,
    ) -> JSONResponse:
        logger.info(
            "record_validation_failed",
            extra={**_request_extra(request, 422), "field_name": exc.field_name},
        )
        return _error_response(
            422, ApiErrorCode.VALIDATION_ERROR, exc.message, exc.field_name
        )

    @app.exception_handler(TemplateLoadError)
    async def handle_template_load(
        request: Request,
        exc: TemplateLoadError,
    ) -> JSONResponse:
        logger.error(
            "template_load_failed",
            exc_info=exc,
            extra=_request_extra(request, 503),
        )
        return _error_response(
            503, ApiErrorCode.TEMPLATE_UNAVAILABLE, TEMPLATE_UNAVAILABLE_MESSAGE
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_exception(
        request: Request,
        exc: Exception,
    ) -> JSONResponse:
        logger.exception("unexpected_exception", extra=_request_extra(request, 500))
        return _error_response(
            500, ApiErrorCode.INTERNAL_SERVER_ERROR, INTERNAL_SERVER_ERROR_MESSAGE
        )
