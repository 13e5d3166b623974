from collections.abc import Awaitable, Callable
import logging
from typing import Any, cast

from fastapi import Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
import sentry_sdk
from starlette.responses import Response

from loggers import get_logger
from src.core.errors.exceptions import CoreException

response_logger = get_logger("src.request.error_response", plain_format=True)

HandlerCallable = Callable[[Request, Exception], Awaitable[Response]]

DEFAULT_MESSAGE = "No additional details available"
MAX_LOG_MESSAGE_LENGTH = 500

# Keys of additional_info whose values are replaced in logs
SENSITIVE_KEYS = frozenset(
    {"authorization", "token", "access", "refresh", "secret", "signing_key"}
)


def as_exception_handler(handler: Any) -> HandlerCallable:
    """
    Convert a handler class instance to a callable FastAPI accepts as an
    exception handler.
    """
    return cast(HandlerCallable, handler.__call__)


def format_error_response(error_type: str, message: str | None) -> dict[str, Any]:
    return {"error": error_type, "message": message or DEFAULT_MESSAGE}


def _mask(key: str, value: Any) -> str:
    return "***" if key.lower() in SENSITIVE_KEYS else repr(value)


def format_log_message(
    request: Request,
    error_type: str,
    message: str | None,
    additional_info: dict[str, Any] | None = None,
) -> str:
    """
    Format an error for the operator log.

    additional_info never reaches the client; credential-like keys are masked
    even here.
    """
    text = " ".join((message or DEFAULT_MESSAGE).split())
    if len(text) > MAX_LOG_MESSAGE_LENGTH:
        text = text[: MAX_LOG_MESSAGE_LENGTH - 3] + "..."

    parts = [f"[{error_type}] {request.method} {request.url.path} | {text}"]
    if request_id := request.headers.get("x-request-id"):
        parts.insert(0, f"[{request_id}]")
    if additional_info:
        details = ", ".join(
            f"{key}={_mask(key, additional_info[key])}"
            for key in sorted(additional_info)
        )
        parts.append(f"| Additional info: {details}")

    return " ".join(parts)


class JSONErrorHandler:
    """
    Renders a CoreException as ``{"error", "message"}``. Subclasses pick the
    status code, the public error label and how loudly to log.
    """

    status_code: int = 400
    error_type: str = "Bad request"
    log_level: int = logging.INFO
    report_to_sentry: bool = False

    async def __call__(self, request: Request, exc: CoreException) -> JSONResponse:
        response_logger.log(
            self.log_level,
            format_log_message(
                request, self.error_type, exc.message, exc.additional_info
            ),
        )
        if self.report_to_sentry:
            sentry_sdk.capture_exception(exc)
        return JSONResponse(
            status_code=self.status_code,
            content=format_error_response(self.error_type, exc.message),
        )


class CoreExceptionHandler(JSONErrorHandler):
    pass


class InstanceNotFoundExceptionHandler(JSONErrorHandler):
    status_code = 404
    error_type = "Instance not found"


class AccessForbiddenExceptionHandler(JSONErrorHandler):
    status_code = 403
    error_type = "Forbidden"
    log_level = logging.WARNING


class InfrastructureExceptionHandler(JSONErrorHandler):
    status_code = 500
    error_type = "Infrastructure error"
    log_level = logging.ERROR
    report_to_sentry = True


class RequestValidationExceptionHandler:
    async def __call__(
        self, request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        safe_detail = jsonable_encoder(exc.errors())
        response_logger.debug(
            format_log_message(request, "Request validation error", str(safe_detail))
        )
        return JSONResponse(status_code=422, content={"detail": safe_detail})
