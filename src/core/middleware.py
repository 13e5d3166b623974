from collections.abc import Awaitable, Callable
import time

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
import sentry_sdk
from starlette.responses import Response

from loggers import get_logger

logger = get_logger(__name__)
timing_logger = get_logger("src.request.timing", plain_format=True)
UNEXPECTED_ERROR_DETAIL = "Unexpected error"

# Every token operation runs at least one Argon2 hash, so requests under a
# second are normal here.
FAST_REQUEST_SECONDS = 1.0
SLOW_REQUEST_SECONDS = 3.0


def register_middlewares(app: FastAPI) -> None:
    """Registers all custom middlewares in proper order"""

    @app.middleware("http")
    async def security_headers_middleware(
        request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        response = await call_next(request)
        response.headers.setdefault("X-Frame-Options", "DENY")
        response.headers.setdefault("X-Content-Type-Options", "nosniff")
        response.headers.setdefault("Cache-Control", "no-store")
        return response

    @app.middleware("http")
    async def request_timing_middleware(
        request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        start_time = time.perf_counter()
        response = await call_next(request)
        process_time = time.perf_counter() - start_time

        if process_time < FAST_REQUEST_SECONDS:
            log, category = timing_logger.info, "[FAST]"
        elif process_time < SLOW_REQUEST_SECONDS:
            log, category = timing_logger.warning, "[MODERATE]"
        else:
            log, category = timing_logger.warning, "[SLOW]"

        log(
            "%s %s %s |%.3fs|%s",
            category,
            request.method,
            request.url.path,
            process_time,
            response.status_code,
        )
        return response

    @app.middleware("http")
    async def unexpected_error_middleware(
        request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        try:
            return await call_next(request)
        except Exception as e:
            logger.exception(
                "Unexpected error at %s from %s: %s",
                request.url.path,
                request.client.host if request.client else "unknown",
                e,
            )
            sentry_sdk.capture_exception(e)
            return JSONResponse(
                status_code=500, content={"detail": UNEXPECTED_ERROR_DETAIL}
            )
