from fastapi import APIRouter, FastAPI
from fastapi.exceptions import RequestValidationError

from src.core.errors.exceptions import (
    AccessForbiddenException,
    CoreException,
    InfrastructureException,
    InstanceNotFoundException,
)
from src.core.errors.handlers import (
    AccessForbiddenExceptionHandler,
    CoreExceptionHandler,
    InfrastructureExceptionHandler,
    InstanceNotFoundExceptionHandler,
    RequestValidationExceptionHandler,
    as_exception_handler,
)
from src.system import routers as system_routers
from src.user.auth import routers as auth_routers

# Starlette resolves handlers along the MRO, so subclasses of CoreException
# without an entry here fall back to the 400 handler.
EXCEPTION_HANDLERS = (
    (InfrastructureException, InfrastructureExceptionHandler),
    (RequestValidationError, RequestValidationExceptionHandler),
    (InstanceNotFoundException, InstanceNotFoundExceptionHandler),
    (AccessForbiddenException, AccessForbiddenExceptionHandler),
    (CoreException, CoreExceptionHandler),
)


def include_routers(app: FastAPI) -> None:
    """
    Mounts the versioned token API under /v1 and the unversioned system
    endpoints at the root.
    """
    v1_router = APIRouter(prefix="/v1")
    v1_router.include_router(auth_routers.router, prefix="/auth", tags=["Auth"])

    app.include_router(v1_router)
    app.include_router(system_routers.router, tags=["System"])


def include_exceptions_handlers(app: FastAPI) -> None:
    for exc_class, handler_class in EXCEPTION_HANDLERS:
        app.add_exception_handler(exc_class, as_exception_handler(handler_class()))
