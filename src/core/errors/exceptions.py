from typing import Any


class CoreException(Exception):
    """Base for errors that are translated into JSON responses by the handlers."""

    def __init__(
        self, message: str | None = None, additional_info: dict[str, Any] | None = None
    ):
        super().__init__(message)
        self.message = message
        self.additional_info = additional_info


class InfrastructureException(CoreException):
    pass


class InstanceNotFoundException(CoreException):
    pass


class AccessForbiddenException(CoreException):
    pass
