from typing import Any

from src.core.errors.exceptions import (
    AccessForbiddenException,
    InfrastructureException,
)

INVALID_TOKEN_MESSAGE = "Invalid token"


class InvalidTokenException(AccessForbiddenException):
    """
    Any rejection of a token pair. The client always sees the same message;
    the reason is kept in additional_info for the operator log.
    """

    def __init__(self, reason: str | None = None, **details: Any) -> None:
        additional_info = {"reason": reason, **details} if reason else None
        super().__init__(INVALID_TOKEN_MESSAGE, additional_info)


class TokenStorageException(InfrastructureException):
    """The refresh token store failed; says nothing about the credential itself."""

    def __init__(self, additional_info: dict[str, Any] | None = None) -> None:
        super().__init__("Token storage is unavailable", additional_info)
