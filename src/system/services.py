import sentry_sdk
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from loggers import get_logger
from src.core.errors.exceptions import InfrastructureException
from src.system.schemas import HealthCheckResponse

logger = get_logger(__name__)


class HealthService:
    """
    Liveness of the parts a token request needs. Mail is reported but never
    fails the check, since the service runs without it.
    """

    def __init__(self, session: AsyncSession, mail_enabled: bool) -> None:
        self.session = session
        self.mail_enabled = mail_enabled

    async def get_status(self) -> HealthCheckResponse:
        if not await self._check_postgres():
            raise InfrastructureException(
                "System health check failed",
                additional_info={"postgres": False},
            )
        return HealthCheckResponse(status="ok", mail_enabled=self.mail_enabled)

    async def _check_postgres(self) -> bool:
        try:
            await self.session.execute(text("SELECT 1"))
            return True
        except SQLAlchemyError as exc:
            logger.error("Postgres health check failed", exc_info=exc)
            sentry_sdk.capture_exception(exc)
            return False
