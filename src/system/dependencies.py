from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.database.session import get_session
from src.core.email_service.dependencies import get_mailer
from src.system.services import HealthService


async def get_health_service(
    session: AsyncSession = Depends(get_session),
) -> HealthService:
    return HealthService(session=session, mail_enabled=get_mailer() is not None)
