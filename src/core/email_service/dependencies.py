from functools import lru_cache

from loggers import get_logger
from src.core.email_service.config import get_fastapi_mail_config
from src.core.email_service.fastapi_mailer import FastAPIMailer
from src.core.email_service.interfaces import AbstractMailer
from src.core.email_service.recording_mailer import RecordingMailer
from src.core.email_service.service import EmailService
from src.main.config import config

logger = get_logger(__name__)


@lru_cache
def get_mailer() -> AbstractMailer | None:
    """
    Pick the transport once per process: the recording double under TESTING,
    SMTP when broadcasting is configured, otherwise none.
    """
    if config.app.TESTING:
        return RecordingMailer()
    if config.broadcasting.is_configured:
        return FastAPIMailer(get_fastapi_mail_config())
    logger.warning("Mail transport is not configured; email delivery is disabled")
    return None


def get_email_service() -> EmailService | None:
    mailer = get_mailer()
    if mailer is None:
        return None
    return EmailService(mailer)
