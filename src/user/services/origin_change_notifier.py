from fastapi import Depends
import sentry_sdk

from loggers import get_logger
from src.core.email_service.dependencies import get_email_service
from src.core.email_service.service import EmailService
from src.core.utils.datetime_utils import format_local_time, get_utc_now
from src.core.utils.security import mask_email

logger = get_logger(__name__)

ORIGIN_CHANGE_SUBJECT = "Suspicious activity"
ORIGIN_CHANGE_TEMPLATE = """{username},
We noticed your account being used from a new IP address.

Time: {time}
IP: {origin}

If this was not you, please contact support."""


class OriginChangeNotifier:
    """
    Alerts an account owner that their refresh token was exchanged from a new
    network origin. Runs after the response; delivery problems are logged and
    reported, never raised.
    """

    def __init__(self, email_service: EmailService | None) -> None:
        self.email_service = email_service

    @property
    def enabled(self) -> bool:
        return self.email_service is not None

    def compose(self, username: str, new_origin: str) -> str:
        return ORIGIN_CHANGE_TEMPLATE.format(
            username=username,
            time=format_local_time(get_utc_now()),
            origin=new_origin,
        )

    async def notify(self, username: str, contact_address: str, new_origin: str) -> None:
        if self.email_service is None:
            logger.info(
                "[OriginChange] Mail is disabled, alert for '%s' skipped",
                mask_email(contact_address),
            )
            return

        try:
            await self.email_service.send_email(
                subject=ORIGIN_CHANGE_SUBJECT,
                recipients=contact_address,
                body=self.compose(username, new_origin),
            )
        except Exception as exc:
            logger.exception(
                "[OriginChange] Failed to alert '%s': %s",
                mask_email(contact_address),
                exc,
            )
            sentry_sdk.capture_exception(exc)
            return

        logger.info("[OriginChange] Alert sent to '%s'", mask_email(contact_address))


def get_origin_change_notifier(
    email_service: EmailService | None = Depends(get_email_service),
) -> OriginChangeNotifier:
    return OriginChangeNotifier(email_service)
