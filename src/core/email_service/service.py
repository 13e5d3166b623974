from fastapi_mail import MessageType
from pydantic import EmailStr, TypeAdapter, ValidationError

from loggers import get_logger
from src.core.email_service.interfaces import AbstractMailer
from src.core.utils.security import mask_email

logger = get_logger(__name__)


class EmailService:
    _email_adapter = TypeAdapter(EmailStr)

    def __init__(self, mailer: AbstractMailer):
        self._mailer = mailer

    async def send_email(
        self,
        subject: str,
        recipients: str | list[str],
        body: str,
        subtype: MessageType = MessageType.plain,
    ) -> None:
        """
        Send a message to one or more addresses.

        Raises:
            ValueError: If none of the recipients is a valid address
            Exception: Whatever the transport raises is logged and re-raised
        """
        normalized = self._normalize_and_validate_recipients(recipients)
        try:
            await self._mailer.send_message(
                subject,
                [str(e) for e in normalized],
                body,
                subtype.value,
            )
            logger.debug(
                "Email '%s' sent to %s",
                subject,
                [mask_email(e) for e in normalized],
            )
        except Exception as e:
            logger.error("Failed to send email '%s': %s", subject, e)
            raise

    def _normalize_and_validate_recipients(
        self, recipients: str | list[str]
    ) -> list[EmailStr]:
        """
        Converts input (string or list) into a validated list of EmailStr.
        Invalid addresses are skipped with a warning. Raises if none are valid.
        """
        if isinstance(recipients, str):
            recipients = [recipients]

        validated = []
        for email in recipients:
            try:
                validated.append(self._email_adapter.validate_python(email))
            except ValidationError:
                logger.warning("Invalid email address skipped: %s", mask_email(email))

        if not validated:
            raise ValueError("No valid recipient emails provided.")

        return validated
