from fastapi_mail import ConnectionConfig, FastMail, MessageSchema

from src.core.email_service.interfaces import AbstractMailer


class FastAPIMailer(AbstractMailer):
    """SMTP transport backed by fastapi-mail."""

    def __init__(self, config: ConnectionConfig):
        self._mailer = FastMail(config)

    async def send_message(
        self,
        subject: str,
        recipients: list[str],
        body: str,
        subtype: str = "plain",
    ) -> None:
        message = MessageSchema(
            subject=subject,
            recipients=recipients,
            body=body,
            subtype=subtype,
        )
        await self._mailer.send_message(message)
