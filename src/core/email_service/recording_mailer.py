from src.core.email_service.interfaces import AbstractMailer
from src.core.email_service.schemas import MailMessage


class RecordingMailer(AbstractMailer):
    """
    Transport that delivers nothing and keeps the last message instead.
    Used when TESTING is enabled and by the test suite.
    """

    def __init__(self) -> None:
        self._last_message: MailMessage | None = None
        self.sent_count = 0

    async def send_message(
        self,
        subject: str,
        recipients: list[str],
        body: str,
        subtype: str = "plain",
    ) -> None:
        self._last_message = MailMessage(
            subject=subject, recipients=recipients, body=body, subtype=subtype
        )
        self.sent_count += 1

    def check_message(self) -> MailMessage | None:
        """Return the last recorded message and forget it."""
        message, self._last_message = self._last_message, None
        return message
