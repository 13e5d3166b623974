from src.core.email_service.interfaces import AbstractMailer


class FailingMailer(AbstractMailer):
    """Transport whose every delivery attempt fails."""

    def __init__(self, error: Exception | None = None) -> None:
        self.error = error or ConnectionRefusedError("SMTP server unreachable")
        self.attempts = 0

    async def send_message(
        self,
        subject: str,
        recipients: list[str],
        body: str,
        subtype: str = "plain",
    ) -> None:
        self.attempts += 1
        raise self.error
