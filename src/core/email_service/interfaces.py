from abc import ABC, abstractmethod


class AbstractMailer(ABC):
    @abstractmethod
    async def send_message(
        self,
        subject: str,
        recipients: list[str],
        body: str,
        subtype: str = "plain",
    ) -> None:
        """Send a message with the given body to every recipient."""
        pass
