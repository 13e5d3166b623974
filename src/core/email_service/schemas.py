from src.core.schemas import Base


class MailMessage(Base):
    subject: str
    recipients: list[str]
    body: str
    subtype: str = "plain"
