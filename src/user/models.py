from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from src.core.database.base import Base
from src.core.database.mixins import TimestampMixin, UUIDIDMixin


class User(Base, UUIDIDMixin, TimestampMixin):
    """
    Account record. This service only reads it: the id is the token subject,
    username and email address the origin change alert.
    """

    __tablename__ = "users"

    username: Mapped[str] = mapped_column(String(60))
    email: Mapped[str] = mapped_column(String(255))

    def __repr__(self) -> str:
        return f"<User(id={str(self.id)}, username={self.username!r})>"
