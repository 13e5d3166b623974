from uuid import UUID as PY_UUID

from sqlalchemy import String
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlalchemy.orm import Mapped, mapped_column

from src.core.database.base import Base


class RefreshToken(Base):
    """
    Verification record of a live refresh credential.

    The primary key is the credential id itself, so it is assigned by the
    issuer and never generated by the database. The row is deleted, not
    flagged, when the credential is exchanged.
    """

    __tablename__ = "refresh_tokens"

    id: Mapped[PY_UUID] = mapped_column(PG_UUID(as_uuid=True), primary_key=True)
    verification_hash: Mapped[str] = mapped_column(String(255))

    def __repr__(self) -> str:
        return f"<RefreshToken(id={str(self.id)})>"
