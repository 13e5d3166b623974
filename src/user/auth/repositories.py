from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.database.repositories import BaseRepository
from src.user.auth.models import RefreshToken


class RefreshTokenRepository(BaseRepository[RefreshToken]):
    model = RefreshToken

    async def add(
        self, session: AsyncSession, refresh_id: UUID, verification_hash: str
    ) -> RefreshToken:
        return await self.create(
            session,
            {"id": refresh_id, "verification_hash": verification_hash},
            flush=True,
        )

    async def get_hash(self, session: AsyncSession, refresh_id: UUID) -> str | None:
        query = select(self.model.verification_hash).where(self.model.id == refresh_id)
        return await session.scalar(query)

    async def consume(self, session: AsyncSession, refresh_id: UUID) -> bool:
        """
        Compare-and-delete. Only the caller whose DELETE actually removed the
        row may go on to issue a replacement.
        """
        return await self.delete_where(session, id=refresh_id) == 1
