from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from sqlalchemy.ext.asyncio import AsyncSession


@asynccontextmanager
async def safe_begin(session: AsyncSession) -> AsyncGenerator[None]:
    """
    Open a transactional scope on the session.

    A fresh session gets BEGIN ... COMMIT/ROLLBACK. A session that is already
    inside a transaction gets a SAVEPOINT, so the inner scope can roll back
    without discarding the outer one.
    """
    if session.in_transaction():
        async with session.begin_nested():
            yield
    else:
        async with session.begin():
            yield
