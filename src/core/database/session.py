from collections.abc import AsyncGenerator
from functools import partial

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from src.core.database.engine import engine
from src.core.database.uow import UnitOfWorkFactory, get_uow

async_session = async_sessionmaker(bind=engine, expire_on_commit=False)


async def get_session() -> AsyncGenerator[AsyncSession]:
    async with async_session() as session:
        yield session


def get_unit_of_work_factory(
    session: AsyncSession = Depends(get_session),
) -> UnitOfWorkFactory:
    """
    FastAPI dependency returning a factory of Units of Work bound to the
    request's session. Each unit is its own transaction, so a use case can
    keep slow work between two short transactions.
    """
    return partial(get_uow, session)
