from contextlib import AsyncExitStack
from typing import Any, Self

from sqlalchemy.ext.asyncio import AsyncSession

from src.core.database.transactions import safe_begin
from src.core.database.uow.abstract import UnitOfWork


class SQLAlchemyUnitOfWork(UnitOfWork):
    """Unit of Work over a single AsyncSession."""

    def __init__(self, session: AsyncSession):
        self._session = session
        self._exit_stack = AsyncExitStack()
        self._is_completed = False

    async def __aenter__(self) -> Self:
        await self._exit_stack.__aenter__()
        await self._exit_stack.enter_async_context(safe_begin(self._session))
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        if exc_type is not None and not self._is_completed:
            await self.rollback()

        await self._exit_stack.__aexit__(exc_type, exc_val, exc_tb)

    async def commit(self) -> None:
        if self._is_completed:
            raise RuntimeError("This unit of work has already been completed")

        await self._session.commit()
        self._is_completed = True

    async def rollback(self) -> None:
        if self._is_completed:
            raise RuntimeError("This unit of work has already been completed")

        await self._session.rollback()
        self._is_completed = True

    @property
    def completed(self) -> bool:
        return self._is_completed

    @property
    def session(self) -> AsyncSession:
        return self._session
