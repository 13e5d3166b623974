from typing import Any, Generic, TypeVar

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from loggers import get_logger
from src.core.database.base import Base as SQLAlchemyBase

logger = get_logger(__name__)

T = TypeVar("T", bound=SQLAlchemyBase)


class BaseRepository(Generic[T]):
    """
    Common SQLAlchemy operations. Repositories never own a session or a
    transaction: callers pass the session of their unit of work.
    """

    model: type[T]

    def __init__(self) -> None:
        if not hasattr(self, "model"):
            raise NotImplementedError("Subclasses must define class variable 'model'")

    async def create(
        self, session: AsyncSession, data: dict[str, Any], flush: bool = False
    ) -> T:
        """Stage a new record; flush=True sends the INSERT immediately."""
        instance = self.model(**data)
        session.add(instance)
        if flush:
            await session.flush()
        logger.debug("%s created [Staged, pending commit].", self.model.__name__)
        return instance

    async def exists(self, session: AsyncSession, **filters: Any) -> bool:
        subquery = select(1).select_from(self.model).filter_by(**filters).limit(1)
        query = select(subquery.exists())
        return bool(await session.scalar(query))

    async def get_single(self, session: AsyncSession, **filters: Any) -> T | None:
        query = select(self.model).filter_by(**filters).limit(1)
        result = await session.execute(query)
        return result.scalars().first()

    async def delete_where(self, session: AsyncSession, **filters: Any) -> int:
        """
        Delete matching rows with a single DELETE statement and return how many
        rows the database actually removed.
        """
        self._ensure_filters_present(filters)
        query = delete(self.model).filter_by(**filters)
        result = await session.execute(query)
        deleted = int(getattr(result, "rowcount", 0) or 0)
        logger.debug(
            "%s delete affected %s row(s) [Staged, pending commit].",
            self.model.__name__,
            deleted,
        )
        return deleted

    @staticmethod
    def _ensure_filters_present(filters: dict[str, Any]) -> None:
        if not filters:
            raise ValueError("At least one filter must be provided for delete")
