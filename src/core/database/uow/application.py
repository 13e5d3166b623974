from collections.abc import Callable
from typing import Any, TypeVar, cast

from sqlalchemy.ext.asyncio import AsyncSession

from src.core.database.repositories import BaseRepository
from src.core.database.uow.sqlalchemy import SQLAlchemyUnitOfWork
from src.user.auth.repositories import RefreshTokenRepository
from src.user.repositories import UserRepository

RepositoryInstance = TypeVar("RepositoryInstance", bound=BaseRepository[Any])


class ApplicationUnitOfWork(SQLAlchemyUnitOfWork):
    """
    Unit of Work exposing the application's repositories.

    Repositories are stateless, so one instance per type is cached for the
    lifetime of the unit.
    """

    def __init__(self, session: AsyncSession):
        super().__init__(session)
        self._repositories: dict[type[BaseRepository[Any]], BaseRepository[Any]] = {}

    def _get_repository(
        self, repository_type: type[RepositoryInstance]
    ) -> RepositoryInstance:
        if repository_type not in self._repositories:
            self._repositories[repository_type] = repository_type()

        return cast(RepositoryInstance, self._repositories[repository_type])

    @property
    def users(self) -> UserRepository:
        return self._get_repository(UserRepository)

    @property
    def refresh_tokens(self) -> RefreshTokenRepository:
        return self._get_repository(RefreshTokenRepository)


def get_uow(session: AsyncSession) -> ApplicationUnitOfWork:
    return ApplicationUnitOfWork(session)


UnitOfWorkFactory = Callable[[], ApplicationUnitOfWork]
