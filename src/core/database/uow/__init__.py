from src.core.database.uow.abstract import UnitOfWork
from src.core.database.uow.application import (
    ApplicationUnitOfWork,
    UnitOfWorkFactory,
    get_uow,
)
from src.core.database.uow.sqlalchemy import SQLAlchemyUnitOfWork

__all__ = [
    "UnitOfWork",
    "SQLAlchemyUnitOfWork",
    "ApplicationUnitOfWork",
    "UnitOfWorkFactory",
    "get_uow",
]
