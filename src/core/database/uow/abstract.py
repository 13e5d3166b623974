from abc import ABC, abstractmethod
from typing import Any


class UnitOfWork(ABC):
    """
    Transaction boundary for a business operation.

    Entering the context opens a transaction; leaving it commits, or rolls back
    when an exception escapes. commit()/rollback() may also be called
    explicitly, after which the unit is completed and cannot be reused.
    """

    @abstractmethod
    async def __aenter__(self) -> "UnitOfWork":
        pass

    @abstractmethod
    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        pass

    @abstractmethod
    async def commit(self) -> None:
        pass

    @abstractmethod
    async def rollback(self) -> None:
        pass

    @property
    @abstractmethod
    def completed(self) -> bool:
        """True once commit() or rollback() has run."""
        pass
