from uuid import UUID

from pydantic import Field

from src.core.schemas import Base
from src.user.auth.token_helpers import TokenPair


class GetTokenModel(Base):
    guid: UUID


class TokenPairModel(Base):
    access: str = Field(min_length=1)
    refresh: str = Field(min_length=1)

    @classmethod
    def from_pair(cls, pair: TokenPair) -> "TokenPairModel":
        return cls(access=pair.access, refresh=pair.encoded_refresh)
