"""
Building blocks of the rotation protocol.

A credential pair is an access token and a refresh credential minted together:
the access token's 'refr' claim is the refresh credential's id. Only the
verification hash of the refresh credential is persisted.
"""

from dataclasses import dataclass
from uuid import UUID

from loggers import get_logger
from src.core.database.uow import ApplicationUnitOfWork
from src.user.auth.access_token import AccessTokenSigner
from src.user.auth.exceptions import InvalidTokenException
from src.user.auth.refresh_credential import (
    RefreshCredential,
    encode_refresh_credential,
)
from src.user.auth.security import hash_refresh_credential

logger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class TokenPair:
    access: str
    refresh: RefreshCredential

    @property
    def encoded_refresh(self) -> str:
        return encode_refresh_credential(self.refresh)


async def build_token_pair(
    signer: AccessTokenSigner, user_id: UUID, origin: str
) -> tuple[TokenPair, str]:
    """
    Mint a fresh pair bound to `origin` and hash its refresh credential.

    Nothing is persisted here, so the slow hash can run before any
    transaction is opened.

    Returns:
        tuple: The pair and the verification hash to store for it
    """
    credential = RefreshCredential.generate(origin)
    access = signer.sign(str(user_id), credential.id)
    verification_hash = await hash_refresh_credential(credential)
    return TokenPair(access=access, refresh=credential), verification_hash


async def execute_token_rotation(
    uow: ApplicationUnitOfWork,
    old_refresh_id: UUID,
    new_pair: TokenPair,
    new_verification_hash: str,
) -> None:
    """
    Replace the old verification record with the new one inside `uow`.

    The old record is removed with a compare-and-delete; if another exchange
    already removed it the rotation is rejected and nothing is inserted.

    Raises:
        InvalidTokenException: If the old record was no longer present
    """
    consumed = await uow.refresh_tokens.consume(uow.session, old_refresh_id)
    if not consumed:
        raise InvalidTokenException(
            "refresh record consumed concurrently", refresh_id=str(old_refresh_id)
        )

    await uow.refresh_tokens.add(
        uow.session, new_pair.refresh.id, new_verification_hash
    )
    logger.debug(
        "[ExchangeTokens] Rotated refresh record %s -> %s",
        old_refresh_id,
        new_pair.refresh.id,
    )
