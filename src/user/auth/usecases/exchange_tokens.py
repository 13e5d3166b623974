from uuid import UUID

from fastapi import BackgroundTasks, Depends
from sqlalchemy.exc import SQLAlchemyError

from loggers import get_logger
from src.core.database.session import get_unit_of_work_factory
from src.core.database.uow import UnitOfWorkFactory
from src.core.utils.security import mask_email
from src.user.auth.access_token import AccessTokenSigner, get_access_token_signer
from src.user.auth.exceptions import InvalidTokenException, TokenStorageException
from src.user.auth.refresh_credential import (
    RefreshCredentialDecodeError,
    decode_refresh_credential,
)
from src.user.auth.schemas import TokenPairModel
from src.user.auth.security import verify_refresh_credential
from src.user.auth.token_helpers import build_token_pair, execute_token_rotation
from src.user.services.origin_change_notifier import (
    OriginChangeNotifier,
    get_origin_change_notifier,
)

logger = get_logger(__name__)


class ExchangeTokenPairUseCase:
    """
    Use case for trading a live token pair for a new one.

    The submitted refresh credential is single use: its record is deleted in
    the same transaction that stores the replacement. Both Argon2 runs happen
    between the short read transaction and that write transaction, never
    inside one. When the exchange comes from an origin other than the one the
    credential was issued to, the owner is alerted after the response has been
    sent.
    """

    def __init__(
        self,
        uow_factory: UnitOfWorkFactory,
        signer: AccessTokenSigner,
        notifier: OriginChangeNotifier,
    ) -> None:
        self.uow_factory = uow_factory
        self.signer = signer
        self.notifier = notifier

    async def execute(
        self,
        data: TokenPairModel,
        client_origin: str,
        background_tasks: BackgroundTasks,
    ) -> TokenPairModel:
        claims = self.signer.verify(data.access)

        try:
            submitted = decode_refresh_credential(data.refresh)
        except RefreshCredentialDecodeError as exc:
            raise InvalidTokenException("malformed refresh token", error=str(exc))

        if claims.refresh_id != submitted.id:
            raise InvalidTokenException(
                "refresh token does not belong to access token",
                refr=str(claims.refresh_id),
                refresh_id=str(submitted.id),
            )

        try:
            user_id = UUID(claims.subject)
        except ValueError:
            raise InvalidTokenException("subject is not a user id")

        try:
            async with self.uow_factory() as uow:
                user = await uow.users.get_single(uow.session, id=user_id)
                stored_hash = await uow.refresh_tokens.get_hash(
                    uow.session, submitted.id
                )

            if user is None:
                raise InvalidTokenException("unknown subject", sub=str(user_id))
            if stored_hash is None:
                raise InvalidTokenException(
                    "refresh record not found", refresh_id=str(submitted.id)
                )
            if not await verify_refresh_credential(submitted, stored_hash):
                raise InvalidTokenException(
                    "refresh token hash mismatch", refresh_id=str(submitted.id)
                )

            new_pair, new_hash = await build_token_pair(
                self.signer, user.id, client_origin
            )

            async with self.uow_factory() as uow:
                await execute_token_rotation(uow, submitted.id, new_pair, new_hash)
                await uow.commit()
        except SQLAlchemyError as exc:
            logger.error("[ExchangeTokens] Storage failure: %s", exc)
            raise TokenStorageException({"operation": "exchange"}) from exc

        logger.info(
            "[ExchangeTokens] Pair %s replaced by %s",
            submitted.id,
            new_pair.refresh.id,
        )

        if client_origin != submitted.origin:
            logger.info(
                "[ExchangeTokens] Origin changed for '%s'", mask_email(user.email)
            )
            background_tasks.add_task(
                self.notifier.notify,
                username=user.username,
                contact_address=user.email,
                new_origin=client_origin,
            )

        return TokenPairModel.from_pair(new_pair)


def get_exchange_token_pair_use_case(
    uow_factory: UnitOfWorkFactory = Depends(get_unit_of_work_factory),
    signer: AccessTokenSigner = Depends(get_access_token_signer),
    notifier: OriginChangeNotifier = Depends(get_origin_change_notifier),
) -> ExchangeTokenPairUseCase:
    return ExchangeTokenPairUseCase(
        uow_factory=uow_factory, signer=signer, notifier=notifier
    )
