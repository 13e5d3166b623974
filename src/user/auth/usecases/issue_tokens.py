from fastapi import Depends
from sqlalchemy.exc import SQLAlchemyError

from loggers import get_logger
from src.core.database.session import get_unit_of_work_factory
from src.core.database.uow import UnitOfWorkFactory
from src.core.errors.exceptions import InstanceNotFoundException
from src.user.auth.access_token import AccessTokenSigner, get_access_token_signer
from src.user.auth.exceptions import TokenStorageException
from src.user.auth.schemas import GetTokenModel, TokenPairModel
from src.user.auth.token_helpers import build_token_pair

logger = get_logger(__name__)


class IssueTokenPairUseCase:
    """
    Use case for issuing the first token pair of a known user.

    The user lookup and the insert run in two short transactions; the pair is
    hashed between them with no transaction open.
    """

    def __init__(
        self,
        uow_factory: UnitOfWorkFactory,
        signer: AccessTokenSigner,
    ) -> None:
        self.uow_factory = uow_factory
        self.signer = signer

    async def execute(self, data: GetTokenModel, client_origin: str) -> TokenPairModel:
        try:
            async with self.uow_factory() as uow:
                user_exists = await uow.users.exists(uow.session, id=data.guid)

            if not user_exists:
                logger.info("[IssueTokens] User '%s' not found", data.guid)
                raise InstanceNotFoundException("User does not exist")

            pair, verification_hash = await build_token_pair(
                self.signer, data.guid, client_origin
            )

            async with self.uow_factory() as uow:
                await uow.refresh_tokens.add(
                    uow.session, pair.refresh.id, verification_hash
                )
                await uow.commit()
        except SQLAlchemyError as exc:
            logger.error("[IssueTokens] Storage failure: %s", exc)
            raise TokenStorageException({"operation": "issue"}) from exc

        logger.info(
            "[IssueTokens] Issued pair %s for user '%s'", pair.refresh.id, data.guid
        )
        return TokenPairModel.from_pair(pair)


def get_issue_token_pair_use_case(
    uow_factory: UnitOfWorkFactory = Depends(get_unit_of_work_factory),
    signer: AccessTokenSigner = Depends(get_access_token_signer),
) -> IssueTokenPairUseCase:
    return IssueTokenPairUseCase(uow_factory=uow_factory, signer=signer)
