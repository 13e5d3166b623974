from typing import Annotated

from fastapi import APIRouter, BackgroundTasks, Depends

from src.core.schemas import ErrorResponse
from src.user.auth.dependencies import get_client_origin
from src.user.auth.schemas import GetTokenModel, TokenPairModel
from src.user.auth.usecases.exchange_tokens import (
    ExchangeTokenPairUseCase,
    get_exchange_token_pair_use_case,
)
from src.user.auth.usecases.issue_tokens import (
    IssueTokenPairUseCase,
    get_issue_token_pair_use_case,
)

router = APIRouter()


@router.post(
    "/get-token",
    response_model=TokenPairModel,
    responses={404: {"model": ErrorResponse}},
)
async def get_token(
    data: GetTokenModel,
    client_origin: Annotated[str, Depends(get_client_origin)],
    use_case: Annotated[IssueTokenPairUseCase, Depends(get_issue_token_pair_use_case)],
) -> TokenPairModel:
    """
    Issue an access/refresh pair for an existing user.
    """
    return await use_case.execute(data=data, client_origin=client_origin)


@router.post(
    "/refresh-token",
    response_model=TokenPairModel,
    responses={403: {"model": ErrorResponse}},
)
async def refresh_token(
    data: TokenPairModel,
    background_tasks: BackgroundTasks,
    client_origin: Annotated[str, Depends(get_client_origin)],
    use_case: Annotated[
        ExchangeTokenPairUseCase, Depends(get_exchange_token_pair_use_case)
    ],
) -> TokenPairModel:
    """
    Exchange a live pair for a new one. The submitted pair stops working.
    """
    return await use_case.execute(
        data=data,
        client_origin=client_origin,
        background_tasks=background_tasks,
    )
