"""
Admin API Routes - Password Reset Maintenance

Authentication is via Admin API Key, not user JWTs.
"""

from fastapi import APIRouter, Depends, Query, status

from src.api.error import ServerError
from src.api.utils.admin_auth import verify_admin_api_key
from src.app.services.clock import Clock
from src.app.services.reset_token_store import ResetStatistics
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.admin import (
    CleanupExpiredResetTokensUseCase,
    CleanupResetTokensResponse,
    GetResetStatisticsUseCase,
)
from src.domain.entities import StatisticsTimeframe
from src.depends import get_clock, get_unit_of_work

router = APIRouter(prefix="/admin", tags=["Admin"])


@router.get(
    "/password-resets/statistics",
    status_code=status.HTTP_200_OK,
    response_model=ResetStatistics,
    dependencies=[Depends(verify_admin_api_key)],
)
async def get_reset_statistics(
    timeframe: StatisticsTimeframe = Query(StatisticsTimeframe.day),
    uow: UnitOfWork = Depends(get_unit_of_work),
    clock: Clock = Depends(get_clock),
):
    """
    Password Reset Statistics

    Requires: X-Admin-API-Key header

    Raises:
        - 401 Unauthorized: Missing or invalid admin API key
        - 422 Unprocessable Entity: Unknown timeframe (handled by FastAPI)
        - 500 Internal Server Error: Server error
    """
    result = await GetResetStatisticsUseCase(uow, clock).execute(timeframe)

    if result.is_err():
        raise ServerError(result.error)

    return result.value


@router.post(
    "/password-resets/cleanup",
    status_code=status.HTTP_200_OK,
    response_model=CleanupResetTokensResponse,
    dependencies=[Depends(verify_admin_api_key)],
)
async def cleanup_expired_reset_tokens(
    uow: UnitOfWork = Depends(get_unit_of_work),
    clock: Clock = Depends(get_clock),
):
    """
    Delete Expired Reset Tokens

    Same job the scheduler runs periodically.

    Requires: X-Admin-API-Key header
    """
    result = await CleanupExpiredResetTokensUseCase(uow, clock).execute()

    if result.is_err():
        raise ServerError(result.error)

    return result.value
