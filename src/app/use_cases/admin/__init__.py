"""Admin use cases for password reset maintenance and reporting."""

from .cleanup_reset_tokens_use_case import (
    CleanupExpiredResetTokensUseCase,
    CleanupResetTokensResponse,
)
from .get_reset_statistics_use_case import GetResetStatisticsUseCase

__all__ = [
    "CleanupExpiredResetTokensUseCase",
    "CleanupResetTokensResponse",
    "GetResetStatisticsUseCase",
]
