from datetime import timedelta
from functools import lru_cache
from uuid import UUID

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from redis.asyncio import Redis
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession
from config import ApplicationConfig
from src.adapter.services.attempt_store import InMemoryAttemptStore, RedisAttemptStore
from src.adapter.services.mail_service import ConsoleMailService, FastMailService
from src.adapter.services.password_hasher import BcryptPasswordHasher
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.api.error import ClientError
from src.api.utils.jwt import verify_jwt
from src.app.services.clock import Clock, SystemClock
from src.app.services.mail_service import IMailService
from src.app.services.password_hasher import IPasswordHasher
from src.app.services.rate_limiter import PasswordChangeRateLimiter, PasswordResetRateLimiter
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.admin import CleanupExpiredResetTokensUseCase
from src.app.use_cases.users import LoadContextUseCase

engine = create_async_engine(ApplicationConfig.DB_URI, echo=False, future=True)

AsyncSessionLocal = sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
)

security = HTTPBearer()


async def get_session() -> AsyncSession:
    async with AsyncSessionLocal() as session:
        yield session


async def get_unit_of_work():
    async with AsyncSessionLocal() as session:
        yield SqlAlchemyUnitOfWork(session)


def get_clock() -> Clock:
    return SystemClock()


@lru_cache
def get_password_hasher() -> IPasswordHasher:
    return BcryptPasswordHasher(rounds=ApplicationConfig.BCRYPT_ROUNDS)


@lru_cache
def get_redis() -> Redis:
    return Redis.from_url(
        ApplicationConfig.REDIS_URL, encoding="utf-8", decode_responses=True
    )


def _attempt_store(key_prefix: str):
    if ApplicationConfig.CACHE_BACKEND == "redis":
        return RedisAttemptStore(get_redis(), key_prefix=key_prefix)
    return InMemoryAttemptStore()


@lru_cache
def get_rate_limiter() -> PasswordResetRateLimiter:
    """One limiter per process so attempts survive across requests"""
    return PasswordResetRateLimiter(
        _attempt_store("password_reset:attempts:"),
        SystemClock(),
        max_attempts=ApplicationConfig.RESET_MAX_ATTEMPTS_PER_DAY,
        cooldown=timedelta(minutes=ApplicationConfig.RESET_COOLDOWN_MINUTES),
    )


@lru_cache
def get_password_change_limiter() -> PasswordChangeRateLimiter:
    return PasswordChangeRateLimiter(
        _attempt_store("password_change:attempts:"),
        SystemClock(),
        max_attempts=ApplicationConfig.PASSWORD_CHANGE_MAX_ATTEMPTS,
        window=timedelta(minutes=ApplicationConfig.PASSWORD_CHANGE_WINDOW_MINUTES),
    )


@lru_cache
def get_mail_service() -> IMailService:
    if ApplicationConfig.MAIL_BACKEND == "smtp":
        return FastMailService.from_config(ApplicationConfig)
    return ConsoleMailService()


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    uow: UnitOfWork = Depends(get_unit_of_work),
    clock: Clock = Depends(get_clock),
) -> dict:
    """
    Dependency to authenticate the caller from the Authorization header.

    Verifies the JWT, then checks that the session it names is still live.

    Returns:
        Context dict with "user" and "session" entries

    Raises:
        HTTPException: 401 if token is invalid or expired
        ClientError: 401 if the session was revoked, 403 if the user is disabled
    """
    token = credentials.credentials
    payload = verify_jwt(token)

    if payload is None or "session_id" not in payload:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
        )

    try:
        user_id = UUID(payload["user_id"])
        session_id = UUID(payload["session_id"])
    except (KeyError, ValueError):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
        )

    result = await LoadContextUseCase(uow, clock).execute(user_id, session_id)
    if result.is_err():
        error = result.error
        if error.code == "USER_DISABLED":
            raise ClientError(error, status_code=status.HTTP_403_FORBIDDEN)
        raise ClientError(error, status_code=status.HTTP_401_UNAUTHORIZED)

    return result.value


async def run_token_cleanup():
    """Entry point for the periodic cleanup job; opens its own session"""
    async with AsyncSessionLocal() as session:
        use_case = CleanupExpiredResetTokensUseCase(SqlAlchemyUnitOfWork(session), SystemClock())
        return await use_case.execute()
