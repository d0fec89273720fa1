import pytest
import pytest_asyncio
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from src.adapter.services.attempt_store import InMemoryAttemptStore
from src.adapter.services.password_hasher import BcryptPasswordHasher
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.app.services.rate_limiter import PasswordChangeRateLimiter, PasswordResetRateLimiter
from src.depends import (
    get_clock,
    get_mail_service,
    get_password_change_limiter,
    get_password_hasher,
    get_rate_limiter,
    get_unit_of_work,
)
from tests.fixtures.fakes import FixedClock, RecordingMailService


@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine("sqlite+aiosqlite:///./test.db")
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(engine):
    Session = sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with Session() as session:
        yield session


@pytest.fixture
def clock():
    return FixedClock()


@pytest.fixture
def hasher():
    # Minimum cost keeps the suite fast
    return BcryptPasswordHasher(rounds=4)


@pytest.fixture
def mail_service():
    return RecordingMailService()


@pytest.fixture
def rate_limiter(clock):
    return PasswordResetRateLimiter(InMemoryAttemptStore(), clock)


@pytest.fixture
def change_limiter(clock):
    return PasswordChangeRateLimiter(InMemoryAttemptStore(), clock)


@pytest_asyncio.fixture
async def client(db_session, clock, hasher, mail_service, rate_limiter, change_limiter):
    from httpx import ASGITransport
    from src.api.app import create_app
    from config import ApplicationConfig

    app = create_app(ApplicationConfig)

    async def override_get_unit_of_work():
        yield SqlAlchemyUnitOfWork(db_session)
        # Next request reads committed rows, as it would with its own session
        db_session.expire_all()

    app.dependency_overrides[get_unit_of_work] = override_get_unit_of_work
    app.dependency_overrides[get_clock] = lambda: clock
    app.dependency_overrides[get_password_hasher] = lambda: hasher
    app.dependency_overrides[get_mail_service] = lambda: mail_service
    app.dependency_overrides[get_rate_limiter] = lambda: rate_limiter
    app.dependency_overrides[get_password_change_limiter] = lambda: change_limiter

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
