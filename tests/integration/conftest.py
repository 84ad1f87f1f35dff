import pytest
import pytest_asyncio
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession
from src.depends import (
    get_email_notifier,
    get_password_reset_settings,
    get_session,
    get_unit_of_work,
)
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.app.use_cases.auth import PasswordResetSettings
from tests.fixtures.memory_store import RecordingEmailNotifier


@pytest_asyncio.fixture
async def engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
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
def email_notifier():
    return RecordingEmailNotifier()


@pytest.fixture
def reset_settings():
    # Lowest bcrypt cost keeps the suite fast
    return PasswordResetSettings(password_hash_rounds=4)


@pytest_asyncio.fixture
async def client(db_session, email_notifier, reset_settings):
    from httpx import ASGITransport
    from src.api.app import create_app
    from config import ApplicationConfig

    app = create_app(ApplicationConfig)

    async def override_get_unit_of_work():
        yield SqlAlchemyUnitOfWork(db_session)

    async def override_get_session():
        yield db_session

    app.dependency_overrides[get_unit_of_work] = override_get_unit_of_work
    app.dependency_overrides[get_session] = override_get_session
    app.dependency_overrides[get_email_notifier] = lambda: email_notifier
    app.dependency_overrides[get_password_reset_settings] = lambda: reset_settings

    transport = ASGITransport(app=app, client=("203.0.113.9", 51000))
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
