from fastapi import Depends
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession
from config import ApplicationConfig
from src.adapter.database import create_engine_from_config
from src.adapter.services.email_notifier import create_email_notifier
from src.adapter.services.password_reset_store import SqlPasswordResetStore
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.app.services.audit_logger import AuditLogger
from src.app.services.email_notifier import IEmailNotifier
from src.app.services.password_hasher import BcryptPasswordHasher
from src.app.services.password_reset_store import IPasswordResetStore
from src.app.use_cases.auth import (
    PasswordResetSettings,
    RequestPasswordResetUseCase,
    ResetPasswordUseCase,
)

engine = create_engine_from_config(ApplicationConfig)

AsyncSessionLocal = sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
)

password_reset_settings = PasswordResetSettings.from_config(ApplicationConfig)
email_notifier = create_email_notifier(ApplicationConfig)


async def get_session() -> AsyncSession:
    async with AsyncSessionLocal() as session:
        yield session


async def get_unit_of_work():
    async with AsyncSessionLocal() as session:
        yield SqlAlchemyUnitOfWork(session)


def get_password_reset_settings() -> PasswordResetSettings:
    return password_reset_settings


def get_email_notifier() -> IEmailNotifier:
    return email_notifier


def get_password_reset_store(uow=Depends(get_unit_of_work)) -> IPasswordResetStore:
    return SqlPasswordResetStore(uow)


def get_request_password_reset_use_case(
    store: IPasswordResetStore = Depends(get_password_reset_store),
    notifier: IEmailNotifier = Depends(get_email_notifier),
    settings: PasswordResetSettings = Depends(get_password_reset_settings),
) -> RequestPasswordResetUseCase:
    return RequestPasswordResetUseCase(
        store, notifier, audit_logger=AuditLogger(store), settings=settings
    )


def get_reset_password_use_case(
    store: IPasswordResetStore = Depends(get_password_reset_store),
    settings: PasswordResetSettings = Depends(get_password_reset_settings),
) -> ResetPasswordUseCase:
    return ResetPasswordUseCase(
        store,
        audit_logger=AuditLogger(store),
        settings=settings,
        password_hasher=BcryptPasswordHasher(settings.password_hash_rounds),
    )
