"""
SqlPasswordResetStore against SQLite

Newest-duplicate selection, single use across sequential and concurrent
sessions and rollback of the consume transaction.
"""
import asyncio
from datetime import timedelta

import pytest
from sqlalchemy.orm import sessionmaker
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.adapter.repositories.user_repository import UserRepository
from src.adapter.services.password_reset_store import SqlPasswordResetStore
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.domain.base import utcnow
from src.domain.entities import AuthAuditLog, PasswordResetToken, User

TOKEN_HASH = "c" * 64


@pytest.fixture
def session_factory(engine):
    return sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def add_user(db_session: AsyncSession, email: str) -> User:
    user = User(email=email, password_hash="old_hash")
    db_session.add(user)
    await db_session.commit()
    await db_session.refresh(user)
    return user


async def reload(db_session: AsyncSession, model, **filters):
    stmt = select(model).execution_options(populate_existing=True)
    for name, value in filters.items():
        stmt = stmt.where(getattr(model, name) == value)
    result = await db_session.exec(stmt)
    return result.one()


@pytest.mark.asyncio
async def test_get_user_by_email(db_session: AsyncSession):
    user = await add_user(db_session, "a@b.com")
    store = SqlPasswordResetStore(SqlAlchemyUnitOfWork(db_session))

    found = await store.get_user_by_email("a@b.com")

    assert found.id == user.id
    assert await store.get_user_by_email("missing@example.com") is None


@pytest.mark.asyncio
async def test_create_allows_duplicate_hashes(db_session: AsyncSession):
    user = await add_user(db_session, "a@b.com")
    store = SqlPasswordResetStore(SqlAlchemyUnitOfWork(db_session))
    expires_at = utcnow() + timedelta(hours=1)

    first = await store.create_reset_token(user.id, TOKEN_HASH, expires_at)
    second = await store.create_reset_token(user.id, TOKEN_HASH, expires_at)

    assert first.id != second.id
    assert first.used_at is None
    assert second.created_at is not None


@pytest.mark.asyncio
async def test_consume_marks_used_and_updates_password(db_session: AsyncSession):
    user = await add_user(db_session, "a@b.com")
    store = SqlPasswordResetStore(SqlAlchemyUnitOfWork(db_session))
    token = await store.create_reset_token(user.id, TOKEN_HASH, utcnow() + timedelta(hours=1))
    now = utcnow()

    result = await store.consume_reset_token(TOKEN_HASH, "new_hash", now)

    assert result.ok is True
    assert result.user_id == user.id
    assert (await reload(db_session, User, id=user.id)).password_hash == "new_hash"
    assert (await reload(db_session, PasswordResetToken, id=token.id)).used_at == now


@pytest.mark.asyncio
async def test_consume_in_later_session_sees_token_used(engine, session_factory, db_session: AsyncSession):
    user = await add_user(db_session, "a@b.com")
    await SqlPasswordResetStore(SqlAlchemyUnitOfWork(db_session)).create_reset_token(
        user.id, TOKEN_HASH, utcnow() + timedelta(hours=1)
    )

    async with session_factory() as first_session:
        first = await SqlPasswordResetStore(SqlAlchemyUnitOfWork(first_session)).consume_reset_token(
            TOKEN_HASH, "first_hash", utcnow()
        )
    async with session_factory() as second_session:
        second = await SqlPasswordResetStore(SqlAlchemyUnitOfWork(second_session)).consume_reset_token(
            TOKEN_HASH, "second_hash", utcnow()
        )

    assert first.ok is True
    assert second.ok is False
    assert second.reason == "invalid_or_expired"
    assert second.user_id == user.id
    assert (await reload(db_session, User, id=user.id)).password_hash == "first_hash"


async def consume_in_new_session(session_factory, token_hash: str, password_hash: str):
    async with session_factory() as session:
        return await SqlPasswordResetStore(SqlAlchemyUnitOfWork(session)).consume_reset_token(
            token_hash, password_hash, utcnow()
        )


@pytest.mark.asyncio
async def test_concurrent_consume_of_same_token_succeeds_once(session_factory, db_session: AsyncSession):
    user = await add_user(db_session, "a@b.com")
    user_id = user.id
    token = await SqlPasswordResetStore(SqlAlchemyUnitOfWork(db_session)).create_reset_token(
        user_id, TOKEN_HASH, utcnow() + timedelta(hours=1)
    )
    token_id = token.id

    results = await asyncio.gather(
        consume_in_new_session(session_factory, TOKEN_HASH, "first_hash"),
        consume_in_new_session(session_factory, TOKEN_HASH, "second_hash"),
    )

    winners = [index for index, result in enumerate(results) if result.ok]
    assert len(winners) == 1
    loser = results[1 - winners[0]]
    assert loser.reason == "invalid_or_expired"
    assert loser.user_id == user_id

    expected_hash = ("first_hash", "second_hash")[winners[0]]
    assert (await reload(db_session, User, id=user_id)).password_hash == expected_hash
    assert (await reload(db_session, PasswordResetToken, id=token_id)).used_at is not None


@pytest.mark.asyncio
async def test_concurrent_consume_of_different_tokens_both_succeed(
    session_factory, db_session: AsyncSession
):
    first_owner = await add_user(db_session, "first@b.com")
    second_owner = await add_user(db_session, "second@b.com")
    first_id, second_id = first_owner.id, second_owner.id
    store = SqlPasswordResetStore(SqlAlchemyUnitOfWork(db_session))
    expires_at = utcnow() + timedelta(hours=1)
    await store.create_reset_token(first_id, "d" * 64, expires_at)
    await store.create_reset_token(second_id, "e" * 64, expires_at)

    first, second = await asyncio.gather(
        consume_in_new_session(session_factory, "d" * 64, "first_hash"),
        consume_in_new_session(session_factory, "e" * 64, "second_hash"),
    )

    assert first.ok is True
    assert first.user_id == first_id
    assert second.ok is True
    assert second.user_id == second_id
    assert (await reload(db_session, User, id=first_id)).password_hash == "first_hash"
    assert (await reload(db_session, User, id=second_id)).password_hash == "second_hash"


@pytest.mark.asyncio
async def test_consume_picks_newest_created_at(db_session: AsyncSession):
    """Older duplicates are ignored even when they are still valid"""
    older_owner = await add_user(db_session, "old@b.com")
    newer_owner = await add_user(db_session, "new@b.com")
    older_id, newer_id = older_owner.id, newer_owner.id
    now = utcnow()

    # Insert the newer record first so insertion order and created_at disagree
    db_session.add(
        PasswordResetToken(
            user_id=newer_id,
            token_hash=TOKEN_HASH,
            expires_at=now + timedelta(hours=1),
            created_at=now - timedelta(minutes=1),
        )
    )
    db_session.add(
        PasswordResetToken(
            user_id=older_id,
            token_hash=TOKEN_HASH,
            expires_at=now + timedelta(hours=1),
            created_at=now - timedelta(minutes=10),
        )
    )
    await db_session.commit()

    store = SqlPasswordResetStore(SqlAlchemyUnitOfWork(db_session))
    result = await store.consume_reset_token(TOKEN_HASH, "new_hash", now)

    assert result.user_id == newer_id
    assert (await reload(db_session, User, id=older_id)).password_hash == "old_hash"

    # Newest is used now; the older valid duplicate is not picked up
    again = await store.consume_reset_token(TOKEN_HASH, "other_hash", now)
    assert again.ok is False
    assert again.user_id == newer_id


@pytest.mark.asyncio
async def test_consume_created_at_tie_uses_latest_insert(db_session: AsyncSession):
    first_owner = await add_user(db_session, "first@b.com")
    second_owner = await add_user(db_session, "second@b.com")
    now = utcnow()

    for owner in (first_owner, second_owner):
        db_session.add(
            PasswordResetToken(
                user_id=owner.id,
                token_hash=TOKEN_HASH,
                expires_at=now + timedelta(hours=1),
                created_at=now - timedelta(minutes=1),
            )
        )
        await db_session.commit()

    result = await SqlPasswordResetStore(SqlAlchemyUnitOfWork(db_session)).consume_reset_token(
        TOKEN_HASH, "new_hash", now
    )

    assert result.user_id == second_owner.id


@pytest.mark.asyncio
async def test_consume_rolls_back_on_failure(db_session: AsyncSession, monkeypatch):
    """Marking the token used is undone when the password update fails"""
    user = await add_user(db_session, "a@b.com")
    store = SqlPasswordResetStore(SqlAlchemyUnitOfWork(db_session))
    token = await store.create_reset_token(user.id, TOKEN_HASH, utcnow() + timedelta(hours=1))
    user_id, token_id = user.id, token.id

    async def failing_update(self, user):
        raise RuntimeError("disk full")

    monkeypatch.setattr(UserRepository, "update", failing_update)

    with pytest.raises(RuntimeError, match="disk full"):
        await store.consume_reset_token(TOKEN_HASH, "new_hash", utcnow())

    assert (await reload(db_session, User, id=user_id)).password_hash == "old_hash"
    assert (await reload(db_session, PasswordResetToken, id=token_id)).used_at is None


@pytest.mark.asyncio
async def test_insert_audit_log(db_session: AsyncSession):
    store = SqlPasswordResetStore(SqlAlchemyUnitOfWork(db_session))

    await store.insert_audit_log(
        AuthAuditLog(
            event_type="password_reset_requested",
            email="missing@example.com",
            success=False,
            detail="email_not_found",
        )
    )

    entry = await reload(db_session, AuthAuditLog, email="missing@example.com")
    assert entry.success is False
    assert entry.detail == "email_not_found"
    assert entry.created_at is not None
