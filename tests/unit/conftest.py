import pytest
from unittest.mock import AsyncMock, MagicMock

from src.app.services.password_reset_store import IPasswordResetStore


@pytest.fixture
def mock_uow():
    uow = MagicMock()
    uow.__aenter__ = AsyncMock(return_value=uow)
    uow.__aexit__ = AsyncMock(return_value=False)  # Must return False to not suppress exceptions
    uow.commit = AsyncMock()
    uow.rollback = AsyncMock()

    uow.users = MagicMock()
    uow.users.get_by_email = AsyncMock()
    uow.users.get_by_id = AsyncMock()
    uow.users.update = AsyncMock()

    uow.password_reset_tokens = MagicMock()
    uow.password_reset_tokens.create = AsyncMock()
    uow.password_reset_tokens.get_latest_by_token_hash_for_update = AsyncMock()
    uow.password_reset_tokens.mark_used_if_unused = AsyncMock(return_value=True)

    uow.audit_logs = MagicMock()
    uow.audit_logs.create = AsyncMock()
    return uow


@pytest.fixture
def mock_store():
    store = MagicMock(spec=IPasswordResetStore)
    store.get_user_by_email = AsyncMock()
    store.create_reset_token = AsyncMock()
    store.consume_reset_token = AsyncMock()
    store.insert_audit_log = AsyncMock()
    return store


@pytest.fixture
def mock_notifier():
    notifier = MagicMock()
    notifier.send_reset_email = AsyncMock()
    return notifier
