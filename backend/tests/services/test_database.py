"""Database Session Manager — store errors become StoreUnavailableError, no retry."""

import pytest
from sqlalchemy import text

from loantracker.core.errors import StoreUnavailableError
from loantracker.infrastructure.database import DatabaseSessionManager


@pytest.fixture
async def manager():
    manager = DatabaseSessionManager("sqlite+aiosqlite:///:memory:")
    yield manager
    await manager.close()


async def test_health_check_on_reachable_store(manager):
    assert await manager.health_check() is True


async def test_operational_error_maps_to_store_unavailable(manager):
    with pytest.raises(StoreUnavailableError) as exc_info:
        async with manager.session() as db:
            await db.execute(text("SELECT * FROM no_such_table"))
    assert exc_info.value.http_status == 500
    assert exc_info.value.code == "STORE_UNAVAILABLE"


async def test_domain_errors_pass_through_untouched(manager):
    with pytest.raises(KeyError):
        async with manager.session():
            raise KeyError("not a store error")
