"""Database Session Manager — failure mapping and readiness on a real engine.

Invariants:
    - A constraint violation inside a scope surfaces as DatabaseError("commit")
    - The scope is usable again afterwards (rolled back, connection returned)
    - health_check is True on a live engine
"""

import pytest
from sqlalchemy import select
from sqlalchemy.exc import DBAPIError, IntegrityError, OperationalError, SQLAlchemyError

from directory_api.core.errors import DatabaseError
from directory_api.infrastructure.database import classify_failure
from directory_api.models.lookup import Country


async def test_integrity_violation_becomes_database_error(fake_manager, test_db):
    test_db.add(Country(code="CA", name="Canada"))
    await test_db.commit()

    with pytest.raises(DatabaseError) as info:
        async with fake_manager.session() as db:
            db.add(Country(code="CA", name="Canada again"))
            await db.commit()

    assert info.value.http_status == 500
    assert info.value.message == "Database commit failed: Integrity constraint violated"
    assert isinstance(info.value.__cause__, IntegrityError)

    async with fake_manager.session() as db:
        names = (await db.execute(select(Country.name))).scalars().all()
    assert names == ["Canada"]


async def test_health_check(fake_manager):
    assert await fake_manager.health_check() is True


def test_classify_failure_prefers_most_specific():
    orig = Exception("driver said no")
    assert classify_failure(IntegrityError("INSERT", {}, orig))[1] == "commit"
    assert classify_failure(OperationalError("SELECT", {}, orig))[1] == "execute"
    assert classify_failure(DBAPIError("SELECT", {}, orig))[1] == "query"
    assert classify_failure(SQLAlchemyError("mapper"))[1] == "unknown"
