"""Service test fixtures — async DB + FastAPI test client.

Invariants:
    - Every test gets a fresh SQLite database file under tmp_path
    - get_db dependency overridden to use test DB session
    - db_manager patched so session scopes (profile fan-out, readiness) hit the test DB
    - get_mailer overridden with a recorder; no test talks to an SMTP server

Design Decisions:
    - SQLite file, not :memory:, since the profile fan-out opens several connections
      at once and each :memory: connection would see its own empty database
    - Cookies sent as a raw header: httpx will not replay Secure cookies to http://test
    - seed helpers commit through test_db so route handlers see the rows
"""

from decimal import Decimal
from types import SimpleNamespace

import pytest
from sqlalchemy.ext.asyncio import create_async_engine
from httpx import ASGITransport, AsyncClient

from directory_api.api.dependencies import get_mailer, get_token_codec
from directory_api.db.base import Base
from directory_api.db.session import create_session_factory
from directory_api.infrastructure.database import get_db, DatabaseSessionManager
from directory_api.models.account import Account
from directory_api.models.lookup import Background, Country, Province, Style
from directory_api.models.profile import Profile as ProfileRow
from directory_api.models.profile_content import ProfileProfession, ServiceArea
import directory_api.infrastructure.database as db_module
from directory_api.main import app

class RecordingMailer:
    """Stands in for Mailer; keeps every message instead of sending it."""

    def __init__(self):
        self.sent: list[dict] = []

    async def send(self, recipient, subject, text, html):
        self.sent.append({
            "recipient": recipient, "subject": subject, "text": text, "html": html,
        })


@pytest.fixture
async def test_engine(tmp_path):
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'directory.db'}", echo=False,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return create_session_factory(engine=test_engine)


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest.fixture
def fake_manager(test_engine, test_session_factory):
    manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    manager.engine = test_engine
    manager._session_factory = test_session_factory
    return manager


@pytest.fixture
def session_scope(fake_manager):
    return fake_manager.session


@pytest.fixture
def mailer():
    return RecordingMailer()


@pytest.fixture
async def client(test_session_factory, fake_manager, mailer):
    """FastAPI test client with DB and mailer dependencies overridden."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_mailer] = lambda: mailer

    original_manager = db_module.db_manager
    db_module.db_manager = fake_manager

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    db_module.db_manager = original_manager


@pytest.fixture
def session_cookie():
    """Cookie header for a token minted with the process codec."""
    def _cookie(account_id: int, email_address: str) -> dict:
        token = get_token_codec().mint(account_id, email_address)
        return {"Cookie": f"accessToken={token}"}
    return _cookie


@pytest.fixture
async def lookups(test_db):
    """Countries, a province, a style and a background shared by profile tests."""
    canada = Country(code="CA", name="Canada")
    usa = Country(code="US", name="United States")
    test_db.add_all([canada, usa])
    await test_db.flush()
    ontario = Province(country_id=canada.id, code="ON", name="Ontario")
    style = Style(name="Midnight", dark=True)
    background = Background(name="Marble", url="https://cdn.example.net/marble.jpg")
    test_db.add_all([ontario, style, background])
    await test_db.commit()
    return SimpleNamespace(
        canada=canada, usa=usa, ontario=ontario, style=style, background=background,
    )


@pytest.fixture
def make_profile(test_db, lookups):
    """Insert an account with a visible, crawlable profile; returns the account id."""
    counter = {"n": 0}

    async def _make(
        first_name: str = "Jane",
        last_name: str = "Doe",
        country=None,
        province=None,
        professions: tuple[str, ...] = ("Writer",),
        areas: tuple[str, ...] = (),
        arrears: str = "0",
        active: bool = True,
        noindex: bool = False,
        intro: str | None = "Freelance writer.",
        city: str | None = "Toronto",
        **profile_fields,
    ) -> int:
        counter["n"] += 1
        account = Account(
            email_address=f"member{counter['n']}@directory.test",
            verified=True,
            arrears=Decimal(arrears),
            sex="F",
            first_name=first_name,
            last_name=last_name,
        )
        test_db.add(account)
        await test_db.flush()
        country = country if country is not None else lookups.canada
        test_db.add(ProfileRow(
            account_id=account.id,
            country_id=country.id,
            province_id=province.id if province is not None else None,
            city=city,
            intro=intro,
            active=active,
            noindex=noindex,
            **profile_fields,
        ))
        for name in professions:
            test_db.add(ProfileProfession(account_id=account.id, profession_name=name))
        for name in areas:
            test_db.add(ServiceArea(account_id=account.id, name=name))
        await test_db.commit()
        return account.id

    return _make
