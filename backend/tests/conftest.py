import tempfile
from contextlib import suppress
from pathlib import Path
from typing import AsyncIterator, Iterator

import pytest
from fastapi import FastAPI
from httpx import AsyncClient, ASGITransport
from sqlmodel import Session, SQLModel, create_engine

from burgerlab.core import database as core_database
from burgerlab.core.config import get_settings
from burgerlab.core.database import get_session
from burgerlab.main import create_app
from burgerlab.models.brands import Brand


@pytest.fixture(scope="session")
def anyio_backend():
    return "asyncio"


@pytest.fixture(autouse=True)
def _clear_settings_cache():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def engine():
    # Use a fresh SQLite DB file in a temp dir per test for isolation
    tmp = tempfile.TemporaryDirectory()
    db_path = Path(tmp.name) / "test.db"
    engine = create_engine(f"sqlite:///{db_path}", connect_args={"check_same_thread": False})

    from burgerlab import models  # noqa: F401
    SQLModel.metadata.create_all(engine)
    try:
        yield engine
    finally:
        with suppress(Exception):
            engine.dispose()
        tmp.cleanup()


@pytest.fixture
def session(engine) -> Iterator[Session]:
    with Session(engine) as s:
        yield s


@pytest.fixture
def brand(session) -> Brand:
    brand = Brand(slug="mcdonalds", name="맥도날드")
    session.add(brand)
    session.commit()
    session.refresh(brand)
    return brand


@pytest.fixture(scope="function")
def test_app(monkeypatch, engine) -> Iterator[FastAPI]:
    def _override_get_session():
        with Session(engine) as session:
            yield session

    # patch global engine/init_db so startup hooks operate on the test database
    monkeypatch.setattr(core_database, "engine", engine, raising=False)

    def _init_db():
        SQLModel.metadata.create_all(engine)

    monkeypatch.setattr(core_database, "init_db", _init_db, raising=False)

    app = create_app()
    app.dependency_overrides[get_session] = _override_get_session

    try:
        yield app
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
async def client(test_app: FastAPI) -> AsyncIterator[AsyncClient]:
    transport = ASGITransport(app=test_app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def db_session(test_app: FastAPI):
    override = test_app.dependency_overrides[get_session]
    generator = override()
    session = next(generator)
    try:
        yield session
    finally:
        with suppress(StopIteration):
            next(generator)
