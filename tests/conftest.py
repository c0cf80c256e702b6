# tests/conftest.py
from __future__ import annotations

import os
import tempfile
from collections.abc import Callable, Generator, Iterator
from itertools import count
from typing import Any

import pytest

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key-please-change")
os.environ.setdefault("CLOUDINARY_CLOUD_NAME", "demo-cloud")
os.environ.setdefault("CLOUDINARY_API_KEY", "1234567890")
os.environ.setdefault("CLOUDINARY_API_SECRET", "cloudinary-secret")
os.environ.setdefault("LOG_DIR", os.path.join(tempfile.gettempdir(), "chatapp-test-logs"))

from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session
from sqlalchemy.pool import StaticPool

from chatapp.core.errors import UpstreamFailure
from chatapp.core.security import hash_password
from chatapp.core.settings import settings
from chatapp.db.session import Base
from chatapp.db.session import get_db as app_get_session
from chatapp.main import app as fastapi_app
from chatapp.models import User
from chatapp.services.identity import create_access_token
from chatapp.services.media import get_media_host

TEST_DB_URL = "sqlite://"
DEFAULT_PASSWORD = "secret-pass"

_USER_COUNTER = count(1)


class FakeMediaHost:
    """In-memory stand-in for the Cloudinary client."""

    def __init__(self) -> None:
        self.uploads: list[dict[str, Any]] = []
        self.fail_with: str | None = None

    async def upload(self, data: bytes, *, filename: str, content_type: str) -> str:
        if self.fail_with is not None:
            raise UpstreamFailure(self.fail_with)
        self.uploads.append({"data": data, "filename": filename, "content_type": content_type})
        return f"https://media.test/{len(self.uploads)}/{filename}"


@pytest.fixture(scope="session")
def engine() -> Generator[Engine, None, None]:
    engine = create_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    # pysqlite emits its own BEGIN lazily, which breaks SAVEPOINT handling.
    @event.listens_for(engine, "connect")
    def _disable_pysqlite_begin(dbapi_connection, connection_record) -> None:
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _emit_begin(conn) -> None:
        conn.exec_driver_sql("BEGIN")

    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def db_session(engine: Engine) -> Iterator[Session]:
    connection = engine.connect()
    transaction = connection.begin()
    session = Session(
        bind=connection,
        autoflush=False,
        expire_on_commit=False,
        join_transaction_mode="create_savepoint",
    )

    try:
        yield session
    finally:
        session.close()

        if transaction.is_active:
            transaction.rollback()
        connection.close()

        # Ensure each test sees a clean database even if commits escaped.
        with engine.begin() as cleanup_conn:
            for table in reversed(Base.metadata.sorted_tables):
                cleanup_conn.execute(table.delete())


@pytest.fixture(scope="session")
def app() -> FastAPI:
    return fastapi_app


@pytest.fixture()
def media_host() -> FakeMediaHost:
    return FakeMediaHost()


@pytest.fixture(autouse=True)
def override_dependencies(
    app: FastAPI, db_session: Session, media_host: FakeMediaHost
) -> Iterator[None]:
    def _get_session_override() -> Generator[Session, None, None]:
        yield db_session

    app.dependency_overrides[app_get_session] = _get_session_override
    app.dependency_overrides[get_media_host] = lambda: media_host
    try:
        yield
    finally:
        app.dependency_overrides.pop(app_get_session, None)
        app.dependency_overrides.pop(get_media_host, None)


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture()
def make_user(db_session: Session) -> Callable[..., User]:
    """Return a factory persisting users with a known password."""

    def _make_user(
        username: str | None = None,
        *,
        name: str = "Test User",
        email: str | None = None,
        password: str = DEFAULT_PASSWORD,
    ) -> User:
        suffix = next(_USER_COUNTER)
        username = username or f"user{suffix}"
        user = User(
            name=name,
            username=username,
            email=email or f"{username}@example.com",
            hashed_password=hash_password(password),
        )
        db_session.add(user)
        db_session.commit()
        return user

    return _make_user


@pytest.fixture()
def test_user(make_user: Callable[..., User]) -> User:
    """Create and return the primary test user."""
    return make_user("alice", name="Alice")


@pytest.fixture()
def other_user(make_user: Callable[..., User]) -> User:
    """Create and return a second persisted user."""
    return make_user("bob", name="Bob")


@pytest.fixture()
def third_user(make_user: Callable[..., User]) -> User:
    return make_user("carol", name="Carol")


def login_as(client: TestClient, user: User) -> None:
    """Attach a valid session cookie for ``user`` to the client."""
    client.cookies.set(settings.auth_cookie_name, create_access_token(user.id))


@pytest.fixture()
def auth_client(client: TestClient, test_user: User) -> TestClient:
    """Client carrying a session cookie for the primary test user."""
    login_as(client, test_user)
    return client


def graphql(client: TestClient, query: str, variables: dict[str, Any] | None = None) -> dict:
    """POST a GraphQL operation and return the decoded body."""
    response = client.post("/graphql", json={"query": query, "variables": variables or {}})
    assert response.status_code == 200, response.text
    return response.json()
