# conftest.py
# Shared fixtures for the Chirp API tests
#
# Every test starts from an empty post table, an empty mock identity
# provider and fresh rate-limit windows.
#
# @see: ../conftest.py - Environment flags applied before api imports

import logging
import typing
from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import func, select

from api.db import Base, engine, get_session, init_db
from api.limiter import get_admission_controller
from api.main import app
from api.mock_auth import get_mock_auth
from api.posts.models import Post


@pytest.fixture(autouse=True)
def clean_state() -> typing.Iterator[None]:
    """Reset database, users, rate-limit windows and overrides."""
    Base.metadata.drop_all(engine)
    init_db()
    get_mock_auth().reset()
    get_admission_controller().reset()
    app.dependency_overrides = {}
    yield
    app.dependency_overrides = {}


@pytest.fixture
def client() -> typing.Iterator[TestClient]:
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def log_records() -> typing.Iterator[list]:
    """Capture records from the app logger at INFO, which does not propagate."""
    records: list = []

    class Collector(logging.Handler):
        def emit(self, record: logging.LogRecord) -> None:
            records.append(record)

    app_logger = logging.getLogger("chirp")
    handler = Collector(level=logging.INFO)
    previous = app_logger.level
    app_logger.setLevel(logging.INFO)
    app_logger.addHandler(handler)
    yield records
    app_logger.removeHandler(handler)
    app_logger.setLevel(previous)


@pytest.fixture
def mock_auth():
    return get_mock_auth()


def auth_headers(uid: str) -> dict:
    """Authorization header for a mock-token user."""
    return {"Authorization": f"Bearer mock-token-{uid}"}


def count_posts() -> int:
    with get_session() as session:
        return session.scalar(select(func.count()).select_from(Post))


def insert_posts(
    author_id: str,
    count: int,
    start: typing.Optional[datetime] = None,
    content: str = "😀",
) -> list[str]:
    """Insert count posts one second apart, oldest first; return their ids."""
    start = start or datetime(2026, 1, 1, tzinfo=timezone.utc)
    ids = []
    with get_session() as session:
        for i in range(count):
            post = Post(
                author_id=author_id,
                content=content,
                created_at=start + timedelta(seconds=i),
            )
            session.add(post)
            session.flush()
            ids.append(post.id)
    return ids
