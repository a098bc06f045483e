"""Shared fixtures: an in-memory database, a record builder and a recording notifier."""

import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session, SQLModel

from gully_backend import models  # noqa: F401
from gully_backend.core.database import build_engine, get_session
from gully_backend.main import app
from gully_backend.services.notifications import get_notifier

from factories import Builder, RecordingNotifier


# ---------------------------------------------
# Fixtures
# ---------------------------------------------
@pytest.fixture
def engine():
    engine = build_engine("sqlite://", echo=False)
    SQLModel.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def build(session) -> Builder:
    return Builder(session)


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def client(engine, notifier):
    def session_override():
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_session] = session_override
    app.dependency_overrides[get_notifier] = lambda: notifier
    yield TestClient(app)
    app.dependency_overrides.clear()
