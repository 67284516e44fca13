from datetime import datetime, timedelta

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from omninews import config
from omninews.database import Base, get_db
from omninews.main import app
from omninews.models import Article
from omninews.utils.text import extract_excerpt

ADMIN_AUTH = ("editor", "rahasia")

BASE_TIME = datetime(2025, 1, 1, 8, 0, 0)


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def make_article(db):
    """Insert an article directly; ``age_minutes`` controls created_at ordering."""
    def _make(age_minutes: int = 0, **overrides) -> Article:
        values = dict(
            title="Warga Jakarta Ramai Bagikan Video Banjir",
            content="Paragraf satu.\n\nParagraf dua.\n\nParagraf tiga.",
            category="viral",
            is_published=True,
            is_breaking=False,
            view_count=0,
        )
        values.update(overrides)
        created = BASE_TIME - timedelta(minutes=age_minutes)
        article = Article(
            **values,
            excerpt=extract_excerpt(values["content"]),
            created_at=created,
            updated_at=created,
        )
        db.add(article)
        db.commit()
        db.refresh(article)
        return article
    return _make


@pytest.fixture
def client(session_factory, monkeypatch):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    monkeypatch.setattr(config, "ADMIN_USER", ADMIN_AUTH[0])
    monkeypatch.setattr(config, "ADMIN_PASS", ADMIN_AUTH[1])
    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def admin_auth():
    return ADMIN_AUTH
