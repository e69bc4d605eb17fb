"""Pytest configuration and fixtures."""

import itertools
import os
import tempfile

# Settings are read at import time, so point them at throwaway resources first
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("LOG_JSON", "false")
os.environ.setdefault("STATIC_DIR", tempfile.mkdtemp(prefix="videohub-static-"))

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from videohub.core.security import create_access_token
from videohub.database import Base, get_db
from videohub.models import Comment, User, Video  # noqa: F401
from videohub.models.user import UserRole
from videohub.services.media_gateway import MediaGateway, MediaUploadResult, get_media_gateway


class FakeMediaGateway(MediaGateway):
    """Records uploads instead of talking to a media host."""

    def __init__(self):
        self.calls = []
        self.error = None

    def upload(self, data, folder, *, filename=None, content_type=None):
        if self.error is not None:
            raise self.error
        self.calls.append(
            {"data": data, "folder": folder, "filename": filename, "content_type": content_type}
        )
        n = len(self.calls)
        return MediaUploadResult(
            secure_url=f"https://media.example.com/{folder}/file{n}",
            public_id=f"{folder}/file{n}",
        )


@pytest.fixture
def db_session():
    """Create a test database session on in-memory SQLite."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    TestingSessionLocal = sessionmaker(autoflush=False, bind=engine)

    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def media_gateway():
    return FakeMediaGateway()


@pytest.fixture
def client(db_session, media_gateway):
    """Create a test FastAPI client bound to the test session and fake media host."""
    from fastapi.testclient import TestClient
    from videohub.main import app

    app.dependency_overrides[get_db] = lambda: db_session
    app.dependency_overrides[get_media_gateway] = lambda: media_gateway

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def make_user(db_session):
    counter = itertools.count(1)

    def _make_user(username=None, role=UserRole.user):
        n = next(counter)
        user = User(
            email=f"user{n}@example.com",
            username=username or f"user{n}",
            role=role,
        )
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user

    return _make_user


@pytest.fixture
def make_video(db_session):
    def _make_video(uploader, title="Clip"):
        video = Video(
            uploader=uploader,
            title=title,
            url="https://media.example.com/videos/clip.mp4",
        )
        db_session.add(video)
        db_session.commit()
        db_session.refresh(video)
        return video

    return _make_video


@pytest.fixture
def make_comment(db_session):
    def _make_comment(user, video, parent=None, content="Nice video"):
        comment = Comment(content=content, user=user, video=video, parent=parent)
        db_session.add(comment)
        db_session.commit()
        db_session.refresh(comment)
        return comment

    return _make_comment


@pytest.fixture
def auth_headers():
    def _auth_headers(user, roles=(UserRole.user,)):
        token = create_access_token(user.id, roles)
        return {"Authorization": f"Bearer {token}"}

    return _auth_headers
