"""Tests for upload validation, authorization and avatar persistence."""

import pytest

from videohub.core.config import settings
from videohub.core.exceptions import (
    BadRequestError,
    ForbiddenError,
    NotFoundError,
    UnauthorizedError,
    UploadError,
)
from videohub.core.security import Identity
from videohub.models.user import User, UserRole
from videohub.services.upload_service import UploadService

PNG = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


def _identity(user, *roles):
    return Identity(id=user.id, roles=frozenset(roles or (UserRole.user,)))


@pytest.fixture
def service(db_session, media_gateway):
    return UploadService(db_session, media_gateway)


def test_video_with_wrong_content_type_is_not_forwarded(service, media_gateway):
    with pytest.raises(BadRequestError) as exc:
        service.upload_video(b"hello", "text/plain", filename="notes.txt")

    assert exc.value.message == "Only video files are allowed"
    assert media_gateway.calls == []


def test_video_without_content_type_is_rejected(service, media_gateway):
    with pytest.raises(BadRequestError):
        service.upload_video(b"data", None)

    assert media_gateway.calls == []


def test_oversized_video_is_rejected(service, media_gateway, monkeypatch):
    monkeypatch.setattr(settings, "MAX_VIDEO_SIZE", 8)

    with pytest.raises(BadRequestError) as exc:
        service.upload_video(b"0123456789", "video/mp4")

    assert "size" in exc.value.message
    assert media_gateway.calls == []


def test_oversized_thumbnail_is_rejected(service, media_gateway, monkeypatch):
    monkeypatch.setattr(settings, "MAX_THUMBNAIL_SIZE", 16)

    with pytest.raises(BadRequestError):
        service.upload_thumbnail(PNG, "image/png")

    assert media_gateway.calls == []


def test_empty_file_is_rejected(service, media_gateway):
    with pytest.raises(BadRequestError):
        service.upload_thumbnail(b"", "image/png")

    assert media_gateway.calls == []


def test_video_upload_returns_gateway_result(service, media_gateway):
    result = service.upload_video(b"\x00\x01", "video/mp4", filename="clip.mp4")

    assert result.secure_url == "https://media.example.com/videos/file1"
    assert result.public_id == "videos/file1"
    assert media_gateway.calls[0]["folder"] == "videos"
    assert media_gateway.calls[0]["content_type"] == "video/mp4"


def test_thumbnail_upload_uses_thumbnail_folder(service, media_gateway):
    service.upload_thumbnail(PNG, "image/png", filename="thumb.png")

    assert media_gateway.calls[0]["folder"] == "thumbnails"


def test_avatar_for_caller(service, media_gateway, make_user):
    user = make_user()

    updated = service.upload_avatar(PNG, "image/png", identity=_identity(user))

    assert updated.id == user.id
    assert updated.avatarUrl == "https://media.example.com/avatars/file1"
    assert media_gateway.calls[0]["folder"] == "avatars"


def test_avatar_without_target_is_bad_request(service, media_gateway):
    with pytest.raises(BadRequestError):
        service.upload_avatar(PNG, "image/png")

    assert media_gateway.calls == []


def test_avatar_explicit_user_without_authentication(service, make_user):
    user = make_user()

    updated = service.upload_avatar(PNG, "image/png", user_id=user.id)

    assert updated.avatarUrl.startswith("https://media.example.com/avatars/")


def test_anonymous_avatar_upload_can_be_disabled(service, media_gateway, make_user, monkeypatch):
    monkeypatch.setattr(settings, "ALLOW_ANONYMOUS_AVATAR_UPLOAD", False)
    user = make_user()

    with pytest.raises(UnauthorizedError):
        service.upload_avatar_for_user(PNG, "image/png", user.id)

    assert media_gateway.calls == []


def test_cross_user_avatar_for_user_requires_admin(service, media_gateway, make_user):
    alice = make_user("alice")
    bob = make_user("bob")

    with pytest.raises(ForbiddenError):
        service.upload_avatar_for_user(PNG, "image/png", bob.id, identity=_identity(alice))

    assert media_gateway.calls == []


def test_explicit_user_id_avatar_is_also_admin_only(service, media_gateway, make_user):
    """
    Stricter than checking only the path-scoped route: an authenticated
    non-admin naming another user through userId is refused too.
    """
    alice = make_user("alice")
    bob = make_user("bob")

    with pytest.raises(ForbiddenError):
        service.upload_avatar(PNG, "image/png", user_id=bob.id, identity=_identity(alice))

    assert media_gateway.calls == []


def test_admin_can_change_other_users_avatar(service, make_user):
    admin = make_user("admin", role=UserRole.admin)
    bob = make_user("bob")

    updated = service.upload_avatar_for_user(
        PNG, "image/png", bob.id, identity=_identity(admin, UserRole.user, UserRole.admin)
    )

    assert updated.id == bob.id
    assert updated.avatarUrl is not None


def test_avatar_for_unknown_user_never_uploads(service, media_gateway):
    with pytest.raises(NotFoundError):
        service.upload_avatar_for_user(PNG, "image/png", 9999)

    assert media_gateway.calls == []


def test_avatar_must_be_an_image(service, media_gateway, make_user):
    user = make_user()

    with pytest.raises(BadRequestError):
        service.upload_avatar(PNG, "application/pdf", identity=_identity(user))
    with pytest.raises(BadRequestError) as exc:
        service.upload_avatar(PNG, "application/octet-stream", identity=_identity(user))

    assert exc.value.message == "Only image files are allowed"

    assert media_gateway.calls == []


def test_gateway_failure_leaves_avatar_unchanged(service, media_gateway, make_user, db_session):
    user = make_user()
    media_gateway.error = UploadError("Media upload failed: timed out")

    with pytest.raises(UploadError):
        service.upload_avatar(PNG, "image/png", identity=_identity(user))

    db_session.expire_all()
    assert db_session.query(User).filter(User.id == user.id).one().avatarUrl is None


def test_set_avatar_url_requires_authentication(service):
    with pytest.raises(UnauthorizedError):
        service.set_avatar_url("https://cdn.example.com/a.png", None)


def test_set_avatar_url_requires_value(service, make_user):
    user = make_user()

    with pytest.raises(BadRequestError):
        service.set_avatar_url("", _identity(user))
    with pytest.raises(BadRequestError):
        service.set_avatar_url(None, _identity(user))


def test_set_avatar_url_updates_callers_own_user(service, media_gateway, make_user):
    user = make_user()

    updated = service.set_avatar_url("https://cdn.example.com/a.png", _identity(user))

    assert updated.id == user.id
    assert updated.avatarUrl == "https://cdn.example.com/a.png"
    assert media_gateway.calls == []
