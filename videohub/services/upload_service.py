import logging
from typing import Optional

from sqlalchemy.orm import Session

from videohub.core.config import settings
from videohub.core.exceptions import (
    BadRequestError,
    ForbiddenError,
    NotFoundError,
    UnauthorizedError,
)
from videohub.core.security import Identity
from videohub.models.user import User
from videohub.services.media_gateway import MediaGateway, MediaUploadResult
from videohub.utils.validators import format_size_mb, validate_content_type, validate_file_size

logger = logging.getLogger(__name__)

AVATAR_FOLDER = "avatars"
VIDEO_FOLDER = "videos"
THUMBNAIL_FOLDER = "thumbnails"


class UploadService:
    """Validates uploads, forwards them to the media host and records avatar URLs."""

    def __init__(self, db: Session, gateway: MediaGateway):
        self.db = db
        self.gateway = gateway

    def upload_avatar(
        self,
        data: bytes,
        content_type: Optional[str],
        *,
        filename: Optional[str] = None,
        user_id: Optional[int] = None,
        identity: Optional[Identity] = None,
    ) -> User:
        """
        Upload an avatar for ``user_id`` or, when omitted, for the caller.

        Returns the updated user.
        """
        target_id = user_id
        if target_id is None and identity is not None:
            target_id = identity.id
        if target_id is None:
            raise BadRequestError(
                "No user ID provided and no authenticated user found. "
                "Please provide a user ID or authenticate."
            )
        return self._store_avatar(data, content_type, filename, target_id, identity)

    def upload_avatar_for_user(
        self,
        data: bytes,
        content_type: Optional[str],
        user_id: int,
        *,
        filename: Optional[str] = None,
        identity: Optional[Identity] = None,
    ) -> User:
        return self._store_avatar(data, content_type, filename, user_id, identity)

    def set_avatar_url(self, avatar_url: Optional[str], identity: Optional[Identity]) -> User:
        """Point the caller's avatar at an existing URL without uploading anything."""
        if identity is None:
            raise UnauthorizedError("Authentication required")
        if not avatar_url or not avatar_url.strip():
            raise BadRequestError("Avatar URL is required")

        user = self._get_user(identity.id)
        user.avatarUrl = avatar_url.strip()
        self._commit(user)

        logger.info("Avatar URL set", extra={"user_id": user.id})
        return user

    def upload_video(
        self, data: bytes, content_type: Optional[str], *, filename: Optional[str] = None
    ) -> MediaUploadResult:
        self._validate(data, content_type, "video/", settings.MAX_VIDEO_SIZE, "Video")
        logger.info(
            "Uploading video",
            extra={"upload_name": filename, "size_bytes": len(data)},
        )
        result = self.gateway.upload(
            data, VIDEO_FOLDER, filename=filename, content_type=content_type
        )
        logger.info("Video uploaded", extra={"url": result.secure_url})
        return result

    def upload_thumbnail(
        self, data: bytes, content_type: Optional[str], *, filename: Optional[str] = None
    ) -> MediaUploadResult:
        self._validate(data, content_type, "image/", settings.MAX_THUMBNAIL_SIZE, "Image")
        logger.info("Uploading thumbnail", extra={"upload_name": filename})
        result = self.gateway.upload(
            data, THUMBNAIL_FOLDER, filename=filename, content_type=content_type
        )
        logger.info("Thumbnail uploaded", extra={"url": result.secure_url})
        return result

    def _store_avatar(
        self,
        data: bytes,
        content_type: Optional[str],
        filename: Optional[str],
        target_id: int,
        identity: Optional[Identity],
    ) -> User:
        self._authorize_avatar_change(target_id, identity)
        self._validate(data, content_type, "image/", settings.MAX_AVATAR_SIZE, "Image")
        # Resolve the user before uploading so a bad id never leaves media behind
        user = self._get_user(target_id)

        result = self.gateway.upload(
            data, AVATAR_FOLDER, filename=filename, content_type=content_type
        )
        user.avatarUrl = result.secure_url
        self._commit(user)

        logger.info(
            "Avatar uploaded",
            extra={"user_id": user.id, "public_id": result.public_id},
        )
        return user

    def _authorize_avatar_change(self, target_id: int, identity: Optional[Identity]) -> None:
        if identity is None:
            if not settings.ALLOW_ANONYMOUS_AVATAR_UPLOAD:
                raise UnauthorizedError("Authentication required")
            logger.warning(
                "Avatar upload without authentication",
                extra={"user_id": target_id},
            )
            return

        if identity.id != target_id and not identity.is_admin:
            raise ForbiddenError("You do not have permission to change another user's avatar.")

    def _validate(
        self,
        data: bytes,
        content_type: Optional[str],
        prefix: str,
        max_size: int,
        kind: str,
    ) -> None:
        if not validate_content_type(content_type, prefix):
            raise BadRequestError(f"Only {kind.lower()} files are allowed")
        if not data:
            raise BadRequestError("Uploaded file is empty")
        if not validate_file_size(len(data), max_size):
            raise BadRequestError(f"{kind} file size must be less than {format_size_mb(max_size)}")

    def _get_user(self, user_id: int) -> User:
        user = self.db.query(User).filter(User.id == user_id).first()
        if not user:
            raise NotFoundError(f"User not found with ID: {user_id}")
        return user

    def _commit(self, user: User) -> None:
        try:
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        self.db.refresh(user)
