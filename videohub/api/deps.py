from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from videohub.core.exceptions import UnauthorizedError
from videohub.core.security import Identity, decode_access_token
from videohub.database import get_db
from videohub.models.user import User
from videohub.services.comment_service import CommentService
from videohub.services.media_gateway import MediaGateway, get_media_gateway
from videohub.services.rating_service import CommentRatingService
from videohub.services.upload_service import UploadService

# auto_error=False so routes can accept anonymous callers
bearer_scheme = HTTPBearer(auto_error=False)
BEARER_CHALLENGE = {"WWW-Authenticate": "Bearer"}


def get_optional_identity(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Optional[Identity]:
    """Identity of the caller, or None when no bearer token was sent."""
    if credentials is None:
        return None

    identity = decode_access_token(credentials.credentials)
    if identity is None:
        # A token that was sent but does not verify is never treated as anonymous
        raise UnauthorizedError("Invalid authentication credentials", headers=BEARER_CHALLENGE)
    return identity


def get_current_identity(
    identity: Optional[Identity] = Depends(get_optional_identity),
) -> Identity:
    if identity is None:
        raise UnauthorizedError("Not authenticated", headers=BEARER_CHALLENGE)
    return identity


def get_current_user(
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
) -> User:
    user = db.query(User).filter(User.id == identity.id).first()
    if not user:
        raise UnauthorizedError("User not found", headers=BEARER_CHALLENGE)
    return user


def get_comment_service(db: Session = Depends(get_db)) -> CommentService:
    return CommentService(db)


def get_rating_service(db: Session = Depends(get_db)) -> CommentRatingService:
    return CommentRatingService(db)


def get_upload_service(
    db: Session = Depends(get_db),
    gateway: MediaGateway = Depends(get_media_gateway),
) -> UploadService:
    return UploadService(db, gateway)
