from videohub.schemas.user import UserResponse
from videohub.schemas.comment import (
    CommentCreate,
    CommentResponse,
    CommentRatingRequest,
    CommentRatingResponse,
)
from videohub.schemas.upload import (
    MessageResponse,
    AvatarUrlRequest,
    AvatarUploadResponse,
    MediaUploadResponse,
)

__all__ = [
    "UserResponse",
    "CommentCreate", "CommentResponse",
    "CommentRatingRequest", "CommentRatingResponse",
    "MessageResponse", "AvatarUrlRequest", "AvatarUploadResponse", "MediaUploadResponse",
]
