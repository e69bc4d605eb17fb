from pydantic import BaseModel
from typing import Optional


class MessageResponse(BaseModel):
    message: str


class AvatarUrlRequest(BaseModel):
    # Optional so a missing field is reported as 400 by the service, not 422
    avatarUrl: Optional[str] = None


class AvatarUploadResponse(BaseModel):
    avatarUrl: str
    userId: int
    message: str


class MediaUploadResponse(BaseModel):
    url: str
    publicId: str
    message: str
