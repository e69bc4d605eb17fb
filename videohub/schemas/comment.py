from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime
from enum import Enum


class RatingType(str, Enum):
    like = "like"
    dislike = "dislike"


class CommentCreate(BaseModel):
    content: str = Field(..., min_length=1, max_length=1000)
    videoId: int
    parentCommentId: Optional[int] = None


class CommentResponse(BaseModel):
    id: int
    content: str
    createdAt: datetime
    userId: int
    username: str
    userAvatarUrl: Optional[str] = None
    videoId: int
    parentCommentId: Optional[int] = None
    likesCount: int = 0
    dislikesCount: int = 0
    userRating: Optional[RatingType] = None
    replies: List["CommentResponse"] = []


CommentResponse.model_rebuild()


class CommentRatingRequest(BaseModel):
    commentId: int
    rating: RatingType


class CommentRatingResponse(BaseModel):
    commentId: int
    likes: int
    dislikes: int
    userRating: Optional[RatingType] = None
