from typing import Optional
from fastapi import APIRouter, Depends, status
from videohub.core.security import Identity
from videohub.schemas.comment import CommentRatingRequest, CommentRatingResponse
from videohub.services.rating_service import CommentRatingService
from videohub.api.deps import get_current_identity, get_optional_identity, get_rating_service

router = APIRouter()


@router.post("/", response_model=CommentRatingResponse)
def rate_comment(
    rating_request: CommentRatingRequest,
    identity: Identity = Depends(get_current_identity),
    service: CommentRatingService = Depends(get_rating_service)
):
    # Same value twice toggles the rating off
    return service.rate_comment(identity.id, rating_request.commentId, rating_request.rating.value)


@router.get("/{comment_id}", response_model=CommentRatingResponse)
def get_comment_rating(
    comment_id: int,
    identity: Optional[Identity] = Depends(get_optional_identity),
    service: CommentRatingService = Depends(get_rating_service)
):
    return service.get_rating(comment_id, identity.id if identity is not None else None)


@router.delete("/{comment_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_comment_rating(
    comment_id: int,
    identity: Identity = Depends(get_current_identity),
    service: CommentRatingService = Depends(get_rating_service)
):
    service.delete_rating(identity.id, comment_id)
    return None
