from typing import List, Optional
from fastapi import APIRouter, Depends, status
from videohub.core.security import Identity
from videohub.schemas.comment import CommentCreate, CommentResponse
from videohub.services.comment_service import CommentService
from videohub.api.deps import get_comment_service, get_current_identity, get_optional_identity

router = APIRouter()


def _caller_id(identity: Optional[Identity]) -> Optional[int]:
    return identity.id if identity is not None else None


@router.post("/", response_model=CommentResponse, status_code=status.HTTP_201_CREATED)
def create_comment(
    comment_data: CommentCreate,
    identity: Identity = Depends(get_current_identity),
    service: CommentService = Depends(get_comment_service)
):
    return service.add_comment(
        content=comment_data.content,
        user_id=identity.id,
        video_id=comment_data.videoId,
        parent_comment_id=comment_data.parentCommentId,
    )


@router.get("/", response_model=List[CommentResponse])
def get_all_comments(
    identity: Optional[Identity] = Depends(get_optional_identity),
    service: CommentService = Depends(get_comment_service)
):
    return service.list_all(current_user_id=_caller_id(identity))


@router.get("/video/{video_id}", response_model=List[CommentResponse])
def get_video_comments(
    video_id: int,
    identity: Optional[Identity] = Depends(get_optional_identity),
    service: CommentService = Depends(get_comment_service)
):
    return service.list_for_video(video_id, current_user_id=_caller_id(identity))


@router.get("/user/{user_id}", response_model=List[CommentResponse])
def get_user_comments(
    user_id: int,
    identity: Optional[Identity] = Depends(get_optional_identity),
    service: CommentService = Depends(get_comment_service)
):
    return service.list_for_user(user_id, current_user_id=_caller_id(identity))


@router.get("/{comment_id}", response_model=CommentResponse)
def get_comment(
    comment_id: int,
    identity: Optional[Identity] = Depends(get_optional_identity),
    service: CommentService = Depends(get_comment_service)
):
    return service.get_by_id(comment_id, current_user_id=_caller_id(identity))


@router.delete("/{comment_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_comment(
    comment_id: int,
    identity: Identity = Depends(get_current_identity),
    service: CommentService = Depends(get_comment_service)
):
    service.delete_comment(comment_id, identity.id)
    return None
