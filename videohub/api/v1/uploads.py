from typing import Optional
from fastapi import APIRouter, Depends, UploadFile, File, Form, Query
from videohub.core.config import settings
from videohub.core.exceptions import BadRequestError
from videohub.core.security import Identity
from videohub.schemas.upload import AvatarUploadResponse, AvatarUrlRequest, MediaUploadResponse
from videohub.services.upload_service import UploadService
from videohub.api.deps import get_optional_identity, get_upload_service
from videohub.utils.validators import format_size_mb

router = APIRouter()

# Sync handlers: the media host call blocks, so these run in the threadpool.


def _read_upload(file: UploadFile, max_size: int, kind: str) -> bytes:
    # Reject on the declared part size before pulling the body into memory
    if file.size is not None and file.size > max_size:
        raise BadRequestError(f"{kind} file size must be less than {format_size_mb(max_size)}")
    return file.file.read()


@router.post("/avatar", response_model=AvatarUploadResponse)
def upload_avatar(
    file: UploadFile = File(...),
    user_id_form: Optional[int] = Form(None, alias="userId"),
    user_id_query: Optional[int] = Query(None, alias="userId"),
    identity: Optional[Identity] = Depends(get_optional_identity),
    service: UploadService = Depends(get_upload_service)
):
    user_id = user_id_form if user_id_form is not None else user_id_query
    user = service.upload_avatar(
        _read_upload(file, settings.MAX_AVATAR_SIZE, "Image"),
        file.content_type,
        filename=file.filename,
        user_id=user_id,
        identity=identity,
    )
    return AvatarUploadResponse(
        avatarUrl=user.avatarUrl,
        userId=user.id,
        message="Avatar uploaded successfully",
    )


@router.post("/avatar-url", response_model=AvatarUploadResponse)
def set_avatar_url(
    request: AvatarUrlRequest,
    identity: Optional[Identity] = Depends(get_optional_identity),
    service: UploadService = Depends(get_upload_service)
):
    user = service.set_avatar_url(request.avatarUrl, identity)
    return AvatarUploadResponse(
        avatarUrl=user.avatarUrl,
        userId=user.id,
        message="Avatar updated successfully",
    )


@router.post("/avatar/{user_id}", response_model=AvatarUploadResponse)
def upload_avatar_for_user(
    user_id: int,
    file: UploadFile = File(...),
    identity: Optional[Identity] = Depends(get_optional_identity),
    service: UploadService = Depends(get_upload_service)
):
    user = service.upload_avatar_for_user(
        _read_upload(file, settings.MAX_AVATAR_SIZE, "Image"),
        file.content_type,
        user_id,
        filename=file.filename,
        identity=identity,
    )
    return AvatarUploadResponse(
        avatarUrl=user.avatarUrl,
        userId=user.id,
        message="Avatar uploaded successfully",
    )


@router.post("/video", response_model=MediaUploadResponse)
def upload_video(
    file: UploadFile = File(...),
    service: UploadService = Depends(get_upload_service)
):
    result = service.upload_video(
        _read_upload(file, settings.MAX_VIDEO_SIZE, "Video"),
        file.content_type,
        filename=file.filename,
    )
    return MediaUploadResponse(
        url=result.secure_url,
        publicId=result.public_id,
        message="Video uploaded successfully",
    )


@router.post("/thumbnail", response_model=MediaUploadResponse)
def upload_thumbnail(
    file: UploadFile = File(...),
    service: UploadService = Depends(get_upload_service)
):
    result = service.upload_thumbnail(
        _read_upload(file, settings.MAX_THUMBNAIL_SIZE, "Image"),
        file.content_type,
        filename=file.filename,
    )
    return MediaUploadResponse(
        url=result.secure_url,
        publicId=result.public_id,
        message="Thumbnail uploaded successfully",
    )
