"""
Media hosting backends.

CloudinaryGateway performs signed uploads against the Cloudinary REST upload
API (https://cloudinary.com/documentation/image_upload_api_reference).
LocalMediaGateway writes files under STATIC_DIR for development.
"""
import hashlib
import logging
import mimetypes
import os
import time
import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

import httpx

from videohub.core.config import settings
from videohub.core.exceptions import UploadError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MediaUploadResult:
    secure_url: str
    public_id: str


class MediaGateway(ABC):
    """Stores an uploaded file with a media host and returns where it lives."""

    @abstractmethod
    def upload(
        self,
        data: bytes,
        folder: str,
        *,
        filename: Optional[str] = None,
        content_type: Optional[str] = None,
    ) -> MediaUploadResult:
        ...


class CloudinaryGateway(MediaGateway):
    def __init__(
        self,
        cloud_name: str,
        api_key: str,
        api_secret: str,
        *,
        api_base: str = "https://api.cloudinary.com/v1_1",
        timeout: float = 60.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.cloud_name = cloud_name
        self.api_key = api_key
        self.api_secret = api_secret
        self.api_base = api_base.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    @property
    def upload_url(self) -> str:
        # "auto" lets Cloudinary pick image/video/raw from the payload
        return f"{self.api_base}/{self.cloud_name}/auto/upload"

    def sign(self, params: dict) -> str:
        """SHA-1 of the alphabetically sorted params joined with '&', followed by the secret."""
        to_sign = "&".join(f"{key}={params[key]}" for key in sorted(params))
        return hashlib.sha1(f"{to_sign}{self.api_secret}".encode("utf-8")).hexdigest()

    def upload(
        self,
        data: bytes,
        folder: str,
        *,
        filename: Optional[str] = None,
        content_type: Optional[str] = None,
    ) -> MediaUploadResult:
        params = {"folder": folder, "timestamp": int(time.time())}
        form = {
            **{key: str(value) for key, value in params.items()},
            "api_key": self.api_key,
            "signature": self.sign(params),
        }
        files = {
            "file": (filename or "upload", data, content_type or "application/octet-stream")
        }

        try:
            with httpx.Client(timeout=self.timeout, transport=self._transport) as client:
                resp = client.post(self.upload_url, data=form, files=files)
                resp.raise_for_status()
                payload = resp.json()
        except httpx.HTTPStatusError as e:
            logger.error(
                "Cloudinary rejected upload",
                extra={"folder": folder, "status_code": e.response.status_code},
            )
            raise UploadError(f"Media host rejected the upload ({e.response.status_code})") from e
        except (httpx.HTTPError, ValueError) as e:
            logger.error("Cloudinary upload failed", extra={"folder": folder}, exc_info=True)
            raise UploadError(f"Media upload failed: {e}") from e

        secure_url = payload.get("secure_url")
        public_id = payload.get("public_id")
        if not secure_url or not public_id:
            raise UploadError("Media host returned an incomplete upload response")

        logger.info("Uploaded media", extra={"folder": folder, "public_id": public_id})
        return MediaUploadResult(secure_url=secure_url, public_id=public_id)


class LocalMediaGateway(MediaGateway):
    def __init__(self, base_dir: str, public_base: str = "/static"):
        self.base_dir = base_dir
        self.public_base = public_base.rstrip("/")

    def upload(
        self,
        data: bytes,
        folder: str,
        *,
        filename: Optional[str] = None,
        content_type: Optional[str] = None,
    ) -> MediaUploadResult:
        ext = ""
        if filename and "." in filename:
            ext = os.path.splitext(filename)[1].lower()
        elif content_type:
            ext = mimetypes.guess_extension(content_type) or ""

        name = uuid.uuid4().hex
        target_dir = os.path.join(self.base_dir, folder)
        try:
            os.makedirs(target_dir, exist_ok=True)
            with open(os.path.join(target_dir, f"{name}{ext}"), "wb") as buffer:
                buffer.write(data)
        except OSError as e:
            logger.error("Failed to store media locally", extra={"folder": folder}, exc_info=True)
            raise UploadError(f"Media upload failed: {e}") from e

        return MediaUploadResult(
            secure_url=f"{self.public_base}/{folder}/{name}{ext}",
            public_id=f"{folder}/{name}",
        )


def get_media_gateway() -> MediaGateway:
    backend = settings.MEDIA_BACKEND.lower()
    if backend == "cloudinary":
        if not (
            settings.CLOUDINARY_CLOUD_NAME
            and settings.CLOUDINARY_API_KEY
            and settings.CLOUDINARY_API_SECRET
        ):
            raise RuntimeError("Cloudinary media backend is not fully configured")
        return CloudinaryGateway(
            settings.CLOUDINARY_CLOUD_NAME,
            settings.CLOUDINARY_API_KEY,
            settings.CLOUDINARY_API_SECRET,
            api_base=settings.CLOUDINARY_API_BASE,
            timeout=settings.MEDIA_UPLOAD_TIMEOUT,
        )
    return LocalMediaGateway(settings.STATIC_DIR, public_base="/static")
