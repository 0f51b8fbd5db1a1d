from __future__ import annotations

import io
import logging
import uuid
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from urllib.parse import urlparse

import boto3
from botocore.config import Config as BotoConfig
from botocore.exceptions import BotoCoreError, ClientError
from PIL import Image, UnidentifiedImageError

from app.shopadmin.core.config import Settings
from app.shopadmin.core.error_catalog import AppError, ErrorCatalog
from app.shopadmin.core.metrics import Metrics

logger = logging.getLogger(__name__)

_FORMAT_TO_EXT = {"JPEG": "jpg", "PNG": "png", "WEBP": "webp", "GIF": "gif"}


@dataclass(frozen=True)
class ImageUpload:
    filename: str
    content_type: str | None
    data: bytes


@dataclass(frozen=True)
class UploadedImage:
    url: str
    public_id: str
    width: int
    height: int


@dataclass(frozen=True)
class UploadFailure:
    filename: str
    code: str
    message: str


@dataclass(frozen=True)
class PreparedImage:
    data: bytes
    content_type: str
    extension: str
    width: int
    height: int


class ImageStorageService:
    """Validates, resizes and stores images on S3-compatible object storage.

    Objects live under ``<prefix>/stores/<store_id>/``; the object key is the
    public id handed back to callers.
    """

    def __init__(self, settings: Settings, metrics: Metrics | None = None) -> None:
        self.settings = settings
        self.metrics = metrics or Metrics(enabled=False)
        self._bucket = settings.STORAGE_BUCKET
        self._prefix = settings.STORAGE_KEY_PREFIX.strip("/")

    def store_prefix(self, store_id) -> str:
        return f"{self._prefix}/stores/{store_id}/"

    def upload_image(self, upload: ImageUpload, *, store_id, trace_id: str | None = None, client=None) -> UploadedImage:
        prepared = self.prepare(upload)
        self._validate_settings()
        key = f"{self.store_prefix(store_id)}{uuid.uuid4().hex}.{prepared.extension}"
        client = client or self._build_s3_client()
        logger.info(
            "image_upload_start",
            extra={"bucket": self._bucket, "key": key, "store_id": str(store_id), "trace_id": trace_id},
        )
        try:
            client.put_object(
                Bucket=self._bucket,
                Key=key,
                Body=prepared.data,
                ACL="public-read",
                ContentType=prepared.content_type,
                CacheControl="public, max-age=31536000",
            )
        except ClientError as exc:
            self.metrics.increment_image_upload_failure()
            s3_error = (getattr(exc, "response", {}) or {}).get("Error") or {}
            logger.exception("image_upload_error", extra={"key": key, "s3_error": s3_error, "trace_id": trace_id})
            raise AppError(ErrorCatalog.UPSTREAM_FAILURE, details={"provider_code": s3_error.get("Code")}) from exc
        except BotoCoreError as exc:
            self.metrics.increment_image_upload_failure()
            logger.exception("image_upload_error", extra={"key": key, "trace_id": trace_id})
            raise AppError(ErrorCatalog.UPSTREAM_FAILURE, details={"type": type(exc).__name__}) from exc

        logger.info("image_upload_ok", extra={"key": key, "bytes": len(prepared.data), "trace_id": trace_id})
        return UploadedImage(
            url=f"{self._public_base_url()}/{key}",
            public_id=key,
            width=prepared.width,
            height=prepared.height,
        )

    def upload_images(
        self, uploads: list[ImageUpload], *, store_id, trace_id: str | None = None
    ) -> tuple[list[UploadedImage], list[UploadFailure]]:
        """Upload every file concurrently; one failure never cancels the rest."""
        if len(uploads) > self.settings.IMAGE_BATCH_MAX_FILES:
            raise AppError(
                ErrorCatalog.VALIDATION_ERROR,
                details={"field": "images", "max_files": self.settings.IMAGE_BATCH_MAX_FILES},
                message="Too many files",
            )
        self._validate_settings()
        client = self._build_s3_client()
        results: dict[int, UploadedImage | UploadFailure] = {}
        with ThreadPoolExecutor(max_workers=self.settings.IMAGE_UPLOAD_CONCURRENCY) as executor:
            futures = {
                executor.submit(self.upload_image, upload, store_id=store_id, trace_id=trace_id, client=client): index
                for index, upload in enumerate(uploads)
            }
            for future in as_completed(futures):
                index = futures[future]
                try:
                    results[index] = future.result()
                except AppError as exc:
                    results[index] = UploadFailure(
                        filename=uploads[index].filename, code=exc.error.code, message=exc.message
                    )
                except Exception:
                    logger.exception(
                        "image_batch_item_error", extra={"filename": uploads[index].filename, "trace_id": trace_id}
                    )
                    results[index] = UploadFailure(
                        filename=uploads[index].filename,
                        code=ErrorCatalog.INTERNAL_ERROR.code,
                        message=ErrorCatalog.INTERNAL_ERROR.message,
                    )
        ordered = [results[index] for index in range(len(uploads))]
        uploaded = [item for item in ordered if isinstance(item, UploadedImage)]
        failed = [item for item in ordered if isinstance(item, UploadFailure)]
        return uploaded, failed

    def delete_image(self, public_id: str, *, store_id, trace_id: str | None = None) -> None:
        if not public_id.startswith(self.store_prefix(store_id)) or ".." in public_id:
            raise AppError(ErrorCatalog.NOT_FOUND, message="Image not found")
        self._validate_settings()
        client = self._build_s3_client()
        try:
            client.delete_object(Bucket=self._bucket, Key=public_id)
        except (ClientError, BotoCoreError) as exc:
            logger.exception("image_delete_error", extra={"key": public_id, "trace_id": trace_id})
            raise AppError(ErrorCatalog.UPSTREAM_FAILURE) from exc

    def prepare(self, upload: ImageUpload) -> PreparedImage:
        content_type = (upload.content_type or "").lower()
        if not content_type.startswith("image/"):
            raise AppError(ErrorCatalog.UNSUPPORTED_MEDIA_TYPE, details={"content_type": upload.content_type})
        if not upload.data:
            raise AppError(ErrorCatalog.INVALID_IMAGE, details={"reason": "empty file"})
        if len(upload.data) > self.settings.IMAGE_MAX_BYTES:
            raise AppError(ErrorCatalog.IMAGE_TOO_LARGE, details={"max_bytes": self.settings.IMAGE_MAX_BYTES})
        try:
            image = Image.open(io.BytesIO(upload.data))
            image.load()
        except Image.DecompressionBombError as exc:
            raise AppError(ErrorCatalog.INVALID_IMAGE, details={"reason": "image dimensions too large"}) from exc
        except (UnidentifiedImageError, OSError, ValueError) as exc:
            raise AppError(ErrorCatalog.INVALID_IMAGE) from exc

        image_format = image.format or "PNG"
        extension = _FORMAT_TO_EXT.get(image_format, image_format.lower())
        mime_type = Image.MIME.get(image_format, content_type)
        limit = self.settings.IMAGE_MAX_DIMENSION
        if max(image.size) <= limit:
            return PreparedImage(upload.data, mime_type, extension, image.width, image.height)

        image.thumbnail((limit, limit))
        if image_format == "JPEG" and image.mode not in ("RGB", "L"):
            image = image.convert("RGB")
        buffer = io.BytesIO()
        image.save(buffer, format=image_format)
        return PreparedImage(buffer.getvalue(), mime_type, extension, image.width, image.height)

    def _validate_settings(self) -> None:
        required = {
            "STORAGE_ACCESS_KEY": self.settings.STORAGE_ACCESS_KEY,
            "STORAGE_SECRET_KEY": self.settings.STORAGE_SECRET_KEY,
            "STORAGE_BUCKET": self.settings.STORAGE_BUCKET,
            "STORAGE_PUBLIC_BASE_URL": self.settings.STORAGE_PUBLIC_BASE_URL,
        }
        missing = [name for name, value in required.items() if not value]
        if missing:
            raise AppError(ErrorCatalog.STORAGE_NOT_CONFIGURED, details={"missing": missing})

    def _public_base_url(self) -> str:
        return (self.settings.STORAGE_PUBLIC_BASE_URL or "").rstrip("/")

    def _normalized_endpoint_url(self) -> str | None:
        endpoint = (self.settings.STORAGE_ENDPOINT or "").strip()
        if not endpoint:
            return None
        parsed = urlparse(endpoint)
        if parsed.scheme:
            return f"{parsed.scheme}://{parsed.netloc}{parsed.path}".rstrip("/")
        return f"https://{endpoint.lstrip('/')}".rstrip("/")

    def _build_s3_client(self):
        return boto3.client(
            "s3",
            region_name=self.settings.STORAGE_REGION or None,
            endpoint_url=self._normalized_endpoint_url(),
            aws_access_key_id=self.settings.STORAGE_ACCESS_KEY,
            aws_secret_access_key=self.settings.STORAGE_SECRET_KEY,
            config=BotoConfig(
                signature_version="s3v4",
                connect_timeout=self.settings.STORAGE_CONNECT_TIMEOUT_SECONDS,
                read_timeout=self.settings.STORAGE_READ_TIMEOUT_SECONDS,
                retries={"max_attempts": self.settings.STORAGE_MAX_ATTEMPTS, "mode": "standard"},
            ),
        )
