"""
VideoTube Backend - Media Host Service
========================================

What:  Validates uploaded video and thumbnail files, pushes them to the
       S3-compatible media host, and deletes them when a video goes away.
Who:   Called by VideoService when publishing a video or replacing a thumbnail.

Upload pipeline (cheapest checks first):
    1. Extension check      O(1), rejects obviously wrong files
    2. Declared size        Content-Length of the part, before any byte is read
    3. Stream to disk       aiofiles writes CHUNK_SIZE pieces into
                            STORAGE_ROOT/staging, stopping as soon as the
                            byte count passes the limit
    4. MIME sniffing        python-magic reads the first SNIFF_BYTES only
    5. Upload to bucket     boto3 in a worker thread, retried with tenacity
    6. Remove staged file   always, success or failure

    At most one chunk of the upload is held in memory at a time.

Object keys:
    videos/2024/01/15/<uuid>.mp4
    thumbnails/2024/01/15/<uuid>.jpg
    The key is stored next to the public URL so the object can be deleted
    later without parsing URLs.
"""

import asyncio
import logging
import os
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import NamedTuple, Optional, Tuple

import aiofiles
import boto3
from botocore.exceptions import BotoCoreError, ClientError
from tenacity import (
    before_sleep_log,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
    wait_random,
)

from app.config import settings
from app.exceptions import MediaHostError, MediaStorageError, ValidationError

logger = logging.getLogger(__name__)

VIDEO = "video"
IMAGE = "image"

ALLOWED_EXTENSIONS = {
    VIDEO: {".mp4", ".mov", ".webm", ".mkv"},
    IMAGE: {".png", ".jpg", ".jpeg", ".webp"},
}

ALLOWED_MIME_TYPES = {
    VIDEO: {"video/mp4", "video/quicktime", "video/webm", "video/x-matroska"},
    IMAGE: {"image/png", "image/jpeg", "image/webp"},
}

KEY_PREFIXES = {
    VIDEO: "videos",
    IMAGE: "thumbnails",
}

CHUNK_SIZE = 1024 * 1024
SNIFF_BYTES = 2048


class MediaAsset(NamedTuple):
    """A file stored on the media host."""

    url: str
    key: str


def upload_wait():
    """Exponential backoff capped at RETRY_MAX_WAIT, plus up to RETRY_JITTER seconds."""
    return wait_exponential(
        multiplier=settings.retry_min_wait, max=settings.retry_max_wait
    ) + wait_random(0, settings.retry_jitter)


class MediaService:
    """
    Thin wrapper around the bucket with validation in front of it.

    The boto3 client is created on first use so importing the module never
    touches AWS configuration (tests inject a fake client instead).
    """

    def __init__(self, storage_root: Optional[str] = None, client=None):
        self.staging_dir = Path(storage_root or settings.storage_root).resolve() / "staging"
        self._client = client

    @property
    def client(self):
        if self._client is None:
            self._client = boto3.client(
                "s3",
                region_name=settings.aws_region,
                endpoint_url=settings.s3_endpoint_url,
            )
        return self._client

    # ── Validation ────────────────────────────────────────────────────────

    def max_size(self, kind: str) -> int:
        return settings.max_video_size if kind == VIDEO else settings.max_image_size

    def validate_extension(self, kind: str, filename: str) -> str:
        """Return the lowercase extension, or raise ValidationError."""
        ext = Path(filename or "").suffix.lower()
        allowed = ALLOWED_EXTENSIONS[kind]
        if ext not in allowed:
            raise ValidationError(
                message=(
                    f"File type '{ext or 'unknown'}' is not supported for {kind} uploads. "
                    f"Allowed types: {', '.join(sorted(allowed))}"
                ),
                field=kind,
                context={"extension": ext, "allowed": sorted(allowed)},
            )
        return ext

    def _too_large(self, kind: str, **context) -> ValidationError:
        max_mb = self.max_size(kind) / (1024 * 1024)
        return ValidationError(
            message=f"The {kind} file exceeds the maximum size of {max_mb:.0f}MB.",
            field=kind,
            context={"max_size_mb": max_mb, **context},
        )

    def validate_declared_size(self, kind: str, content_length: Optional[int]) -> None:
        """Reject on the part's declared size alone; nothing has been read yet."""
        if content_length and content_length > self.max_size(kind):
            raise self._too_large(kind, reported_size=content_length)

    def validate_size(self, kind: str, content_length: Optional[int], actual_size: int) -> None:
        """
        Check the declared Content-Length first (cheap), then the real size
        (clients can lie about the header). Empty files are rejected too.
        """
        if actual_size == 0:
            raise ValidationError(message=f"The uploaded {kind} file is empty.", field=kind)

        self.validate_declared_size(kind, content_length)

        if actual_size > self.max_size(kind):
            raise self._too_large(kind, actual_size=actual_size)

    def validate_mime_type(self, kind: str, header: bytes) -> str:
        """
        Sniff the real content type from the first bytes of the file.

        Catches renamed files (a .mp4 that is actually a zip). Requires the
        libmagic system library.
        """
        try:
            import magic

            mime_type = magic.from_buffer(header[:SNIFF_BYTES], mime=True)
        except Exception as e:
            logger.error("MIME type detection failed: %s", str(e))
            raise MediaStorageError(
                message="Could not verify file type. Please try again.",
                context={"error": str(e)},
            )

        if mime_type not in ALLOWED_MIME_TYPES[kind]:
            raise ValidationError(
                message=f"File content type '{mime_type}' is not a supported {kind} format.",
                field=kind,
                context={"detected_mime": mime_type, "allowed": sorted(ALLOWED_MIME_TYPES[kind])},
            )
        return mime_type

    # ── Staging ───────────────────────────────────────────────────────────

    def object_key(self, kind: str, extension: str) -> str:
        date_dir = datetime.now(timezone.utc).strftime("%Y/%m/%d")
        return f"{KEY_PREFIXES[kind]}/{date_dir}/{uuid.uuid4()}{extension}"

    async def stage_stream(self, kind: str, source, extension: str) -> Tuple[Path, int, bytes]:
        """
        Copy `source` (anything with an async `read(size)`, e.g. UploadFile)
        into the staging directory chunk by chunk.

        Returns:
            (staged path, byte count, first SNIFF_BYTES bytes)

        Raises:
            ValidationError: the stream passed the size limit; the partial
                file is removed
            MediaStorageError: the staging directory is not writable
        """
        limit = self.max_size(kind)
        path = self.staging_dir / f"{uuid.uuid4()}{extension}"
        size = 0
        header = b""
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            async with aiofiles.open(path, "wb") as f:
                while True:
                    chunk = await source.read(CHUNK_SIZE)
                    if not chunk:
                        break
                    size += len(chunk)
                    if size > limit:
                        raise self._too_large(kind, received_bytes=size)
                    if len(header) < SNIFF_BYTES:
                        header += chunk[: SNIFF_BYTES - len(header)]
                    await f.write(chunk)
        except ValidationError:
            await self.cleanup_file(path)
            raise
        except OSError as e:
            logger.error("Failed to stage upload at %s: %s", path, str(e))
            await self.cleanup_file(path)
            raise MediaStorageError(context={"path": str(path), "os_error": str(e)})
        return path, size, header

    async def cleanup_file(self, path: Path) -> None:
        """Best-effort removal of a staged file."""
        try:
            if path.exists():
                os.remove(path)
        except OSError as e:
            logger.warning("Failed to remove staged file %s: %s", path.name, str(e))

    # ── Media Host ────────────────────────────────────────────────────────

    def public_url(self, key: str) -> str:
        if settings.media_public_base_url:
            return f"{settings.media_public_base_url.rstrip('/')}/{key}"
        if settings.s3_endpoint_url:
            return f"{settings.s3_endpoint_url.rstrip('/')}/{settings.s3_bucket}/{key}"
        return f"https://{settings.s3_bucket}.s3.{settings.aws_region}.amazonaws.com/{key}"

    @retry(
        retry=retry_if_exception_type((BotoCoreError, ClientError)),
        stop=stop_after_attempt(settings.retry_max_attempts),
        wait=upload_wait(),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True,
    )
    async def _put_object(self, path: Path, key: str, content_type: str) -> None:
        # boto3 is blocking; keep the event loop free during the transfer
        await asyncio.to_thread(
            self.client.upload_file,
            str(path),
            settings.s3_bucket,
            key,
            ExtraArgs={"ContentType": content_type},
        )

    async def upload(
        self,
        kind: str,
        filename: str,
        source,
        content_length: Optional[int] = None,
    ) -> MediaAsset:
        """
        Validate, stage and upload one file read from `source`.

        Raises:
            ValidationError: wrong extension, size or content type (400)
            MediaStorageError: staging failed (500)
            MediaHostError: the bucket rejected the upload after retries (503)
        """
        ext = self.validate_extension(kind, filename)
        self.validate_declared_size(kind, content_length)

        staged, size, header = await self.stage_stream(kind, source, ext)
        try:
            self.validate_size(kind, content_length, size)
            mime_type = self.validate_mime_type(kind, header)

            key = self.object_key(kind, ext)
            try:
                await self._put_object(staged, key, mime_type)
            except (BotoCoreError, ClientError) as e:
                logger.error("Upload of %s to media host failed: %s", key, str(e))
                raise MediaHostError(
                    message=f"{kind.capitalize()} upload failed. Please try again later.",
                    context={"attempts": settings.retry_max_attempts},
                )
        finally:
            await self.cleanup_file(staged)

        logger.info("Uploaded %s (%d bytes) to %s", kind, size, key)
        return MediaAsset(url=self.public_url(key), key=key)

    async def delete(self, key: Optional[str]) -> None:
        """
        Remove an object from the bucket. Never raises: a leftover object is
        a storage cost, not a reason to fail the user's request.
        """
        if not key:
            return
        try:
            await asyncio.to_thread(
                self.client.delete_object, Bucket=settings.s3_bucket, Key=key
            )
            logger.info("Deleted media object %s", key)
        except (BotoCoreError, ClientError) as e:
            logger.warning("Failed to delete media object %s: %s", key, str(e))


media_service = MediaService()
