"""
Object storage for catalog item images.

Two backends share one small interface (put, get, delete):
1. LocalImageStorage - files under a directory on the local filesystem
2. R2ImageStorage - Cloudflare R2 through its S3-compatible API (boto3)

ImageStore is the Flask extension that picks the backend from config
(IMAGE_STORAGE_BACKEND) and hands it to the services.
"""

from __future__ import annotations

import hashlib
import logging
import mimetypes
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import boto3
from botocore.exceptions import ClientError
from flask import current_app

from .validation import ConfigurationError, ValidationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StoredImage:
    body: bytes
    content_type: Optional[str]
    etag: Optional[str] = None


class ImageStorage:
    """Base class for image storage backends."""

    def put(self, key: str, data: bytes, content_type: str) -> None:
        raise NotImplementedError

    def get(self, key: str) -> Optional[StoredImage]:
        """Return the stored object, or None if the key does not exist."""
        raise NotImplementedError

    def delete(self, key: str) -> bool:
        raise NotImplementedError


class LocalImageStorage(ImageStorage):
    """Filesystem backend. Content type is inferred from the key's extension."""

    def __init__(self, base_path: str):
        self.base_path = Path(base_path).resolve()
        self.base_path.mkdir(parents=True, exist_ok=True)
        logger.info(f"LocalImageStorage initialized with base_path: {self.base_path}")

    def _get_full_path(self, key: str) -> Path:
        path = (self.base_path / key).resolve()
        if self.base_path not in path.parents:
            raise ValidationError("Invalid storage key")
        return path

    def put(self, key: str, data: bytes, content_type: str) -> None:
        destination = self._get_full_path(key)
        destination.parent.mkdir(parents=True, exist_ok=True)
        destination.write_bytes(data)
        logger.info(f"LocalImageStorage: stored {key} ({len(data)} bytes)")

    def get(self, key: str) -> Optional[StoredImage]:
        path = self._get_full_path(key)
        if not path.is_file():
            return None
        body = path.read_bytes()
        content_type, _ = mimetypes.guess_type(path.name)
        etag = f'"{hashlib.md5(body).hexdigest()}"'
        return StoredImage(body=body, content_type=content_type, etag=etag)

    def delete(self, key: str) -> bool:
        path = self._get_full_path(key)
        if not path.exists():
            return False
        path.unlink()
        logger.info(f"LocalImageStorage: deleted {key}")
        return True


class R2ImageStorage(ImageStorage):
    """Cloudflare R2 backend using the S3 API."""

    def __init__(
        self,
        *,
        endpoint_url: str,
        access_key_id: str,
        secret_access_key: str,
        bucket_name: str,
    ):
        self.bucket_name = bucket_name
        self.client = boto3.client(
            "s3",
            endpoint_url=endpoint_url,
            aws_access_key_id=access_key_id,
            aws_secret_access_key=secret_access_key,
            region_name="auto",
        )
        logger.info(f"R2ImageStorage initialized for bucket: {bucket_name}")

    def put(self, key: str, data: bytes, content_type: str) -> None:
        self.client.put_object(
            Bucket=self.bucket_name,
            Key=key,
            Body=data,
            ContentType=content_type,
        )
        logger.info(f"R2ImageStorage: stored {key} ({len(data)} bytes)")

    def get(self, key: str) -> Optional[StoredImage]:
        try:
            response = self.client.get_object(Bucket=self.bucket_name, Key=key)
        except ClientError as e:
            error_code = e.response.get("Error", {}).get("Code", "")
            if error_code in ("404", "NoSuchKey"):
                return None
            raise
        return StoredImage(
            body=response["Body"].read(),
            content_type=response.get("ContentType"),
            etag=response.get("ETag"),
        )

    def delete(self, key: str) -> bool:
        try:
            self.client.delete_object(Bucket=self.bucket_name, Key=key)
        except ClientError as e:
            error_code = e.response.get("Error", {}).get("Code", "")
            if error_code == "NoSuchKey":
                return False
            raise
        logger.info(f"R2ImageStorage: deleted {key}")
        return True


def create_storage(config) -> Optional[ImageStorage]:
    backend = (config.get("IMAGE_STORAGE_BACKEND") or "").strip().lower()
    if not backend:
        return None

    if backend == "local":
        return LocalImageStorage(config["IMAGE_STORAGE_PATH"])

    if backend == "r2":
        required = ("R2_ENDPOINT_URL", "R2_ACCESS_KEY_ID", "R2_SECRET_ACCESS_KEY", "R2_BUCKET_NAME")
        missing = [k for k in required if not config.get(k)]
        if missing:
            logger.error(f"R2 storage selected but missing settings: {', '.join(missing)}")
            return None
        return R2ImageStorage(
            endpoint_url=config["R2_ENDPOINT_URL"],
            access_key_id=config["R2_ACCESS_KEY_ID"],
            secret_access_key=config["R2_SECRET_ACCESS_KEY"],
            bucket_name=config["R2_BUCKET_NAME"],
        )

    raise ValueError(f"Unknown IMAGE_STORAGE_BACKEND: {backend}")


class ImageStore:
    """Flask extension holding the configured ImageStorage for the app."""

    def __init__(self, app=None):
        if app is not None:
            self.init_app(app)

    def init_app(self, app) -> None:
        app.extensions["image_store"] = create_storage(app.config)

    @property
    def backend(self) -> ImageStorage:
        storage = current_app.extensions.get("image_store")
        if storage is None:
            raise ConfigurationError("Image storage is not configured")
        return storage

    def put(self, key: str, data: bytes, content_type: str) -> None:
        self.backend.put(key, data, content_type)

    def get(self, key: str) -> Optional[StoredImage]:
        return self.backend.get(key)

    def delete(self, key: str) -> bool:
        return self.backend.delete(key)
