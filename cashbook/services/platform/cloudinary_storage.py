"""
Object Storage using Cloudinary

An alternative backend for the upload relay. The storage key becomes the
Cloudinary public ID inside a folder named after the bucket. The declared
content type selects the Cloudinary resource type; raw files keep their
extension in the public ID, since Cloudinary only derives a format for
images and videos.

The stored path is the secure delivery URL Cloudinary returns, which
already carries the resource type and version.
"""

from typing import Optional

import cloudinary
import cloudinary.exceptions
import cloudinary.uploader
import cloudinary.utils

from cashbook.services.platform.interface import (
    ObjectStorageInterface,
    StorageError,
)


def resource_type_for(content_type: Optional[str]) -> str:
    """Cloudinary resource type for a MIME type; 'auto' when unknown."""
    major = (content_type or "").split("/", 1)[0].lower()
    if major == "image" or content_type == "application/pdf":
        return "image"
    if major in ("video", "audio"):
        return "video"
    if not content_type or content_type == "application/octet-stream":
        return "auto"
    return "raw"


class CloudinaryObjectStorage(ObjectStorageInterface):
    """Cloudinary implementation of object storage."""

    def __init__(self, cloud_name: str, api_key: str, api_secret: str):
        cloudinary.config(
            cloud_name=cloud_name,
            api_key=api_key,
            api_secret=api_secret,
            secure=True,
        )

    @classmethod
    def from_settings(cls, settings) -> "CloudinaryObjectStorage":
        return cls(
            cloud_name=settings.cloud_name,
            api_key=settings.api_key,
            api_secret=settings.api_secret,
        )

    def store_object(
        self,
        bucket: str,
        key: str,
        data: bytes,
        content_type: str,
    ) -> str:
        resource_type = resource_type_for(content_type)
        public_id = key if resource_type == "raw" else key.rsplit(".", 1)[0]
        try:
            result = cloudinary.uploader.upload(
                data,
                public_id=public_id,
                folder=bucket,
                resource_type=resource_type,
                overwrite=False,
            )
        except cloudinary.exceptions.Error as e:
            raise StorageError(str(e))

        url = result.get("secure_url", result.get("url", ""))
        if not url:
            raise StorageError("No URL returned from Cloudinary")
        return url

    def public_url(self, bucket: str, path: str) -> str:
        if path.startswith(("https://", "http://")):
            return path
        # A bare public ID; Cloudinary's default resource type applies.
        url, _ = cloudinary.utils.cloudinary_url(path, secure=True)
        return url
