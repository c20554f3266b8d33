from __future__ import annotations

import logging
from typing import Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from ..core.constants import DEFAULT_S3_PREFIX
from ..core.exceptions import UploadError
from .image_host import ImageHost, ImageUpload

logger = logging.getLogger(__name__)


class S3ImageHost(ImageHost):
    """Uploads lesson photos to an S3 bucket.

    The returned URL is `base_url/key` when a public base URL (bucket website
    or CDN) is configured, otherwise the virtual-hosted S3 URL.
    """

    def __init__(
        self,
        bucket: str,
        *,
        prefix: str = DEFAULT_S3_PREFIX,
        base_url: Optional[str] = None,
        client=None,
    ):
        self._bucket = bucket
        self._prefix = prefix
        self._base_url = base_url.rstrip("/") if base_url else None
        self._client = client or boto3.client("s3")

    def _public_url(self, key: str) -> str:
        if self._base_url:
            return f"{self._base_url}/{key}"
        return f"https://{self._bucket}.s3.amazonaws.com/{key}"

    def upload(self, image: ImageUpload) -> str:
        key = self._prefix + image.object_name()
        try:
            self._client.put_object(
                Bucket=self._bucket,
                Key=key,
                Body=image.data,
                ContentType=image.content_type or "image/jpeg",
                ServerSideEncryption="AES256",
            )
        except (BotoCoreError, ClientError) as e:
            logger.error("S3 upload failed for %s: %s", key, e)
            raise UploadError("Photo upload failed") from e
        return self._public_url(key)
