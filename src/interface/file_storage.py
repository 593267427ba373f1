"""Import file storage on Amazon S3."""

import asyncio
import logging
import uuid
from typing import Any

from pydantic import BaseModel, Field

from src.core.errors import FileEmptyError


logger = logging.getLogger(__name__)


class UploadUrl(BaseModel):
    """Pre-signed URL a client PUTs an import file to."""

    url: str = Field(..., description="Pre-signed PUT URL")
    key: str = Field(..., description="Object key the upload will land at")
    expires_in: int = Field(..., serialization_alias="expiresIn", description="Lifetime in seconds")


class FileStorage:
    """Reads uploaded import files and issues upload URLs."""

    def __init__(self, s3_client: Any, *, bucket: str | None = None) -> None:
        self._s3 = s3_client
        self._bucket = bucket

    async def read_text(self, *, bucket: str, key: str) -> str:
        """Fetch an object's content as UTF-8 text.

        Raises:
            FileEmptyError: If the object has no content
        """
        response = await asyncio.to_thread(self._s3.get_object, Bucket=bucket, Key=key)
        body = response.get("Body")
        content = (await asyncio.to_thread(body.read)).decode("utf-8") if body is not None else ""
        if not content.strip():
            msg = f"Import file is empty: s3://{bucket}/{key}"
            raise FileEmptyError(msg)
        logger.info("Read import file", extra={"bucket": bucket, "key": key, "size": len(content)})
        return content

    async def create_upload_url(self, *, expires_in: int) -> UploadUrl:
        """Issue a pre-signed PUT URL for a new import file key."""
        if not self._bucket:
            msg = "Upload bucket not configured. Set BUCKET_NAME environment variable."
            raise ValueError(msg)

        key = f"{uuid.uuid4()}.csv"
        url = await asyncio.to_thread(
            self._s3.generate_presigned_url,
            "put_object",
            Params={"Bucket": self._bucket, "Key": key},
            ExpiresIn=expires_in,
        )
        logger.info("Issued upload URL", extra={"bucket": self._bucket, "key": key})
        return UploadUrl(url=url, key=key, expires_in=expires_in)
