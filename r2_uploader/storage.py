"""
Cloudflare R2 uploader.

R2 speaks the S3 protocol, so it is addressed through a regular boto3 S3
client pointed at https://<account_id>.r2.cloudflarestorage.com with the
"auto" region.
"""
from __future__ import annotations

import logging
import mimetypes
import os
import pathlib
from typing import Optional

import boto3
from botocore.config import Config as BotoConfig
from botocore.exceptions import BotoCoreError, ClientError
from PIL import Image

from r2_uploader.config import Config
from r2_uploader.errors import ClientSetupError, SourceFileError, UploadError
from r2_uploader.keys import KeyGenerator, file_extension

logger = logging.getLogger(__name__)

SIGNING_REGION = "auto"
DEFAULT_CONTENT_TYPE = "application/octet-stream"


# --------------------------------------------------------------------------- #
#  Allowed image extensions
# --------------------------------------------------------------------------- #
ALLOWED_EXTENSIONS = {".jpg", ".jpeg", ".png", ".gif", ".bmp", ".webp"}


def validate_image(filename: str) -> bool:
    """Validate if the file has an allowed image extension"""
    file_ext = pathlib.Path(filename).suffix.lower()
    return file_ext in ALLOWED_EXTENSIONS


def guess_content_type(path: str) -> str:
    """Content type from the image header, then from the file name."""
    mime = None
    try:
        with Image.open(path) as im:
            mime = Image.MIME.get(im.format)
    except (OSError, ValueError, Image.DecompressionBombError) as exc:
        logger.debug("Could not read image header of %s: %s", path, exc)
    return mime or mimetypes.guess_type(path)[0] or DEFAULT_CONTENT_TYPE


class R2Uploader:
    """Puts local files into the configured bucket, one PUT per file."""

    def __init__(self, config: Config, key_generator: Optional[KeyGenerator] = None):
        self.config = config
        self.keys = key_generator or KeyGenerator()
        self.client = None

    def setup(self):
        """Create the boto3 S3 client for the account's R2 endpoint."""
        try:
            self.client = boto3.client(
                "s3",
                endpoint_url=self.config.endpoint,
                aws_access_key_id=self.config.access_key,
                aws_secret_access_key=self.config.secret_key,
                config=BotoConfig(
                    region_name=SIGNING_REGION,
                    signature_version="s3v4",
                    s3={
                        "addressing_style": "path",
                        "payload_signing_enabled": False,
                    },
                ),
            )
        except (BotoCoreError, ValueError) as exc:
            raise ClientSetupError(
                f"Failed to load r2 config: {exc}", {"endpoint": self.config.endpoint}
            ) from exc

        logger.debug("Initialized R2 client for %s", self.config.endpoint)
        return self.client

    def upload(self, path: str) -> str:
        """Upload ``path`` under a fresh key and return its public URL."""
        if self.client is None:
            self.setup()

        try:
            size = os.stat(path).st_size
        except OSError as exc:
            raise SourceFileError(f"Failed to stat image: {exc}", {"path": path}) from exc

        if not validate_image(path):
            logger.warning("%s does not look like an image, uploading anyway", path)

        key = self.keys.generate_key(file_extension(path))
        content_type = guess_content_type(path)

        try:
            fh = open(path, "rb")
        except OSError as exc:
            raise SourceFileError(f"Failed to open image: {exc}", {"path": path}) from exc

        with fh:
            try:
                self.client.put_object(
                    Bucket=self.config.bucket_name,
                    Key=key,
                    Body=fh,
                    ContentLength=size,
                    ContentType=content_type,
                )
            except (BotoCoreError, ClientError) as exc:
                raise UploadError(
                    f"Failed to upload image: {exc}",
                    {"path": path, "bucket": self.config.bucket_name, "key": key},
                ) from exc

        logger.info("Uploaded %s (%d bytes, %s) as %s", path, size, content_type, key)
        return f"{self.config.public_url}/{key}"
