"""
Upload images to Cloudflare R2 and print their public URLs.

Usage:
    r2-uploader <file_or_url> [<file_or_url> ...]

Arguments starting with "http" are downloaded to a temp file first. One URL
is printed per argument, in order. The first failure stops the run.
"""
from __future__ import annotations

import logging
import os
import sys
from typing import List, Optional

from r2_uploader.config import load_config
from r2_uploader.errors import UploaderError
from r2_uploader.fetch import fetch, is_remote
from r2_uploader.keys import KeyGenerator
from r2_uploader.storage import R2Uploader

logger = logging.getLogger(__name__)

LOG_LEVEL_ENV = "R2_UPLOADER_LOG_LEVEL"


def log_level() -> str:
    level = os.getenv(LOG_LEVEL_ENV, "WARNING").upper()
    if not isinstance(logging.getLevelName(level), int):
        return "WARNING"
    return level


def setup_logging():
    if not logging.root.handlers:
        logging.basicConfig(
            level=log_level(),
            format="%(asctime)s - %(levelname)s - %(message)s",
            stream=sys.stderr,
        )
    for name in ("botocore", "boto3", "urllib3", "s3transfer"):
        logging.getLogger(name).setLevel(logging.WARNING)


def run(sources: List[str], uploader: R2Uploader) -> None:
    for source in sources:
        path = fetch(source) if is_remote(source) else source
        print(uploader.upload(path), flush=True)


def main(argv: Optional[List[str]] = None) -> int:
    setup_logging()
    sources = sys.argv[1:] if argv is None else list(argv)

    try:
        config = load_config()
        uploader = R2Uploader(config, KeyGenerator())
        uploader.setup()
        run(sources, uploader)
    except UploaderError as exc:
        logger.error("%s", exc.message)
        return 1

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
