"""Download remote images into temp files so they can be uploaded like local ones."""
from __future__ import annotations

import logging
import tempfile
from typing import Optional
from urllib.parse import urlparse

import requests

from r2_uploader.errors import FetchError
from r2_uploader.keys import file_extension

logger = logging.getLogger(__name__)

TEMP_PREFIX = "r2_uploader_"
CHUNK_SIZE = 64 * 1024


def is_remote(source: str) -> bool:
    return source.startswith("http")


def url_extension(url: str) -> str:
    """Extension of the URL path, e.g. ".png", ignoring query and fragment."""
    return file_extension(urlparse(url).path)


def fetch(
    url: str,
    session: Optional[requests.Session] = None,
    tmp_dir: Optional[str] = None,
) -> str:
    """Download ``url`` into a new temp file and return its path.

    The temp file name ends with the URL's extension so the uploaded key
    keeps it. The file is not removed afterwards, even on failure.

    Raises:
        FetchError: if the temp file cannot be created, the GET fails or
            returns a non-2xx status, or the body cannot be written.
    """
    http = session or requests
    ext = url_extension(url)

    try:
        tmp = tempfile.NamedTemporaryFile(
            prefix=TEMP_PREFIX, suffix=f"_{ext}", dir=tmp_dir, delete=False
        )
    except OSError as exc:
        raise FetchError(f"Failed to create temp file: {exc}", {"url": url}) from exc

    with tmp:
        try:
            with http.get(url, stream=True) as resp:
                resp.raise_for_status()
                for chunk in resp.iter_content(chunk_size=CHUNK_SIZE):
                    tmp.write(chunk)
        except requests.RequestException as exc:
            raise FetchError(
                f"Failed to download image: {exc}", {"url": url, "path": tmp.name}
            ) from exc
        except OSError as exc:
            raise FetchError(
                f"Failed to copy image: {exc}", {"url": url, "path": tmp.name}
            ) from exc

    logger.debug("Downloaded %s to %s", url, tmp.name)
    return tmp.name
