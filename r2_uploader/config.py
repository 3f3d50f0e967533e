"""
Locate and load the R2 credentials file.

The file lives in a per-user directory:
  • Linux:   $HOME/.config/r2_uploader/config.json
  • Windows: %APPDATA%\\r2_uploader\\config.json

Any value from the file can be overridden with the matching R2_* environment
variable.
"""
from __future__ import annotations

import json
import logging
import os
import sys
from dataclasses import dataclass, field
from typing import Dict, Mapping, Optional

from r2_uploader.errors import ConfigurationError, UnsupportedPlatformError

logger = logging.getLogger(__name__)

APP_DIR_NAME = "r2_uploader"
CONFIG_FILE_NAME = "config.json"
R2_DOMAIN = "r2.cloudflarestorage.com"

REQUIRED_FIELDS = ("account_id", "access_key", "secret_key", "bucket_name")
ALL_FIELDS = REQUIRED_FIELDS + ("public_url",)

ENV_OVERRIDES: Dict[str, str] = {
    "account_id": "R2_ACCOUNT_ID",
    "access_key": "R2_ACCESS_KEY_ID",
    "secret_key": "R2_SECRET_KEY",
    "bucket_name": "R2_BUCKET",
    "public_url": "R2_PUBLIC_BASE",
}


@dataclass(frozen=True)
class Config:
    account_id: str
    access_key: str
    secret_key: str = field(repr=False)
    bucket_name: str
    public_url: str

    @property
    def endpoint(self) -> str:
        return r2_endpoint(self.account_id)


def r2_endpoint(account_id: str) -> str:
    return f"https://{account_id}.{R2_DOMAIN}"


# --------------------------------------------------------------------------- #
#  Config directory
# --------------------------------------------------------------------------- #
def get_config_dir(
    system: Optional[str] = None, environ: Optional[Mapping[str, str]] = None
) -> str:
    """Return the per-user config directory, creating it if needed.

    ``system`` is a ``sys.platform`` style identifier. Only the Windows and
    Linux families are supported.
    """
    system = (system or sys.platform).lower()
    environ = os.environ if environ is None else environ

    if system in ("win32", "windows"):
        base_dir = environ.get("APPDATA", "")
        config_dir = APP_DIR_NAME
    elif system.startswith("linux"):
        base_dir = environ.get("HOME", "")
        config_dir = os.path.join(".config", APP_DIR_NAME)
    else:
        raise UnsupportedPlatformError(
            f"Unsupported OS: {system}", {"platform": system}
        )

    if not base_dir:
        base_dir = "."

    path = os.path.join(base_dir, config_dir)
    try:
        os.makedirs(path, mode=0o755, exist_ok=True)
    except OSError as exc:
        # not fatal
        logger.debug("Could not create config dir %s: %s", path, exc)

    return path


def get_config_path(
    system: Optional[str] = None, environ: Optional[Mapping[str, str]] = None
) -> str:
    return os.path.join(get_config_dir(system, environ), CONFIG_FILE_NAME)


# --------------------------------------------------------------------------- #
#  Load R2 credentials & settings
# --------------------------------------------------------------------------- #
def load_config(
    path: Optional[str] = None, environ: Optional[Mapping[str, str]] = None
) -> Config:
    """Read the JSON config file, apply R2_* overrides and validate it.

    Raises:
        ConfigurationError: if the file is unreadable, not a JSON object, or
            lacks one of account_id, access_key, secret_key, bucket_name.
    """
    environ = os.environ if environ is None else environ
    if path is None:
        path = get_config_path(environ=environ)

    try:
        with open(path, encoding="utf-8") as fh:
            raw = json.load(fh)
    except OSError as exc:
        raise ConfigurationError(
            f"Failed to read config file: {exc}", {"path": path}
        ) from exc
    except ValueError as exc:
        raise ConfigurationError(
            f"Failed to parse config file: {exc}", {"path": path}
        ) from exc

    if not isinstance(raw, dict):
        raise ConfigurationError(
            "Failed to parse config file: expected a JSON object", {"path": path}
        )

    cfg: Dict[str, str] = {}
    for name in ALL_FIELDS:
        value = raw.get(name)
        if value is None:
            continue
        if not isinstance(value, str):
            raise ConfigurationError(
                f"Failed to parse config file: {name} must be a string",
                {"path": path, "field": name},
            )
        cfg[name] = value.strip()

    for name, env_key in ENV_OVERRIDES.items():
        if environ.get(env_key):
            cfg[name] = environ[env_key]

    missing = [k for k in REQUIRED_FIELDS if not cfg.get(k)]
    if missing:
        raise ConfigurationError(
            f"Config file is missing required fields: {', '.join(missing)}",
            {"path": path, "missing": ", ".join(missing)},
        )

    if not cfg.get("public_url"):
        cfg["public_url"] = f"{r2_endpoint(cfg['account_id'])}/{cfg['bucket_name']}"
        logger.warning("public_url not set, defaulting to %s", cfg["public_url"])
    cfg["public_url"] = cfg["public_url"].rstrip("/")

    logger.debug("Loaded config from %s (bucket=%s)", path, cfg["bucket_name"])
    return Config(**cfg)
