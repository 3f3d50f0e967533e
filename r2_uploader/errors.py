"""Exception hierarchy for r2_uploader."""

from __future__ import annotations


class UploaderError(Exception):
    """Base exception for all r2_uploader errors."""

    def __init__(self, message: str, details: dict[str, str] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ConfigurationError(UploaderError):
    """Raised when the config file is missing, malformed or incomplete."""
    pass


class UnsupportedPlatformError(ConfigurationError):
    """Raised when no config directory is known for the host OS."""
    pass


class FetchError(UploaderError):
    """Raised when a remote image cannot be downloaded to a temp file."""
    pass


class SourceFileError(UploaderError):
    """Raised when a local file cannot be stat'd or opened."""
    pass


class StorageError(UploaderError):
    """Base class for object storage errors."""
    pass


class ClientSetupError(StorageError):
    """Raised when the S3 client for R2 cannot be constructed."""
    pass


class UploadError(StorageError):
    """Raised when the PUT to the bucket fails."""
    pass
