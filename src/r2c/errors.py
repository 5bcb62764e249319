"""Error taxonomy for the collator.

Every failure the pipeline can hit is one of these. None of them are
retried: the CLI logs the error and exits non-zero.
"""

from __future__ import annotations


class R2CError(Exception):
    """Base class for all collator errors."""


class NetworkFailure(R2CError):
    """A GET failed at the transport level or returned a non-2xx status."""

    def __init__(self, url: str, reason: str, status_code: int | None = None) -> None:
        self.url = url
        self.reason = reason
        self.status_code = status_code
        super().__init__(f"GET {url} failed: {reason}")


class DeserializationFailure(R2CError):
    """The tag list payload was not a JSON array of tag objects."""


class SerializationFailure(R2CError):
    """The release store could not be converted to JSON."""


class FileWriteFailure(R2CError):
    """The output file could not be written."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Could not write {path}: {reason}")


class ConfigError(R2CError, ValueError):
    """The YAML configuration is unreadable or fails validation."""
