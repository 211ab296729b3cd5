"""Error taxonomy shared by the generation and publication services."""
from __future__ import annotations

from pathlib import Path


class AutoblogError(Exception):
    """Base class for errors that abort a generation run."""


class ChatClientError(AutoblogError):
    """Raised when the chat model call fails or returns unusable content."""


class InvalidPostError(AutoblogError):
    """Raised when a parsed post is not fit for publication."""


class ConfigurationError(AutoblogError):
    """Raised when environment settings are invalid or a chat model cannot be built."""


class _PathError(AutoblogError):
    def __init__(self, path: Path | str, reason: str) -> None:
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"{reason}: {self.path}")


class FileIOError(_PathError):
    """Raised when reading or writing a resume, manifest, or content file fails."""


class ManifestCorruptError(_PathError):
    """Raised when the stored manifest does not match its schema."""


__all__ = [
    "AutoblogError",
    "ChatClientError",
    "ConfigurationError",
    "FileIOError",
    "InvalidPostError",
    "ManifestCorruptError",
]
