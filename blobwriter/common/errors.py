"""
Error types for the blob writer.

Streaming-path errors derive from StreamingWriteError and are absorbed by the
orchestrator, which switches to the chunked fallback. InvalidPathError and
FallbackWriteError reach the caller.
"""

from typing import Optional


class BlobWriterError(Exception):
    """Base class for all blob writer errors."""


class InvalidPathError(BlobWriterError, ValueError):
    """The path is malformed or escapes its root directory."""

    def __init__(self, path: str, reason: str):
        super().__init__(f"Invalid path {path!r}: {reason}")
        self.path = path
        self.reason = reason


class StreamingWriteError(BlobWriterError):
    """The streaming write did not produce a published file."""

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.status = status


class AuthError(StreamingWriteError):
    """The server rejected the access token."""


class NetworkError(StreamingWriteError):
    """The request to the local server could not be completed."""


class StreamingTimeoutError(NetworkError):
    """The request to the local server timed out."""


class ServerStartError(StreamingWriteError):
    """The local server could not be started."""


class DirectoryMissingError(BlobWriterError):
    """The destination's parent directory is missing and recursive is off."""


class StreamingDirectoryMissingError(StreamingWriteError, DirectoryMissingError):
    """The server answered 409 for the destination's directory."""


class WriteIOError(BlobWriterError):
    """A filesystem operation failed while writing."""


class FallbackWriteError(BlobWriterError):
    """The chunked fallback failed; the target may be left short."""

    def __init__(self, path: str, chunk_index: int, cause: Exception):
        super().__init__(f"Fallback write to {path} failed at chunk {chunk_index}: {cause}")
        self.path = path
        self.chunk_index = chunk_index
        self.cause = cause
