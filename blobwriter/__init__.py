"""
blobwriter - write large blobs to the local filesystem without base64.

Writes are streamed to a loopback HTTP server that publishes them atomically;
if that fails, a chunked base64 append fallback is used instead.
"""

from blobwriter.common.blob import Blob
from blobwriter.common.errors import (
    BlobWriterError, InvalidPathError, StreamingWriteError, AuthError, NetworkError,
    StreamingTimeoutError, ServerStartError, DirectoryMissingError, StreamingDirectoryMissingError,
    WriteIOError, FallbackWriteError
)
from blobwriter.common.protocol_definitions import Directory, WriteRequest
from blobwriter.client.orchestrator import WriteOrchestrator, write_blob

__version__ = '1.0.0'

__all__ = [
    'Blob', 'Directory', 'WriteRequest', 'WriteOrchestrator', 'write_blob',
    'BlobWriterError', 'InvalidPathError', 'StreamingWriteError', 'AuthError', 'NetworkError',
    'StreamingTimeoutError', 'ServerStartError', 'DirectoryMissingError',
    'StreamingDirectoryMissingError', 'WriteIOError', 'FallbackWriteError',
]
