"""
Write orchestration module.

Public entry point of the blob writer. Every write first goes through the
local streaming server exactly once; if that fails for any reason the
chunked fallback takes over and its outcome is final.
"""

from typing import Any, Callable, Optional

from blobwriter.common.blob import Blob
from blobwriter.common.path_resolver import PathResolver
from blobwriter.common.protocol_definitions import Directory, WriteRequest
from blobwriter.client.fallback_writer import ChunkedFallbackWriter
from blobwriter.client.stream_client import StreamingWriteClient
from blobwriter.client.utils.config import ClientConfig
from blobwriter.client.utils.logger import logger
from blobwriter.server.session import ServerSession


class WriteOrchestrator:
    """Chooses between the streaming path and the chunked fallback."""

    def __init__(self, config: Optional[ClientConfig] = None, resolver: Optional[PathResolver] = None,
                 stream_client: Optional[StreamingWriteClient] = None,
                 fallback_writer: Optional[ChunkedFallbackWriter] = None,
                 session_provider: Optional[Callable] = None):
        self.config = config or ClientConfig()
        self.resolver = resolver or self.config.create_resolver()
        self.stream_client = stream_client or StreamingWriteClient(self.config)
        self.fallback_writer = fallback_writer or ChunkedFallbackWriter(self.config)
        self.session_provider = session_provider or ServerSession.acquire_async

    async def write(self, request: WriteRequest) -> str:
        """Carry out one write request and return the absolute path.

        InvalidPathError is raised before anything is attempted. Streaming
        failures are reported through request.on_fallback only; fallback
        failures are raised as FallbackWriteError.
        """
        blob = Blob.coerce(request.blob)
        resolved = self.resolver.resolve(request.directory, request.path)
        logger.log_write_start(resolved.path, blob.size)

        try:
            session = await self.session_provider()
            path = await self.stream_client.write(blob, resolved, request.recursive, session)
        except Exception as e:
            logger.log_streaming_failure(resolved.path, e)
            self._notify_fallback(request.on_fallback, e)
        else:
            logger.log_streaming_success(path, blob.size)
            return path

        return await self.fallback_writer.write(blob, resolved, request.recursive)

    def _notify_fallback(self, callback: Optional[Callable[[Exception], Any]], error: Exception):
        """Tell the caller the fallback is about to run; never raises."""
        if callback is None:
            return
        try:
            callback(error)
        except Exception as e:
            logger.log_error("on_fallback callback", e)


_default_orchestrator: Optional[WriteOrchestrator] = None


def get_default_orchestrator() -> WriteOrchestrator:
    """Get the shared orchestrator built from the default configuration."""
    global _default_orchestrator
    if _default_orchestrator is None:
        _default_orchestrator = WriteOrchestrator()
    return _default_orchestrator


async def write_blob(path: str, blob, directory: Optional[Directory] = None, recursive: bool = False,
                     on_fallback: Optional[Callable[[Exception], Any]] = None,
                     orchestrator: Optional[WriteOrchestrator] = None) -> str:
    """Write a blob to the filesystem and return its absolute path."""
    request = WriteRequest(
        path=path,
        blob=blob,
        directory=directory,
        recursive=recursive,
        on_fallback=on_fallback
    )
    return await (orchestrator or get_default_orchestrator()).write(request)
