"""
Streaming write client module.

This module sends one authenticated, streamed PUT to the local blob server.
The blob is read lazily and sent as raw bytes, never encoded.
"""

import asyncio
from typing import Optional

import aiohttp
from yarl import URL

from blobwriter.common.blob import Blob
from blobwriter.common.constants import Status
from blobwriter.common.errors import (
    AuthError, NetworkError, StreamingDirectoryMissingError, StreamingTimeoutError, StreamingWriteError
)
from blobwriter.common.protocol_definitions import (
    ResolvedPath, SessionInfo, build_write_url, create_auth_header
)
from blobwriter.client.utils.config import ClientConfig


class StreamingWriteClient:
    """Caller-side streaming write functionality."""

    def __init__(self, config: Optional[ClientConfig] = None):
        self.config = config or ClientConfig()

    async def write(self, blob: Blob, resolved: ResolvedPath, recursive: bool, session: SessionInfo) -> str:
        """Stream a blob to the server; return the published absolute path.

        Every failure is raised as a StreamingWriteError subclass. Nothing is
        retried here.
        """
        url = URL(build_write_url(session, resolved.path, recursive), encoded=True)
        headers = create_auth_header(session.token)
        headers['Content-Length'] = str(blob.size)
        headers['Content-Type'] = 'application/octet-stream'

        body = blob.iter_chunks(self.config.stream_chunk_size) if blob.size else b''
        timeout = aiohttp.ClientTimeout(total=self.config.request_timeout)

        try:
            async with aiohttp.ClientSession(timeout=timeout) as http:
                async with http.put(url, data=body, headers=headers) as response:
                    status = response.status
                    text = await response.text()
        except asyncio.TimeoutError as e:
            raise StreamingTimeoutError(f"Streaming write to {resolved.path} timed out") from e
        except (aiohttp.ClientError, OSError) as e:
            raise NetworkError(f"Streaming write to {resolved.path} failed: {e}") from e

        return self._interpret_response(status, text, resolved)

    def _interpret_response(self, status: int, text: str, resolved: ResolvedPath) -> str:
        """Map the server's answer to a path or an error.

        The body of a 200 is the published path verbatim. Names may end in
        whitespace, so it is compared as-is.
        """
        if status == Status.OK:
            if not text:
                raise StreamingWriteError("Server answered 200 without a path", status)
            if text != resolved.path:
                raise StreamingWriteError(f"Server published {text!r} instead of {resolved.path!r}", status)
            return text
        if status == Status.UNAUTHORIZED:
            raise AuthError("Blob server rejected the access token", status)
        if status == Status.CONFLICT:
            raise StreamingDirectoryMissingError(f"Cannot write {resolved.path}: {text}", status)
        raise StreamingWriteError(f"Blob server answered {status} for {resolved.path}: {text}", status)
