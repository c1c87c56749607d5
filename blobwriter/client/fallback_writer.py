"""
Chunked fallback writer module.

Used only after the streaming path failed. The blob is cut into fixed-size
chunks which are base64 encoded and handed to the filesystem bridge one at a
time: the first chunk creates or truncates the target, the rest append.
"""

import base64
from typing import Optional

from blobwriter.common.blob import Blob
from blobwriter.common.errors import FallbackWriteError
from blobwriter.common.protocol_definitions import ResolvedPath
from blobwriter.client.fs_bridge import LocalFilesystemBridge
from blobwriter.client.utils.config import ClientConfig
from blobwriter.client.utils.logger import logger


class ChunkedFallbackWriter:
    """Sequential chunked append fallback."""

    def __init__(self, config: Optional[ClientConfig] = None, bridge=None):
        self.config = config or ClientConfig()
        self.bridge = bridge or LocalFilesystemBridge()

    async def write(self, blob: Blob, resolved: ResolvedPath, recursive: bool) -> str:
        """Write the blob chunk by chunk; return the absolute path.

        Chunks are awaited strictly one after another, so at most one encoded
        chunk is alive at a time. A failure aborts the write and may leave the
        target short.
        """
        path = resolved.path
        size = blob.size
        interval = self.config.progress_log_interval
        written = 0
        chunk_index = 0

        for chunk_index, (start, end) in enumerate(blob.ranges(self.config.fallback_chunk_size)):
            try:
                data = await blob.read_range(start, end)
                encoded = base64.b64encode(data).decode('ascii')

                if chunk_index == 0:
                    await self.bridge.write_file(path, encoded, recursive=recursive)
                else:
                    await self.bridge.append_file(path, encoded)
            except Exception as e:
                logger.log_error(f"fallback write of {path} (chunk {chunk_index})", e)
                raise FallbackWriteError(path, chunk_index, e) from e

            previous = written
            written = end
            if written // interval > previous // interval:
                logger.log_fallback_progress(path, written, size)

        logger.log_fallback_success(path, size, chunk_index + 1)
        return path
