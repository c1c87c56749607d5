"""
Filesystem bridge module.

The generic filesystem bridge only moves text across its boundary, so binary
data has to travel base64 encoded. The chunked fallback writes through this
interface one chunk at a time.
"""

import base64
import binascii
import os

import aiofiles
import aiofiles.os

from blobwriter.common.errors import DirectoryMissingError, WriteIOError


class LocalFilesystemBridge:
    """Base64 write/append primitives on the local filesystem."""

    async def write_file(self, path: str, data: str, recursive: bool = False):
        """Create or truncate a file with the decoded contents of data."""
        payload = self._decode(data)
        parent = os.path.dirname(path)

        if not await aiofiles.os.path.isdir(parent):
            if not recursive:
                raise DirectoryMissingError(f"Parent directory {parent} does not exist")
            try:
                await aiofiles.os.makedirs(parent, exist_ok=True)
            except OSError as e:
                raise WriteIOError(f"Failed to create {parent}: {e}") from e

        await self._write(path, payload, 'wb')

    async def append_file(self, path: str, data: str):
        """Append the decoded contents of data to a file."""
        await self._write(path, self._decode(data), 'ab')

    async def _write(self, path: str, payload: bytes, mode: str):
        try:
            async with aiofiles.open(path, mode) as f:
                await f.write(payload)
        except OSError as e:
            raise WriteIOError(f"Failed to write {path}: {e}") from e

    @staticmethod
    def _decode(data: str) -> bytes:
        try:
            return base64.b64decode(data, validate=True)
        except (binascii.Error, ValueError) as e:
            raise WriteIOError(f"Invalid base64 payload: {e}") from e
