"""
Streaming write handler module.

This module handles PUT requests on the local server: it authenticates the
caller, streams the request body into a temp file next to the destination
and publishes it with an atomic rename.
"""

import asyncio
import os
import tempfile
from typing import Optional

import aiofiles
import aiofiles.os
from aiohttp import web

from blobwriter.common.constants import Status, TEMP_SUFFIX
from blobwriter.common.errors import InvalidPathError
from blobwriter.common.path_resolver import ensure_within_roots, resolve_fully_qualified
from blobwriter.common.protocol_definitions import (
    StreamingTransfer, decode_write_path, parse_recursive_flag, token_matches
)
from blobwriter.server.utils.config import ServerConfig
from blobwriter.server.utils.logger import logger


def _create_temp_file(destination: str) -> str:
    """Create an empty temp file beside the destination and return its path."""
    # Same directory as the destination, so the rename never crosses volumes
    fd, temp_path = tempfile.mkstemp(
        prefix=f".{os.path.basename(destination)}.",
        suffix=TEMP_SUFFIX,
        dir=os.path.dirname(destination)
    )
    os.close(fd)
    return temp_path


class StreamingWriteHandler:
    """Server-side streaming write functionality."""

    def __init__(self, token: str, config: Optional[ServerConfig] = None):
        self.token = token
        self.config = config or ServerConfig()

    def register(self, app: web.Application):
        """Attach the PUT route to an application."""
        app.router.add_put('/{tail:.*}', self.handle_put)

    async def handle_put(self, request: web.Request) -> web.Response:
        """Authenticate, validate and stream one PUT request to disk."""
        remote = request.remote or 'unknown'

        if not token_matches(request.headers.get('Authorization'), self.token):
            logger.log_rejected(remote, Status.UNAUTHORIZED, "bad or missing token")
            return web.Response(status=Status.UNAUTHORIZED, text="Unauthorized")

        try:
            transfer = self._parse_request(request)
        except (InvalidPathError, ValueError) as e:
            logger.log_rejected(remote, Status.BAD_REQUEST, str(e))
            return web.Response(status=Status.BAD_REQUEST, text=str(e))

        rejection = await self._prepare_directory(transfer)
        if rejection is not None:
            return rejection

        return await self._stream_to_disk(request, transfer)

    def _parse_request(self, request: web.Request) -> StreamingTransfer:
        """Extract destination, recursive flag and declared length."""
        recursive = parse_recursive_flag(request.query.get('recursive'))

        size = request.content_length
        if size is None:
            raise ValueError("Content-Length is required")
        if size < 0:
            raise ValueError(f"Invalid Content-Length: {size}")

        path = decode_write_path(request.rel_url.raw_path)
        if '\x00' in path:
            raise InvalidPathError(path, "path contains a NUL byte")
        resolved = resolve_fully_qualified(path, path)
        if self.config.allowed_roots:
            resolved = ensure_within_roots(path, resolved, self.config.allowed_roots)
        return StreamingTransfer(destination=resolved.path, recursive=recursive, expected_size=size)

    async def _prepare_directory(self, transfer: StreamingTransfer) -> Optional[web.Response]:
        """Make sure the destination directory exists, or explain why not."""
        destination = transfer.destination
        parent = os.path.dirname(destination)

        if await aiofiles.os.path.isdir(destination):
            return self._conflict(destination, "destination is a directory")

        if await aiofiles.os.path.isdir(parent):
            return None

        if await aiofiles.os.path.exists(parent):
            return self._conflict(destination, f"parent {parent} is not a directory")

        if not transfer.recursive:
            return self._conflict(destination, f"parent directory {parent} does not exist")

        try:
            await aiofiles.os.makedirs(parent, exist_ok=True)
        except (FileExistsError, NotADirectoryError):
            return self._conflict(destination, f"cannot create {parent}: a path component is a file")
        except OSError as e:
            logger.log_error(f"creating {parent}", e)
            return web.Response(status=Status.SERVER_ERROR, text=f"Failed to create {parent}: {e}")
        return None

    def _conflict(self, destination: str, reason: str) -> web.Response:
        logger.warning(f"Conflict writing {destination}: {reason}")
        return web.Response(status=Status.CONFLICT, text=reason)

    async def _stream_to_disk(self, request: web.Request, transfer: StreamingTransfer) -> web.Response:
        """Copy the body into a temp file, then publish it."""
        destination = transfer.destination
        chunk_size = self.config.read_chunk_size
        interval = self.config.progress_log_interval

        logger.log_transfer_start(destination, transfer.expected_size, transfer.recursive)

        try:
            transfer.temp_path = await self._off_loop(_create_temp_file, destination)

            async with aiofiles.open(transfer.temp_path, 'wb') as f:
                async for data in request.content.iter_chunked(chunk_size):
                    await f.write(data)
                    transfer.bytes_received += len(data)

                    if transfer.bytes_received % interval < len(data):
                        logger.log_progress(destination, transfer.bytes_received, transfer.expected_size)

            if transfer.bytes_received != transfer.expected_size:
                raise IOError(
                    f"body ended early: {transfer.bytes_received}/{transfer.expected_size} bytes"
                )

            await aiofiles.os.replace(transfer.temp_path, destination)
            transfer.published = True

        except Exception as e:
            await self._off_loop(
                logger.log_transfer_failed, destination, transfer.bytes_received, transfer.expected_size, str(e)
            )
            return web.Response(status=Status.SERVER_ERROR, text=f"Write failed: {e}")
        finally:
            if not transfer.published:
                await self._discard_temp(transfer)

        await self._off_loop(logger.log_publish, destination, transfer.bytes_received)
        return web.Response(status=Status.OK, text=destination, content_type='text/plain')

    async def _off_loop(self, func, *args):
        """Run a blocking filesystem call on the default executor."""
        return await asyncio.get_running_loop().run_in_executor(None, func, *args)

    async def _discard_temp(self, transfer: StreamingTransfer):
        """Delete the staged temp file of a failed transfer."""
        if not transfer.temp_path:
            return
        try:
            await aiofiles.os.remove(transfer.temp_path)
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.log_error(f"removing temp file {transfer.temp_path}", e)
