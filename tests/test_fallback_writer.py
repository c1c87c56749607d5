#!/usr/bin/env python3
"""
Unit tests for the chunked fallback writer and the filesystem bridge.

Tests the sequential base64 append path:
- First chunk truncates, later chunks append, strictly in order
- Zero-length blobs still create the file
- Recursive flag handling on missing directories
- Failures abort the write
"""

import asyncio
import base64
import os
import sys
import tempfile
import unittest
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from blobwriter.client.fallback_writer import ChunkedFallbackWriter
from blobwriter.client.fs_bridge import LocalFilesystemBridge
from blobwriter.client.utils.config import ClientConfig
from blobwriter.common.blob import Blob
from blobwriter.common.errors import DirectoryMissingError, FallbackWriteError, StreamingWriteError, WriteIOError
from blobwriter.common.protocol_definitions import ResolvedPath


def resolved(path: str) -> ResolvedPath:
    return ResolvedPath(path, os.path.dirname(path))


class RecordingBridge:
    """Bridge that records calls and checks they never overlap."""

    def __init__(self, fail_on_call: int = None):
        self.calls = []
        self.in_flight = 0
        self.max_in_flight = 0
        self.fail_on_call = fail_on_call

    async def _record(self, entry):
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(0)
            if self.fail_on_call is not None and len(self.calls) == self.fail_on_call:
                raise WriteIOError("disk full")
            self.calls.append(entry)
        finally:
            self.in_flight -= 1

    async def write_file(self, path, data, recursive=False):
        await self._record(('write', path, data, recursive))

    async def append_file(self, path, data):
        await self._record(('append', path, data))


class TestChunkedFallbackWriter(unittest.IsolatedAsyncioTestCase):
    """Test cases for ChunkedFallbackWriter with a recording bridge."""

    def setUp(self):
        self.config = ClientConfig()
        self.config.update_fallback_settings(chunk_size=6)

    async def test_chunks_in_order(self):
        """Test that the first chunk writes and the rest append in order."""
        bridge = RecordingBridge()
        writer = ChunkedFallbackWriter(self.config, bridge)
        data = b'0123456789abcdefghij'

        path = await writer.write(Blob(data), resolved('/data/out.bin'), recursive=True)

        self.assertEqual(path, '/data/out.bin')
        self.assertEqual([c[0] for c in bridge.calls], ['write', 'append', 'append', 'append'])
        self.assertTrue(bridge.calls[0][3])
        decoded = b''.join(base64.b64decode(c[2]) for c in bridge.calls)
        self.assertEqual(decoded, data)
        self.assertEqual(bridge.max_in_flight, 1)

    async def test_chunk_size_bounds_each_call(self):
        """Test that no call carries more than one chunk."""
        bridge = RecordingBridge()
        writer = ChunkedFallbackWriter(self.config, bridge)

        await writer.write(Blob(os.urandom(50)), resolved('/data/out.bin'), recursive=False)

        self.assertTrue(all(len(base64.b64decode(c[2])) <= 6 for c in bridge.calls))
        self.assertEqual(len(bridge.calls), 9)

    async def test_empty_blob_writes_once(self):
        """Test that an empty blob still truncates the target."""
        bridge = RecordingBridge()
        writer = ChunkedFallbackWriter(self.config, bridge)

        await writer.write(Blob(b''), resolved('/data/empty.bin'), recursive=False)

        self.assertEqual(bridge.calls, [('write', '/data/empty.bin', '', False)])

    async def test_failure_aborts_remaining_chunks(self):
        """Test that a failed append stops the write and reports the chunk."""
        bridge = RecordingBridge(fail_on_call=2)
        writer = ChunkedFallbackWriter(self.config, bridge)

        with self.assertRaises(FallbackWriteError) as ctx:
            await writer.write(Blob(b'x' * 30), resolved('/data/out.bin'), recursive=False)

        self.assertEqual(ctx.exception.chunk_index, 2)
        self.assertIsInstance(ctx.exception.cause, WriteIOError)
        self.assertIs(ctx.exception.__cause__, ctx.exception.cause)
        self.assertEqual(len(bridge.calls), 2)

    def test_default_chunk_size_is_multiple_of_three(self):
        """Test that default chunks encode without base64 padding."""
        self.assertEqual(ClientConfig().fallback_chunk_size % 3, 0)

    def test_invalid_chunk_size(self):
        """Test that a non-positive chunk size is refused."""
        with self.assertRaises(ValueError):
            ClientConfig().update_fallback_settings(chunk_size=0)


class TestFallbackOnDisk(unittest.IsolatedAsyncioTestCase):
    """Test cases for the fallback writing real files."""

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.root = os.path.realpath(self.tmp.name)
        config = ClientConfig()
        config.update_fallback_settings(chunk_size=3 * 1024)
        self.writer = ChunkedFallbackWriter(config)

    def tearDown(self):
        self.tmp.cleanup()

    async def test_round_trip(self):
        """Test that the written file matches the blob."""
        target = os.path.join(self.root, 'out.bin')
        data = os.urandom(100_000)

        await self.writer.write(Blob(data), resolved(target), recursive=False)

        with open(target, 'rb') as f:
            self.assertEqual(f.read(), data)

    async def test_replaces_longer_file(self):
        """Test that a shorter write truncates the previous content."""
        target = os.path.join(self.root, 'out.bin')
        with open(target, 'wb') as f:
            f.write(b'Z' * 50_000)

        await self.writer.write(Blob(b'short'), resolved(target), recursive=False)

        with open(target, 'rb') as f:
            self.assertEqual(f.read(), b'short')

    async def test_missing_parent_without_recursive(self):
        """Test that no directory is created when recursive is off."""
        target = os.path.join(self.root, 'a', 'b', 'out.bin')

        with self.assertRaises(FallbackWriteError) as ctx:
            await self.writer.write(Blob(b'data'), resolved(target), recursive=False)

        self.assertIsInstance(ctx.exception.cause, DirectoryMissingError)
        self.assertNotIsInstance(ctx.exception.cause, StreamingWriteError)
        self.assertFalse(os.path.exists(os.path.join(self.root, 'a')))

    async def test_missing_parent_with_recursive(self):
        """Test that all intermediates are created when recursive is on."""
        target = os.path.join(self.root, 'a', 'b', 'c', 'out.bin')

        await self.writer.write(Blob(b'nested'), resolved(target), recursive=True)

        with open(target, 'rb') as f:
            self.assertEqual(f.read(), b'nested')


class TestLocalFilesystemBridge(unittest.IsolatedAsyncioTestCase):
    """Test cases for the base64 bridge primitives."""

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.target = os.path.join(self.tmp.name, 'file.bin')
        self.bridge = LocalFilesystemBridge()

    def tearDown(self):
        self.tmp.cleanup()

    async def test_write_then_append(self):
        await self.bridge.write_file(self.target, base64.b64encode(b'abc').decode())
        await self.bridge.append_file(self.target, base64.b64encode(b'def').decode())

        with open(self.target, 'rb') as f:
            self.assertEqual(f.read(), b'abcdef')

    async def test_invalid_base64(self):
        """Test that malformed base64 is a write error."""
        with self.assertRaises(WriteIOError):
            await self.bridge.write_file(self.target, 'not base64!!')

    async def test_write_into_directory_path_fails(self):
        """Test that OS errors surface as WriteIOError."""
        os.mkdir(self.target)

        with self.assertRaises(WriteIOError):
            await self.bridge.write_file(self.target, base64.b64encode(b'abc').decode())


if __name__ == '__main__':
    unittest.main()
