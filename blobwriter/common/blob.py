"""
Blob byte sources.

A Blob is an immutable byte source with a known length. Bytes are produced
lazily, either as explicit (start, end) ranges or as a sequential stream of
chunks, so a large file never has to be held in memory.
"""

import os
from pathlib import Path
from typing import AsyncIterator, Iterator, Optional, Tuple, Union

import aiofiles


BytesLike = Union[bytes, bytearray, memoryview]


class Blob:
    """Byte source backed by an in-memory buffer or a file on disk."""

    def __init__(self, data: Optional[BytesLike] = None, path: Optional[Union[str, os.PathLike]] = None):
        if (data is None) == (path is None):
            raise ValueError("Blob needs exactly one of data or path")
        if data is not None:
            self._data: Optional[bytes] = bytes(data)
            self._path: Optional[Path] = None
            self._size = len(self._data)
        else:
            self._data = None
            self._path = Path(path)
            self._size = self._path.stat().st_size

    @classmethod
    def from_path(cls, path: Union[str, os.PathLike]) -> 'Blob':
        """Create a blob that reads from a file on demand."""
        return cls(path=path)

    @classmethod
    def coerce(cls, value) -> 'Blob':
        """Accept a Blob or any bytes-like object."""
        if isinstance(value, Blob):
            return value
        if isinstance(value, (bytes, bytearray, memoryview)):
            return cls(data=value)
        raise TypeError(f"Expected Blob or bytes-like object, got {type(value).__name__}")

    @property
    def size(self) -> int:
        return self._size

    @property
    def source(self) -> str:
        return str(self._path) if self._path is not None else '<memory>'

    def __len__(self) -> int:
        return self._size

    def __repr__(self) -> str:
        return f"Blob(size={self._size}, source={self.source})"

    def ranges(self, chunk_size: int) -> Iterator[Tuple[int, int]]:
        """Yield (start, end) byte ranges covering the blob in order.

        An empty blob yields one empty range so callers still create the file.
        """
        if chunk_size <= 0:
            raise ValueError("chunk_size must be positive")
        if self._size == 0:
            yield (0, 0)
            return
        for start in range(0, self._size, chunk_size):
            yield (start, min(start + chunk_size, self._size))

    async def read_range(self, start: int, end: int) -> bytes:
        """Read bytes [start, end)."""
        if start < 0 or end < start or end > self._size:
            raise ValueError(f"Range [{start}, {end}) outside blob of size {self._size}")
        if self._data is not None:
            return self._data[start:end]
        async with aiofiles.open(self._path, 'rb') as f:
            await f.seek(start)
            data = await f.read(end - start)
        if len(data) != end - start:
            raise OSError(f"Short read from {self._path}: expected {end - start} bytes, got {len(data)}")
        return data

    async def iter_chunks(self, chunk_size: int) -> AsyncIterator[bytes]:
        """Stream the blob sequentially in chunks of at most chunk_size bytes."""
        if self._data is not None:
            view = memoryview(self._data)
            for start in range(0, self._size, chunk_size):
                yield bytes(view[start:start + chunk_size])
            return

        remaining = self._size
        async with aiofiles.open(self._path, 'rb') as f:
            while remaining > 0:
                data = await f.read(min(chunk_size, remaining))
                if not data:
                    raise OSError(f"{self._path} shrank while streaming: {remaining} bytes missing")
                remaining -= len(data)
                yield data
