"""
Client configuration module.

This module handles caller-side configuration settings.
"""

from blobwriter.common.constants import (
    DEFAULT_ROOT_BASE, FALLBACK_CHUNK_SIZE, STREAM_CHUNK_SIZE, STREAM_TIMEOUT, PROGRESS_LOG_INTERVAL
)
from blobwriter.common.path_resolver import PathResolver, default_roots


class ClientConfig:
    """Client configuration class."""

    def __init__(self, root_base: str = DEFAULT_ROOT_BASE, roots: dict = None):
        # Filesystem roots
        self.root_base = root_base
        self.roots = roots or {}

        # Streaming settings
        self.stream_chunk_size = STREAM_CHUNK_SIZE
        self.request_timeout = STREAM_TIMEOUT

        # Fallback settings
        self.fallback_chunk_size = FALLBACK_CHUNK_SIZE
        self.progress_log_interval = PROGRESS_LOG_INTERVAL

    def update_fallback_settings(self, chunk_size: int = None, progress_log_interval: int = None):
        """Update fallback settings."""
        if chunk_size is not None:
            if chunk_size <= 0:
                raise ValueError("chunk_size must be positive")
            self.fallback_chunk_size = chunk_size
        if progress_log_interval is not None:
            self.progress_log_interval = progress_log_interval

    def create_resolver(self) -> PathResolver:
        """Build a path resolver for the configured roots."""
        table = default_roots(self.root_base)
        table.update(self.roots)
        return PathResolver(table)
