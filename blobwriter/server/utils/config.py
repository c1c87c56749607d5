"""
Server configuration module.

This module handles server-side configuration settings.
"""

import os

from blobwriter.common.constants import (
    LOOPBACK_HOST, EPHEMERAL_PORT, STREAM_CHUNK_SIZE, PROGRESS_LOG_INTERVAL,
    TOKEN_BYTES, SERVER_START_TIMEOUT
)


class ServerConfig:
    """Server configuration class."""

    def __init__(self, host: str = LOOPBACK_HOST, port: int = EPHEMERAL_PORT, log_dir: str = None,
                 allowed_roots: list = None):
        self.host = host
        self.port = port

        # Destinations must fall under one of these when set
        self.allowed_roots = [
            os.path.normpath(os.path.abspath(os.path.expanduser(root))) for root in allowed_roots or ()
        ]

        # Logging configuration
        self.log_dir = log_dir

        # Streaming settings
        self.read_chunk_size = STREAM_CHUNK_SIZE
        self.progress_log_interval = PROGRESS_LOG_INTERVAL

        # Session settings
        self.token_bytes = TOKEN_BYTES
        self.start_timeout = SERVER_START_TIMEOUT

    def get_connection_info(self):
        """Get connection information."""
        return {
            'host': self.host,
            'port': self.port
        }
