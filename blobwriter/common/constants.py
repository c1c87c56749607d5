"""
Shared constants for the blob writer.

This module contains all constants used across client and server components.
"""

# Network Configuration
LOOPBACK_HOST = '127.0.0.1'
EPHEMERAL_PORT = 0  # let the OS pick

# Buffer Sizes
STREAM_CHUNK_SIZE = 64 * 1024
FALLBACK_CHUNK_SIZE = 3 * 256 * 1024  # multiple of 3, base64 pieces concatenate cleanly
PROGRESS_LOG_INTERVAL = 16 * 1024 * 1024  # Log progress every 16MB

# Timeouts
STREAM_TIMEOUT = 300  # 5 minutes in seconds, aiohttp's default total timeout
SERVER_START_TIMEOUT = 10  # seconds

# Authentication
TOKEN_BYTES = 32
AUTH_SCHEME = 'Bearer'

# Temp files
TEMP_SUFFIX = '.part'

# Filesystem roots
DEFAULT_ROOT_BASE = '~/.blobwriter'
ROOT_DIRECTORY_NAMES = {
    'DOCUMENTS': 'Documents',
    'DATA': 'Data',
    'LIBRARY': 'Library',
    'CACHE': 'Cache',
    'EXTERNAL': 'External',
    'EXTERNAL_STORAGE': 'ExternalStorage',
}

# Logging
TRANSFER_LOG_FILE = 'blob_transfers.log'


# HTTP status codes used on the wire
class Status:
    OK = 200
    BAD_REQUEST = 400
    UNAUTHORIZED = 401
    CONFLICT = 409
    SERVER_ERROR = 500
