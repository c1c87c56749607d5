"""
Protocol definitions for the blob writer.

This module defines the data structures shared by the caller and the local
server, and the helpers that build and parse the loopback wire format.
"""

import hmac
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional
from urllib.parse import quote, unquote

from blobwriter.common.constants import AUTH_SCHEME


class Directory(Enum):
    """Symbolic filesystem roots a write can target."""
    DOCUMENTS = 'DOCUMENTS'
    DATA = 'DATA'
    LIBRARY = 'LIBRARY'
    CACHE = 'CACHE'
    EXTERNAL = 'EXTERNAL'
    EXTERNAL_STORAGE = 'EXTERNAL_STORAGE'


@dataclass(frozen=True)
class WriteRequest:
    """A single blob write, as submitted by the caller."""
    path: str
    blob: Any
    directory: Optional[Directory] = None
    recursive: bool = False
    on_fallback: Optional[Callable[[Exception], Any]] = None


@dataclass(frozen=True)
class SessionInfo:
    """Connection details of the running local server."""
    host: str
    port: int
    token: str

    @property
    def base_url(self) -> str:
        return f"http://{self.host}:{self.port}"


@dataclass(frozen=True)
class ResolvedPath:
    """Absolute destination path and its containing directory."""
    path: str
    parent: str


@dataclass
class StreamingTransfer:
    """Server-side state of one inbound streaming write."""
    destination: str
    recursive: bool
    expected_size: int
    temp_path: Optional[str] = None
    bytes_received: int = 0
    published: bool = False


def build_write_path(absolute_path: str) -> str:
    """Quote an absolute filesystem path into a URL path."""
    posix = absolute_path.replace('\\', '/')
    if not posix.startswith('/'):
        posix = '/' + posix
    return quote(posix, safe='/')


def build_write_url(session: SessionInfo, absolute_path: str, recursive: bool) -> str:
    """Create the already-encoded URL for a streaming PUT."""
    flag = 'true' if recursive else 'false'
    return f"{session.base_url}{build_write_path(absolute_path)}?recursive={flag}"


def decode_write_path(raw_path: str) -> str:
    """Decode the raw URL path of a PUT back into a filesystem path."""
    return unquote(raw_path)


def create_auth_header(token: str) -> dict:
    """Create the Authorization header for a session token."""
    return {'Authorization': f"{AUTH_SCHEME} {token}"}


def parse_bearer_token(header_value: Optional[str]) -> Optional[str]:
    """Extract the token from an Authorization header value."""
    if not header_value:
        return None
    scheme, _, token = header_value.partition(' ')
    if scheme.lower() != AUTH_SCHEME.lower() or not token.strip():
        return None
    return token.strip()


def token_matches(header_value: Optional[str], expected: str) -> bool:
    """Check an Authorization header against the session token in constant time."""
    token = parse_bearer_token(header_value)
    if token is None:
        return False
    return hmac.compare_digest(token.encode('utf-8'), expected.encode('utf-8'))


def parse_recursive_flag(value: Optional[str]) -> bool:
    """Parse the recursive query parameter; raises ValueError when malformed."""
    if value is None or value == '':
        return False
    lowered = value.lower()
    if lowered == 'true':
        return True
    if lowered == 'false':
        return False
    raise ValueError(f"recursive must be 'true' or 'false', got {value!r}")
