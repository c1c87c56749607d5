"""
Path resolution module.

Maps a symbolic root directory plus a path string to an absolute filesystem
path, refusing anything that would land outside the chosen root.
"""

import os
from pathlib import Path
from typing import Dict, Optional, Union
from urllib.parse import unquote, urlparse

from blobwriter.common.constants import DEFAULT_ROOT_BASE, ROOT_DIRECTORY_NAMES
from blobwriter.common.errors import InvalidPathError
from blobwriter.common.protocol_definitions import Directory, ResolvedPath


def default_roots(base: Union[str, os.PathLike] = DEFAULT_ROOT_BASE) -> Dict[Directory, str]:
    """Build the root directory table under a base directory."""
    base_path = Path(base).expanduser()
    return {
        directory: str(base_path / ROOT_DIRECTORY_NAMES[directory.value])
        for directory in Directory
    }


def _has_traversal(path: str) -> bool:
    parts = path.replace('\\', '/').split('/')
    return '..' in parts


def _is_within(root: str, candidate: str) -> bool:
    try:
        return os.path.commonpath([root, candidate]) == root
    except ValueError:
        return False


class PathResolver:
    """Resolve (directory, path) pairs into absolute paths."""

    def __init__(self, roots: Optional[Dict[Directory, Union[str, os.PathLike]]] = None):
        table = default_roots()
        if roots:
            table.update({Directory(d): str(p) for d, p in roots.items()})
        self.roots: Dict[Directory, str] = {
            d: os.path.normpath(os.path.abspath(os.path.expanduser(p))) for d, p in table.items()
        }

    def root_for(self, directory: Directory) -> str:
        """Get the absolute root for a symbolic directory."""
        try:
            return self.roots[Directory(directory)]
        except (KeyError, ValueError):
            raise InvalidPathError(str(directory), "unknown root directory") from None

    def resolve(self, directory: Optional[Directory], path: str) -> ResolvedPath:
        """Resolve a path, optionally relative to a symbolic root."""
        if not isinstance(path, str) or not path.strip():
            raise InvalidPathError(str(path), "path is empty")
        if '\x00' in path:
            raise InvalidPathError(path, "path contains a NUL byte")

        parsed = urlparse(path)
        if parsed.scheme == 'file':
            return resolve_fully_qualified(path, unquote(parsed.path))
        if '://' in path:
            raise InvalidPathError(path, f"unsupported URI scheme '{parsed.scheme}'")

        if directory is None:
            return resolve_fully_qualified(path, path)

        root = self.root_for(directory)
        relative = path.replace('\\', '/').lstrip('/')
        candidate = os.path.normpath(os.path.join(root, relative))
        if not _is_within(root, candidate):
            raise InvalidPathError(path, f"escapes root directory {root}")
        if candidate == root:
            raise InvalidPathError(path, "resolves to the root directory itself")
        return ResolvedPath(candidate, os.path.dirname(candidate))


def resolve_fully_qualified(original: str, local_path: str) -> ResolvedPath:
    """Validate an absolute path that carries no root directory."""
    # "/C:/dir" from a file URI on Windows
    if os.name == 'nt' and len(local_path) >= 3 and local_path[0] == '/' and local_path[2] == ':':
        local_path = local_path[1:]
    if not os.path.isabs(local_path):
        raise InvalidPathError(original, "no directory given and path is not fully qualified")
    if _has_traversal(local_path):
        raise InvalidPathError(original, "upward traversal is not allowed")
    candidate = os.path.normpath(local_path)
    parent = os.path.dirname(candidate)
    if candidate == parent:
        raise InvalidPathError(original, "path names a filesystem root")
    return ResolvedPath(candidate, parent)


def ensure_within_roots(original: str, resolved: ResolvedPath, roots) -> ResolvedPath:
    """Check that a resolved path lies strictly inside one of the given roots."""
    for root in roots:
        if resolved.path != root and _is_within(root, resolved.path):
            return resolved
    raise InvalidPathError(original, "outside every allowed root directory")
